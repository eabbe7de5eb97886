"""Base interfaces for signing.

Signing flow:
1. Build the payload (EIP-712 typed data or unsigned transaction)
2. Submit it to a signer backend
3. Backend returns a signature or signed transaction, never the key
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Type of signing backend."""
    LOCAL = "local"         # Private key in memory (server side)
    EXTERNAL = "external"   # Caller supplied backend (wallet proxy, remote signer)


@dataclass
class SigningRequest:
    """Request to sign EIP-712 typed data.

    The payload is the full ``eth_signTypedData_v4`` message, so a wallet
    proxy can forward it unchanged.

    Attributes:
        typed_data: Dict with ``types``, ``primaryType``, ``domain`` and ``message``
        metadata: Optional context for audit logging
    """
    typed_data: dict
    metadata: Optional[dict] = None

    @property
    def domain(self) -> dict:
        return self.typed_data.get("domain", {})

    @property
    def primary_type(self) -> Optional[str]:
        return self.typed_data.get("primaryType")

    @property
    def message(self) -> dict:
        return self.typed_data.get("message", {})


@dataclass
class SignatureResult:
    """Result of a signing operation.

    Attributes:
        success: Whether signing succeeded
        v: Recovery parameter (27 or 28)
        r: R component of signature (0x hex, 32 bytes)
        s: S component of signature (0x hex, 32 bytes)
        signer: Address that produced the signature
        error: Error message if signing failed
    """
    success: bool
    v: Optional[int] = None
    r: Optional[str] = None
    s: Optional[str] = None
    signer: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Signature:
    """An ECDSA signature as the chain consumes it."""
    v: int
    r: str
    s: str

    def as_dict(self) -> dict:
        return {"v": self.v, "r": self.r, "s": self.s}


class SignerBackend(ABC):
    """Abstract base class for signing backends.

    Implementations should NEVER expose raw private keys.
    """

    def __init__(self, signer_type: SignerType = SignerType.EXTERNAL):
        self.signer_type = signer_type

    @abstractmethod
    async def sign(self, request: SigningRequest) -> SignatureResult:
        """Sign EIP-712 typed data (eth_signTypedData_v4 semantics).

        Args:
            request: Signing request with the typed-data payload

        Returns:
            SignatureResult with v, r and s
        """
        pass

    @abstractmethod
    async def sign_transaction(self, tx: dict) -> bytes:
        """Sign a fully populated transaction and return the raw bytes."""
        pass

    @abstractmethod
    async def get_address(self) -> Optional[str]:
        """Get the checksummed address of the signing account."""
        pass

    async def health_check(self) -> bool:
        """Check if the backend is ready to sign."""
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value})"


class SigningError(Exception):
    """Exception raised when a backend fails to sign."""
    pass
