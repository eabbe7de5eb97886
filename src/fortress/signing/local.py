"""Local signing backend.

Holds one private key in memory. Suitable for:
- Server side scripts and bots
- Tests against a local fork

WARNING: the key lives in process memory. Use an external backend (wallet
proxy, remote signer) when the key should not be loaded into the process.
"""

import logging
from typing import Optional

from eth_account import Account

from fortress.signing.base import (
    SignatureResult,
    SignerBackend,
    SignerType,
    SigningError,
    SigningRequest,
)

logger = logging.getLogger(__name__)


def _to_bytes32_hex(value: int) -> str:
    return "0x" + value.to_bytes(32, "big").hex()


class LocalSigner(SignerBackend):
    """Signing backend using an in-memory secp256k1 private key."""

    def __init__(self, private_key_hex: str):
        super().__init__(SignerType.LOCAL)
        try:
            self._account = Account.from_key(private_key_hex)
        except Exception as e:
            raise SigningError(f"Invalid private key: {e}") from None
        logger.info(f"Loaded local signer for {self._account.address}")

    async def sign(self, request: SigningRequest) -> SignatureResult:
        """Sign typed data with eth-account's EIP-712 encoder."""
        if not request.typed_data:
            return SignatureResult(success=False, error="No typed data to sign")

        try:
            signed = self._account.sign_typed_data(full_message=request.typed_data)

            return SignatureResult(
                success=True,
                v=signed.v,
                r=_to_bytes32_hex(signed.r),
                s=_to_bytes32_hex(signed.s),
                signer=self._account.address,
            )

        except Exception as e:
            logger.error(f"Local signing failed: {e}")
            return SignatureResult(success=False, error=str(e))

    async def sign_transaction(self, tx: dict) -> bytes:
        """Sign a populated transaction dict."""
        return self._account.sign_transaction(tx).raw_transaction

    async def get_address(self) -> Optional[str]:
        return self._account.address

    async def health_check(self) -> bool:
        return self._account is not None
