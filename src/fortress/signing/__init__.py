"""Signing services.

- LocalSigner: in-memory private key
- SignerBackend: interface for wallet proxies and remote signers
- TypedData: EIP-712 message payload
"""

from fortress.signing.base import (
    Signature,
    SignatureResult,
    SignerBackend,
    SigningRequest,
)
from fortress.signing.factory import get_signer
from fortress.signing.local import LocalSigner
from fortress.signing.typed_data import TypedData

__all__ = [
    "Signature",
    "SignatureResult",
    "SignerBackend",
    "SigningRequest",
    "LocalSigner",
    "TypedData",
    "get_signer",
]
