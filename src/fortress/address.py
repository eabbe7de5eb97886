"""EIP-55 address checksumming.

Every address placed into a transaction goes through ``checksum`` first so a
malformed or mistyped address is rejected locally instead of on-chain.
"""

import re

from eth_utils import keccak

from fortress.errors import InvalidAddress

_HEX_BODY = re.compile(r"^[0-9a-fA-F]{40}$")


def checksum(address: str) -> str:
    """Return the mixed-case checksummed form of an address.

    Args:
        address: 40 hex characters with an optional ``0x`` prefix

    Returns:
        ``0x``-prefixed EIP-55 address

    Raises:
        InvalidAddress: If the input is not a 20-byte hex address
    """
    if not isinstance(address, str):
        raise InvalidAddress(f"Address must be a string, got {type(address).__name__}.")

    body = address[2:] if address[:2] in ("0x", "0X") else address
    if not _HEX_BODY.match(body):
        raise InvalidAddress(f"Invalid address: {address!r}")

    body = body.lower()
    digest = keccak(text=body).hex()

    chars = []
    for char, nibble in zip(body, digest):
        if char.isalpha() and int(nibble, 16) >= 8:
            chars.append(char.upper())
        else:
            chars.append(char)

    return "0x" + "".join(chars)


def is_address(value) -> bool:
    """Check whether a value is a 20-byte hex address (any letter case)."""
    try:
        checksum(value)
        return True
    except InvalidAddress:
        return False
