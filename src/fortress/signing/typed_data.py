"""EIP-712 typed structured data.

``TypedData`` only holds the message; hashing and signing are left to the
signer backend, which receives the full ``eth_signTypedData_v4`` payload from
``as_dict()``.
"""

from dataclasses import dataclass, field

# Canonical order of the optional EIP712Domain fields
DOMAIN_FIELDS = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
)


def domain_type(domain: dict) -> list[dict]:
    """Build the EIP712Domain type for the fields present in ``domain``."""
    return [{"name": name, "type": kind} for name, kind in DOMAIN_FIELDS if name in domain]


@dataclass(frozen=True)
class TypedData:
    """A typed structured message."""
    primary_type: str
    types: dict
    domain: dict
    message: dict = field(default_factory=dict)

    def as_dict(self) -> dict:
        """Full JSON form as wallets and eth_signTypedData_v4 expect it."""
        types = {"EIP712Domain": domain_type(self.domain)}
        types.update(self.types)
        return {
            "types": types,
            "primaryType": self.primary_type,
            "domain": self.domain,
            "message": self.message,
        }
