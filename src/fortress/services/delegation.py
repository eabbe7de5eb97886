"""Gasless governance delegation signatures (EIP-712).

The signature is created off-chain and returned; anyone can later submit it
with ``delegateBySig``. The token contract checks the nonce and expiry when
the signature is submitted, so a stale nonce or a past expiry is rejected
on-chain, not here.
"""

import logging
from typing import Optional

from fortress import abi
from fortress.address import checksum
from fortress.chain.base import ChainBackend
from fortress.config import Settings
from fortress.constants import DEFAULT_DELEGATION_EXPIRY, GOVERNANCE_TOKEN
from fortress.errors import InvalidArgument, SigningUnavailable
from fortress.registry import AssetRegistry
from fortress.services.base import ProtocolService, sdk_operation
from fortress.signing.base import Signature, SignerBackend, SigningRequest
from fortress.signing.typed_data import TypedData

logger = logging.getLogger(__name__)

DELEGATION_TYPES = {
    "Delegation": [
        {"name": "delegatee", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
    ],
}


class DelegationSigner(ProtocolService):
    """Builds and signs ``Delegation`` messages for the governance token."""

    def __init__(
        self,
        chain: ChainBackend,
        registry: AssetRegistry,
        settings: Settings,
        signer: Optional[SignerBackend] = None,
    ):
        super().__init__(chain, registry, settings)
        self.signer = signer

    def build_typed_data(self, delegatee: str, nonce: int, expiry: int) -> TypedData:
        """Typed data for a delegation on the active network."""
        domain = {
            "name": self.settings.delegation_domain_name,
            "chainId": self.registry.chain_id,
            "verifyingContract": self.registry.address_of(GOVERNANCE_TOKEN),
        }
        message = {
            "delegatee": checksum(delegatee),
            "nonce": nonce,
            "expiry": expiry,
        }
        return TypedData(
            primary_type="Delegation",
            types=DELEGATION_TYPES,
            domain=domain,
            message=message,
        )

    async def get_nonce(self, account: str) -> int:
        """Current delegation nonce of ``account`` on the governance token."""
        token = self.registry.address_of(GOVERNANCE_TOKEN)
        return int(await self.chain.read(token, "nonces", [checksum(account)], abi.GOVERNANCE_TOKEN))

    async def _require_signer(self) -> tuple[SignerBackend, str]:
        if self.signer is None:
            raise SigningUnavailable("No signer available to create signatures.")
        if not await self.signer.health_check():
            raise SigningUnavailable(f"Signer {self.signer!r} is not ready.")

        address = await self.signer.get_address()
        if not address:
            raise SigningUnavailable(f"Signer {self.signer!r} has no account address.")
        return self.signer, address

    @sdk_operation("createDelegationSignature")
    async def create_delegation_signature(
        self,
        delegatee: str,
        expiry: int = DEFAULT_DELEGATION_EXPIRY,
    ) -> Signature:
        """Sign a delegation of the signer's votes to ``delegatee``.

        Args:
            delegatee: Address receiving the voting power
            expiry: Unix timestamp after which the signature is void

        Returns:
            Signature with v, r and s

        Raises:
            InvalidAddress: If ``delegatee`` is not an address
            SigningUnavailable: If no usable signer is configured
        """
        delegatee = checksum(delegatee)
        if isinstance(expiry, bool) or not isinstance(expiry, int) or expiry < 0:
            raise InvalidArgument("Argument `expiry` must be a non-negative integer.")

        signer, account = await self._require_signer()
        nonce = await self.get_nonce(account)

        typed_data = self.build_typed_data(delegatee, nonce, expiry)

        result = await signer.sign(
            SigningRequest(
                typed_data=typed_data.as_dict(),
                metadata={"primary_type": "Delegation", "delegatee": delegatee, "nonce": nonce},
            )
        )
        if not result.success:
            raise SigningUnavailable(f"Signer could not sign delegation: {result.error}")

        logger.info(f"Created delegation signature {account} -> {delegatee} (nonce={nonce})")
        return Signature(v=result.v, r=result.r, s=result.s)
