"""Governance token (FTS) operations: delegation, claims and balances."""

import logging
from typing import Union

from fortress import abi
from fortress.address import checksum
from fortress.chain.base import TransactionHandle
from fortress.constants import COMPTROLLER, GOVERNANCE_TOKEN, LENS
from fortress.errors import InvalidArgument
from fortress.options import CallOptions
from fortress.services.base import ProtocolService, sdk_operation
from fortress.signing.base import Signature

logger = logging.getLogger(__name__)

Options = Union[CallOptions, dict, None]


def _signature_parts(signature: Union[Signature, dict]) -> tuple[int, bytes, bytes]:
    """Validate a v, r, s signature and convert it to contract arguments."""
    if isinstance(signature, Signature):
        signature = signature.as_dict()
    if not isinstance(signature, dict) or not all(signature.get(k) for k in ("v", "r", "s")):
        raise InvalidArgument(
            "Argument `signature` must contain the v, r and s pieces of an EIP-712 signature."
        )

    v = signature["v"]
    try:
        v = int(v, 16) if isinstance(v, str) else int(v)
        r = bytes.fromhex(signature["r"].replace("0x", ""))
        s = bytes.fromhex(signature["s"].replace("0x", ""))
    except (AttributeError, TypeError, ValueError):
        raise InvalidArgument("Argument `signature` has malformed v, r or s.") from None

    if len(r) != 32 or len(s) != 32:
        raise InvalidArgument("Signature r and s must be 32 bytes each.")
    return v, r, s


def _non_negative_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"Argument `{name}` must be a non-negative integer.")
    return value


class GovernanceService(ProtocolService):
    """Votes delegation and FTS rewards."""

    @sdk_operation("delegate")
    async def delegate(self, delegatee: str, options: Options = None) -> TransactionHandle:
        """Delegate the caller's voting rights to ``delegatee``."""
        options = CallOptions.coerce(options)
        delegatee = checksum(delegatee)
        token = self.registry.address_of(GOVERNANCE_TOKEN)

        logger.info(f"Delegating votes to {delegatee}")
        return await self._send(token, "delegate", [delegatee], abi.GOVERNANCE_TOKEN, options)

    @sdk_operation("delegateBySig")
    async def delegate_by_sig(
        self,
        delegatee: str,
        nonce: int,
        expiry: int,
        signature: Union[Signature, dict],
        options: Options = None,
    ) -> TransactionHandle:
        """Submit a delegation signature created with ``create_delegation_signature``.

        The contract recomputes the typed-data hash and checks ``nonce`` and
        ``expiry``; any account may pay the gas.
        """
        options = CallOptions.coerce(options)
        delegatee = checksum(delegatee)
        nonce = _non_negative_int(nonce, "nonce")
        expiry = _non_negative_int(expiry, "expiry")
        v, r, s = _signature_parts(signature)

        token = self.registry.address_of(GOVERNANCE_TOKEN)
        logger.info(f"Submitting delegation to {delegatee} (nonce={nonce})")
        return await self._send(
            token,
            "delegateBySig",
            [delegatee, nonce, expiry, v, r, s],
            abi.GOVERNANCE_TOKEN,
            options,
        )

    @sdk_operation("claimFortress")
    async def claim_fortress(self, options: Options = None) -> TransactionHandle:
        """Claim the caller's accrued FTS rewards."""
        options = CallOptions.coerce(options)
        holder = await self.chain.get_account_address()
        comptroller = self.registry.address_of(COMPTROLLER)
        return await self._send(comptroller, "claimFortress", [holder], abi.COMPTROLLER, options)

    @sdk_operation("getFortressBalance")
    async def get_fortress_balance(self, address: str) -> int:
        """FTS balance of ``address`` as a mantissa (18 decimals)."""
        address = checksum(address)
        token = self.registry.address_of(GOVERNANCE_TOKEN)
        return int(await self.chain.read(token, "balanceOf", [address], abi.GOVERNANCE_TOKEN))

    @sdk_operation("getFortressAccrued")
    async def get_fortress_accrued(self, address: str) -> int:
        """FTS accrued but not yet claimed by ``address`` (mantissa)."""
        address = checksum(address)
        lens = self.registry.address_of(LENS)
        metadata = await self.chain.read(
            lens,
            "getFTSBalanceMetadataExt",
            [
                self.registry.address_of(GOVERNANCE_TOKEN),
                self.registry.address_of(COMPTROLLER),
                address,
            ],
            abi.LENS,
        )
        # (balance, votes, delegate, allocated)
        return int(metadata[3])

