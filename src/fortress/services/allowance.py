"""Token allowance check before value-moving transactions.

The allowance is read once, right before the approve decision, and the main
transaction is sent right after the approval confirms. Between the read and
the main send another transaction may still change the allowance; the
contract is the final check and the main transaction reverts on-chain in that
case. Concurrent calls for the same owner, spender and token can both decide
to approve.
"""

import logging
from typing import Optional

from fortress import abi
from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.errors import InvalidArgument
from fortress.options import CallOptions

logger = logging.getLogger(__name__)


class AllowanceGate:
    """Sends an ``approve`` only when the current allowance is too low."""

    def __init__(self, chain: ChainBackend, confirmation_timeout: float = 120, confirmations: int = 1):
        self.chain = chain
        self.confirmation_timeout = confirmation_timeout
        self.confirmations = confirmations

    async def get_allowance(self, token: str, owner: str, spender: str) -> int:
        """Read allowance(owner, spender) on a BEP-20 token."""
        return int(await self.chain.read(token, "allowance", [owner, spender], abi.BEP20))

    async def ensure_allowance(
        self,
        owner: str,
        spender: str,
        token: Optional[str],
        required: int,
        options: Optional[CallOptions] = None,
        skip: bool = False,
    ) -> Optional[TransactionHandle]:
        """Approve ``spender`` for ``required`` if the allowance is short.

        Args:
            owner: Token holder (the signing account)
            spender: Market contract that pulls the tokens
            token: BEP-20 token address (the native asset has none)
            required: Mantissa the next transaction will move
            options: Gas overrides shared with the main transaction
            skip: Caller guarantees the allowance; no read, no write

        Returns:
            Confirmed approval handle, or None if nothing was sent
        """
        if skip:
            logger.debug(f"Allowance check skipped for {token}")
            return None

        if token is None:
            raise InvalidArgument("The native asset has no allowance.")

        allowance = await self.get_allowance(token, owner, spender)
        if allowance >= required:
            logger.info(f"Token already approved: allowance={allowance} required={required}")
            return None

        logger.info(f"Approving {spender} to spend {required} of {token} (allowance={allowance})")

        params = (options or CallOptions()).to_tx_params()
        params.pop("value", None)

        handle = await self.chain.send(token, "approve", [spender, required], abi.BEP20, params)
        return await self.chain.wait_for_receipt(
            handle, timeout=self.confirmation_timeout, confirmations=self.confirmations
        )
