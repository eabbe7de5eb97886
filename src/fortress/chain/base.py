"""Base interface for the chain RPC capability.

The SDK only needs four things from a chain: a read-only contract call, a
state-changing contract call, a way to wait for inclusion, and the address of
the active account. Everything else (gas estimation, nonce management,
transport) belongs to the backend.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class TransactionHandle:
    """A submitted transaction.

    Attributes:
        tx_hash: Transaction hash (0x hex)
        to: Contract address the transaction was sent to
        method: Contract method name
        args: Arguments the method was called with
        value: Native asset amount attached, in wei
        receipt: Receipt dict once confirmed
    """
    tx_hash: str
    to: str
    method: str
    args: tuple = ()
    value: int = 0
    receipt: Optional[dict] = None

    @property
    def confirmed(self) -> bool:
        return self.receipt is not None

    @property
    def succeeded(self) -> bool:
        return self.receipt is not None and self.receipt.get("status") == 1


class ChainBackend(ABC):
    """Abstract chain RPC capability."""

    @abstractmethod
    async def read(self, address: str, method: str, args: Sequence[Any], abi: list[dict]) -> Any:
        """Call a view method against the latest block.

        Args:
            address: Contract address
            method: Method name in ``abi``
            args: Positional arguments
            abi: ABI fragments containing ``method``

        Returns:
            Decoded return value (a tuple for multiple outputs)
        """
        pass

    @abstractmethod
    async def send(
        self,
        address: str,
        method: str,
        args: Sequence[Any],
        abi: list[dict],
        tx_params: Optional[dict] = None,
    ) -> TransactionHandle:
        """Sign and broadcast a state-changing call.

        Args:
            address: Contract address
            method: Method name in ``abi``
            args: Positional arguments
            abi: ABI fragments containing ``method``
            tx_params: Overrides (value, gas, gasPrice, nonce, ...)

        Returns:
            Handle of the pending transaction
        """
        pass

    @abstractmethod
    async def wait_for_receipt(
        self,
        handle: TransactionHandle,
        timeout: float = 120,
        confirmations: int = 1,
    ) -> TransactionHandle:
        """Wait until a transaction is included and return it with its receipt.

        Raises:
            ChainCallFailure: If the transaction reverted or timed out
        """
        pass

    @abstractmethod
    async def get_account_address(self) -> str:
        """Address of the account that signs sends."""
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        pass
