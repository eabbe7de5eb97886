"""web3.py implementation of the chain capability.

Reads go through ``eth_call`` on the latest block. Sends are built by web3
(gas and fee estimation by the node), signed by the configured signer backend
and broadcast as raw transactions.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.errors import ChainCallFailure, SigningUnavailable
from fortress.signing.base import SignerBackend

logger = logging.getLogger(__name__)


class EVMChain(ChainBackend):
    """Chain backend for EVM networks over JSON-RPC."""

    def __init__(
        self,
        rpc_url: str,
        signer: Optional[SignerBackend] = None,
        poll_interval: float = 2.0,
    ):
        self.rpc_url = rpc_url
        self.signer = signer
        self.poll_interval = poll_interval
        self._web3: Optional[AsyncWeb3] = None

    @property
    def web3(self) -> AsyncWeb3:
        """Lazy load web3 instance."""
        if self._web3 is None:
            self._web3 = AsyncWeb3(AsyncHTTPProvider(self.rpc_url))
        return self._web3

    def _function(self, address: str, method: str, args: Sequence[Any], abi: list[dict]):
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return contract.functions[method](*args)

    async def read(self, address: str, method: str, args: Sequence[Any], abi: list[dict]) -> Any:
        logger.debug(f"eth_call {address}.{method}{tuple(args)}")
        try:
            return await self._function(address, method, args, abi).call()
        except Exception as e:
            logger.warning(f"Read {method} on {address} failed: {e}")
            raise ChainCallFailure(f"{method} call failed: {e}") from e

    async def send(
        self,
        address: str,
        method: str,
        args: Sequence[Any],
        abi: list[dict],
        tx_params: Optional[dict] = None,
    ) -> TransactionHandle:
        sender = await self.get_account_address()
        params = dict(tx_params or {})
        params["from"] = sender

        try:
            if "nonce" not in params:
                params["nonce"] = await self.web3.eth.get_transaction_count(sender, "pending")

            tx = await self._function(address, method, args, abi).build_transaction(params)
            raw_tx = await self.signer.sign_transaction(tx)
            tx_hash = await self.web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            logger.warning(f"Send {method} to {address} failed: {e}")
            raise ChainCallFailure(f"{method} transaction failed: {e}") from e

        handle = TransactionHandle(
            tx_hash=Web3.to_hex(tx_hash),
            to=address,
            method=method,
            args=tuple(args),
            value=int(params.get("value", 0)),
        )
        logger.info(f"Sent {method} to {address}: {handle.tx_hash}")
        return handle

    async def wait_for_receipt(
        self,
        handle: TransactionHandle,
        timeout: float = 120,
        confirmations: int = 1,
    ) -> TransactionHandle:
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        while True:
            if loop.time() - start_time > timeout:
                raise ChainCallFailure(
                    f"Transaction {handle.tx_hash} not confirmed after {timeout}s"
                )

            try:
                receipt = await self.web3.eth.get_transaction_receipt(handle.tx_hash)
            except TransactionNotFound:
                receipt = None

            if receipt is not None:
                current_block = await self.web3.eth.get_block_number()
                confirms = current_block - receipt["blockNumber"] + 1

                if confirms >= confirmations:
                    handle.receipt = dict(receipt)
                    if receipt["status"] == 0:
                        raise ChainCallFailure(f"Transaction {handle.tx_hash} failed (reverted)")
                    logger.info(f"Confirmed {handle.method} {handle.tx_hash}")
                    return handle

            await asyncio.sleep(self.poll_interval)

    async def get_account_address(self) -> str:
        if self.signer is None:
            raise SigningUnavailable("No signer configured for this account.")
        address = await self.signer.get_address()
        if not address:
            raise SigningUnavailable("Signer has no account address.")
        return address

    async def get_chain_id(self) -> int:
        return await self.web3.eth.chain_id
