"""FAI stablecoin operations on the Comptroller."""

import logging
from typing import Union

from fortress import abi
from fortress.address import checksum
from fortress.amounts import Amount, normalize
from fortress.chain.base import TransactionHandle
from fortress.constants import COMPTROLLER, STABLECOIN
from fortress.errors import ChainCallFailure
from fortress.options import CallOptions
from fortress.services.base import ProtocolService, sdk_operation

logger = logging.getLogger(__name__)

Options = Union[CallOptions, dict, None]


class FaiService(ProtocolService):
    """Mint, repay and inspect FAI positions."""

    @property
    def _comptroller(self) -> str:
        return self.registry.address_of(COMPTROLLER)

    async def _read(self, method: str, args: list = None):
        return await self.chain.read(self._comptroller, method, args or [], abi.COMPTROLLER)

    @sdk_operation("mintFAI")
    async def mint_fai(self, amount: Amount, options: Options = None) -> TransactionHandle:
        """Mint FAI against the caller's collateral."""
        options = CallOptions.coerce(options)
        mantissa = normalize(amount, self.registry.decimals_of(STABLECOIN), options.mantissa)

        logger.info(f"Minting {mantissa} FAI")
        return await self._send(self._comptroller, "mintFAI", [mantissa], abi.COMPTROLLER, options)

    @sdk_operation("repayFAI")
    async def repay_fai(self, amount: Amount, options: Options = None) -> TransactionHandle:
        """Repay minted FAI."""
        options = CallOptions.coerce(options)
        mantissa = normalize(amount, self.registry.decimals_of(STABLECOIN), options.mantissa)

        logger.info(f"Repaying {mantissa} FAI")
        return await self._send(self._comptroller, "repayFAI", [mantissa], abi.COMPTROLLER, options)

    @sdk_operation("getMintableFAI")
    async def get_mintable_fai(self, address: str) -> int:
        """FAI mantissa ``address`` can still mint.

        Raises:
            ChainCallFailure: If the Comptroller returns a non-zero error code
        """
        error_code, amount = await self._read("getMintableFAI", [checksum(address)])
        if int(error_code) != 0:
            raise ChainCallFailure(f"Contract error occurred (code {error_code}).")
        return int(amount)

    @sdk_operation("getFAIMintRate")
    async def get_fai_mint_rate(self) -> int:
        return int(await self._read("getFAIMintRate"))

    @sdk_operation("mintedFAIOf")
    async def minted_fai_of(self, address: str) -> int:
        return int(await self._read("mintedFAIOf", [checksum(address)]))

    @sdk_operation("mintedFAIs")
    async def minted_fais(self, address: str) -> int:
        return int(await self._read("mintedFAIs", [checksum(address)]))

    @sdk_operation("faiController")
    async def fai_controller(self) -> str:
        return await self._read("faiController")

    @sdk_operation("faiMintRate")
    async def fai_mint_rate(self) -> int:
        return int(await self._read("faiMintRate"))

    @sdk_operation("mintFAIGuardianPaused")
    async def mint_fai_guardian_paused(self) -> bool:
        return bool(await self._read("mintFAIGuardianPaused"))

    @sdk_operation("repayFAIGuardianPaused")
    async def repay_fai_guardian_paused(self) -> bool:
        return bool(await self._read("repayFAIGuardianPaused"))
