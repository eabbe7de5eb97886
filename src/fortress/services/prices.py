"""Cross-asset prices from the protocol oracle.

The oracle quotes each underlying in USD, keyed by its market token address
and scaled by ``10**(36 - underlying decimals)``. The price of A in B is
``usd(A) / usd(B)``; a market token is worth its underlying times the market's
exchange rate, so

    price(A in B) = raw(A) / raw(B) * 10**(dA - dB) * x(A) / x(B)

where ``x`` is 1 for underlyings and the exchange rate for market tokens.

Every call reads the chain again. Two calls a block apart can return
different values.
"""

import logging
from decimal import Decimal, localcontext

from fortress import abi
from fortress.constants import (
    COMPTROLLER,
    DEFAULT_QUOTE_ASSET,
    DERIVATIVE_DECIMALS,
    ORACLE_DECIMALS,
)
from fortress.errors import ChainCallFailure
from fortress.registry import Asset
from fortress.services.base import ProtocolService, sdk_operation

logger = logging.getLogger(__name__)

_PRECISION = 50


class PriceResolver(ProtocolService):
    """Prices between any two supported assets."""

    async def get_oracle_address(self) -> str:
        """Read the current oracle from the Comptroller."""
        comptroller = self.registry.address_of(COMPTROLLER)
        return await self.chain.read(comptroller, "oracle", [], abi.COMPTROLLER)

    async def get_underlying_price(self, oracle: str, asset: Asset) -> int:
        """Raw oracle price for the underlying of ``asset``."""
        return int(
            await self.chain.read(
                oracle, "getUnderlyingPrice", [asset.price_key], abi.PRICE_ORACLE
            )
        )

    async def get_exchange_rate(self, asset: Asset) -> Decimal:
        """Underlying units one market token is worth.

        ``exchangeRateCurrent`` is scaled by ``10**(18 + dU - 8)``.
        """
        market_abi = abi.market_abi(asset.symbol, self.registry.native_derivative)
        raw = int(await self.chain.read(asset.address, "exchangeRateCurrent", [], market_abi))

        underlying_decimals = self.registry.decimals_of(asset.underlying)
        scale = ORACLE_DECIMALS + underlying_decimals - DERIVATIVE_DECIMALS

        with localcontext() as ctx:
            ctx.prec = _PRECISION
            return Decimal(raw).scaleb(-scale)

    @sdk_operation("getPrice")
    async def get_price(self, asset: str, in_asset: str = DEFAULT_QUOTE_ASSET) -> Decimal:
        """Price of ``asset`` expressed in ``in_asset``.

        Both arguments accept underlyings, market tokens (``fDAI``) and
        oracle-only assets.

        Args:
            asset: Asset to price
            in_asset: Quote asset (defaults to USDC)

        Returns:
            Price as Decimal

        Raises:
            UnsupportedAsset: If either symbol is not supported
        """
        base = self.registry.resolve(asset)
        quote = self.registry.resolve(in_asset)

        oracle = await self.get_oracle_address()
        base_price = await self.get_underlying_price(oracle, base)
        quote_price = await self.get_underlying_price(oracle, quote)
        if quote_price == 0:
            raise ChainCallFailure(f"Oracle has no price for {in_asset}.")

        base_rate = await self.get_exchange_rate(base) if base.is_derivative else None
        quote_rate = await self.get_exchange_rate(quote) if quote.is_derivative else None

        base_decimals = self.registry.decimals_of(base.underlying)
        quote_decimals = self.registry.decimals_of(quote.underlying)

        with localcontext() as ctx:
            ctx.prec = _PRECISION

            aligned = Decimal(base_price).scaleb(base_decimals - quote_decimals)
            result = aligned / Decimal(quote_price)

            if base_rate is not None:
                result = result * base_rate
            if quote_rate is not None:
                result = result / quote_rate

        logger.debug(f"Price {asset} in {in_asset}: {result}")
        return result
