"""Supply, redeem, borrow and repay against protocol markets.

Each entry point validates its arguments, normalizes the amount, runs the
allowance gate where tokens leave the caller's wallet, then submits. Nothing
touches the chain until validation has passed.

If an approval confirms and the main transaction then fails, the approval
stays in place; blockchain transactions cannot be rolled back.
"""

import logging
from typing import Optional, Union

from fortress import abi
from fortress.address import checksum
from fortress.amounts import Amount, normalize, to_human
from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.config import Settings
from fortress.errors import InvalidAddress, InvalidArgument, UnsupportedAsset
from fortress.options import CallOptions
from fortress.registry import AssetRegistry
from fortress.services.allowance import AllowanceGate
from fortress.services.base import ProtocolService, sdk_operation

logger = logging.getLogger(__name__)

Options = Union[CallOptions, dict, None]


class MarketService(ProtocolService):
    """Transaction entry points for lending markets."""

    def __init__(
        self,
        chain: ChainBackend,
        registry: AssetRegistry,
        settings: Settings,
        gate: Optional[AllowanceGate] = None,
    ):
        super().__init__(chain, registry, settings)
        self.gate = gate or AllowanceGate(
            chain,
            confirmation_timeout=settings.confirmation_timeout,
            confirmations=settings.confirmations,
        )

    def _market_for(self, asset: str, action: str) -> tuple[str, str]:
        """Validate an underlying symbol and return (market symbol, market address)."""
        if not isinstance(asset, str) or not self.registry.is_underlying(asset):
            raise UnsupportedAsset(f"Argument `asset` cannot be {action}.")
        derivative = self.registry.derivative_of(asset)
        return derivative, self.registry.address_of(derivative)

    def _market_abi(self, derivative: str) -> list[dict]:
        return abi.market_abi(derivative, self.registry.native_derivative)

    def _amount(self, amount: Amount, symbol: str, options: CallOptions) -> int:
        return normalize(amount, self.registry.decimals_of(symbol), options.mantissa)

    def _human(self, mantissa: int, symbol: str):
        return to_human(mantissa, self.registry.decimals_of(symbol))

    async def _gate(
        self,
        asset: str,
        market: str,
        amount: int,
        options: CallOptions,
        skip_approval: bool,
    ) -> CallOptions:
        """Approve the market if needed; return options for the main send."""
        owner = await self.chain.get_account_address()
        approval = await self.gate.ensure_allowance(
            owner,
            market,
            self.registry.address_of(asset),
            amount,
            options,
            skip=skip_approval,
        )
        # An explicit nonce was consumed by the approval
        if approval is not None and options.nonce is not None:
            options = options.model_copy(update={"nonce": options.nonce + 1})
        return options

    @sdk_operation("supply")
    async def supply(
        self,
        asset: str,
        amount: Amount,
        skip_approval: bool = False,
        options: Options = None,
    ) -> TransactionHandle:
        """Supply an underlying asset to its market.

        Args:
            asset: Underlying symbol (``DAI``, ``BNB``)
            amount: Amount in natural scale, or mantissa if ``options.mantissa``
            skip_approval: Do not check or send an ``approve`` first
            options: Call options and gas overrides

        Returns:
            Handle of the ``mint`` transaction
        """
        options = CallOptions.coerce(options)
        derivative, market = self._market_for(asset, "supplied")
        mantissa = self._amount(amount, asset, options)

        if self.registry.is_native(asset):
            args = []
            options = options.with_value(mantissa)
        else:
            options = await self._gate(asset, market, mantissa, options, skip_approval)
            args = [mantissa]

        logger.info(f"Supplying {self._human(mantissa, asset)} {asset} to {derivative}")
        return await self._send(market, "mint", args, self._market_abi(derivative), options)

    @sdk_operation("redeem")
    async def redeem(self, asset: str, amount: Amount, options: Options = None) -> TransactionHandle:
        """Redeem from a market.

        Passing the market token symbol (``fDAI``) redeems that many market
        tokens; passing the underlying (``DAI``) redeems that much underlying.
        """
        options = CallOptions.coerce(options)
        if not isinstance(asset, str) or not asset:
            raise InvalidArgument("Argument `asset` must be a non-empty string.")

        if self.registry.is_derivative(asset):
            derivative, method = asset, "redeem"
        elif self.registry.is_underlying(asset):
            derivative, method = self.registry.derivative_of(asset), "redeemUnderlying"
        else:
            raise UnsupportedAsset("Argument `asset` is not supported.")

        market = self.registry.address_of(derivative)
        mantissa = self._amount(amount, asset, options)

        logger.info(f"Redeeming {self._human(mantissa, asset)} {asset} via {method}")
        return await self._send(market, method, [mantissa], self._market_abi(derivative), options)

    @sdk_operation("borrow")
    async def borrow(self, asset: str, amount: Amount, options: Options = None) -> TransactionHandle:
        """Borrow an underlying asset. Requires collateral in entered markets."""
        options = CallOptions.coerce(options)
        derivative, market = self._market_for(asset, "borrowed")
        mantissa = self._amount(amount, asset, options)

        logger.info(f"Borrowing {self._human(mantissa, asset)} {asset}")
        return await self._send(market, "borrow", [mantissa], self._market_abi(derivative), options)

    @sdk_operation("repayBorrow")
    async def repay_borrow(
        self,
        asset: str,
        amount: Amount,
        borrower: Optional[str] = None,
        skip_approval: bool = False,
        options: Options = None,
    ) -> TransactionHandle:
        """Repay a borrow for the caller or on behalf of ``borrower``.

        Args:
            asset: Underlying symbol that was borrowed
            amount: Amount in natural scale, or mantissa if ``options.mantissa``
            borrower: Address to repay for; empty or None repays the caller's
                own borrow
            skip_approval: Do not check or send an ``approve`` first
            options: Call options and gas overrides

        Raises:
            InvalidAddress: If ``borrower`` is given but not an address
        """
        options = CallOptions.coerce(options)
        derivative, market = self._market_for(asset, "repaid")

        if borrower:
            try:
                borrower = checksum(borrower)
            except InvalidAddress:
                raise InvalidAddress("Invalid `borrower` address.") from None
            method, args = "repayBorrowBehalf", [borrower]
        else:
            method, args = "repayBorrow", []

        mantissa = self._amount(amount, asset, options)

        if self.registry.is_native(asset):
            options = options.with_value(mantissa)
        else:
            options = await self._gate(asset, market, mantissa, options, skip_approval)
            args.append(mantissa)

        logger.info(f"Repaying {self._human(mantissa, asset)} {asset} via {method}")
        return await self._send(market, method, args, self._market_abi(derivative), options)
