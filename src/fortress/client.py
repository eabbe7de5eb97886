"""The ``Fortress`` SDK facade.

One object holds the registry, the chain backend, the signer and every
protocol service. All capabilities are injected once at construction::

    fortress = create_fortress()                      # from FORTRESS_* settings
    trx = await fortress.supply("DAI", 1)
    price = await fortress.get_price("fDAI", "USDC")
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from fortress.amounts import Amount
from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.config import Settings, get_settings
from fortress.constants import DEFAULT_DELEGATION_EXPIRY, DEFAULT_QUOTE_ASSET
from fortress.errors import InvalidArgument
from fortress.options import CallOptions
from fortress.registry import AssetRegistry
from fortress.services import (
    AllowanceGate,
    DelegationSigner,
    FaiService,
    GovernanceService,
    MarketService,
    PriceResolver,
)
from fortress.signing.base import Signature, SignerBackend

logger = logging.getLogger(__name__)

Options = Union[CallOptions, dict, None]


class Fortress:
    """Entry point for all protocol interactions."""

    def __init__(
        self,
        registry: AssetRegistry,
        chain: ChainBackend,
        signer: Optional[SignerBackend] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.chain = chain
        self.signer = signer

        self.allowance = AllowanceGate(
            chain,
            confirmation_timeout=self.settings.confirmation_timeout,
            confirmations=self.settings.confirmations,
        )
        self.markets = MarketService(chain, registry, self.settings, gate=self.allowance)
        self.prices = PriceResolver(chain, registry, self.settings)
        self.delegation = DelegationSigner(chain, registry, self.settings, signer=signer)
        self.governance = GovernanceService(chain, registry, self.settings)
        self.fai = FaiService(chain, registry, self.settings)

    def __repr__(self) -> str:
        return f"Fortress(network={self.registry.network}, chain_id={self.registry.chain_id})"

    # ======================
    # Markets
    # ======================

    async def supply(
        self, asset: str, amount: Amount, skip_approval: bool = False, options: Options = None
    ) -> TransactionHandle:
        return await self.markets.supply(asset, amount, skip_approval, options)

    async def redeem(self, asset: str, amount: Amount, options: Options = None) -> TransactionHandle:
        return await self.markets.redeem(asset, amount, options)

    async def borrow(self, asset: str, amount: Amount, options: Options = None) -> TransactionHandle:
        return await self.markets.borrow(asset, amount, options)

    async def repay_borrow(
        self,
        asset: str,
        amount: Amount,
        borrower: Optional[str] = None,
        skip_approval: bool = False,
        options: Options = None,
    ) -> TransactionHandle:
        return await self.markets.repay_borrow(asset, amount, borrower, skip_approval, options)

    # ======================
    # Prices
    # ======================

    async def get_price(self, asset: str, in_asset: str = DEFAULT_QUOTE_ASSET) -> Decimal:
        return await self.prices.get_price(asset, in_asset)

    # ======================
    # Governance
    # ======================

    async def create_delegation_signature(
        self, delegatee: str, expiry: int = DEFAULT_DELEGATION_EXPIRY
    ) -> Signature:
        return await self.delegation.create_delegation_signature(delegatee, expiry)

    async def delegate(self, delegatee: str, options: Options = None) -> TransactionHandle:
        return await self.governance.delegate(delegatee, options)

    async def delegate_by_sig(
        self,
        delegatee: str,
        nonce: int,
        expiry: int,
        signature: Union[Signature, dict],
        options: Options = None,
    ) -> TransactionHandle:
        return await self.governance.delegate_by_sig(delegatee, nonce, expiry, signature, options)

    async def claim_fortress(self, options: Options = None) -> TransactionHandle:
        return await self.governance.claim_fortress(options)

    async def get_fortress_balance(self, address: str) -> int:
        return await self.governance.get_fortress_balance(address)

    async def get_fortress_accrued(self, address: str) -> int:
        return await self.governance.get_fortress_accrued(address)

    # ======================
    # FAI
    # ======================

    async def mint_fai(self, amount: Amount, options: Options = None) -> TransactionHandle:
        return await self.fai.mint_fai(amount, options)

    async def repay_fai(self, amount: Amount, options: Options = None) -> TransactionHandle:
        return await self.fai.repay_fai(amount, options)

    async def get_mintable_fai(self, address: str) -> int:
        return await self.fai.get_mintable_fai(address)

    async def get_fai_mint_rate(self) -> int:
        return await self.fai.get_fai_mint_rate()

    async def minted_fai_of(self, address: str) -> int:
        return await self.fai.minted_fai_of(address)

    async def minted_fais(self, address: str) -> int:
        return await self.fai.minted_fais(address)

    async def fai_controller(self) -> str:
        return await self.fai.fai_controller()

    async def fai_mint_rate(self) -> int:
        return await self.fai.fai_mint_rate()

    async def mint_fai_guardian_paused(self) -> bool:
        return await self.fai.mint_fai_guardian_paused()

    async def repay_fai_guardian_paused(self) -> bool:
        return await self.fai.repay_fai_guardian_paused()


def create_fortress(
    settings: Optional[Settings] = None,
    registry: Optional[AssetRegistry] = None,
    chain: Optional[ChainBackend] = None,
    signer: Optional[SignerBackend] = None,
) -> Fortress:
    """Build a ``Fortress`` instance, filling missing capabilities from settings.

    Args:
        settings: SDK settings (defaults to environment)
        registry: Address registry; loaded from ``settings.registry_path`` if omitted
        chain: Chain backend; a web3 backend on ``settings.rpc_url`` if omitted
        signer: Signer backend; a local signer from ``settings.private_key`` if omitted

    Raises:
        InvalidArgument: If no registry is given and none is configured
    """
    from fortress.chain.factory import create_chain
    from fortress.signing.factory import get_signer

    settings = settings or get_settings()

    if registry is None:
        if not settings.registry_path:
            raise InvalidArgument("No registry given and FORTRESS_REGISTRY_PATH is not set.")
        registry = AssetRegistry.from_json(settings.registry_path, settings.get_network_name())

    if signer is None:
        signer = getattr(chain, "signer", None) if chain is not None else get_signer(settings)

    if chain is None:
        chain = create_chain(settings, signer=signer)

    logger.info(f"Fortress SDK ready on {registry.network} (chain {registry.chain_id})")
    return Fortress(registry, chain, signer=signer, settings=settings)
