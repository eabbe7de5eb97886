"""Immutable per-network asset and contract registry.

The registry is built once (from a mapping or a JSON file) and passed to every
service. Nothing mutates it afterwards.

JSON layout::

    {
      "mainnet": {
        "chain_id": 56,
        "addresses": {"Comptroller": "0x...", "DAI": "0x...", "fDAI": "0x..."},
        "oracle_assets": {"XVS": "0x..."},
        "decimals": {"DAI": 18}
      }
    }

``oracle_assets`` maps assets that have a price but no market to the address
the oracle is keyed by for them.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from fortress.address import checksum
from fortress.constants import (
    DEFAULT_DECIMALS,
    DERIVATIVE_DECIMALS,
    DERIVATIVE_PREFIX,
    NATIVE_ASSET,
    NETWORK_DECIMAL_OVERRIDES,
    UNDERLYINGS,
)
from fortress.errors import UnsupportedAsset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Asset:
    """A supported asset on one network.

    Attributes:
        symbol: Symbol as used in the registry (``DAI``, ``fDAI``)
        decimals: Token decimal count
        address: Token contract address (None for the native asset)
        is_derivative: True for market tokens
        underlying: Underlying symbol (self for underlyings)
        derivative: Market token symbol (None for oracle-only assets)
        oracle_only: True if the asset has a price but no market
        price_key: Address ``getUnderlyingPrice`` is keyed by
    """
    symbol: str
    decimals: int
    address: Optional[str]
    is_derivative: bool
    underlying: str
    derivative: Optional[str]
    oracle_only: bool
    price_key: str


class AssetRegistry:
    """Lookup tables for one network."""

    def __init__(
        self,
        network: str,
        chain_id: int,
        addresses: Mapping[str, str],
        decimals: Optional[Mapping[str, int]] = None,
        oracle_assets: Optional[Mapping[str, str]] = None,
        underlyings: Iterable[str] = UNDERLYINGS,
        native_asset: str = NATIVE_ASSET,
    ):
        self.network = network
        self.chain_id = chain_id
        self.native_asset = native_asset

        self._addresses = MappingProxyType(
            {name: checksum(addr) for name, addr in addresses.items()}
        )
        self._oracle_assets = MappingProxyType(
            {symbol: checksum(addr) for symbol, addr in (oracle_assets or {}).items()}
        )

        table = dict(DEFAULT_DECIMALS)
        table.update(NETWORK_DECIMAL_OVERRIDES.get(chain_id, {}))
        table.update(decimals or {})
        self._decimals = MappingProxyType(table)

        # An underlying is supported only when its market is deployed here
        self._markets = frozenset(
            symbol for symbol in underlyings
            if DERIVATIVE_PREFIX + symbol in self._addresses
        )

        logger.debug(
            f"Registry for {network} ({chain_id}): {len(self._markets)} markets, "
            f"{len(self._oracle_assets)} oracle-only assets"
        )

    @classmethod
    def from_json(cls, path: str, network: str) -> "AssetRegistry":
        """Load the registry for one network from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if network not in data:
            raise UnsupportedAsset(f"Network {network!r} not found in {path}")

        entry = data[network]
        return cls(
            network=network,
            chain_id=int(entry["chain_id"]),
            addresses=entry.get("addresses", {}),
            decimals=entry.get("decimals"),
            oracle_assets=entry.get("oracle_assets"),
        )

    @property
    def native_derivative(self) -> str:
        return DERIVATIVE_PREFIX + self.native_asset

    @property
    def markets(self) -> frozenset[str]:
        """Underlying symbols that have a market on this network."""
        return self._markets

    def address_of(self, name: str) -> str:
        """Get the checksummed address of a token or protocol contract."""
        address = self._addresses.get(name)
        if address is None:
            raise UnsupportedAsset(f"No address for {name!r} on {self.network}.")
        return address

    def decimals_of(self, symbol: str) -> int:
        """Get the decimal count of an underlying or market token."""
        if self.is_derivative(symbol):
            return DERIVATIVE_DECIMALS
        if symbol not in self._decimals:
            raise UnsupportedAsset(f"Unknown decimals for {symbol!r}.")
        return self._decimals[symbol]

    def is_underlying(self, symbol: str) -> bool:
        """True if the symbol is an underlying with a market on this network."""
        return symbol in self._markets

    def is_derivative(self, symbol: str) -> bool:
        """True if the symbol is the market token of a supported underlying."""
        return (
            isinstance(symbol, str)
            and symbol.startswith(DERIVATIVE_PREFIX)
            and symbol[len(DERIVATIVE_PREFIX):] in self._markets
        )

    def is_oracle_only(self, symbol: str) -> bool:
        return symbol in self._oracle_assets and symbol not in self._markets

    def is_native(self, symbol: str) -> bool:
        """True for the gas asset and its market token."""
        return symbol in (self.native_asset, DERIVATIVE_PREFIX + self.native_asset)

    def underlying_of(self, derivative: str) -> str:
        if not self.is_derivative(derivative):
            raise UnsupportedAsset(f"{derivative!r} is not a supported market token.")
        return derivative[len(DERIVATIVE_PREFIX):]

    def derivative_of(self, underlying: str) -> str:
        if not self.is_underlying(underlying):
            raise UnsupportedAsset(f"{underlying!r} has no market on {self.network}.")
        return DERIVATIVE_PREFIX + underlying

    def price_key_of(self, symbol: str) -> str:
        """Address the oracle's ``getUnderlyingPrice`` is keyed by for a symbol.

        Both an underlying and its market token resolve to the market token
        address; oracle-only assets use their registered key.
        """
        return self.resolve(symbol).price_key

    def resolve(self, symbol: str) -> Asset:
        """Resolve a symbol into its full asset description.

        Raises:
            UnsupportedAsset: If the symbol is not a market underlying, a market
                token or an oracle-only asset on this network
        """
        if not isinstance(symbol, str) or not symbol:
            raise UnsupportedAsset("Asset must be a non-empty string.")

        if self.is_derivative(symbol):
            underlying = self.underlying_of(symbol)
            return Asset(
                symbol=symbol,
                decimals=DERIVATIVE_DECIMALS,
                address=self.address_of(symbol),
                is_derivative=True,
                underlying=underlying,
                derivative=symbol,
                oracle_only=False,
                price_key=self.address_of(symbol),
            )

        if self.is_underlying(symbol):
            derivative = DERIVATIVE_PREFIX + symbol
            return Asset(
                symbol=symbol,
                decimals=self.decimals_of(symbol),
                address=self._addresses.get(symbol),
                is_derivative=False,
                underlying=symbol,
                derivative=derivative,
                oracle_only=False,
                price_key=self.address_of(derivative),
            )

        if self.is_oracle_only(symbol):
            return Asset(
                symbol=symbol,
                decimals=self.decimals_of(symbol),
                address=self._addresses.get(symbol),
                is_derivative=False,
                underlying=symbol,
                derivative=None,
                oracle_only=True,
                price_key=self._oracle_assets[symbol],
            )

        raise UnsupportedAsset(f"Asset {symbol!r} is not supported on {self.network}.")
