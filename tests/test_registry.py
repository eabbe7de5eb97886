"""Tests for the asset registry."""

import json

import pytest

from fortress.address import checksum
from fortress.errors import UnsupportedAsset
from fortress.registry import AssetRegistry
from tests.conftest import TEST_ADDRESSES, TEST_ORACLE_ASSETS, addr


class TestRegistryLookups:
    """Tests for symbol classification."""

    def test_markets_require_deployed_market_token(self, registry):
        assert registry.markets == frozenset({"DAI", "USDC", "BNB", "BTCB"})
        assert not registry.is_underlying("ETH")

    def test_derivative_classification(self, registry):
        assert registry.is_derivative("fDAI")
        assert not registry.is_derivative("DAI")
        assert not registry.is_derivative("fETH")
        assert registry.underlying_of("fDAI") == "DAI"
        assert registry.derivative_of("DAI") == "fDAI"

    def test_native_asset(self, registry):
        assert registry.is_native("BNB")
        assert registry.is_native("fBNB")
        assert not registry.is_native("DAI")
        assert registry.native_derivative == "fBNB"

    def test_addresses_are_checksummed(self, registry):
        assert registry.address_of("fDAI") == checksum(TEST_ADDRESSES["fDAI"])

    def test_unknown_address(self, registry):
        with pytest.raises(UnsupportedAsset):
            registry.address_of("XYZ")

    def test_decimals(self, registry):
        assert registry.decimals_of("DAI") == 18
        assert registry.decimals_of("USDC") == 6
        assert registry.decimals_of("fUSDC") == 8
        assert registry.decimals_of("BTCB") == 18

    def test_mainnet_stablecoin_override(self):
        mainnet = AssetRegistry("mainnet", 56, TEST_ADDRESSES)
        assert mainnet.decimals_of("USDC") == 18
        assert mainnet.decimals_of("USDT") == 18
        assert mainnet.decimals_of("fUSDC") == 8

    def test_decimals_table_override(self):
        custom = AssetRegistry("testnet", 97, TEST_ADDRESSES, decimals={"DAI": 6})
        assert custom.decimals_of("DAI") == 6

    def test_explicit_table_beats_network_override(self):
        custom = AssetRegistry("mainnet", 56, TEST_ADDRESSES, decimals={"USDC": 6})
        assert custom.decimals_of("USDC") == 6
        assert custom.decimals_of("USDT") == 18


class TestResolve:
    """Tests for resolve() and price keys."""

    def test_underlying_priced_by_market_token(self, registry):
        asset = registry.resolve("DAI")
        assert asset.decimals == 18
        assert not asset.is_derivative
        assert asset.derivative == "fDAI"
        assert asset.price_key == checksum(TEST_ADDRESSES["fDAI"])

    def test_derivative(self, registry):
        asset = registry.resolve("fUSDC")
        assert asset.is_derivative
        assert asset.decimals == 8
        assert asset.underlying == "USDC"
        assert asset.price_key == checksum(TEST_ADDRESSES["fUSDC"])

    def test_native_has_no_token_address(self, registry):
        asset = registry.resolve("BNB")
        assert asset.address is None
        assert asset.price_key == checksum(TEST_ADDRESSES["fBNB"])

    def test_oracle_only_asset(self, registry):
        asset = registry.resolve("FTS")
        assert asset.oracle_only
        assert asset.derivative is None
        assert asset.price_key == checksum(TEST_ORACLE_ASSETS["FTS"])

    @pytest.mark.parametrize("symbol", ["ETH", "fETH", "", None, "dai"])
    def test_unsupported(self, registry, symbol):
        with pytest.raises(UnsupportedAsset):
            registry.resolve(symbol)


class TestFromJson:
    def test_loads_network(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(
            json.dumps(
                {
                    "mainnet": {
                        "chain_id": 56,
                        "addresses": {"DAI": addr(5), "fDAI": addr(6)},
                        "oracle_assets": {"FTS": addr(0x30)},
                    }
                }
            )
        )

        registry = AssetRegistry.from_json(str(path), "mainnet")

        assert registry.chain_id == 56
        assert registry.markets == frozenset({"DAI"})
        assert registry.decimals_of("USDC") == 18
        assert registry.is_oracle_only("FTS")

    def test_missing_network(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({"mainnet": {"chain_id": 56, "addresses": {}}}))

        with pytest.raises(UnsupportedAsset):
            AssetRegistry.from_json(str(path), "testnet")
