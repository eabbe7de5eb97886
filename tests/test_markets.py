"""Tests for supply, redeem, borrow and repay."""

import logging

import pytest

from fortress.address import checksum
from fortress.errors import (
    ChainCallFailure,
    InvalidAddress,
    InvalidAmount,
    InvalidArgument,
    UnsupportedAsset,
)
from fortress.options import CallOptions
from fortress.services.markets import MarketService
from tests.conftest import OWNER, TEST_ADDRESSES, addr

DAI = TEST_ADDRESSES["DAI"]
FDAI = TEST_ADDRESSES["fDAI"]
USDC = TEST_ADDRESSES["USDC"]
FUSDC = TEST_ADDRESSES["fUSDC"]
FBNB = TEST_ADDRESSES["fBNB"]


@pytest.fixture
def markets(chain, registry, settings):
    return MarketService(chain, registry, settings)


def methods(chain):
    return [tx.method for tx in chain.sends]


class TestSupply:
    """Tests for MarketService.supply()."""

    @pytest.mark.asyncio
    async def test_supply_approves_then_mints(self, chain, markets):
        chain.respond(DAI, "allowance", 0)

        handle = await markets.supply("DAI", 1)

        assert chain.reads == [(DAI, "allowance", (OWNER, FDAI))]
        assert methods(chain) == ["approve", "mint"]
        assert chain.sends[0].to == DAI
        assert chain.sends[0].args == (FDAI, 10**18)
        assert chain.sends[1].to == FDAI
        assert chain.sends[1].args == (10**18,)
        assert handle.method == "mint"

    @pytest.mark.asyncio
    async def test_approval_confirmed_before_mint(self, chain, markets):
        chain.respond(DAI, "allowance", 0)

        handle = await markets.supply("DAI", 1)

        approval_hash = "0x%064x" % 1
        assert chain.waited == [approval_hash]
        assert handle.receipt is None

    @pytest.mark.asyncio
    async def test_sufficient_allowance_only_mints(self, chain, markets):
        chain.respond(DAI, "allowance", 10**18)

        await markets.supply("DAI", 1)

        assert methods(chain) == ["mint"]

    @pytest.mark.asyncio
    async def test_decimals_follow_asset(self, chain, markets):
        chain.respond(USDC, "allowance", 10**12)

        await markets.supply("USDC", "1.5")

        assert chain.sends[0].to == FUSDC
        assert chain.sends[0].args == (1_500_000,)

    @pytest.mark.asyncio
    async def test_skip_approval(self, chain, markets):
        await markets.supply("DAI", 1, skip_approval=True)

        assert chain.reads == []
        assert methods(chain) == ["mint"]

    @pytest.mark.asyncio
    async def test_mantissa_option(self, chain, markets):
        await markets.supply("DAI", "1000000000000000000", skip_approval=True, options={"mantissa": True})

        assert chain.sends[0].args == (10**18,)

    @pytest.mark.asyncio
    async def test_native_supply_sends_value(self, chain, markets):
        await markets.supply("BNB", "0.5")

        assert chain.reads == []
        assert len(chain.sends) == 1
        sent = chain.sends[0]
        assert sent.to == FBNB
        assert sent.method == "mint"
        assert sent.args == ()
        assert sent.params["value"] == 5 * 10**17

    @pytest.mark.asyncio
    async def test_unsupported_asset(self, chain, markets):
        with pytest.raises(UnsupportedAsset) as exc:
            await markets.supply("ETH", 1)

        assert str(exc.value) == "Fortress [supply] | Argument `asset` cannot be supplied."
        assert chain.calls == 0

    @pytest.mark.asyncio
    async def test_market_token_cannot_be_supplied(self, chain, markets):
        with pytest.raises(UnsupportedAsset):
            await markets.supply("fDAI", 1)
        assert chain.calls == 0

    @pytest.mark.asyncio
    async def test_invalid_amount_touches_nothing(self, chain, markets):
        with pytest.raises(InvalidAmount) as exc:
            await markets.supply("DAI", -1)

        assert str(exc.value).startswith("Fortress [supply] | ")
        assert chain.calls == 0

    @pytest.mark.asyncio
    async def test_overflowing_amount_is_invalid_amount(self, chain, markets):
        with pytest.raises(InvalidAmount) as exc:
            await markets.supply("DAI", "1e999999")

        assert str(exc.value).startswith("Fortress [supply] | ")
        assert chain.calls == 0

    @pytest.mark.asyncio
    async def test_logs_human_scale_amount(self, markets, caplog):
        caplog.set_level(logging.INFO, logger="fortress.services.markets")

        await markets.supply("USDC", "2.5", skip_approval=True)

        assert "Supplying 2.500000 USDC to fUSDC" in caplog.text

    @pytest.mark.asyncio
    async def test_explicit_nonce_bumped_after_approval(self, chain, markets):
        chain.respond(DAI, "allowance", 0)

        await markets.supply("DAI", 1, options=CallOptions(nonce=7, gas_limit=250000))

        assert chain.sends[0].params == {"nonce": 7, "gas": 250000}
        assert chain.sends[1].params == {"nonce": 8, "gas": 250000}

    @pytest.mark.asyncio
    async def test_explicit_nonce_kept_without_approval(self, chain, markets):
        chain.respond(DAI, "allowance", 10**18)

        await markets.supply("DAI", 1, options={"nonce": 7})

        assert chain.sends[0].params == {"nonce": 7}

    @pytest.mark.asyncio
    async def test_wait_for_confirmation(self, chain, markets):
        handle = await markets.supply("DAI", 1, skip_approval=True, options={"wait_for_confirmation": True})

        assert chain.waited == [handle.tx_hash]
        assert handle.succeeded

    @pytest.mark.asyncio
    async def test_failed_mint_keeps_approval(self, chain, markets):
        chain.respond(DAI, "allowance", 0)
        chain.fail_send("mint", RuntimeError("execution reverted"))

        with pytest.raises(ChainCallFailure) as exc:
            await markets.supply("DAI", 1)

        assert str(exc.value) == "Fortress [supply] | execution reverted"
        assert methods(chain) == ["approve", "mint"]
        assert len(chain.waited) == 1

    @pytest.mark.asyncio
    async def test_unknown_option_rejected(self, chain, markets):
        with pytest.raises(InvalidArgument) as exc:
            await markets.supply("DAI", 1, options={"gasLimit": 1})

        assert str(exc.value).startswith("Fortress [supply] | Invalid call options")
        assert chain.calls == 0


class TestRedeem:
    @pytest.mark.asyncio
    async def test_redeem_market_tokens(self, chain, markets):
        await markets.redeem("fDAI", 5)

        assert chain.reads == []
        assert chain.sends[0].to == FDAI
        assert chain.sends[0].method == "redeem"
        assert chain.sends[0].args == (5 * 10**8,)

    @pytest.mark.asyncio
    async def test_redeem_underlying_amount(self, chain, markets):
        await markets.redeem("USDC", 2)

        assert chain.sends[0].to == FUSDC
        assert chain.sends[0].method == "redeemUnderlying"
        assert chain.sends[0].args == (2_000_000,)

    @pytest.mark.asyncio
    async def test_redeem_unsupported(self, chain, markets):
        with pytest.raises(UnsupportedAsset) as exc:
            await markets.redeem("fETH", 1)

        assert str(exc.value).startswith("Fortress [redeem] | ")
        assert chain.calls == 0


class TestBorrow:
    @pytest.mark.asyncio
    async def test_borrow_has_no_allowance_step(self, chain, markets):
        await markets.borrow("USDC", "2.5")

        assert chain.reads == []
        assert methods(chain) == ["borrow"]
        assert chain.sends[0].args == (2_500_000,)

    @pytest.mark.asyncio
    async def test_borrow_unsupported(self, chain, markets):
        with pytest.raises(UnsupportedAsset) as exc:
            await markets.borrow("XYZ", 1)

        assert str(exc.value) == "Fortress [borrow] | Argument `asset` cannot be borrowed."


class TestRepayBorrow:
    """Tests for MarketService.repay_borrow()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("borrower", [None, ""])
    async def test_repay_own_borrow(self, chain, markets, borrower):
        chain.respond(DAI, "allowance", 10**20)

        await markets.repay_borrow("DAI", 1, borrower=borrower)

        assert methods(chain) == ["repayBorrow"]
        assert chain.sends[0].args == (10**18,)

    @pytest.mark.asyncio
    async def test_repay_on_behalf(self, chain, markets):
        borrower = addr(0xB0B)
        chain.respond(DAI, "allowance", 0)

        await markets.repay_borrow("DAI", 1, borrower=borrower)

        assert methods(chain) == ["approve", "repayBorrowBehalf"]
        assert chain.sends[1].args == (checksum(borrower), 10**18)

    @pytest.mark.asyncio
    async def test_invalid_borrower(self, chain, markets):
        with pytest.raises(InvalidAddress) as exc:
            await markets.repay_borrow("DAI", 1, borrower="not-an-address")

        assert str(exc.value) == "Fortress [repayBorrow] | Invalid `borrower` address."
        assert chain.calls == 0

    @pytest.mark.asyncio
    async def test_native_repay_sends_value(self, chain, markets):
        await markets.repay_borrow("BNB", 1)

        assert chain.reads == []
        assert chain.sends[0].to == FBNB
        assert chain.sends[0].method == "repayBorrow"
        assert chain.sends[0].args == ()
        assert chain.sends[0].params["value"] == 10**18

    @pytest.mark.asyncio
    async def test_native_repay_on_behalf(self, chain, markets):
        borrower = addr(0xB0B)

        await markets.repay_borrow("BNB", 1, borrower=borrower)

        assert chain.sends[0].method == "repayBorrowBehalf"
        assert chain.sends[0].args == (checksum(borrower),)
        assert chain.sends[0].params["value"] == 10**18

    @pytest.mark.asyncio
    async def test_repay_unsupported(self, chain, markets):
        with pytest.raises(UnsupportedAsset) as exc:
            await markets.repay_borrow("ETH", 1)

        assert str(exc.value) == "Fortress [repayBorrow] | Argument `asset` cannot be repaid."
        assert chain.calls == 0
