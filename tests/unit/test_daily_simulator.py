"""
Unit tests for DailySimulator.

Tests cover:
- Flat-price scenario with a pre-window BUY
- Per-day sum invariants and idempotence
- Weighted-average-cost SELL invariant
- Carry-forward after provider failure
- Class floors (average cost, gold fallback rate)
- MF with an unmappable ISIN
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from portfolio_tracker.domain.models import AssetType, TransactionType
from portfolio_tracker.domain.views import AssetBalance
from portfolio_tracker.providers.strategies import AmfiNavHistory
from portfolio_tracker.services import BalanceReconstructor, DailySimulator, HistoricalPriceResolver

from tests.conftest import (
    FailingHistoryProvider,
    FakeHistoryProvider,
    FakeSymbolMapper,
    flat_series,
    make_asset,
    make_txn,
)


END = date(2024, 6, 15)
START = END - timedelta(days=9)
GOLD_FLOOR = Decimal("7200")


def _resolver(chains, start=START, end=END) -> HistoricalPriceResolver:
    return HistoricalPriceResolver(chains, start, end, gold_floor=GOLD_FLOOR)


def _run(assets, transactions, chains, start=START, end=END):
    baseline = BalanceReconstructor().reconstruct(assets, transactions, start)
    return DailySimulator(_resolver(chains, start, end)).run(assets, baseline, transactions, start, end)


# =============================================================================
# SCENARIOS
# =============================================================================


class TestFlatPriceScenario:
    def test_pre_window_buy_with_flat_price(self):
        """
        GIVEN a STOCK asset (qty 10, avg 100, invested 1000) bought 30 days
              before a 10-day window and a flat daily price of 120
        WHEN I run the simulation
        THEN every day has totalValue 1200, investedValue 1000, profit 200
        """
        asset = make_asset("RELIANCE", quantity="10", average_price="100", invested_value="1000")
        txn = make_txn(asset, TransactionType.BUY, "10", "100", START - timedelta(days=30))
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"RELIANCE": Decimal("120")})]}

        points = _run([asset], [txn], chains)

        assert len(points) == 10
        for point in points:
            assert point.total_value == Decimal("1200")
            assert point.invested_value == Decimal("1000")
            assert point.profit == Decimal("200")

    def test_one_point_per_calendar_day(self):
        asset = make_asset("RELIANCE")
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"RELIANCE": Decimal("120")})]}

        points = _run([asset], [], chains)

        assert [p.date for p in points] == [START + timedelta(days=i) for i in range(10)]


# =============================================================================
# INVARIANTS
# =============================================================================


class TestInvariants:
    @pytest.fixture
    def mixed_portfolio(self):
        stock = make_asset("INFY", quantity="8", average_price="1500")
        fund = make_asset("INF179K01BB8", AssetType.MF, quantity="40", average_price="80")
        gold = make_asset("GOLD_A", AssetType.GOLD, quantity="2", average_price="6000")
        series = {
            "INFY": {START + timedelta(days=i): Decimal("1500") + i for i in range(10)},
            "INF179K01BB8": flat_series(START, END, "82.5"),
            "GOLD": flat_series(START, END, "6400"),
        }
        txns = [
            make_txn(stock, TransactionType.BUY, "2", "1510", START + timedelta(days=3)),
            make_txn(stock, TransactionType.SELL, "5", "1520", START + timedelta(days=6)),
        ]
        provider = FakeHistoryProvider(series=series)
        chains = {t: [provider] for t in AssetType}
        return [stock, fund, gold], txns, chains

    def test_totals_equal_breakdown_sums(self, mixed_portfolio):
        """
        GIVEN a mixed portfolio with trades inside the window
        WHEN I run the simulation
        THEN each day's totals equal the sums over its breakdown
        """
        assets, txns, chains = mixed_portfolio

        points = _run(assets, txns, chains)

        for point in points:
            assert point.total_value == sum(i.value for i in point.assets_breakdown)
            assert point.invested_value == sum(i.invested for i in point.assets_breakdown)
            assert point.profit == point.total_value - point.invested_value

    def test_identical_inputs_give_identical_series(self, mixed_portfolio):
        """
        GIVEN identical inputs and identical provider responses
        WHEN I run the simulation twice
        THEN both series are equal
        """
        assets, txns, chains = mixed_portfolio

        assert _run(assets, txns, chains) == _run(assets, txns, chains)

    def test_baseline_is_not_mutated(self, mixed_portfolio):
        assets, txns, chains = mixed_portfolio
        baseline = BalanceReconstructor().reconstruct(assets, txns, START)
        before = {k: v.copy() for k, v in baseline.items()}

        DailySimulator(_resolver(chains)).run(assets, baseline, txns, START, END)

        assert baseline == before


class TestSellInvariant:
    def test_sell_reduces_invested_by_average_cost(self):
        """
        GIVEN 10 units with 1000 invested on the day of a SELL of 4
        WHEN the SELL is applied
        THEN invested drops by exactly 4 * (1000 / 10) and quantity by 4
        """
        asset = make_asset("HDFCBANK", quantity="6", average_price="100", invested_value="600")
        sell_day = START + timedelta(days=4)
        txn = make_txn(asset, TransactionType.SELL, "4", "150", sell_day)
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"HDFCBANK": Decimal("150")})]}
        baseline = {asset.asset_id: AssetBalance(quantity=Decimal("10"), invested_value=Decimal("1000"))}

        points = DailySimulator(_resolver(chains)).run([asset], baseline, [txn], START, END)
        by_day = {p.date: p for p in points}

        before = by_day[sell_day - timedelta(days=1)].assets_breakdown[0]
        after = by_day[sell_day].assets_breakdown[0]
        assert before.quantity == Decimal("10")
        assert before.invested == Decimal("1000")
        assert after.quantity == Decimal("6")
        assert after.invested == Decimal("600")

    def test_oversell_never_goes_negative(self):
        """
        GIVEN a SELL larger than the held quantity
        WHEN it is applied
        THEN quantity and invested value stop at zero and the asset drops out
        """
        asset = make_asset("HDFCBANK", quantity="0", average_price="100", invested_value="0")
        txn = make_txn(asset, TransactionType.SELL, "15", "150", START + timedelta(days=2))
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"HDFCBANK": Decimal("150")})]}
        baseline = {asset.asset_id: AssetBalance(quantity=Decimal("10"), invested_value=Decimal("1000"))}

        points = DailySimulator(_resolver(chains)).run([asset], baseline, [txn], START, END)

        assert points[1].total_value == Decimal("1500")
        for point in points[2:]:
            assert point.assets_breakdown == []
            assert point.total_value == Decimal("0")
            assert point.invested_value == Decimal("0")

    def test_same_day_transactions_apply_in_ledger_order(self):
        """
        GIVEN a BUY and then a SELL on the same day
        WHEN they are applied
        THEN the SELL sees the post-BUY average cost
        """
        asset = make_asset("SBIN", quantity="5", average_price="200", invested_value="1000")
        day = START + timedelta(days=1)
        txns = [
            make_txn(asset, TransactionType.BUY, "5", "300", day, hour=10),
            make_txn(asset, TransactionType.SELL, "5", "310", day, hour=11),
        ]
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"SBIN": Decimal("300")})]}
        baseline = {asset.asset_id: AssetBalance(quantity=Decimal("5"), invested_value=Decimal("1000"))}

        points = DailySimulator(_resolver(chains)).run([asset], baseline, txns, START, END)

        # 10 units @ 250 average after the BUY; selling 5 removes 1250
        item = points[1].assets_breakdown[0]
        assert item.quantity == Decimal("5")
        assert item.invested == Decimal("1250")


# =============================================================================
# FALLBACKS
# =============================================================================


class TestPriceFallbacks:
    def test_missing_days_carry_forward_last_price(self):
        """
        GIVEN a STOCK series with prices only on the first two days
        WHEN I run the simulation
        THEN later days use the last known price, not zero
        """
        asset = make_asset("ITC", quantity="100", average_price="400")
        series = {"ITC": {START: Decimal("440"), START + timedelta(days=1): Decimal("450")}}
        chains = {AssetType.STOCK: [FakeHistoryProvider(series=series)]}

        points = _run([asset], [], chains)

        assert points[0].assets_breakdown[0].price == Decimal("440")
        for point in points[1:]:
            assert point.assets_breakdown[0].price == Decimal("450")

    def test_all_providers_failing_on_a_day_uses_earlier_price(self):
        """
        GIVEN the primary provider fails and the fallback has a gap mid-window
        WHEN I run the simulation
        THEN the gap days use the price from the day before the gap
        """
        asset = make_asset("ITC", quantity="100", average_price="400")
        series = flat_series(START, END, "430")
        gap = {START + timedelta(days=4), START + timedelta(days=5)}
        for d in gap:
            del series[d]
        series[START + timedelta(days=3)] = Decimal("435")
        failing = FailingHistoryProvider()
        chains = {AssetType.STOCK: [failing, FakeHistoryProvider(series={"ITC": series})]}

        points = _run([asset], [], chains)
        by_day = {p.date: p for p in points}

        assert failing.calls == 1
        for d in gap:
            assert by_day[d].assets_breakdown[0].price == Decimal("435")

    def test_series_starting_after_window_seeds_from_first_price(self):
        """
        GIVEN a series whose first price is after the window start
        WHEN I run the simulation
        THEN days before that price use the earliest price in the series
        """
        asset = make_asset("ITC", quantity="10", average_price="400")
        series = {"ITC": {START + timedelta(days=3): Decimal("460"), START + timedelta(days=5): Decimal("470")}}
        chains = {AssetType.STOCK: [FakeHistoryProvider(series=series)]}

        points = _run([asset], [], chains)

        assert [p.assets_breakdown[0].price for p in points[:3]] == [Decimal("460")] * 3

    def test_stock_with_no_history_uses_average_cost(self):
        asset = make_asset("UNKNOWN", quantity="3", average_price="250")
        chains = {AssetType.STOCK: [FailingHistoryProvider()]}

        points = _run([asset], [], chains)

        assert all(p.assets_breakdown[0].price == Decimal("250") for p in points)
        assert all(p.total_value == Decimal("750") for p in points)

    def test_gold_with_no_history_uses_fallback_rate(self):
        gold = make_asset("GOLD_X", AssetType.GOLD, quantity="2", average_price="5000")
        chains = {AssetType.GOLD: [FailingHistoryProvider()]}

        points = _run([gold], [], chains)

        assert all(p.assets_breakdown[0].price == GOLD_FLOOR for p in points)

    def test_unmappable_mf_stays_at_average_cost(self):
        """
        GIVEN an MF asset whose ISIN the symbol mapper cannot resolve
        WHEN I run the simulation
        THEN its price is its average cost on every day and nothing is raised
        """
        fund = make_asset("INF000000000", AssetType.MF, quantity="50", average_price="42.5")
        chains = {AssetType.MF: [AmfiNavHistory(FakeSymbolMapper(), client=None)]}

        points = _run([fund], [], chains)

        assert len(points) == 10
        for point in points:
            assert point.assets_breakdown[0].price == Decimal("42.5")
            assert point.assets_breakdown[0].value == Decimal("2125")

    def test_asset_without_any_price_is_excluded(self, caplog):
        """
        GIVEN an asset with no history and no recorded cost
        WHEN I run the simulation
        THEN it is left out of every day's breakdown and totals
        """
        priced = make_asset("TCS", quantity="1", average_price="3000")
        unpriced = make_asset("FREEBIE", quantity="5", average_price="0", invested_value="0")
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"TCS": Decimal("3100")})]}

        points = _run([priced, unpriced], [], chains)

        for point in points:
            assert [i.symbol for i in point.assets_breakdown] == ["TCS"]
            assert point.total_value == Decimal("3100")
        assert "FREEBIE" in caplog.text


# =============================================================================
# TRANSACTION FILTERING
# =============================================================================


class TestTransactionFiltering:
    def test_in_window_buy_increases_position(self):
        asset = make_asset("WIPRO", quantity="20", average_price="450", invested_value="9000")
        buy_day = START + timedelta(days=5)
        txn = make_txn(asset, TransactionType.BUY, "10", "480", buy_day)
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"WIPRO": Decimal("500")})]}

        points = _run([asset], [txn], chains)
        by_day = {p.date: p for p in points}

        assert by_day[buy_day - timedelta(days=1)].assets_breakdown[0].quantity == Decimal("10")
        assert by_day[buy_day].assets_breakdown[0].quantity == Decimal("20")
        assert by_day[END].invested_value == Decimal("9000")

    def test_transaction_for_unknown_asset_is_skipped(self, caplog):
        asset = make_asset("WIPRO", quantity="10", average_price="450")
        ghost = make_asset("GHOST", asset_id="missing-asset")
        txn = make_txn(ghost, TransactionType.BUY, "1", "10", START + timedelta(days=1))
        chains = {AssetType.STOCK: [FakeHistoryProvider(flat={"WIPRO": Decimal("500")})]}

        points = _run([asset], [txn], chains)

        assert all(p.total_value == Decimal("5000") for p in points)
        assert "unknown asset" in caplog.text

    def test_empty_window_returns_nothing(self):
        asset = make_asset("WIPRO")
        resolver = _resolver({})

        assert DailySimulator(resolver).run([asset], {}, [], END, START) == []
