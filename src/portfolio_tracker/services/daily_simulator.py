"""Forward day-by-day replay of the portfolio over a window."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models import Asset, Transaction, TransactionType
from portfolio_tracker.domain.views import AssetBalance, BreakdownItem, DailyPortfolioPoint
from portfolio_tracker.services.price_resolver import HistoricalPriceResolver

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class DailySimulator:
    """
    Replays transactions from window-start balances and values each day.

    Day price precedence: the day's resolved price, then the last price seen
    for the asset (seeded from its history), then the class floor. An asset
    with no usable price at all is left out of that day.
    """

    def __init__(self, resolver: HistoricalPriceResolver):
        self._resolver = resolver

    def run(
        self,
        assets: list[Asset],
        baseline: dict[str, AssetBalance],
        transactions: list[Transaction],
        start: date,
        end: date,
    ) -> list[DailyPortfolioPoint]:
        if start > end:
            return []

        assets_by_id = {a.asset_id: a for a in assets}
        balances = {
            a.asset_id: baseline[a.asset_id].copy() if a.asset_id in baseline else AssetBalance()
            for a in assets
        }
        pending = self._pending_by_day(transactions, assets_by_id, start, end)

        traded = {t.asset_id for day_txns in pending.values() for t in day_txns}
        active = [a for a in assets if balances[a.asset_id].quantity > 0 or a.asset_id in traded]
        self._resolver.prefetch(active)
        last_known: dict[str, Decimal] = {}
        for asset in active:
            seed = self._resolver.seed_price(asset)
            if seed is not None:
                last_known[asset.asset_id] = seed

        unpriced: set[str] = set()
        points: list[DailyPortfolioPoint] = []
        day = start
        while day <= end:
            for txn in pending.get(day, []):
                self._apply(balances[txn.asset_id], txn, assets_by_id[txn.asset_id])

            breakdown: list[BreakdownItem] = []
            for asset in assets:
                balance = balances[asset.asset_id]
                if balance.quantity <= 0:
                    continue
                price = self._price_for(asset, day, last_known)
                if price is None:
                    if asset.asset_id not in unpriced:
                        logger.warning("No price or floor for %s; excluded from valuation", asset.symbol)
                        unpriced.add(asset.asset_id)
                    continue
                breakdown.append(
                    BreakdownItem(
                        name=asset.name,
                        symbol=asset.symbol,
                        asset_type=asset.asset_type,
                        quantity=balance.quantity,
                        price=price,
                        avg_price=balance.average_cost,
                        value=balance.quantity * price,
                        invested=balance.invested_value,
                    )
                )

            total_value = sum((item.value for item in breakdown), ZERO)
            invested = sum((item.invested for item in breakdown), ZERO)
            points.append(
                DailyPortfolioPoint(
                    date=day,
                    total_value=total_value,
                    invested_value=invested,
                    profit=total_value - invested,
                    assets_breakdown=breakdown,
                )
            )
            day += timedelta(days=1)
        return points

    def _price_for(self, asset: Asset, day: date, last_known: dict[str, Decimal]) -> Optional[Decimal]:
        price = self._resolver.price_on(asset, day)
        if price is not None and price > 0:
            last_known[asset.asset_id] = price
            return price
        if asset.asset_id in last_known:
            return last_known[asset.asset_id]
        return self._resolver.floor_price(asset)

    @staticmethod
    def _pending_by_day(
        transactions: list[Transaction],
        assets_by_id: dict[str, Asset],
        start: date,
        end: date,
    ) -> dict[date, list[Transaction]]:
        pending: dict[date, list[Transaction]] = {}
        # Stable sort keeps same-day transactions in ledger order
        for txn in sorted(transactions, key=lambda t: t.trade_date):
            if txn.trade_date < start or txn.trade_date > end:
                continue
            if txn.asset_id not in assets_by_id:
                logger.warning("Skipping transaction %s for unknown asset %s", txn.txn_id, txn.asset_id)
                continue
            pending.setdefault(txn.trade_date, []).append(txn)
        return pending

    @staticmethod
    def _apply(balance: AssetBalance, txn: Transaction, asset: Asset) -> None:
        if txn.txn_type == TransactionType.BUY:
            balance.quantity += txn.quantity
            balance.invested_value += txn.quantity * txn.price
            return

        average_cost = balance.average_cost
        if txn.quantity > balance.quantity:
            logger.warning(
                "SELL of %s %s exceeds held quantity %s on %s",
                txn.quantity,
                asset.symbol,
                balance.quantity,
                txn.trade_date,
            )
        balance.invested_value = max(balance.invested_value - txn.quantity * average_cost, ZERO)
        balance.quantity = max(balance.quantity - txn.quantity, ZERO)
