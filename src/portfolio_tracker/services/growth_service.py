"""Growth analysis: the portfolio's daily value over a window."""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio_tracker.core.exceptions import LedgerReadError, ValidationError
from portfolio_tracker.core.timezone import today_ist
from portfolio_tracker.domain.models import Asset, Transaction
from portfolio_tracker.domain.views import DailyPortfolioPoint, GrowthSeries, GrowthWindow
from portfolio_tracker.repositories.protocols import AssetRepository, TransactionRepository
from portfolio_tracker.services.balance_reconstructor import BalanceReconstructor
from portfolio_tracker.services.daily_simulator import DailySimulator
from portfolio_tracker.services.price_resolver import HistoricalPriceResolver

logger = logging.getLogger(__name__)

ResolverFactory = Callable[[date, date], HistoricalPriceResolver]


def trim_leading_zeros(points: list[DailyPortfolioPoint]) -> list[DailyPortfolioPoint]:
    """Drop the days before the portfolio first had any value."""
    for i, point in enumerate(points):
        if point.total_value != 0:
            return points[i:]
    return []


class GrowthService:
    """
    Orchestrates a growth-analysis run.

    Reads the ledger, picks the window, reconstructs window-start balances,
    replays the window day by day and trims the empty lead-in.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        transaction_repo: TransactionRepository,
        resolver_factory: ResolverFactory,
        lookback_days: int = 365,
        today: Callable[[], date] = today_ist,
    ):
        self._asset_repo = asset_repo
        self._transaction_repo = transaction_repo
        self._resolver_factory = resolver_factory
        self._lookback_days = lookback_days
        self._today = today
        self._reconstructor = BalanceReconstructor()

    def window(
        self,
        transactions: list[Transaction],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> GrowthWindow:
        """
        Default window: from the earlier of (today - lookback) and the first
        transaction date, through today.
        """
        end = end or self._today()
        if start is None:
            start = self._today() - timedelta(days=self._lookback_days)
            if transactions:
                start = min(start, min(t.trade_date for t in transactions))
        if start > end:
            raise ValidationError(f"Window start {start} is after end {end}")
        return GrowthWindow(start=start, end=end)

    def growth_series(self, start: Optional[date] = None, end: Optional[date] = None) -> GrowthSeries:
        assets, transactions = self._load_ledger()
        if not assets:
            return GrowthSeries(window=None, points=[])

        window = self.window(transactions, start, end)
        logger.info(
            "Growth analysis over %s..%s (%d days, %d assets, %d transactions)",
            window.start,
            window.end,
            window.days,
            len(assets),
            len(transactions),
        )

        baseline = self._reconstructor.reconstruct(assets, transactions, window.start)
        resolver = self._resolver_factory(window.start, window.end)
        points = DailySimulator(resolver).run(assets, baseline, transactions, window.start, window.end)
        return GrowthSeries(window=window, points=trim_leading_zeros(points))

    def _load_ledger(self) -> tuple[list[Asset], list[Transaction]]:
        try:
            return self._asset_repo.list_all(), self._transaction_repo.list_all()
        except SQLAlchemyError as e:
            logger.error("Failed to read ledger: %s", e)
            raise LedgerReadError("Could not read assets or transactions") from e
