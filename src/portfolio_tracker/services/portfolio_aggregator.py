"""Live portfolio snapshot."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from portfolio_tracker.core.exceptions import LedgerReadError
from portfolio_tracker.core.timezone import now_ist
from portfolio_tracker.domain.models import Asset, AssetSource, AssetType
from portfolio_tracker.domain.views import PortfolioLine, PortfolioSnapshot, PortfolioSummary
from portfolio_tracker.repositories.protocols import AssetRepository
from portfolio_tracker.services.price_resolver import LivePriceResolver

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

GOLD_TOTAL_SYMBOL = "GOLD_TOTAL"
GOLD_TOTAL_ID = "AGGREGATED_GOLD"


def pnl_percent(pnl: Decimal, invested: Decimal) -> Decimal:
    """P&L as a percentage of invested value (0 when nothing is invested)."""
    if invested <= 0:
        return ZERO
    return (pnl / invested * 100).quantize(Decimal("0.01"))


class PortfolioAggregator:
    """
    Values every asset at its live price.

    All GOLD assets are merged into a single synthetic line, since gold is
    held as one fungible position spread over several manual entries.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        resolver: LivePriceResolver,
        clock: Callable[[], datetime] = now_ist,
    ):
        self._asset_repo = asset_repo
        self._resolver = resolver
        self._clock = clock

    def snapshot(self) -> PortfolioSnapshot:
        try:
            assets = self._asset_repo.list_all()
        except SQLAlchemyError as e:
            logger.error("Failed to read assets: %s", e)
            raise LedgerReadError("Could not read assets") from e

        lines = [self._line(a) for a in assets if a.asset_type != AssetType.GOLD]
        gold = [a for a in assets if a.asset_type == AssetType.GOLD]
        if gold:
            lines.append(self._gold_line(gold))

        total_invested = sum((line.invested_value for line in lines), ZERO)
        current_value = sum((line.current_value for line in lines), ZERO)
        total_pnl = current_value - total_invested
        summary = PortfolioSummary(
            total_invested=total_invested,
            current_value=current_value,
            total_pnl=total_pnl,
            total_pnl_percent=pnl_percent(total_pnl, total_invested),
        )
        return PortfolioSnapshot(summary=summary, assets=lines, as_of=self._clock())

    def _live_price(self, asset: Asset) -> Decimal:
        if asset.quantity <= 0:
            return asset.cost_per_unit
        return self._resolver.resolve(asset)

    def _line(self, asset: Asset) -> PortfolioLine:
        price = self._live_price(asset)
        value = asset.quantity * price
        pnl = value - asset.invested_value
        return PortfolioLine(
            asset_id=asset.asset_id,
            symbol=asset.symbol,
            name=asset.name,
            asset_type=asset.asset_type,
            source=asset.source,
            quantity=asset.quantity,
            average_price=asset.average_price,
            invested_value=asset.invested_value,
            live_price=price,
            current_value=value,
            pnl=pnl,
            pnl_percent=pnl_percent(pnl, asset.invested_value),
            last_updated_ist=asset.last_updated_ist,
        )

    def _gold_line(self, gold: list[Asset]) -> PortfolioLine:
        quantity = sum((a.quantity for a in gold), ZERO)
        invested = sum((a.invested_value for a in gold), ZERO)
        value = sum((a.quantity * self._live_price(a) for a in gold), ZERO)
        pnl = value - invested
        label = "entry" if len(gold) == 1 else "entries"
        return PortfolioLine(
            asset_id=GOLD_TOTAL_ID,
            symbol=GOLD_TOTAL_SYMBOL,
            name=f"Gold Holdings ({len(gold)} {label})",
            asset_type=AssetType.GOLD,
            source=AssetSource.AGGREGATED,
            quantity=quantity,
            average_price=invested / quantity if quantity > 0 else ZERO,
            invested_value=invested,
            live_price=value / quantity if quantity > 0 else ZERO,
            current_value=value,
            pnl=pnl,
            pnl_percent=pnl_percent(pnl, invested),
            last_updated_ist=max((a.last_updated_ist for a in gold if a.last_updated_ist), default=None),
        )
