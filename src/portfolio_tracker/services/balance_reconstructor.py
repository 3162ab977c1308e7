"""Backward reconstruction of window-start balances."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from portfolio_tracker.domain.models import Asset, Transaction, TransactionType
from portfolio_tracker.domain.views import AssetBalance

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class BalanceReconstructor:
    """
    Infers each asset's (quantity, invested value) at the start of a window.

    Starts from the asset's current state and undoes, newest first, every
    transaction dated on or after the window start:

    - BUY(q, p):  quantity -= q, invested -= q * p
    - SELL(q):    quantity += q, invested += q * asset.average_price

    The SELL undo uses today's average price because the cost basis at the
    time of the sale is not recoverable from partial history. Results are
    clamped at zero; a negative intermediate value means the ledger and the
    current holding disagree and is logged, not rejected.
    """

    def reconstruct(
        self,
        assets: list[Asset],
        transactions: list[Transaction],
        window_start: date,
    ) -> dict[str, AssetBalance]:
        by_asset: dict[str, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            if txn.trade_date >= window_start:
                by_asset[txn.asset_id].append(txn)

        balances: dict[str, AssetBalance] = {}
        for asset in assets:
            balance = AssetBalance(quantity=asset.quantity, invested_value=asset.invested_value)
            # Input is chronological; undo newest first
            for txn in reversed(by_asset.get(asset.asset_id, [])):
                self._undo(balance, txn, asset)
            balances[asset.asset_id] = self._clamped(balance, asset)
        return balances

    @staticmethod
    def _undo(balance: AssetBalance, txn: Transaction, asset: Asset) -> None:
        if txn.txn_type == TransactionType.BUY:
            balance.quantity -= txn.quantity
            balance.invested_value -= txn.quantity * txn.price
        else:
            balance.quantity += txn.quantity
            balance.invested_value += txn.quantity * asset.average_price

    @staticmethod
    def _clamped(balance: AssetBalance, asset: Asset) -> AssetBalance:
        if balance.quantity < ZERO or balance.invested_value < ZERO:
            logger.warning(
                "Ledger inconsistency for %s: reconstructed quantity=%s invested=%s; clamping to zero",
                asset.symbol,
                balance.quantity,
                balance.invested_value,
            )
        return AssetBalance(
            quantity=max(balance.quantity, ZERO),
            invested_value=max(balance.invested_value, ZERO),
        )
