#!/usr/bin/env python3
"""
Generate realistic test data for the last 3 months.

Simulates an Indian investor: weekly equity SIP-style buys, a few profit
takes, a mutual fund holding and two manual gold entries. Asset rows are
written with the final holding state, transactions as the partial history.
Writes to the database configured in Settings (DATABASE_URL / DATA_DIR).
"""

import random
import sys
from datetime import date, datetime, timedelta
from decimal import Decimal

from portfolio_tracker.core.timezone import IST_TZ, today_ist
from portfolio_tracker.domain.models import AssetSource, AssetType, TransactionType
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyTransactionRepository,
    get_session,
    init_db,
)
from portfolio_tracker.services import (
    AssetCreate,
    GoldHoldingInput,
    LedgerService,
    TransactionCreate,
)

# NSE symbols with approximate prices
STOCKS = [
    ("RELIANCE", "Reliance Industries", 2900.0),
    ("TCS", "Tata Consultancy Services", 3900.0),
    ("INFY", "Infosys", 1500.0),
    ("HDFCBANK", "HDFC Bank", 1600.0),
    ("ITC", "ITC", 430.0),
]

MAX_TRANSACTIONS = 60


def _at(day: date, hour: int) -> datetime:
    return IST_TZ.localize(datetime.combine(day, datetime.min.time().replace(hour=hour)))


def _plan_trades(start: date, today: date) -> list[tuple]:
    """Return (symbol, type, quantity, price, time) tuples in date order."""
    trades = []

    # Weekly buys of roughly 20k each
    monday = start + timedelta(days=(7 - start.weekday()) % 7)
    while monday <= today and len(trades) < MAX_TRANSACTIONS - 8:
        symbol, _, base = random.choice(STOCKS)
        price = Decimal(str(round(base * random.uniform(0.95, 1.05), 2)))
        quantity = Decimal(max(1, int(20000 / float(price))))
        trades.append((symbol, TransactionType.BUY, quantity, price, _at(monday, 10)))
        monday += timedelta(days=7)

    # Profit takes in the second half, never more than held on the day
    sell_days = sorted(start + timedelta(days=random.randint(45, 90)) for _ in range(8))
    for day in sell_days:
        if day > today or day.weekday() >= 5:
            continue
        held = _holdings_before(trades, _at(day, 16))
        candidates = [s for s, q in held.items() if q > 1]
        if not candidates:
            break
        symbol = random.choice(candidates)
        base = next(b for s, _, b in STOCKS if s == symbol)
        quantity = Decimal(max(1, int(held[symbol] * Decimal("0.3"))))
        price = Decimal(str(round(base * random.uniform(1.03, 1.12), 2)))
        trades.append((symbol, TransactionType.SELL, quantity, price, _at(day, 15)))

    trades.sort(key=lambda t: t[4])
    return trades


def _holdings_before(trades: list[tuple], cutoff: datetime) -> dict[str, Decimal]:
    held: dict[str, Decimal] = {}
    for symbol, txn_type, quantity, _, when in trades:
        if when < cutoff:
            sign = 1 if txn_type == TransactionType.BUY else -1
            held[symbol] = held.get(symbol, Decimal("0")) + sign * quantity
    return held


def _final_state(trades: list[tuple]) -> dict[str, tuple[Decimal, Decimal]]:
    """Replay trades at weighted-average cost: symbol -> (quantity, invested)."""
    state: dict[str, tuple[Decimal, Decimal]] = {}
    for symbol, txn_type, quantity, price, _ in trades:
        held, invested = state.get(symbol, (Decimal("0"), Decimal("0")))
        if txn_type == TransactionType.BUY:
            state[symbol] = (held + quantity, invested + quantity * price)
        else:
            average = invested / held if held > 0 else Decimal("0")
            state[symbol] = (held - quantity, invested - quantity * average)
    return state


def generate_realistic_data():
    """Generate realistic ledger data for the last 3 months."""
    init_db()
    session = get_session()
    assets = SqlAlchemyAssetRepository(session)
    ledger = LedgerService(assets, SqlAlchemyTransactionRepository(session))

    today = today_ist()
    start = today - timedelta(days=90)
    print(f"Generating ledger from {start} to {today}")
    print("=" * 60)

    trades = _plan_trades(start, today)
    state = _final_state(trades)

    asset_ids = {}
    for symbol, name, _ in STOCKS:
        if symbol not in state:
            continue
        if assets.get_by_symbol(symbol, AssetType.STOCK):
            print(f"✓ {symbol} already exists, skipping")
            continue
        quantity, invested = state[symbol]
        asset = ledger.create_asset(
            AssetCreate(
                symbol=symbol,
                name=name,
                asset_type=AssetType.STOCK,
                quantity=quantity,
                average_price=(invested / quantity).quantize(Decimal("0.01")) if quantity > 0 else Decimal("0"),
                invested_value=invested,
                source=AssetSource.BROKER,
            )
        )
        asset_ids[symbol] = asset.asset_id
        print(f"✓ {symbol}: {quantity} shares, invested ₹{invested:,.2f}")

    created = 0
    for n, (symbol, txn_type, quantity, price, when) in enumerate(trades):
        if symbol not in asset_ids:
            continue
        ledger.add_transaction(
            TransactionCreate(
                asset_id=asset_ids[symbol],
                txn_type=txn_type,
                quantity=quantity,
                price=price,
                txn_time_ist=when,
                external_id=f"{txn_type.value.lower()}_{symbol}_{when.date().isoformat()}_{n}",
            )
        )
        created += 1
    print(f"✓ Recorded {created} transactions")

    if not assets.get_by_symbol("INF209K01YY7", AssetType.MF):
        ledger.create_asset(
            AssetCreate(
                symbol="INF209K01YY7",
                name="Aditya Birla Sun Life Frontline Equity - Growth",
                asset_type=AssetType.MF,
                quantity=Decimal("120.456"),
                average_price=Decimal("412.50"),
                source=AssetSource.BROKER,
            )
        )
        print("✓ Mutual fund holding added")

    if not ledger.list_gold():
        ledger.add_gold(GoldHoldingInput(total_grams=Decimal("10"), invested_value=Decimal("62000"), name="Coins"))
        ledger.add_gold(GoldHoldingInput(total_grams=Decimal("5"), price_per_gram=Decimal("7100"), name="Digital Gold"))
        print("✓ Two gold entries added")

    session.close()

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    buys = sum(1 for t in trades if t[1] == TransactionType.BUY)
    print(f"Transactions: {created} ({buys} buys, {len(trades) - buys} sells)")
    print("\n✓ Test data generation complete!")
    print("\nYou can now:")
    print("  - View holdings: GET /api/portfolio")
    print("  - View growth curve: GET /api/analysis/growth")


if __name__ == "__main__":
    try:
        generate_realistic_data()
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
