"""
Pytest configuration and fixtures for portfolio growth tracker tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for assets and transactions
- Deterministic fake provider strategies (no network)
- Time helpers for Asia/Kolkata timezone
- Service and repository fixtures
"""

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from portfolio_tracker.main import app
from portfolio_tracker.api import deps
from portfolio_tracker.config.settings import Settings, set_settings, reset_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.core.timezone import IST_TZ
from portfolio_tracker.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from portfolio_tracker.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyPriceCacheRepository,
)
from portfolio_tracker.services import LedgerService, PriceCacheService
from portfolio_tracker.domain.models import (
    Asset,
    AssetSource,
    AssetType,
    Transaction,
    TransactionType,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def ist_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in Asia/Kolkata timezone."""
    return IST_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return ist_datetime(2024, 6, 15, 14, 30, 0)


def days_between(start: date, end: date) -> list[date]:
    """Every calendar day in [start, end]."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


# =============================================================================
# DOMAIN FACTORIES
# =============================================================================


def make_asset(
    symbol: str = "RELIANCE",
    asset_type: AssetType = AssetType.STOCK,
    quantity: Union[str, Decimal] = "10",
    average_price: Union[str, Decimal] = "100",
    invested_value: Optional[Union[str, Decimal]] = None,
    name: Optional[str] = None,
    asset_id: Optional[str] = None,
    current_price: Optional[Union[str, Decimal]] = None,
    source: AssetSource = AssetSource.MANUAL,
) -> Asset:
    """Build an Asset; invested value defaults to quantity * average price."""
    quantity = Decimal(str(quantity))
    average_price = Decimal(str(average_price))
    invested = Decimal(str(invested_value)) if invested_value is not None else quantity * average_price
    return Asset(
        asset_id=asset_id or f"asset-{symbol.lower()}",
        symbol=symbol,
        name=name or symbol.title(),
        asset_type=asset_type,
        quantity=quantity,
        average_price=average_price,
        invested_value=invested,
        source=source,
        current_price=Decimal(str(current_price)) if current_price is not None else None,
    )


def make_txn(
    asset: Asset,
    txn_type: TransactionType,
    quantity: Union[str, Decimal],
    price: Union[str, Decimal],
    on: date,
    hour: int = 10,
    txn_id: Optional[str] = None,
) -> Transaction:
    """Build a Transaction for an asset on a calendar day."""
    return Transaction(
        txn_id=txn_id or str(uuid.uuid4()),
        asset_id=asset.asset_id,
        txn_type=txn_type,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        txn_time_ist=ist_datetime(on.year, on.month, on.day, hour),
    )


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


class FakeHistoryProvider:
    """
    Deterministic HistoryProvider.

    Serves a fixed per-date series, a flat price over the requested window,
    or raises ProviderError when neither is configured for the asset.
    """

    def __init__(
        self,
        name: str = "fake-history",
        series: Optional[dict[str, dict[date, Decimal]]] = None,
        flat: Optional[dict[str, Decimal]] = None,
    ):
        self.name = name
        self._series = series or {}
        self._flat = flat or {}
        self.calls: list[tuple[str, date, date]] = []

    def fetch_history(self, asset: Asset, start: date, end: date) -> dict[date, Decimal]:
        self.calls.append((asset.symbol, start, end))
        key = "GOLD" if asset.asset_type == AssetType.GOLD else asset.symbol
        if key in self._series:
            return dict(self._series[key])
        if key in self._flat:
            return {d: self._flat[key] for d in days_between(start, end)}
        raise ProviderError(self.name, f"no data for {key}")


class FailingHistoryProvider:
    """HistoryProvider that always fails."""

    def __init__(self, name: str = "failing-history"):
        self.name = name
        self.calls = 0

    def fetch_history(self, asset: Asset, start: date, end: date) -> dict[date, Decimal]:
        self.calls += 1
        raise ProviderError(self.name, "network unavailable")


class FakeLiveProvider:
    """LiveQuoteProvider serving fixed prices by symbol ("GOLD" for any gold asset)."""

    def __init__(self, name: str = "fake-live", prices: Optional[dict[str, Decimal]] = None):
        self.name = name
        self._prices = prices or {}
        self.calls: list[str] = []

    def fetch_live(self, asset: Asset) -> Decimal:
        key = "GOLD" if asset.asset_type == AssetType.GOLD else asset.symbol
        self.calls.append(key)
        if key not in self._prices:
            raise ProviderError(self.name, f"no quote for {key}")
        return self._prices[key]


class FailingLiveProvider:
    def __init__(self, name: str = "failing-live"):
        self.name = name
        self.calls = 0

    def fetch_live(self, asset: Asset) -> Decimal:
        self.calls += 1
        raise ProviderError(self.name, "network unavailable")


class FakeSymbolMapper:
    """SymbolMapper stand-in with fixed tables."""

    def __init__(self, tokens: Optional[dict] = None, schemes: Optional[dict[str, str]] = None):
        self._tokens = tokens or {}
        self._schemes = schemes or {}

    def resolve_exchange_token(self, symbol: str):
        return self._tokens.get(symbol)

    def resolve_scheme_code(self, isin: str) -> Optional[str]:
        return self._schemes.get(isin)


class InMemoryPriceCacheRepository:
    """Dict-backed PriceCacheRepository."""

    def __init__(self):
        self.entries = {}

    def get(self, symbol, asset_type):
        return self.entries.get((symbol, asset_type))

    def put(self, entry):
        self.entries[(entry.symbol, entry.asset_type)] = entry
        return entry


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def asset_repo(test_session) -> SqlAlchemyAssetRepository:
    """Provide test AssetRepository."""
    return SqlAlchemyAssetRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


@pytest.fixture
def price_cache_repo(test_session) -> SqlAlchemyPriceCacheRepository:
    """Provide test PriceCacheRepository."""
    return SqlAlchemyPriceCacheRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_service(asset_repo, transaction_repo) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(
        asset_repo=asset_repo,
        transaction_repo=transaction_repo,
    )


@pytest.fixture
def memory_cache_repo() -> InMemoryPriceCacheRepository:
    return InMemoryPriceCacheRepository()


@pytest.fixture
def price_cache(memory_cache_repo, fixed_now) -> PriceCacheService:
    """PriceCacheService with a 15 minute window and a frozen clock."""
    return PriceCacheService(memory_cache_repo, freshness_minutes=15, clock=lambda: fixed_now)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def history_provider() -> FakeHistoryProvider:
    """History provider shared by every asset class in API tests."""
    return FakeHistoryProvider(flat={"RELIANCE": Decimal("120"), "GOLD": Decimal("6000")})


@pytest.fixture
def live_provider() -> FakeLiveProvider:
    return FakeLiveProvider(prices={"RELIANCE": Decimal("150"), "GOLD": Decimal("6500")})


@pytest.fixture
def client(test_engine, history_provider, live_provider) -> TestClient:
    """Provide FastAPI test client with test database and fake providers."""
    set_settings(Settings(database_url="sqlite://", live_price_cache_minutes=0))
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    history_chains = {t: [history_provider] for t in AssetType}
    live_chains = {t: [live_provider] for t in AssetType}

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_symbol_mapper] = lambda: FakeSymbolMapper()
    app.dependency_overrides[deps.get_history_chains] = lambda: history_chains
    app.dependency_overrides[deps.get_live_chains] = lambda: live_chains
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def flat_series(start: date, end: date, price: Union[str, Decimal]) -> dict[date, Decimal]:
    """Same price on every day of [start, end]."""
    return {d: Decimal(str(price)) for d in days_between(start, end)}

