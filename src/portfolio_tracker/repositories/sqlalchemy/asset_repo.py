"""SQLAlchemy implementation of AssetRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from portfolio_tracker.core.timezone import to_ist
from portfolio_tracker.domain.models import Asset, AssetType
from portfolio_tracker.repositories.sqlalchemy.orm_models import AssetORM


class SqlAlchemyAssetRepository:
    """SQLAlchemy-backed asset repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, asset: Asset) -> Asset:
        """Persist a new asset."""
        orm_asset = AssetORM(
            asset_id=asset.asset_id,
            symbol=asset.symbol,
            name=asset.name,
            asset_type=asset.asset_type,
            quantity=asset.quantity,
            average_price=asset.average_price,
            invested_value=asset.invested_value,
            current_price=asset.current_price,
            source=asset.source,
            last_updated_ist=asset.last_updated_ist,
        )
        self._db.add(orm_asset)
        self._db.commit()
        self._db.refresh(orm_asset)
        return self._to_domain(orm_asset)

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        """Retrieve asset by ID."""
        orm_asset = self._db.query(AssetORM).filter(
            AssetORM.asset_id == asset_id
        ).first()
        return self._to_domain(orm_asset) if orm_asset else None

    def get_by_symbol(self, symbol: str, asset_type: AssetType) -> Optional[Asset]:
        """Retrieve asset by (symbol, type)."""
        orm_asset = self._db.query(AssetORM).filter(
            AssetORM.symbol == symbol.strip().upper(),
            AssetORM.asset_type == asset_type,
        ).first()
        return self._to_domain(orm_asset) if orm_asset else None

    def list_all(self) -> list[Asset]:
        """List all assets."""
        orm_assets = (
            self._db.query(AssetORM)
            .order_by(AssetORM.asset_type, AssetORM.symbol)
            .all()
        )
        return [self._to_domain(a) for a in orm_assets]

    def list_by_type(self, asset_type: AssetType) -> list[Asset]:
        """List assets of one class."""
        orm_assets = (
            self._db.query(AssetORM)
            .filter(AssetORM.asset_type == asset_type)
            .order_by(AssetORM.symbol)
            .all()
        )
        return [self._to_domain(a) for a in orm_assets]

    def update(self, asset: Asset) -> Asset:
        """Update an existing asset."""
        orm_asset = self._db.query(AssetORM).filter(
            AssetORM.asset_id == asset.asset_id
        ).first()
        if not orm_asset:
            raise ValueError(f"Asset not found: {asset.asset_id}")

        orm_asset.symbol = asset.symbol
        orm_asset.name = asset.name
        orm_asset.quantity = asset.quantity
        orm_asset.average_price = asset.average_price
        orm_asset.invested_value = asset.invested_value
        orm_asset.current_price = asset.current_price
        orm_asset.source = asset.source
        orm_asset.last_updated_ist = asset.last_updated_ist

        self._db.commit()
        self._db.refresh(orm_asset)
        return self._to_domain(orm_asset)

    def delete(self, asset_id: str) -> None:
        """Delete an asset."""
        self._db.query(AssetORM).filter(
            AssetORM.asset_id == asset_id
        ).delete()
        self._db.commit()

    @staticmethod
    def _to_domain(orm: AssetORM) -> Asset:
        """Convert ORM model to domain model."""
        return Asset(
            asset_id=orm.asset_id,
            symbol=orm.symbol,
            name=orm.name,
            asset_type=orm.asset_type,
            quantity=Decimal(str(orm.quantity)) if orm.quantity else Decimal("0"),
            average_price=Decimal(str(orm.average_price)) if orm.average_price else Decimal("0"),
            invested_value=Decimal(str(orm.invested_value)) if orm.invested_value else Decimal("0"),
            current_price=Decimal(str(orm.current_price)) if orm.current_price is not None else None,
            source=orm.source,
            last_updated_ist=to_ist(orm.last_updated_ist) if orm.last_updated_ist else None,
        )
