"""Enumerations for domain models."""

from enum import Enum


class AssetType(str, Enum):
    """Asset classes; each one has its own price provider chain."""

    STOCK = "STOCK"
    MF = "MF"  # Mutual fund, identified by ISIN
    GOLD = "GOLD"  # Fungible gold, quantity in grams


class AssetSource(str, Enum):
    """Where an asset record came from."""

    BROKER = "BROKER"
    MANUAL = "MANUAL"
    AGGREGATED = "AGGREGATED"  # Synthetic merged line, never persisted


class TransactionType(str, Enum):
    """Types of ledger transactions."""

    BUY = "BUY"
    SELL = "SELL"
