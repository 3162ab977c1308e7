"""Portfolio growth tracker: live valuation and historical value curve for INR holdings."""

__version__ = "0.1.0"
