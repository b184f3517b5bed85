"""StockPilot: point-of-sale and inventory manager for small shops."""

__version__ = "0.1.0"
