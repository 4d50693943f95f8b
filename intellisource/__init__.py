"""IntelliSource catalog API: categories, market reports and contact messages."""

__version__ = "0.3.0"
