"""Sling ledger and currency-conversion engine."""

__version__ = "0.1.0"
