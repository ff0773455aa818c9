"""Everclear ledger tools: API pass-through plus the invoice enrichment pipeline."""

__version__ = "1.0.0"
