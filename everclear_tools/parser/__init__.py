# -*- coding: utf-8 -*-
"""
Parser Module

Ingestion-side helpers for raw ledger data:
- normalize_invoice_batch: unwrap heterogeneous ledger responses into a record list
- to_decimal_string: exact base-unit -> display amount conversion
- timestamp parsing / formatting for createdAt and hub_invoice_enqueued_timestamp
"""

from everclear_tools.parser.types import BatchShape, NormalizedBatch
from everclear_tools.parser.normalize_batch import normalize_invoice_batch, WRAPPER_KEYS
from everclear_tools.parser.extract_amount import (
    ZERO_AMOUNT,
    parse_base_units,
    to_decimal_string,
)
from everclear_tools.parser.extract_time import (
    compute_open_time_seconds,
    current_millis,
    epoch_seconds_to_iso,
    millis_to_iso,
    parse_created_at,
)

__all__ = [
    "BatchShape",
    "NormalizedBatch",
    "WRAPPER_KEYS",
    "normalize_invoice_batch",
    "ZERO_AMOUNT",
    "parse_base_units",
    "to_decimal_string",
    "compute_open_time_seconds",
    "current_millis",
    "epoch_seconds_to_iso",
    "millis_to_iso",
    "parse_created_at",
]
