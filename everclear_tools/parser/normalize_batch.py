# -*- coding: utf-8 -*-
"""Invoice batch normalization.

The ledger API is not consistent about how it wraps invoice lists. Unwrap by
known keys first, then fall back to treating an object as a single invoice.
"""

from __future__ import annotations

import logging
from typing import Any

from everclear_tools.parser.types import BatchShape, NormalizedBatch

logger = logging.getLogger(__name__)

# Checked in order; the first key holding a list wins.
WRAPPER_KEYS = ("invoices", "data", "results")


def normalize_invoice_batch(raw: Any) -> NormalizedBatch:
    if isinstance(raw, list):
        return NormalizedBatch(shape=BatchShape.ARRAY, records=list(raw), raw=raw)

    if isinstance(raw, dict):
        for key in WRAPPER_KEYS:
            value = raw.get(key)
            if isinstance(value, list):
                return NormalizedBatch(
                    shape=BatchShape.WRAPPED,
                    records=list(value),
                    source_key=key,
                    raw=raw,
                )
        return NormalizedBatch(shape=BatchShape.SINGLE, records=[raw], raw=raw)

    logger.warning(f"Unrecognized invoice batch of type {type(raw).__name__}")
    return NormalizedBatch(shape=BatchShape.UNSHAPED, records=[], raw=raw)
