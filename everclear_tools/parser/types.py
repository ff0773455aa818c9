# -*- coding: utf-8 -*-
"""
Invoice batch shapes

Ledger responses arrive as a bare list, a wrapper object, or a single invoice.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class BatchShape(Enum):
    """Shape of a raw ledger response"""

    ARRAY = "array"          # bare list of invoices
    WRAPPED = "wrapped"      # {"invoices"|"data"|"results": [...]}
    SINGLE = "single"        # one invoice object
    UNSHAPED = "unshaped"    # null, string, number ...

    @classmethod
    def has_records(cls, shape: "BatchShape") -> bool:
        return shape != cls.UNSHAPED


@dataclass
class NormalizedBatch:
    """Raw ledger response unwrapped into a list of invoice records"""

    shape: BatchShape
    records: list = field(default_factory=list)
    source_key: Optional[str] = None    # wrapper key when shape is WRAPPED
    raw: Any = None

    def __len__(self) -> int:
        return len(self.records)
