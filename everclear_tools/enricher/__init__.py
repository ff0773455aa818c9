# -*- coding: utf-8 -*-
"""
Invoice Enrichment Module

負責將 raw ledger invoice 轉換為可讀格式：
- chain ID / tickerhash 轉為名稱
- base-unit 金額轉為 6 位小數
- 計算 open time
- 單筆失敗不影響整批
"""

from .enricher import enrich_batch, enrich_record
from .types import EnrichmentResult

__all__ = [
    "enrich_batch",
    "enrich_record",
    "EnrichmentResult",
]
