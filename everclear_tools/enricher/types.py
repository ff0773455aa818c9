# -*- coding: utf-8 -*-
"""
Enrichment Types

定義 Enricher 模組使用的資料型別。
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class EnrichmentResult:
    """
    單筆 invoice 的 enrichment 結果。

    record 一定存在：成功時為完整 enriched record，
    失敗時為最小格式化版本並帶有 processing_error。
    """
    record: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None
