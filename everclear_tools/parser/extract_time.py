# -*- coding: utf-8 -*-
"""
Timestamp Helpers

負責 invoice 時間欄位的解析與格式化：
- createdAt：ISO-8601 字串或 epoch 毫秒，用於計算 open time
- hub_invoice_enqueued_timestamp：epoch 秒，用於輸出的 Created At 欄位
"""

import math
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INTEGER_PATTERN = re.compile(r"^\s*(-?\d+)")


def current_millis() -> int:
    return int(time.time() * 1000)


def millis_to_iso(ms: int) -> str:
    """
    Format epoch milliseconds as ISO-8601 UTC, e.g. '2025-01-01T00:00:00.000Z'

    Raises:
        OverflowError: If the value is outside the datetime range
    """
    dt = _EPOCH + timedelta(milliseconds=ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_created_at(value: Any) -> Optional[int]:
    """
    解析 createdAt，回傳 epoch 毫秒。

    Args:
        value: ISO-8601 字串（可含 Z 結尾；無時區視為 UTC）、epoch 毫秒數字或數字字串

    Returns:
        Epoch milliseconds or None if absent or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if text.isdecimal():
        return int(text)

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    delta = dt - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def compute_open_time_seconds(created_ms: Optional[int], now_ms: int) -> int:
    """Whole seconds elapsed since creation; creation defaults to now (0 seconds)"""
    if created_ms is None:
        created_ms = now_ms
    return (now_ms - created_ms) // 1000


def epoch_seconds_to_iso(value: Any) -> Optional[str]:
    """
    將 hub_invoice_enqueued_timestamp（epoch 秒）轉為 ISO-8601 字串。

    Leading integer digits are used (like parseInt), so "1700000000" and
    1700000000.9 both resolve to the same second. Returns None when the value
    is absent, non-numeric or out of range.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        seconds = int(value)
    elif isinstance(value, int):
        seconds = value
    elif isinstance(value, str):
        match = _INTEGER_PATTERN.match(value)
        if not match:
            return None
        seconds = int(match.group(1))
    else:
        return None

    try:
        return millis_to_iso(seconds * 1000)
    except OverflowError:
        return None
