# -*- coding: utf-8 -*-
"""
Amount Normalization

將 base-unit 整數金額（wei 等）轉換為固定 6 位小數的顯示字串。
- 全程使用 Python int（任意精度），不經過 float
- 小數第 6 位以後無條件捨去（toward zero）
- 格式錯誤時回傳 "0.000000"，原始值由呼叫端保留在 amount_raw
"""

import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

DISPLAY_PLACES = 6
ZERO_AMOUNT = "0.000000"

_BASE_UNITS_PATTERN = re.compile(r"^\d+$")


def parse_base_units(raw_amount: Any) -> Optional[int]:
    """
    Parse a non-negative base-unit integer.

    Accepts int values and digit-only strings (surrounding whitespace allowed).
    Returns None for anything else: None, "", "-5", "1.5", "0x10", True, 1.0 ...
    """
    if isinstance(raw_amount, bool):
        return None
    if isinstance(raw_amount, int):
        return raw_amount if raw_amount >= 0 else None
    if isinstance(raw_amount, str):
        text = raw_amount.strip()
        if _BASE_UNITS_PATTERN.match(text):
            return int(text)
    return None


def to_decimal_string(raw_amount: Any, decimals: Any) -> str:
    """
    Convert a base-unit amount into a decimal string with 6 fractional digits.

    Args:
        raw_amount: Base-unit integer (int or digit string), e.g. "1000000"
        decimals: Token decimal precision, e.g. 6

    Returns:
        str: e.g. "1.000000"; "0.000000" when the input is malformed

    Examples:
        >>> to_decimal_string("1000000", 6)
        '1.000000'
        >>> to_decimal_string("123456789012345678901234567890", 18)
        '123456789012.345678'
        >>> to_decimal_string("abc", 18)
        '0.000000'
    """
    value = parse_base_units(raw_amount)
    if value is None:
        if raw_amount not in (None, ""):
            logger.warning(f"Malformed amount {raw_amount!r}, using {ZERO_AMOUNT}")
        return ZERO_AMOUNT

    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        logger.warning(f"Invalid decimals {decimals!r} for amount {raw_amount!r}, using {ZERO_AMOUNT}")
        return ZERO_AMOUNT

    # Scale to 6 places first, then floor-divide: truncation toward zero for non-negative values
    scaled = value * 10 ** DISPLAY_PLACES // 10 ** decimals
    whole, fraction = divmod(scaled, 10 ** DISPLAY_PLACES)
    return f"{whole}.{fraction:0{DISPLAY_PLACES}d}"
