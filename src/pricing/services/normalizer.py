"""
控件值归一化：把任意原始值投影为固定形状的 NormalizedValue，永不抛异常。

- 布尔值与对象不会被强转为数字；数字字符串解析后必须有限，否则为 None。
- "true"/"false" 字符串大小写不敏感地映射为布尔值。
"""

import math
from typing import Any, Optional

from ..models import NormalizedValue


def as_finite_number(value: Any) -> Optional[float]:
    """Return value as a finite number, or None. Booleans and objects are never coerced."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return value if math.isfinite(value) else None
        except OverflowError:  # int too large for float
            return None
    if isinstance(value, str):
        t = value.strip()
        if t == "":
            return None
        try:
            n = float(t)
        except ValueError:
            return None
        return n if math.isfinite(n) else None
    return None


def _to_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    try:
        return str(raw).strip().lower()
    except Exception:
        return ""


def _to_boolean(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        ls = raw.strip().lower()
        if ls == "true":
            return True
        if ls == "false":
            return False
    return None


def normalize_value(raw: Any) -> NormalizedValue:
    """把单个控件原始值转换为 NormalizedValue。"""
    return NormalizedValue(
        raw=raw,
        text=_to_text(raw),
        number=as_finite_number(raw),
        boolean=_to_boolean(raw),
    )
