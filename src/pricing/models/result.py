"""
定价结果模型：带标签的联合类型 + 格式化选项。

求值器返回的原始 dict（{"type": "usd", ...}）由 formatter.parse_pricing_result 转为这里的类型。
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """徽标格式化选项；None 表示未设置，由默认值或上层补齐。"""
    suffix: str | None = None
    note: str | None = None
    approximate: bool | None = None
    separator: str | None = None

    def merged(self, override: Optional['FormatOptions']) -> 'FormatOptions':
        """Return a copy where every field set on ``override`` wins."""
        if override is None:
            return self
        values = {}
        for f in fields(self):
            value = getattr(override, f.name)
            values[f.name] = value if value is not None else getattr(self, f.name)
        return FormatOptions(**values)


@dataclass(frozen=True, slots=True)
class TextResult:
    text: str


@dataclass(frozen=True, slots=True)
class UsdResult:
    usd: float
    format: FormatOptions | None = None


@dataclass(frozen=True, slots=True)
class RangeUsdResult:
    min_usd: float
    max_usd: float
    format: FormatOptions | None = None


@dataclass(frozen=True, slots=True)
class ListUsdResult:
    usd: Tuple[float, ...]
    format: FormatOptions | None = None


PricingResult = Union[TextResult, UsdResult, RangeUsdResult, ListUsdResult]
