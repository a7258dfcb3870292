"""
定价结果格式化：把求值器返回的结果转为徽标文本。

- parse_pricing_result：原始 dict（{"type": ...}）-> 带类型的 PricingResult；未知类型或字段不合法返回 None。
- ResultFormatter.format：合并默认格式（引擎 < 规则 < 结果），再按类型渲染；任何异常情况都返回空串。
"""

import logging
from dataclasses import fields
from typing import Any, Mapping, Optional

from ..config import DEFAULT_CONFIG, PricingConfig
from ..models import (
    FormatOptions,
    ListUsdResult,
    PricingResult,
    RangeUsdResult,
    TextResult,
    UsdResult,
)
from .credits import format_credits_from_usd
from .normalizer import as_finite_number

logger = logging.getLogger(__name__)

_RESULT_TAGS = {
    TextResult: "text",
    UsdResult: "usd",
    RangeUsdResult: "range_usd",
    ListUsdResult: "list_usd",
}


def parse_format_options(value: Any) -> Optional[FormatOptions]:
    """Read a {"suffix", "note", "approximate", "separator"} mapping; non-mappings give None."""
    if isinstance(value, FormatOptions):
        value = {f.name: getattr(value, f.name) for f in fields(value)}
    if not isinstance(value, Mapping):
        return None

    def _str_or_none(key: str) -> Optional[str]:
        v = value.get(key)
        return v if isinstance(v, str) else None

    approximate = value.get("approximate")
    return FormatOptions(
        suffix=_str_or_none("suffix"),
        note=_str_or_none("note"),
        approximate=bool(approximate) if approximate is not None else None,
        separator=_str_or_none("separator"),
    )


def parse_pricing_result(raw: Any) -> Optional[PricingResult]:
    """Turn an evaluator result into a typed PricingResult, or None when the shape is not recognized."""
    tag = _RESULT_TAGS.get(type(raw))
    if tag is not None:
        # typed results go through the same checks as evaluator mappings
        raw = {"type": tag, **{f.name: getattr(raw, f.name) for f in fields(raw)}}
    if not isinstance(raw, Mapping):
        return None

    kind = raw.get("type")
    if kind == "text":
        text = raw.get("text")
        return TextResult(text="" if text is None else str(text))

    fmt = parse_format_options(raw.get("format"))
    if kind == "usd":
        usd = as_finite_number(raw.get("usd"))
        if usd is None:
            return None
        return UsdResult(usd=usd, format=fmt)

    if kind == "range_usd":
        min_usd = as_finite_number(raw.get("min_usd"))
        max_usd = as_finite_number(raw.get("max_usd"))
        if min_usd is None or max_usd is None:
            return None
        return RangeUsdResult(min_usd=min_usd, max_usd=max_usd, format=fmt)

    if kind == "list_usd":
        values = raw.get("usd")
        if not isinstance(values, (list, tuple)) or not values:
            return None
        usd_values = tuple(as_finite_number(v) for v in values)
        if any(v is None for v in usd_values):
            return None
        return ListUsdResult(usd=usd_values, format=fmt)

    return None


class ResultFormatter:
    """Render PricingResults as credit labels using one PricingConfig."""

    def __init__(self, config: PricingConfig = DEFAULT_CONFIG):
        self.config = config

    def _amount(self, usd: float) -> str:
        return format_credits_from_usd(
            usd,
            decimals=self.config.credit_decimals,
            credits_per_usd=self.config.credits_per_usd,
        )

    def _label(self, value: str, fmt: FormatOptions) -> str:
        prefix = "~" if fmt.approximate else ""
        suffix = fmt.suffix if fmt.suffix is not None else self.config.default_suffix
        note = f" {fmt.note}" if fmt.note else ""
        return f"{prefix}{value} credits{suffix}{note}"

    def render(self, result: PricingResult, defaults: Optional[FormatOptions] = None) -> str:
        """Render a typed result. Raises ValueError on amounts the credit formatter rejects."""
        if isinstance(result, TextResult):
            return result.text

        if not isinstance(result, (UsdResult, RangeUsdResult, ListUsdResult)):
            return ""
        fmt = self.config.base_format().merged(defaults).merged(result.format)

        if isinstance(result, UsdResult):
            return self._label(self._amount(result.usd), fmt)

        if isinstance(result, RangeUsdResult):
            lo = self._amount(result.min_usd)
            hi = self._amount(result.max_usd)
            return self._label(lo if lo == hi else f"{lo}-{hi}", fmt)

        separator = fmt.separator if fmt.separator is not None else self.config.default_separator
        return self._label(separator.join(self._amount(v) for v in result.usd), fmt)

    def format(self, raw: Any, defaults: Optional[FormatOptions] = None) -> str:
        """解析并渲染求值结果；结构不合法或数值非有限时返回空串，不抛异常。"""
        result = parse_pricing_result(raw)
        if result is None:
            return ""
        try:
            return self.render(result, defaults)
        except ValueError as e:
            logger.debug("Unformattable pricing result %r: %s", raw, e)
            return ""


def format_pricing_result(
    raw: Any,
    defaults: Optional[FormatOptions] = None,
    config: PricingConfig = DEFAULT_CONFIG,
) -> str:
    """Format one evaluator result with a throwaway ResultFormatter."""
    return ResultFormatter(config).format(raw, defaults)
