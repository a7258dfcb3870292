"""
结果格式化与额度换算测试。
"""
import pytest

from pricing.config import PricingConfig
from pricing.models import FormatOptions, ListUsdResult, RangeUsdResult, TextResult, UsdResult
from pricing.services import (
    ResultFormatter,
    format_credits_from_usd,
    format_pricing_result,
    parse_pricing_result,
)


class TestFormatCredits:
    """format_credits_from_usd 测试（默认 1 USD = 211 credits）。"""

    @pytest.mark.parametrize("usd, expected", [
        (0.04, "8"),
        (0.23, "49"),
        (0.0003, "0"),
        (0.0025, "1"),
        (1, "211"),
        (10, "2,110"),
        (0, "0"),
    ])
    def test_whole_credits(self, usd, expected):
        assert format_credits_from_usd(usd) == expected

    def test_decimals(self):
        assert format_credits_from_usd(0.04, decimals=2) == "8.44"

    def test_rate(self):
        assert format_credits_from_usd(1, credits_per_usd=100) == "100"

    @pytest.mark.parametrize("bad", [float("inf"), float("nan"), "abc", None])
    def test_rejects_non_finite(self, bad):
        with pytest.raises(ValueError):
            format_credits_from_usd(bad)


class TestParsePricingResult:
    """parse_pricing_result 测试。"""

    def test_usd_with_format(self):
        r = parse_pricing_result({"type": "usd", "usd": 0.04, "format": {"suffix": "/Image", "approximate": True}})
        assert r == UsdResult(usd=0.04, format=FormatOptions(suffix="/Image", approximate=True))

    def test_numeric_strings_accepted(self):
        assert parse_pricing_result({"type": "usd", "usd": "0.5"}) == UsdResult(usd=0.5)

    def test_typed_result_passthrough(self):
        r = TextResult("Token-based")
        assert parse_pricing_result(r) == r

    @pytest.mark.parametrize("raw", [
        None,
        "usd",
        42,
        {},
        {"type": "eur", "eur": 1},
        {"type": "usd"},
        {"type": "usd", "usd": True},
        {"type": "usd", "usd": float("inf")},
        {"type": "range_usd", "min_usd": 1},
        {"type": "range_usd", "min_usd": 1, "max_usd": "nan"},
        {"type": "list_usd", "usd": []},
        {"type": "list_usd", "usd": 0.1},
        {"type": "list_usd", "usd": [0.1, None]},
        {"type": "list_usd", "usd": [0.1, float("inf")]},
    ])
    def test_malformed(self, raw):
        assert parse_pricing_result(raw) is None


class TestResultFormatter:
    """ResultFormatter 测试。"""

    def test_usd_defaults(self):
        assert format_pricing_result({"type": "usd", "usd": 0.04}) == "8 credits/Run"

    def test_text_verbatim(self):
        assert format_pricing_result({"type": "text", "text": "Token-based"}) == "Token-based"

    def test_text_ignores_format_defaults(self):
        assert format_pricing_result({"type": "text", "text": "Free"}, FormatOptions(suffix="/x")) == "Free"

    def test_range_collapses_when_equal(self):
        label = format_pricing_result({"type": "range_usd", "min_usd": 0.23, "max_usd": 0.23})
        assert label == "49 credits/Run"
        assert "-" not in label

    def test_range_collapses_after_rounding(self):
        assert format_pricing_result({"type": "range_usd", "min_usd": 0.230, "max_usd": 0.231}) == "49 credits/Run"

    def test_range(self):
        assert format_pricing_result({"type": "range_usd", "min_usd": 0.23, "max_usd": 0.24}) == "49-51 credits/Run"

    def test_list_with_suffix_override(self):
        label = format_pricing_result(
            {"type": "list_usd", "usd": [0.0003, 0.0025]},
            FormatOptions(suffix=" per 1K tokens"),
        )
        assert label == "0/1 credits per 1K tokens"

    def test_list_separator(self):
        label = format_pricing_result({"type": "list_usd", "usd": [1, 2], "format": {"separator": " | "}})
        assert label == "211 | 422 credits/Run"

    def test_prefix_and_note(self):
        label = format_pricing_result(
            {"type": "usd", "usd": 0.04, "format": {"approximate": True, "note": "(est.)"}}
        )
        assert label == "~8 credits/Run (est.)"

    def test_empty_note_not_appended(self):
        assert format_pricing_result({"type": "usd", "usd": 1, "format": {"note": ""}}) == "211 credits/Run"

    def test_result_format_overrides_rule_defaults(self):
        defaults = FormatOptions(suffix=" per 1K tokens", approximate=True)
        label = format_pricing_result({"type": "usd", "usd": 0.5, "format": {"suffix": "/second"}}, defaults)
        assert label == "~106 credits/second"

    def test_empty_suffix_is_respected(self):
        assert format_pricing_result({"type": "usd", "usd": 1, "format": {"suffix": ""}}) == "211 credits"

    @pytest.mark.parametrize("raw", [None, {"type": "mystery"}, {"type": "usd", "usd": "x"}, [1, 2]])
    def test_unrecognized_is_empty(self, raw):
        assert format_pricing_result(raw) == ""

    def test_typed_non_finite_is_empty(self):
        formatter = ResultFormatter()
        assert formatter.format(UsdResult(usd=float("nan"))) == ""
        assert formatter.format(ListUsdResult(usd=(0.1, float("inf")))) == ""
        assert formatter.format(RangeUsdResult(min_usd=0.1, max_usd=float("-inf"))) == ""

    def test_config_defaults(self):
        formatter = ResultFormatter(PricingConfig(default_suffix="/Call", default_separator=" or ", credit_decimals=1))
        assert formatter.format({"type": "list_usd", "usd": [0.04, 1]}) == "8.4 or 211.0 credits/Call"


class TestPricingConfig:
    """PricingConfig 测试。"""

    def test_base_format(self):
        base = PricingConfig().base_format()
        assert base == FormatOptions(suffix="/Run", approximate=False, separator="/")

    @pytest.mark.parametrize("kwargs", [{"credit_decimals": -1}, {"credits_per_usd": 0}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            PricingConfig(**kwargs)


class TestTypedResultValidation:
    """已构造的结果对象与求值器返回的 dict 走同样的校验。"""

    @pytest.mark.parametrize("result", [
        ListUsdResult(usd=()),
        UsdResult(usd=True),
        RangeUsdResult(min_usd=0.1, max_usd=None),
    ])
    def test_malformed_typed_result_is_rejected(self, result):
        assert parse_pricing_result(result) is None
        assert format_pricing_result(result) == ""

    def test_text_none_becomes_empty(self):
        assert parse_pricing_result(TextResult(text=None)) == TextResult("")
        assert format_pricing_result(TextResult(text=None)) == ""

    def test_plain_dict_format_is_parsed(self):
        result = UsdResult(usd=0.1, format={"suffix": "/x"})
        assert parse_pricing_result(result) == UsdResult(usd=0.1, format=FormatOptions(suffix="/x"))
        assert format_pricing_result(result) == "21 credits/x"

    def test_list_tuple_preserved(self):
        assert format_pricing_result(ListUsdResult(usd=(0.04, 0.03))) == "8/6 credits/Run"
