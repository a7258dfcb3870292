"""
内置的定价规则表（节点类型名 -> RuleSpec），表达式为单个 Python 表达式。

表达式可用的变量：w.<控件名>（NormalizedValue：raw / text / number / boolean）、
i.<输入名>.connected，以及 contains() 与少量内置函数。
当宿主开始随节点 schema 下发规则包时，用 registry.load_rule_bundle 的结果替换本表即可。
"""

from typing import Dict, Optional

from ..models import DependsOn, FormatOptions, RuleEngine, RuleSpec


def expr_usd(usd: float, fmt: Optional[Dict[str, object]] = None) -> str:
    """Expression that always yields a flat usd result."""
    result: Dict[str, object] = {"type": "usd", "usd": usd}
    if fmt:
        result["format"] = fmt
    return repr(result)


def _rule(expr: str, widgets=(), inputs=(), result_defaults: Optional[FormatOptions] = None) -> RuleSpec:
    return RuleSpec(
        engine=RuleEngine.PYTHON,
        expr=expr,
        depends_on=DependsOn(widgets=tuple(widgets), inputs=tuple(inputs)),
        result_defaults=result_defaults,
    )


# model -> resolution -> [min, max] USD per 10 seconds
SEEDANCE_PRICES = {
    "seedance-1-0-pro": {"480p": [0.23, 0.24], "720p": [0.51, 0.56], "1080p": [1.18, 1.22]},
    "seedance-1-0-pro-fast": {"480p": [0.09, 0.1], "720p": [0.21, 0.23], "1080p": [0.47, 0.49]},
    "seedance-1-0-lite": {"480p": [0.17, 0.18], "720p": [0.37, 0.41], "1080p": [0.85, 0.88]},
}

SEEDANCE_EXPR = f"""(
    {{"type": "usd", "usd": lo}}
    if (r := {SEEDANCE_PRICES!r}[w.model.text][w.resolution.text])
    and (lo := r[0] * w.duration.number / 10) == (hi := r[1] * w.duration.number / 10)
    else {{"type": "range_usd", "min_usd": lo, "max_usd": hi}}
)"""

# model -> resolution -> USD per second
LTXV_PRICES = {
    "ltx-2 (pro)": {"1920x1080": 0.06, "2560x1440": 0.12, "3840x2160": 0.24},
    "ltx-2 (fast)": {"1920x1080": 0.04, "2560x1440": 0.08, "3840x2160": 0.16},
}

LTXV_EXPR = (
    f'{{"type": "usd", "usd": {LTXV_PRICES!r}[w.model.text][w.resolution.text] * w.duration.number}}'
)

FLUX2_EXPR = """(
    {{"type": "range_usd", "min_usd": cost + {ref_min}, "max_usd": cost + {ref_max}{fmt}}}
    if (cost := {base} + {per_mp} * (max(1, int(((w.width.number or 0) * (w.height.number or 0) + 1048575) // 1048576)) - 1))
    and i.images.connected
    else {{"type": "usd", "usd": cost}}
)"""

GEMINI_EXPR = """(
    {"type": "usd", "usd": 0.5, "format": {"suffix": "/second"}} if contains(w.model.text, "veo-2.0")
    else {"type": "list_usd", "usd": [0.0003, 0.0025]} if contains(w.model.text, "gemini-2.5-flash")
    else {"type": "list_usd", "usd": [0.00125, 0.01]} if contains(w.model.text, "gemini-2.5-pro")
    else {"type": "list_usd", "usd": [0.002, 0.012]} if contains(w.model.text, "gemini-3-pro-preview")
    else {"type": "text", "text": "Token-based"}
)"""

GEMINI_IMAGE2_EXPR = """(
    {"type": "usd", "usd": 0.134, "format": {"suffix": "/Image", "approximate": True}}
    if contains(w.resolution.text, "1k") or contains(w.resolution.text, "2k")
    else {"type": "usd", "usd": 0.24, "format": {"suffix": "/Image", "approximate": True}}
    if contains(w.resolution.text, "4k")
    else {"type": "text", "text": "Token-based"}
)"""

LOCAL_PRICING_RULES: Dict[str, RuleSpec] = {
    "ByteDanceSeedreamNode": _rule(
        """{
            "type": "usd",
            "usd": 0.04 if contains(w.model.text, "seedream-4-5-251128") else 0.03,
            "format": {"suffix": " x images/Run", "approximate": True},
        }""",
        widgets=["model"],
    ),
    "ByteDanceTextToVideoNode": _rule(SEEDANCE_EXPR, widgets=["model", "duration", "resolution"]),
    "ByteDanceImageToVideoNode": _rule(SEEDANCE_EXPR, widgets=["model", "duration", "resolution"]),
    "ByteDanceFirstLastFrameNode": _rule(SEEDANCE_EXPR, widgets=["model", "duration", "resolution"]),
    "ByteDanceImageReferenceNode": _rule(SEEDANCE_EXPR, widgets=["model", "duration", "resolution"]),
    "FluxProExpandNode": _rule(expr_usd(0.05)),
    "FluxProFillNode": _rule(expr_usd(0.05)),
    "FluxProUltraImageNode": _rule(expr_usd(0.06)),
    "FluxProKontextProNode": _rule(expr_usd(0.04)),
    "FluxProKontextMaxNode": _rule(expr_usd(0.08)),
    "Flux2ProImageNode": _rule(
        FLUX2_EXPR.format(base=0.03, per_mp=0.015, ref_min=0.015, ref_max=0.12, fmt=', "format": {"approximate": True}'),
        widgets=["width", "height"],
        inputs=["images"],
    ),
    "Flux2MaxImageNode": _rule(
        FLUX2_EXPR.format(base=0.07, per_mp=0.03, ref_min=0.03, ref_max=0.24, fmt=""),
        widgets=["width", "height"],
        inputs=["images"],
    ),
    "GeminiNode": _rule(
        GEMINI_EXPR,
        widgets=["model"],
        result_defaults=FormatOptions(suffix=" per 1K tokens"),
    ),
    "GeminiImageNode": _rule(expr_usd(0.039, {"suffix": "/Image (1K)", "approximate": True})),
    "GeminiImage2Node": _rule(GEMINI_IMAGE2_EXPR, widgets=["resolution"]),
    "IdeogramV1": _rule(
        '{"type": "usd", "usd": round((0.0286 if w.turbo.boolean is True else 0.0858) * w.num_images.number, 2)}',
        widgets=["num_images", "turbo"],
    ),
    "WanTextToImageApi": _rule(expr_usd(0.03)),
    "WanImageToImageApi": _rule(expr_usd(0.03)),
    "LtxvApiTextToVideo": _rule(LTXV_EXPR, widgets=["model", "duration", "resolution"]),
    "LtxvApiImageToVideo": _rule(LTXV_EXPR, widgets=["model", "duration", "resolution"]),
}
