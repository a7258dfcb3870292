"""
求值上下文与签名。

build_context：按规则声明的依赖名从实体收集控件值（归一化）与输入槽连接标志，
求值器看到的恰好是声明的依赖面。
build_signature：把上下文限制在声明依赖上序列化为字符串，用于判断是否需要重新求值。
"""

import json
from typing import Any, Dict

from ..models import DependsOn, EMPTY_VALUE, EvalContext, InputState, NormalizedValue
from .normalizer import normalize_value

SIGNATURE_SEPARATOR = "|"


def build_context(entity: Any, depends_on: DependsOn) -> EvalContext:
    """Collect normalized widget values and input connection flags for the declared names."""
    widgets: Dict[str, NormalizedValue] = {}
    for name in depends_on.widgets:
        widget = entity.widget(name)
        widgets[name] = normalize_value(widget.value) if widget is not None else EMPTY_VALUE

    inputs: Dict[str, InputState] = {}
    for name in depends_on.inputs:
        slot = entity.input(name)
        inputs[name] = InputState(connected=slot is not None and slot.link is not None)

    return EvalContext(widgets=widgets, inputs=inputs)


def safe_value_for_signature(value: Any) -> str:
    """Stringify a raw widget value for the signature; structured values go through JSON."""
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    try:
        return json.dumps(value, sort_keys=True)
    except (TypeError, ValueError):
        return str(value)


def build_signature(context: EvalContext, depends_on: DependsOn) -> str:
    """签名：按声明顺序拼接 w:name=raw 与 i:name=1/0。"""
    parts = []
    for name in depends_on.widgets:
        value = context.widgets.get(name, EMPTY_VALUE)
        parts.append(f"w:{name}={safe_value_for_signature(value.raw)}")
    for name in depends_on.inputs:
        state = context.inputs.get(name)
        parts.append(f"i:{name}={'1' if state is not None and state.connected else '0'}")
    return SIGNATURE_SEPARATOR.join(parts)
