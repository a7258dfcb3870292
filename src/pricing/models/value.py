"""
求值上下文模型：控件值的归一化视图与输入槽连接状态。

- NormalizedValue：raw 原值 + text（小写字符串）+ number（有限数或 None）+ boolean。
- EvalContext：规则声明的控件名 -> NormalizedValue，输入名 -> InputState（仅连接标志）。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class NormalizedValue:
    """单个控件值的统一投影。"""
    raw: Any
    text: str = ""
    number: float | None = None
    boolean: bool | None = None


EMPTY_VALUE = NormalizedValue(raw=None)


@dataclass(frozen=True, slots=True)
class InputState:
    """输入槽只暴露是否已连接，从不暴露上游的值。"""
    connected: bool = False


class DependencyView(Mapping[str, Any]):
    """Read-only mapping that also allows attribute access (``w.model.text``)."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, Any]):
        self._items = dict(items)

    def __getitem__(self, key: str) -> Any:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._items[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"DependencyView({self._items!r})"


@dataclass(frozen=True, slots=True)
class EvalContext:
    """求值器看到的全部状态：恰好是规则声明的依赖面。"""
    widgets: Mapping[str, NormalizedValue] = field(default_factory=dict)
    inputs: Mapping[str, InputState] = field(default_factory=dict)

    def as_namespace(self) -> Dict[str, DependencyView]:
        """Variables handed to the evaluator: ``w`` for widgets, ``i`` for inputs."""
        return {"w": DependencyView(self.widgets), "i": DependencyView(self.inputs)}
