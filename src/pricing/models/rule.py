"""
定价规则模型：每个节点类型一条规则，启动时加载、编译一次，此后不可变。

- DependsOn：规则读取的控件名与输入名（有序），必须覆盖表达式用到的全部状态。
- RuleSpec：表达式语言、依赖、默认格式、表达式源码。
- CompiledRule：RuleSpec + 求值器句柄；句柄为 None 表示规则被永久禁用。
"""

from dataclasses import dataclass, field
from typing import Any, Tuple

from .result import FormatOptions
from .rule_engine import RuleEngine


@dataclass(frozen=True, slots=True)
class DependsOn:
    """规则的依赖面：控件名、输入名，均按声明顺序。"""
    widgets: Tuple[str, ...] = ()
    inputs: Tuple[str, ...] = ()

    def names(self) -> Tuple[str, ...]:
        """Widgets then inputs, duplicates removed, order kept."""
        out: list[str] = []
        for name in (*self.widgets, *self.inputs):
            if name not in out:
                out.append(name)
        return tuple(out)


@dataclass(frozen=True, slots=True)
class RuleSpec:
    """单个节点类型的定价规则。"""
    engine: RuleEngine
    expr: str
    depends_on: DependsOn = field(default_factory=DependsOn)
    result_defaults: FormatOptions | None = None


@dataclass(frozen=True, slots=True)
class CompiledRule:
    """编译后的规则；handle 为求值器的不透明句柄。"""
    spec: RuleSpec
    handle: Any = None

    @property
    def disabled(self) -> bool:
        return self.handle is None

    @property
    def depends_on(self) -> DependsOn:
        return self.spec.depends_on
