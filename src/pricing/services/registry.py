"""
规则注册表：节点类型名 -> 规则，启动时每条规则编译一次。

- 编译失败或求值器不支持该表达式语言时，规则被永久禁用（记录一次 ERROR 日志），不会再次编译。
- 未知类型返回 None。
- load_rule_bundle 把外部提供的 dict 形式规则包解析为 RuleSpec，可替换内置静态表。
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models import CompileError, CompiledRule, DependsOn, FormatOptions, RuleEngine, RuleSpec
from .evaluator import ExpressionEvaluator
from .formatter import parse_format_options

logger = logging.getLogger(__name__)


def _compile_rule(type_name: str, spec: RuleSpec, evaluator: ExpressionEvaluator) -> CompiledRule:
    if spec.engine != evaluator.engine:
        logger.error(
            "Pricing rule %s uses engine %s, evaluator speaks %s; rule disabled",
            type_name, spec.engine.value, evaluator.engine.value,
        )
        return CompiledRule(spec=spec, handle=None)
    try:
        handle = evaluator.compile(spec.expr)
    except CompileError as e:
        logger.error("Failed to compile pricing rule %s: %s\n%s", type_name, e, spec.expr)
        return CompiledRule(spec=spec, handle=None)
    return CompiledRule(spec=spec, handle=handle)


class RuleRegistry:
    """Compiled pricing rules keyed by node type name."""

    def __init__(self, rules: Mapping[str, RuleSpec], evaluator: ExpressionEvaluator):
        self.evaluator = evaluator
        self._specs: Dict[str, RuleSpec] = dict(rules)
        self._compiled: Dict[str, CompiledRule] = {
            type_name: _compile_rule(type_name, spec, evaluator)
            for type_name, spec in self._specs.items()
        }
        disabled = [name for name, rule in self._compiled.items() if rule.disabled]
        logger.debug("Loaded %s pricing rules (%s disabled)", len(self._compiled), len(disabled))

    def get(self, type_name: str) -> Optional[CompiledRule]:
        """Get the compiled rule for a node type, or None"""
        return self._compiled.get(type_name)

    def get_spec(self, type_name: str) -> Optional[RuleSpec]:
        """Get the rule spec (no evaluator handle) for a node type, or None"""
        return self._specs.get(type_name)

    def dependency_names(self, type_name: str) -> List[str]:
        """Widget then input dependency names of a node type, deduplicated; [] for unknown types."""
        spec = self._specs.get(type_name)
        if spec is None:
            return []
        return list(spec.depends_on.names())

    def type_names(self) -> Iterable[str]:
        return self._specs.keys()

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._specs

    def __len__(self) -> int:
        return len(self._specs)


def _parse_rule(entry: Mapping[str, Any]) -> RuleSpec:
    engine = RuleEngine(entry.get("engine", RuleEngine.PYTHON.value))
    expr = entry["expr"]
    if not isinstance(expr, str):
        raise TypeError("expr must be a string")
    deps = entry.get("depends_on") or {}
    depends_on = DependsOn(
        widgets=tuple(str(n) for n in deps.get("widgets", ())),
        inputs=tuple(str(n) for n in deps.get("inputs", ())),
    )
    defaults: Optional[FormatOptions] = None
    if entry.get("result_defaults") is not None:
        defaults = parse_format_options(entry["result_defaults"])
        if defaults is None:
            raise TypeError("result_defaults must be a mapping")
    return RuleSpec(engine=engine, expr=expr, depends_on=depends_on, result_defaults=defaults)


def load_rule_bundle(bundle: Mapping[str, Any]) -> Dict[str, RuleSpec]:
    """
    Parse a pricing bundle ({type_name: {"engine", "depends_on", "result_defaults", "expr"}}).

    Malformed entries are logged and skipped; the rest load normally.
    """
    rules: Dict[str, RuleSpec] = {}
    for type_name, entry in bundle.items():
        try:
            rules[type_name] = _parse_rule(entry)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Skipping malformed pricing rule %s: %s", type_name, e)
    return rules
