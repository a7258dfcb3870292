"""
表达式求值器：引擎只依赖 compile / evaluate 两个操作，具体语法可替换。

PythonExpressionEvaluator 用内置 compile + eval 实现：表达式只能看到 w（控件）、i（输入）
以及一小组白名单函数；求值结果若是 awaitable 则继续 await。
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models import CompileError, EvalContext, RuleEngine


class ExpressionEvaluator(ABC):
    """
    Abstract expression evaluator

    compile() runs once per rule at registry load; evaluate() runs per signature.
    """

    engine: RuleEngine

    @abstractmethod
    def compile(self, source: str) -> Any:
        """
        Compile an expression source

        Args:
            source: Expression text from a RuleSpec

        Returns:
            Opaque handle passed back to evaluate()

        Raises:
            CompileError: if the source is malformed
        """
        pass

    @abstractmethod
    async def evaluate(self, handle: Any, context: EvalContext) -> Any:
        """
        Evaluate a compiled expression against one entity context

        Args:
            handle: Value returned by compile()
            context: Normalized dependency view of the entity

        Returns:
            Raw result, normally a {"type": ...} mapping
        """
        pass


def contains(haystack: Any, needle: Any) -> bool:
    """Substring / membership test that treats None as empty."""
    if haystack is None or needle is None:
        return False
    return needle in haystack


SAFE_BUILTINS: Dict[str, Any] = {
    "min": min,
    "max": max,
    "abs": abs,
    "round": round,
    "len": len,
    "sum": sum,
    "any": any,
    "all": all,
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "dict": dict,
    "list": list,
    "tuple": tuple,
    "sorted": sorted,
}


class PythonExpressionEvaluator(ExpressionEvaluator):
    """Evaluates single Python expressions with a restricted globals table."""

    engine = RuleEngine.PYTHON

    def __init__(self, extra_globals: Dict[str, Any] | None = None):
        self._globals: Dict[str, Any] = {"__builtins__": SAFE_BUILTINS, "contains": contains}
        if extra_globals:
            self._globals.update(extra_globals)

    def compile(self, source: str) -> Any:
        try:
            return compile(source.strip(), "<pricing-rule>", "eval")
        except (SyntaxError, ValueError, TypeError) as e:
            raise CompileError(f"cannot compile expression: {e}", source=source) from e

    async def evaluate(self, handle: Any, context: EvalContext) -> Any:
        # w and i live in globals so comprehensions and lambdas can see them
        scope = dict(self._globals)
        scope.update(context.as_namespace())
        result = eval(handle, scope)
        if inspect.isawaitable(result):
            result = await result
        return result
