"""
Pytest 配置与公共 fixture。

运行测试前将 src 加入 Python 路径；提供可手动控制完成时机的求值器，用于验证乱序完成、丢弃过期结果等行为。
"""
import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

# 将项目 src 加入路径，便于 import pricing
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from pricing.models import (
    CompileError,
    DependsOn,
    EvalContext,
    InputSlot,
    NodeEntity,
    RuleEngine,
    RuleSpec,
    Widget,
)
from pricing.services import ExpressionEvaluator, NodePricingService, RuleRegistry


@dataclass
class PendingCall:
    """一次 evaluate 调用：handle、上下文，以及由测试决定何时完成的 future。"""
    handle: Any
    context: EvalContext
    future: asyncio.Future = field(repr=False)

    def resolve(self, value: Any) -> None:
        self.future.set_result(value)

    def reject(self, exc: BaseException) -> None:
        self.future.set_exception(exc)


class ControlledEvaluator(ExpressionEvaluator):
    """
    测试用求值器：compile 原样返回源码（含 "syntax error" 时抛 CompileError）。

    auto 为 None 时每次 evaluate 挂起，直到测试调用 calls[n].resolve()/reject()；
    否则立即返回 auto(handle, context) 的结果（或其抛出的异常）。
    """

    engine = RuleEngine.PYTHON

    def __init__(self, auto: Optional[Callable[[Any, EvalContext], Any]] = None):
        self.auto = auto
        self.calls: List[PendingCall] = []
        self.compiled: List[str] = []

    def compile(self, source: str) -> Any:
        self.compiled.append(source)
        if "syntax error" in source:
            raise CompileError("syntax error", source=source)
        return source

    async def evaluate(self, handle: Any, context: EvalContext) -> Any:
        call = PendingCall(handle, context, asyncio.get_running_loop().create_future())
        self.calls.append(call)
        if self.auto is not None:
            return self.auto(handle, context)
        return await call.future


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run until they block on a pending future or finish."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_node(node_id: str = "node_1", type_name: str = "PricedNode", **widgets: Any) -> NodeEntity:
    return NodeEntity(
        id=node_id,
        type_name=type_name,
        widgets=[Widget(name, value) for name, value in widgets.items()],
        inputs=[InputSlot("image")],
    )


@pytest.fixture
def model_rule():
    """依赖 model 控件与 image 输入的规则。"""
    return RuleSpec(
        engine=RuleEngine.PYTHON,
        expr="model price",
        depends_on=DependsOn(widgets=("model",), inputs=("image",)),
    )


@pytest.fixture
def controlled_evaluator():
    return ControlledEvaluator()


@pytest.fixture
def controlled_service(model_rule, controlled_evaluator):
    """PricedNode 规则 + 手动控制的求值器。"""
    registry = RuleRegistry({"PricedNode": model_rule}, controlled_evaluator)
    return NodePricingService(registry)


@pytest.fixture
def node():
    return make_node(model="model-a")
