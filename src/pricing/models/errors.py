"""
定价子系统的异常类型。

- CompileError：表达式无法编译，规则在注册时被永久禁用，不会传给调用方。
- EvaluationError：求值器运行时失败，按签名缓存为空标签。
格式化失败与规则缺失都不是异常：前者返回空串，后者返回 None / 空串。
"""

from typing import Optional


class PricingError(Exception):
    """Base class for pricing engine errors."""


class CompileError(PricingError):
    """Raised by an evaluator when a rule expression cannot be compiled."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class EvaluationError(PricingError):
    """Wraps an evaluator failure for one entity signature."""

    def __init__(self, message: str, signature: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.signature = signature
        self.cause = cause
