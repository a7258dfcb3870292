from .rule_engine import RuleEngine
from .errors import PricingError, CompileError, EvaluationError
from .value import NormalizedValue, EMPTY_VALUE, InputState, DependencyView, EvalContext
from .result import (
    FormatOptions,
    TextResult,
    UsdResult,
    RangeUsdResult,
    ListUsdResult,
    PricingResult,
)
from .rule import DependsOn, RuleSpec, CompiledRule
from .cache_entry import CacheEntry, InFlightRecord
from .entity import Widget, InputSlot, NodeEntity

__all__ = [
    'RuleEngine',
    'PricingError',
    'CompileError',
    'EvaluationError',
    'NormalizedValue',
    'EMPTY_VALUE',
    'InputState',
    'DependencyView',
    'EvalContext',
    'FormatOptions',
    'TextResult',
    'UsdResult',
    'RangeUsdResult',
    'ListUsdResult',
    'PricingResult',
    'DependsOn',
    'RuleSpec',
    'CompiledRule',
    'CacheEntry',
    'InFlightRecord',
    'Widget',
    'InputSlot',
    'NodeEntity',
]
