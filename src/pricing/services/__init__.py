# Value normalization, evaluation context and signatures
from .normalizer import as_finite_number, normalize_value
from .context import build_context, build_signature, safe_value_for_signature

# Expression evaluator capability and compiled rule registry
from .evaluator import ExpressionEvaluator, PythonExpressionEvaluator
from .registry import RuleRegistry, load_rule_bundle

# Result formatting
from .credits import format_credits_from_usd
from .formatter import ResultFormatter, format_pricing_result, parse_format_options, parse_pricing_result

# Async evaluation scheduler, revision channel and public query surface
from .revision import Revision
from .scheduler import EvaluationScheduler
from .pricing_service import NodePricingService

# NetworkX-based host node graph
from .node_graph import NodeGraph

__all__ = [
    'as_finite_number',
    'normalize_value',
    'build_context',
    'build_signature',
    'safe_value_for_signature',
    'ExpressionEvaluator',
    'PythonExpressionEvaluator',
    'RuleRegistry',
    'load_rule_bundle',
    'format_credits_from_usd',
    'ResultFormatter',
    'format_pricing_result',
    'parse_format_options',
    'parse_pricing_result',
    'Revision',
    'EvaluationScheduler',
    'NodePricingService',
    'NodeGraph',
]
