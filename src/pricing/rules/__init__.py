from .local_rules import LOCAL_PRICING_RULES, expr_usd

__all__ = [
    'LOCAL_PRICING_RULES',
    'expr_usd',
]
