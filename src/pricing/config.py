"""
Pricing engine configuration.

PricingConfig collects the formatting constants and switches that the
original composable kept as module-level literals (default suffix, list
separator, credit precision and rate, debug logging of resolved evaluations).
"""

from dataclasses import dataclass

from .models import FormatOptions


@dataclass
class PricingConfig:
    """
    Configuration for the node pricing engine.

    Attributes:
        default_suffix: Suffix appended after "credits" when a result sets none.
        default_separator: Separator between amounts of a list_usd result.
        credit_decimals: Fraction digits of a formatted credit amount.
        credits_per_usd: Conversion rate from USD to credits.
        debug: Log every accepted evaluation (signature, raw result, label) at INFO.
    """

    default_suffix: str = "/Run"
    default_separator: str = "/"
    credit_decimals: int = 0
    credits_per_usd: float = 211.0
    debug: bool = False

    def __post_init__(self):
        if self.credit_decimals < 0:
            raise ValueError("credit_decimals must be >= 0")
        if self.credits_per_usd <= 0:
            raise ValueError("credits_per_usd must be positive")

    def base_format(self) -> FormatOptions:
        """Engine-wide defaults underneath rule and result level options."""
        return FormatOptions(
            suffix=self.default_suffix,
            approximate=False,
            separator=self.default_separator,
        )


DEFAULT_CONFIG = PricingConfig()
