"""
Node pricing service: the public query surface of the pricing engine.

get_display_label() is safe to call from a redraw path: it never blocks and
never raises. When a background evaluation settles, ``revision`` bumps and
observers should call get_display_label() again.
"""

import logging
from typing import Any, List, Mapping, Optional

from ..config import DEFAULT_CONFIG, PricingConfig
from ..models import CompiledRule, RuleSpec
from .evaluator import ExpressionEvaluator, PythonExpressionEvaluator
from .formatter import ResultFormatter
from .registry import RuleRegistry
from .revision import Revision
from .scheduler import EvaluationScheduler

logger = logging.getLogger(__name__)


class NodePricingService:
    """Price badges for graph nodes, backed by a RuleRegistry and an EvaluationScheduler."""

    def __init__(
        self,
        registry: RuleRegistry,
        scheduler: Optional[EvaluationScheduler] = None,
        config: PricingConfig = DEFAULT_CONFIG,
    ):
        self.registry = registry
        self.config = config
        self.scheduler = scheduler or EvaluationScheduler(
            registry.evaluator,
            formatter=ResultFormatter(config),
            config=config,
        )

    @classmethod
    def from_rules(
        cls,
        rules: Mapping[str, RuleSpec],
        evaluator: Optional[ExpressionEvaluator] = None,
        config: PricingConfig = DEFAULT_CONFIG,
    ) -> 'NodePricingService':
        """Compile rules with the given evaluator (Python expressions by default) and build a service."""
        registry = RuleRegistry(rules, evaluator or PythonExpressionEvaluator())
        return cls(registry, config=config)

    @property
    def revision(self) -> Revision:
        return self.scheduler.revision

    def _rule_for(self, entity: Any) -> Optional[CompiledRule]:
        if not getattr(entity, "price_bearing", False):
            return None
        rule = self.registry.get(entity.type_name)
        if rule is None or rule.disabled:
            return None
        return rule

    def get_display_label(self, entity: Any) -> str:
        """
        Label for the entity's current widget/input state.

        Returns the cached label when the state is unchanged; otherwise schedules
        an evaluation and returns the last known label, or "" when there is none.
        """
        try:
            rule = self._rule_for(entity)
            if rule is None:
                return ""
            return self.scheduler.query(entity, rule)
        except Exception:
            logger.exception("Pricing query failed for %r", getattr(entity, "id", entity))
            return ""

    def get_rule_config(self, entity: Any) -> Optional[RuleSpec]:
        """Rule of the entity's type without the evaluator handle (debug / tooling)."""
        type_name = getattr(entity, "type_name", None)
        if type_name is None:
            return None
        return self.registry.get_spec(type_name)

    def get_dependency_names(self, type_name: str) -> List[str]:
        """Widget and input names whose changes can change the price of a node type."""
        return self.registry.dependency_names(type_name)

    def forget(self, entity_id: str) -> None:
        """Destruction hook: the host calls this when it removes a node."""
        self.scheduler.forget(entity_id)

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()
