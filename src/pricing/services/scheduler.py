"""
求值调度器与缓存：每个实体一台小状态机，实体之间相互独立。

- query：同步计算当前签名；命中缓存直接返回标签，否则安排后台求值并返回上一次的标签（无闪烁）。
- schedule：同签名的在途求值合并；新签名替换在途记录，旧的求值继续跑完但结果会被丢弃。
- 完成时：只有签名仍是实体的「期望签名」才写缓存；失败缓存为空标签，避免同签名反复重试。
  无论接受、失败还是丢弃，revision 都恰好 +1。

所有状态按实体 id 存放在本对象的侧表里，不持有实体本身；宿主删除节点时必须调用 forget。
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from ..config import DEFAULT_CONFIG, PricingConfig
from ..models import CacheEntry, CompiledRule, EvalContext, EvaluationError, InFlightRecord
from .context import build_context, build_signature
from .evaluator import ExpressionEvaluator
from .formatter import ResultFormatter
from .revision import Revision

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _EntityState:
    cache: Optional[CacheEntry] = None
    desired: Optional[str] = None
    inflight: Optional[InFlightRecord] = None
    last_error: Optional[EvaluationError] = None


class EvaluationScheduler:
    """Per-entity memoizing scheduler for asynchronous rule evaluation."""

    def __init__(
        self,
        evaluator: ExpressionEvaluator,
        formatter: Optional[ResultFormatter] = None,
        revision: Optional[Revision] = None,
        config: PricingConfig = DEFAULT_CONFIG,
    ):
        self.evaluator = evaluator
        self.config = config
        self.formatter = formatter or ResultFormatter(config)
        self.revision = revision or Revision()
        self._states: Dict[str, _EntityState] = {}
        self._tasks: Set[asyncio.Task] = set()

    def _state(self, entity_id: str) -> _EntityState:
        state = self._states.get(entity_id)
        if state is None:
            state = _EntityState()
            self._states[entity_id] = state
        return state

    def query(self, entity: Any, rule: CompiledRule) -> str:
        """
        Return the label for the entity's current state without blocking.

        On a cache miss the evaluation is scheduled and the last known label
        (or "") is returned; the revision bumps once the evaluation settles.
        """
        context = build_context(entity, rule.depends_on)
        signature = build_signature(context, rule.depends_on)

        state = self._state(entity.id)
        state.desired = signature
        cached = state.cache
        if cached is not None and cached.signature == signature:
            return cached.label

        self.schedule(entity.id, rule, context, signature)
        return cached.label if cached is not None else ""

    def schedule(self, entity_id: str, rule: CompiledRule, context: EvalContext, signature: str) -> None:
        """Start an evaluation for signature unless one is already in flight for it."""
        state = self._state(entity_id)
        if state.inflight is not None and state.inflight.signature == signature:
            return
        if rule.disabled:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; evaluation for %s [%s] not started", entity_id, signature)
            return

        task = loop.create_task(self._evaluate(entity_id, rule, context, signature))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        # Replaces any previous record; a superseded task keeps running and is discarded on completion.
        state.inflight = InFlightRecord(signature=signature, task=task)

    async def _evaluate(self, entity_id: str, rule: CompiledRule, context: EvalContext, signature: str) -> None:
        try:
            raw = await self.evaluator.evaluate(rule.handle, context)
        except Exception as e:
            error = EvaluationError(str(e) or type(e).__name__, signature=signature, cause=e)
            self._on_complete(entity_id, rule, signature, error=error)
        else:
            self._on_complete(entity_id, rule, signature, raw=raw)
        finally:
            state = self._states.get(entity_id)
            if state is not None and state.inflight is not None and state.inflight.signature == signature:
                state.inflight = None
            self.revision.bump()

    def _on_complete(
        self,
        entity_id: str,
        rule: CompiledRule,
        signature: str,
        raw: Any = None,
        error: Optional[EvaluationError] = None,
    ) -> None:
        state = self._states.get(entity_id)
        if state is None or state.desired != signature:
            logger.debug("Discarding stale pricing result for %s [%s]", entity_id, signature)
            return

        if error is not None:
            logger.debug("Pricing evaluation failed for %s [%s]: %s", entity_id, signature, error)
            state.cache = CacheEntry(signature=signature, label="")
            state.last_error = error
            return

        try:
            label = self.formatter.format(raw, rule.spec.result_defaults)
        except Exception as e:
            logger.debug("Formatting failed for %s [%s]: %s", entity_id, signature, e)
            label = ""
        state.cache = CacheEntry(signature=signature, label=label)
        state.last_error = None
        if self.config.debug:
            logger.info("Pricing resolved %s [%s]: %r -> %r", entity_id, signature, raw, label)

    def forget(self, entity_id: str) -> None:
        """Drop all side state of a destroyed entity. Running evaluations for it are discarded."""
        self._states.pop(entity_id, None)

    async def wait_idle(self) -> None:
        """Wait until every evaluation task started so far (and any it triggers) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cached_label(self, entity_id: str) -> Optional[str]:
        state = self._states.get(entity_id)
        return state.cache.label if state is not None and state.cache is not None else None

    def cached_signature(self, entity_id: str) -> Optional[str]:
        state = self._states.get(entity_id)
        return state.cache.signature if state is not None and state.cache is not None else None

    def desired_signature(self, entity_id: str) -> Optional[str]:
        state = self._states.get(entity_id)
        return state.desired if state is not None else None

    def inflight_signature(self, entity_id: str) -> Optional[str]:
        state = self._states.get(entity_id)
        return state.inflight.signature if state is not None and state.inflight is not None else None

    def last_error(self, entity_id: str) -> Optional[EvaluationError]:
        state = self._states.get(entity_id)
        return state.last_error if state is not None else None

    def tracked_entities(self) -> List[str]:
        return list(self._states)
