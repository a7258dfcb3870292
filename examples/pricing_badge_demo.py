"""
Pricing Badge Demo

Flow: build a small node graph -> query badges (first pass is empty, evaluations run in
the background) -> wait -> query again -> change widgets / connect inputs -> observe the
stale label being served until the new evaluation lands -> remove a node.

Uses the built-in LOCAL_PRICING_RULES table and the Python expression evaluator.
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add src to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from pricing.config import PricingConfig
from pricing.models import InputSlot, NodeEntity, Widget
from pricing.rules import LOCAL_PRICING_RULES
from pricing.services import NodeGraph, NodePricingService

from demo_utils import log_badges, print_header, setup_logging

logger = logging.getLogger("pricing_badge_demo")


# ============================================================================
# Graph Construction
# ============================================================================

def build_node_graph() -> NodeGraph:
    """
    Build a node graph with a few priced API nodes.

    Graph structure:
        [LoadImage] --image--> [Flux2ProImageNode (images)]
        [ByteDanceTextToVideoNode]   [GeminiNode]   [KSampler (no badge)]
    """
    graph = NodeGraph()
    graph.add_node(NodeEntity(id="load_1", type_name="LoadImage", price_bearing=False))
    graph.add_node(NodeEntity(
        id="flux_1",
        type_name="Flux2ProImageNode",
        widgets=[Widget("width", 1024), Widget("height", 1024)],
        inputs=[InputSlot("images")],
    ))
    graph.add_node(NodeEntity(
        id="seedance_1",
        type_name="ByteDanceTextToVideoNode",
        widgets=[Widget("model", "seedance-1-0-pro"), Widget("duration", 5), Widget("resolution", "720p")],
    ))
    graph.add_node(NodeEntity(
        id="gemini_1",
        type_name="GeminiNode",
        widgets=[Widget("model", "gemini-2.5-pro"), Widget("seed", 7)],
    ))
    graph.add_node(NodeEntity(id="ksampler_1", type_name="KSampler", widgets=[Widget("steps", 20)]))
    return graph


# ============================================================================
# Main Entry Point
# ============================================================================

async def main():
    setup_logging()
    service = NodePricingService.from_rules(LOCAL_PRICING_RULES, config=PricingConfig(debug=True))
    graph = build_node_graph()
    graph.attach_pricing(service)
    service.revision.subscribe(lambda rev: logger.info("  revision -> %s", rev))

    print_header("Step 1: First pass (cache empty, evaluations scheduled)")
    log_badges(service, graph.nodes())
    await service.wait_idle()

    print_header("Step 2: After background evaluation")
    log_badges(service, graph.nodes())

    print_header("Step 3: Change widgets / connect input (stale label until re-evaluated)")
    graph.get_node("seedance_1").set_widget_value("resolution", "1080p")
    graph.get_node("gemini_1").set_widget_value("seed", 8)  # not a dependency: cache hit
    graph.connect("load_1", "flux_1", "images")
    log_badges(service, graph.nodes())
    await service.wait_idle()
    log_badges(service, graph.nodes())

    print_header("Step 4: Remove a node (pricing side state released)")
    graph.remove_node("flux_1")
    logger.info("Tracked entities: %s", service.scheduler.tracked_entities())

    print_header("Demo Completed!")


if __name__ == "__main__":
    asyncio.run(main())
