"""
NodeGraph 单元测试：连线维护输入槽连接状态，删除节点时释放定价侧表。
"""
import pytest

from conftest import settle
from pricing.models import DependsOn, InputSlot, NodeEntity, RuleEngine, RuleSpec, Widget
from pricing.services import NodeGraph, NodePricingService


@pytest.fixture
def graph():
    g = NodeGraph()
    g.add_node(NodeEntity(id="loader", type_name="LoadImage", price_bearing=False))
    g.add_node(
        NodeEntity(
            id="flux",
            type_name="Flux",
            widgets=[Widget("width", 1024)],
            inputs=[InputSlot("images"), InputSlot("mask")],
        )
    )
    return g


class TestNodeGraph:
    """NodeGraph 测试。"""

    def test_add_duplicate(self, graph):
        with pytest.raises(ValueError):
            graph.add_node(NodeEntity(id="flux", type_name="Flux"))

    def test_connect_and_disconnect(self, graph):
        link = graph.connect("loader", "flux", "images")
        flux = graph.get_node("flux")
        assert flux.input("images").link == link
        assert graph.upstream("flux") == {"images": "loader"}

        assert graph.disconnect("flux", "images") is True
        assert flux.input("images").link is None
        assert graph.upstream("flux") == {}
        assert graph.disconnect("flux", "images") is False

    def test_reconnect_replaces_link(self, graph):
        graph.add_node(NodeEntity(id="other", type_name="LoadImage"))
        first = graph.connect("loader", "flux", "images")
        second = graph.connect("other", "flux", "images")
        assert first != second
        assert graph.get_node("flux").input("images").link == second
        assert graph.upstream("flux") == {"images": "other"}

    def test_same_source_feeds_two_slots(self, graph):
        images = graph.connect("loader", "flux", "images")
        mask = graph.connect("loader", "flux", "mask")
        assert images != mask
        assert graph.G.number_of_edges("loader", "flux") == 2
        assert graph.upstream("flux") == {"images": "loader", "mask": "loader"}

        assert graph.disconnect("flux", "images") is True
        assert graph.G.number_of_edges("loader", "flux") == 1
        assert graph.get_node("flux").input("mask").link == mask

    def test_connect_unknown(self, graph):
        with pytest.raises(KeyError):
            graph.connect("missing", "flux", "images")
        with pytest.raises(KeyError):
            graph.connect("loader", "flux", "nope")

    def test_remove_source_disconnects_targets(self, graph):
        graph.connect("loader", "flux", "images")
        removed = []
        graph.on_node_removed(removed.append)
        assert graph.remove_node("loader") is True
        assert graph.get_node("flux").input("images").link is None
        assert removed == ["loader"]
        assert graph.remove_node("loader") is False
        assert [n.id for n in graph.nodes()] == ["flux"]

    @pytest.mark.asyncio
    async def test_attach_pricing_forgets_removed_nodes(self, graph):
        rule = RuleSpec(
            RuleEngine.PYTHON,
            '{"type": "usd", "usd": 0.06 if i.images.connected else 0.03}',
            depends_on=DependsOn(inputs=("images",)),
        )
        service = NodePricingService.from_rules({"Flux": rule})
        graph.attach_pricing(service)
        flux = graph.get_node("flux")

        service.get_display_label(flux)
        await service.wait_idle()
        assert service.get_display_label(flux) == "6 credits/Run"

        graph.connect("loader", "flux", "images")
        assert service.get_display_label(flux) == "6 credits/Run"
        await service.wait_idle()
        assert service.get_display_label(flux) == "13 credits/Run"

        graph.remove_node("flux")
        await settle()
        assert service.scheduler.tracked_entities() == []
