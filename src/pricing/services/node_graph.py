"""
宿主节点图：基于 NetworkX 的内存图，节点为 NodeEntity，边为 输出 -> 输入槽 的连线。

- connect / disconnect 维护输入槽的 link，定价规则只读取「是否已连接」。
- remove_node 断开相关连线、删除节点并通知监听者；attach_pricing 把删除事件接到定价服务的 forget。
"""

import itertools
import logging
from typing import Callable, Dict, List, Optional

import networkx as nx

from ..models import NodeEntity

logger = logging.getLogger(__name__)

NodeRemovedCallback = Callable[[str], None]


class NodeGraph:
    """基于 NetworkX 的节点图：加节点、连线、删节点，并广播删除事件。"""

    def __init__(self):
        self.G = nx.MultiDiGraph()
        self._link_ids = itertools.count(1)
        self._removed_listeners: List[NodeRemovedCallback] = []

    def add_node(self, node: NodeEntity) -> NodeEntity:
        """Add a node entity; its id must be unique in the graph"""
        if node.id in self.G:
            raise ValueError(f"Node {node.id} already exists")
        self.G.add_node(node.id, entity=node)
        return node

    def get_node(self, node_id: str) -> Optional[NodeEntity]:
        """Get a node entity by ID"""
        if node_id in self.G.nodes:
            return self.G.nodes[node_id]["entity"]
        return None

    def nodes(self) -> List[NodeEntity]:
        return [data["entity"] for _, data in self.G.nodes(data=True)]

    def connect(self, source_id: str, target_id: str, slot_name: str) -> int:
        """连线：source 的输出接到 target 的 slot_name 输入槽；槽上已有连线时先断开。返回 link id。"""
        target = self.get_node(target_id)
        if source_id not in self.G or target is None:
            raise KeyError(f"Unknown node: {source_id if source_id not in self.G else target_id}")
        slot = target.input(slot_name)
        if slot is None:
            raise KeyError(f"Node {target_id} has no input {slot_name}")
        if slot.link is not None:
            self.disconnect(target_id, slot_name)

        link_id = next(self._link_ids)
        self.G.add_edge(source_id, target_id, key=link_id, slot=slot_name)
        slot.link = link_id
        return link_id

    def disconnect(self, target_id: str, slot_name: str) -> bool:
        """Disconnect the link feeding an input slot; returns False when it was not connected"""
        target = self.get_node(target_id)
        slot = target.input(slot_name) if target is not None else None
        if slot is None or slot.link is None:
            return False
        for u, v, key in list(self.G.in_edges(target_id, keys=True)):
            if key == slot.link:
                self.G.remove_edge(u, v, key=key)
        slot.link = None
        return True

    def remove_node(self, node_id: str) -> bool:
        """删除节点：先清空下游节点指向它的输入槽，再删节点并通知监听者。"""
        if node_id not in self.G:
            return False
        for _, target_id, data in list(self.G.out_edges(node_id, data=True)):
            if target_id != node_id:
                self.disconnect(target_id, data["slot"])
        self.G.remove_node(node_id)

        for callback in list(self._removed_listeners):
            try:
                callback(node_id)
            except Exception:
                logger.exception("Node removal listener failed for %s", node_id)
        return True

    def on_node_removed(self, callback: NodeRemovedCallback) -> None:
        self._removed_listeners.append(callback)

    def attach_pricing(self, service) -> None:
        """Release pricing side state whenever a node leaves the graph"""
        self.on_node_removed(service.forget)

    def upstream(self, node_id: str) -> Dict[str, str]:
        """slot name -> source node id for every connected input of a node"""
        return {data["slot"]: u for u, _, data in self.G.in_edges(node_id, data=True)}
