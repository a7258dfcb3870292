"""
宿主图中的节点实体：有序控件列表、输入槽列表、稳定的类型名。

定价引擎只通过 widget()/input() 读取状态，不持有实体本身。
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(slots=True)
class Widget:
    name: str
    value: Any = None


@dataclass(slots=True)
class InputSlot:
    name: str
    link: Any = None  # link id when connected

    @property
    def connected(self) -> bool:
        return self.link is not None


@dataclass(slots=True)
class NodeEntity:
    """图编辑器里的一个节点实例。price_bearing 为 False 的节点不显示价格徽标。"""
    id: str
    type_name: str
    widgets: List[Widget] = field(default_factory=list)
    inputs: List[InputSlot] = field(default_factory=list)
    price_bearing: bool = True

    def widget(self, name: str) -> Optional[Widget]:
        """Get the first widget with the given name"""
        for w in self.widgets:
            if w.name == name:
                return w
        return None

    def input(self, name: str) -> Optional[InputSlot]:
        """Get the first input slot with the given name"""
        for slot in self.inputs:
            if slot.name == name:
                return slot
        return None

    def set_widget_value(self, name: str, value: Any) -> None:
        """Set a widget value, adding the widget if the node does not have it yet"""
        w = self.widget(name)
        if w is None:
            self.widgets.append(Widget(name, value))
        else:
            w.value = value
