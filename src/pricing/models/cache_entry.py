"""每个实体的缓存与在途记录。"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """最近一次被接受的结果：签名 + 标签。"""
    signature: str
    label: str


@dataclass(frozen=True, slots=True)
class InFlightRecord:
    """标记某个签名的求值正在进行；task 为对应的 asyncio.Task。"""
    signature: str
    task: Any = None
