"""
Examples 公共工具：日志初始化、打印标题、等待并打印当前徽标。
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Demo 统一日志格式。"""
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def print_header(title: str, width: int = 60) -> None:
    """在日志中输出分节标题（等宽分隔线 + 标题）。"""
    logger.info("=" * width)
    logger.info(title)
    logger.info("=" * width)
    logger.info("")


def log_badges(service, nodes: Iterable) -> None:
    """逐个节点输出当前徽标（不等待后台求值）。"""
    for node in nodes:
        label = service.get_display_label(node)
        logger.info("  [%s] %s -> %r", node.id, node.type_name, label)
