"""规则表达式语言枚举：当前内置求值器仅支持 PYTHON（eval）。"""

from enum import Enum


class RuleEngine(Enum):
    PYTHON = "python"
    JSONATA = "jsonata"
