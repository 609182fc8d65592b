"""
演化策略模組

包含所有演化策略的實現：
- 選擇策略
- 操作策略
- 替換策略
"""

from .base import EvolutionStrategy
from .selection import *
from .operation import *
from .replacement import *

__all__ = [
    'EvolutionStrategy',
    # 選擇策略
    'SelectionStrategy', 'UniformStrategy', 'RouletteStrategy', 'TournamentStrategy', 'SelectorRegistry',
    # 操作策略
    'OperationStrategy', 'SerialOperationStrategy',
    # 替換策略
    'ReplacementPolicy', 'GenerationalReplacement', 'ElitistReplacement',
]
