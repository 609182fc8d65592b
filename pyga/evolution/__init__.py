"""
演化計算框架

將演化過程中的各個部分 (選擇、子代產生、替換、終止、事件處理)
抽象成可插拔的組件，由 EvolutionEngine 統一協調。
"""

from .engine import EvolutionEngine, OperatorBinding
from .genome import Genome, OperatorRegistry
from .statistics import GenerationStatistics, StatisticsRecorder
from .result import EvolutionResult
from .early_stopping import EarlyStopping, FitnessThreshold

__all__ = [
    'EvolutionEngine', 'OperatorBinding',
    'Genome', 'OperatorRegistry',
    'GenerationStatistics', 'StatisticsRecorder',
    'EvolutionResult',
    'EarlyStopping', 'FitnessThreshold',
]
