"""
pyga - a pluggable genetic algorithm framework
"""

from .exceptions import PygaError, ConfigurationError
from .evolution import (
    EvolutionEngine, Genome, OperatorRegistry, GenerationStatistics,
    EvolutionResult, EarlyStopping, FitnessThreshold,
)

__version__ = '0.1.0'

__all__ = [
    'PygaError', 'ConfigurationError',
    'EvolutionEngine', 'Genome', 'OperatorRegistry', 'GenerationStatistics',
    'EvolutionResult', 'EarlyStopping', 'FitnessThreshold',
]
