"""
演化結果類

封裝演化過程的結果，包括最佳個體、最終族群與每世代統計。
"""

from typing import Dict, List, Any, Optional, Tuple
from dataclasses import dataclass

import pandas as pd

from .statistics import GenerationStatistics, statistics_frame


@dataclass
class EvolutionResult:
    """
    演化結果封裝類
    """

    best_individual: Any
    final_population: Tuple[Any, ...]
    statistics: Tuple[GenerationStatistics, ...]
    generations_completed: int
    ordering: str = 'desc'
    execution_time: Optional[float] = None  # 秒

    def _best_of(self, stats: GenerationStatistics) -> float:
        return stats.min if self.ordering == 'asc' else stats.max

    @property
    def best_fitness(self) -> float:
        """最佳適應度值"""
        if self.best_individual is None:
            return 0.0
        return self.best_individual.fitness

    @property
    def convergence_generation(self) -> Optional[int]:
        """收斂世代 (最終最佳適應度首次出現的世代)"""
        if not self.statistics:
            return None

        best_fitness = self.best_fitness
        for stats in self.statistics:
            if abs(self._best_of(stats) - best_fitness) < 1e-10:
                return stats.generation

        return None

    @property
    def improvement_rate(self) -> float:
        """最終最佳適應度相對於第 0 代最佳適應度的改進率"""
        if len(self.statistics) < 2:
            return 0.0

        initial_fitness = self._best_of(self.statistics[0])
        final_fitness = self._best_of(self.statistics[-1])

        if initial_fitness == 0:
            return float('inf') if final_fitness != 0 else 0.0

        change = final_fitness - initial_fitness
        if self.ordering == 'asc':
            change = -change
        return change / abs(initial_fitness)

    def to_frame(self) -> pd.DataFrame:
        """每世代統計的 DataFrame (以世代為索引)"""
        return statistics_frame(self.statistics)

    def get_summary(self) -> Dict[str, Any]:
        """獲取結果摘要"""
        return {
            'generations_completed': self.generations_completed,
            'population_size': len(self.final_population),
            'best_fitness': self.best_fitness,
            'ordering': self.ordering,
            'execution_time': self.execution_time,
            'convergence_generation': self.convergence_generation,
            'improvement_rate': self.improvement_rate,
        }

    def to_dict(self) -> Dict[str, Any]:
        """轉換為字典格式 (用於 JSON 序列化)"""
        history: List[Dict[str, Any]] = [stats.as_dict() for stats in self.statistics]
        return {
            'summary': self.get_summary(),
            'statistics': history,
        }
