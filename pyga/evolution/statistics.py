"""
世代統計

記錄每個世代的適應度總和、平均、最小與最大值，並同步寫入
DEAP Logbook 以便輸出報表。
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Sequence, Tuple
import logging

import numpy as np
import pandas as pd
from deap import tools

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationStatistics:
    """單一世代的適應度統計 (記錄後不可變)"""

    generation: int
    sum: float
    avg: float
    min: float
    max: float
    size: int

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def statistics_frame(entries: Sequence[GenerationStatistics]) -> pd.DataFrame:
    """將統計項目轉換為以世代為索引的 DataFrame"""
    frame = pd.DataFrame([entry.as_dict() for entry in entries],
                         columns=['generation', 'sum', 'avg', 'min', 'max', 'size'])
    return frame.set_index('generation')


class StatisticsRecorder:
    """
    世代統計記錄器

    統計依世代編號密集儲存 (從 0 開始)。
    """

    FIELDS = ['sum', 'avg', 'min', 'max']

    def __init__(self):
        self._entries: List[GenerationStatistics] = []
        self.logbook = tools.Logbook()
        self.logbook.header = ['gen', 'nevals'] + self.FIELDS

    @staticmethod
    def summarize(fitnesses: Sequence[float]) -> Tuple[float, float]:
        """
        計算適應度總和與平均

        總和以遞增排序後的值計算，結果與評估順序無關。
        """
        values = np.sort(np.asarray(fitnesses, dtype=float))
        total = float(np.sum(values))
        return total, total / len(values)

    def record(self, generation: int, population: Sequence, ordering: str) -> GenerationStatistics:
        """
        記錄世代統計

        Args:
            generation: 世代編號
            population: 已依 ordering 排序的族群
            ordering: 'asc' 或 'desc'

        Returns:
            新的統計項目
        """
        if not population:
            raise ValueError("cannot record statistics for an empty population")
        if generation < 0 or generation > len(self._entries):
            raise ValueError(
                f"statistics must be recorded densely: expected generation <= {len(self._entries)}, got {generation}"
            )

        total, average = self.summarize([ind.fitness for ind in population])

        # 排序後的兩端即為極值
        if ordering == 'asc':
            lowest, highest = population[0].fitness, population[-1].fitness
        else:
            lowest, highest = population[-1].fitness, population[0].fitness

        entry = GenerationStatistics(
            generation=generation,
            sum=total,
            avg=average,
            min=float(lowest),
            max=float(highest),
            size=len(population),
        )

        if generation == len(self._entries):
            self._entries.append(entry)
            self.logbook.record(gen=generation, nevals=len(population),
                                sum=total, avg=average, min=entry.min, max=entry.max)
        else:
            logger.debug(f"重新評估第 {generation} 世代，覆寫統計")
            self._entries[generation] = entry
            self.logbook[generation] = {
                'gen': generation, 'nevals': len(population),
                'sum': total, 'avg': average, 'min': entry.min, 'max': entry.max,
            }

        return entry

    @property
    def entries(self) -> Tuple[GenerationStatistics, ...]:
        return tuple(self._entries)

    def latest(self) -> GenerationStatistics:
        return self._entries[-1]

    def stream(self) -> str:
        """回傳上次呼叫後新增的 Logbook 文字 (首次包含表頭)"""
        return self.logbook.stream

    def to_frame(self) -> pd.DataFrame:
        return statistics_frame(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, generation: int) -> GenerationStatistics:
        return self._entries[generation]
