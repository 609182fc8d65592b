"""
替換策略模組

決定子代如何取代目前的族群：完全世代替換或菁英保留。
"""

from typing import List, Sequence
import logging

from .base import EvolutionStrategy

logger = logging.getLogger(__name__)


class ReplacementPolicy(EvolutionStrategy):
    """
    替換策略基類
    """

    def __init__(self):
        super().__init__()
        self.name = "replacement_policy"

    def replace(self, population: Sequence, offspring: Sequence) -> List:
        """
        執行世代替換

        Args:
            population: 目前族群 (已依排序模式排序，索引 0 最優)
            offspring: 子代個體

        Returns:
            新的族群
        """
        raise NotImplementedError("子類必須實現 replace 方法")


class GenerationalReplacement(ReplacementPolicy):
    """
    世代替換策略

    完全用子代替換父代。
    """

    def __init__(self):
        super().__init__()
        self.name = "generational"

    def replace(self, population: Sequence, offspring: Sequence) -> List:
        logger.debug(f"   世代替換: {len(population)} → {len(offspring)}")
        return list(offspring)


class ElitistReplacement(ReplacementPolicy):
    """
    菁英保留策略

    在子代之後原樣附加目前族群的前 elite_size 個個體，
    新族群大小因此為子代數 + elite_size。
    """

    def __init__(self, elite_size: int = 1):
        """
        初始化菁英保留策略

        Args:
            elite_size: 保留的菁英個體數量
        """
        super().__init__()
        if not isinstance(elite_size, int) or elite_size < 0:
            raise ValueError(f"elite_size must be a non-negative integer, got {elite_size!r}")
        self.name = "elitist"
        self.elite_size = elite_size

    def replace(self, population: Sequence, offspring: Sequence) -> List:
        new_population = list(offspring)

        if self.elite_size == 0:
            return new_population

        if self.elite_size > len(population):
            logger.warning(f"菁英數量 {self.elite_size} 超過族群大小 {len(population)}，不保留菁英")
            return new_population

        elites = list(population[:self.elite_size])
        new_population.extend(elites)

        logger.debug(f"   菁英保留: {len(offspring)} 子代 + {len(elites)} 菁英 = {len(new_population)}")
        return new_population
