"""
操作策略模組

定義由目前族群產生子代的流程：依機率決定是否交配，
否則直接複製選中的個體，之後對每個子代依機率套用變異。
"""

from typing import List
import logging

from .base import EvolutionStrategy

logger = logging.getLogger(__name__)


class OperationStrategy(EvolutionStrategy):
    """操作策略基類"""

    def breed(self, engine) -> List:
        """
        產生子代

        Args:
            engine: 演化引擎

        Returns:
            子代列表 (尚未評估)
        """
        raise NotImplementedError("子類必須實現 breed 方法")


class SerialOperationStrategy(OperationStrategy):
    """
    串聯操作策略

    每次嘗試依序進行：交配 (或複製) → 對每個子代變異 → 加入新族群，
    直到新族群達到族群大小，多出的子代會被截斷。
    """

    def __init__(self, crossover: str = 'crossover', mutation: str = 'mutation'):
        """
        初始化串聯操作策略

        Args:
            crossover: 交配運算子名稱
            mutation: 變異運算子名稱
        """
        super().__init__()
        self.name = "serial_operation"
        self.crossover = crossover
        self.mutation = mutation

    def breed(self, engine) -> List:
        target = engine.population_size
        offspring: List = []
        crossover_count = reproduction_count = mutation_count = 0

        while len(offspring) < target:
            children: List = []

            if engine.can_apply(self.crossover):
                mom = engine.select()
                dad = engine.select()
                children = engine.apply(self.crossover, mom, dad)
                crossover_count += 1

            # 未實作交配的基因組不會產生子代，改為複製
            if not children:
                children = [engine.clone(engine.select())]
                reproduction_count += 1

            for child in children:
                if engine.can_apply(self.mutation):
                    # 就地變異的運算子回傳同一個體，未註冊時回傳空列表
                    mutated = engine.apply(self.mutation, child)
                    offspring.extend(mutated or [child])
                    mutation_count += 1
                else:
                    offspring.append(child)

        if len(offspring) > target:
            logger.debug(f"   子代超出族群大小 {len(offspring) - target} 個，已截斷")

        logger.debug(f"   串聯操作: 交配={crossover_count}, 複製={reproduction_count}, 變異={mutation_count}")
        return offspring[:target]
