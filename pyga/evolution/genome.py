"""
基因組介面與遺傳運算子註冊表

定義引擎對基因組的最小要求 (create / initialize / fitness)，
以及每個基因組類型各自持有的運算子註冊表。
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional
import logging

from deap import base

logger = logging.getLogger(__name__)


class OperatorRegistry(base.Toolbox):
    """
    遺傳運算子註冊表

    擴展 DEAP 的 Toolbox：沿用其 register (綁定預設參數) 與 clone，
    並額外記錄哪些名稱是遺傳運算子，以便引擎檢查機率表是否完整。
    """

    def __init__(self):
        self._operator_names: List[str] = []
        super().__init__()

    def register(self, alias: str, function: Callable, *args, **kargs):
        """
        註冊運算子

        Args:
            alias: 運算子名稱 (例如 'crossover', 'mutation')
            function: 運算子實作，接收基因組並回傳新基因組序列
            *args, **kargs: 預先綁定的參數
        """
        super().register(alias, function, *args, **kargs)
        # Toolbox.__init__ 會註冊 clone 與 map，它們不是遺傳運算子
        if alias in ('clone', 'map'):
            return
        if alias not in self._operator_names:
            self._operator_names.append(alias)
            logger.debug(f"已註冊運算子: {alias}")

    def unregister(self, alias: str):
        super().unregister(alias)
        if alias in self._operator_names:
            self._operator_names.remove(alias)

    def names(self) -> List[str]:
        """回傳已註冊的遺傳運算子名稱 (依註冊順序)"""
        return list(self._operator_names)

    def get(self, alias: str) -> Optional[Callable]:
        """取得運算子實作，未註冊時回傳 None"""
        if alias not in self._operator_names:
            return None
        return getattr(self, alias)

    def __contains__(self, alias: str) -> bool:
        return alias in self._operator_names

    def __len__(self) -> int:
        return len(self._operator_names)


class Genome(ABC):
    """
    基因組基類

    子類必須實作 create、initialize 與 build_operators。
    內部表示對引擎而言是不透明的，引擎只讀寫 fitness。
    """

    def __init__(self):
        self._fitness: float = 0.0

    @property
    def fitness(self) -> float:
        """適應度，只由引擎評估時設置"""
        return self._fitness

    @fitness.setter
    def fitness(self, value: float):
        self._fitness = value

    @classmethod
    @abstractmethod
    def create(cls, genes: Optional[Any] = None) -> 'Genome':
        """
        建立個體

        Args:
            genes: 明確的遺傳物質 (交配產生子代時使用)；
                   省略時建立空個體，之後需呼叫 initialize()
        """

    @abstractmethod
    def initialize(self):
        """隨機初始化內部表示 (只對新建且無遺傳物質的個體呼叫)"""

    @classmethod
    @abstractmethod
    def build_operators(cls) -> OperatorRegistry:
        """建立並回傳此基因組類型的運算子註冊表"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(fitness={self._fitness})"


def is_genome_type(candidate: Any) -> bool:
    """檢查 candidate 是否為可用的基因組類型 (Genome 的具體子類)"""
    return (
        isinstance(candidate, type)
        and issubclass(candidate, Genome)
        and not getattr(candidate, '__abstractmethods__', None)
    )
