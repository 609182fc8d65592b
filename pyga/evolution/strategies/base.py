"""
演化策略基類

定義所有演化策略的統一接口。
"""

import logging

logger = logging.getLogger(__name__)


class EvolutionStrategy:
    """
    演化策略基類

    策略透過 set_engine 取得引擎引用，以讀取族群、統計與運算子。
    """

    def __init__(self):
        self.engine = None
        self.name = "base_strategy"

    def set_engine(self, engine):
        """設置演化引擎引用"""
        self.engine = engine

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
