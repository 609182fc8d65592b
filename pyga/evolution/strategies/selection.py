"""
選擇策略模組

實現個體選擇策略：均勻隨機、輪盤賭 (適應度比例) 與錦標賽。
每個策略同時也是 `(engine) -> genome` 的可呼叫物件，
與使用者自訂的選擇函數共用同一個擴充點。
"""

from typing import Callable, Dict, List, Union
import logging
import random

from deap import tools

from .base import EvolutionStrategy

logger = logging.getLogger(__name__)

Selector = Callable[..., object]


class SelectionStrategy(EvolutionStrategy):
    """
    選擇策略基類
    """

    def __init__(self):
        super().__init__()
        self.name = "selection_strategy"

    def select(self, engine):
        """
        從引擎目前的族群中選出一個個體

        Args:
            engine: 演化引擎

        Returns:
            選中的個體
        """
        raise NotImplementedError("子類必須實現 select 方法")

    def select_individuals(self, engine, k: int) -> List:
        """獨立選擇 k 個個體 (可重複)"""
        if k <= 0:
            return []
        return [self.select(engine) for _ in range(k)]

    def __call__(self, engine):
        return self.select(engine)


def _breeding_pool_size(engine) -> int:
    # 菁英保留附加在族群尾端的個體不參與選擇
    return min(engine.population_size, len(engine.population))


class UniformStrategy(SelectionStrategy):
    """
    均勻隨機選擇策略

    索引從 [0, pop_size) 均勻抽出。
    """

    def __init__(self):
        super().__init__()
        self.name = "uniform"

    def select(self, engine):
        return engine.population[random.randrange(_breeding_pool_size(engine))]


class TournamentStrategy(SelectionStrategy):
    """
    錦標賽選擇策略

    以 DEAP 的 selRandom 抽出參賽者索引 (可重複抽取)。族群在評估後已依
    排序模式排好，索引越小越優，因此索引最小者勝出，與 asc/desc 無關。
    """

    def __init__(self, tournament_size: int = 3):
        """
        初始化錦標賽選擇策略

        Args:
            tournament_size: 錦標賽大小
        """
        super().__init__()
        if tournament_size < 1:
            raise ValueError(f"tournament_size must be >= 1, got {tournament_size}")
        self.name = "tournament"
        self.tournament_size = tournament_size

    def select(self, engine):
        aspirants = tools.selRandom(range(_breeding_pool_size(engine)), self.tournament_size)
        return engine.population[min(aspirants)]


class RouletteStrategy(SelectionStrategy):
    """
    輪盤賭選擇策略

    依目前世代統計中的適應度總和抽出門檻，線性累加適應度直到
    達到門檻。如果檢測到負適應度或總和不為正，則回退到錦標賽選擇。
    """

    def __init__(self, fallback: SelectionStrategy = None):
        super().__init__()
        self.name = "roulette"
        self.fallback = fallback or TournamentStrategy()

    def select(self, engine):
        population = engine.population
        stats = engine.current_statistics()

        if stats.sum <= 0 or stats.min < 0:
            logger.warning("檢測到負適應度值或適應度總和不為正，回退到錦標賽選擇")
            return self.fallback.select(engine)

        limit = stats.sum * random.random()
        accumulated = 0.0
        i = 0
        while i < len(population) and accumulated < limit:
            accumulated += population[i].fitness
            i += 1

        # 門檻為 0 時迴圈不會執行，夾到第一個個體
        return population[max(i - 1, 0)]


class SelectorRegistry:
    """
    具名選擇策略表

    由每個引擎各自持有，預設包含 uniform、roulette 與 tournament。
    """

    def __init__(self):
        self._selectors: Dict[str, Selector] = {}
        self.register('uniform', UniformStrategy())
        self.register('roulette', RouletteStrategy())
        self.register('tournament', TournamentStrategy())

    def register(self, name: str, selector: Selector):
        """
        註冊具名選擇策略

        Args:
            name: 策略名稱
            selector: SelectionStrategy 實例或任何 (engine) -> genome 的函數

        Raises:
            TypeError: 如果 selector 不可呼叫
        """
        if not callable(selector):
            raise TypeError(f"selector must be callable: {type(selector)}")
        self._selectors[name] = selector
        logger.debug(f"已註冊選擇策略: {name}")

    def resolve(self, selector: Union[str, Selector]) -> Selector:
        """
        將名稱或可呼叫物件解析為選擇函數

        Raises:
            KeyError: 如果名稱未註冊
            TypeError: 如果既不是字串也不可呼叫
        """
        if isinstance(selector, str):
            if selector not in self._selectors:
                raise KeyError(f"unknown selector: {selector!r}. available: {self.names()}")
            return self._selectors[selector]
        if callable(selector):
            return selector
        raise TypeError(f"selector must be a name or a callable: {type(selector)}")

    def names(self) -> List[str]:
        return list(self._selectors)

    def __contains__(self, name: str) -> bool:
        return name in self._selectors
