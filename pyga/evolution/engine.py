"""
演化引擎核心類

這個模組實現了演化引擎的核心邏輯：持有族群、評估適應度並排序、
檢查終止條件，並透過選擇策略、遺傳運算子與替換策略產生下一代。
"""

from dataclasses import dataclass
from numbers import Integral, Real
from operator import attrgetter
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import random
import re
import time

from ..exceptions import ConfigurationError
from .genome import Genome, OperatorRegistry, is_genome_type
from .handlers.base import EventHandler
from .result import EvolutionResult
from .statistics import GenerationStatistics, StatisticsRecorder
from .strategies.base import EvolutionStrategy
from .strategies.operation import OperationStrategy, SerialOperationStrategy
from .strategies.replacement import ElitistReplacement, GenerationalReplacement, ReplacementPolicy
from .strategies.selection import Selector, SelectorRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_GENERATIONS = 100
DEFAULT_POPULATION_SIZE = 500
DEFAULT_ORDERING = 'desc'

_ORDERING_PATTERN = re.compile(r'^(asc|desc)$', re.IGNORECASE)

FitnessFunction = Callable[['EvolutionEngine', Genome], float]
TerminationFunction = Callable[['EvolutionEngine'], bool]


@dataclass(frozen=True)
class OperatorBinding:
    """運算子名稱對應的實作與套用機率"""

    name: str
    implementation: Optional[Callable]
    rate: float


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value > 0


def _is_rate(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and 0.0 <= value <= 1.0


class EvolutionEngine:
    """
    演化引擎

    這個類是演化計算的核心，負責：
    1. 建立並評估初始族群 (建構時立即完成)
    2. 每代評估適應度、依排序模式排序並記錄統計
    3. 依運算子機率套用交配與變異產生子代
    4. 依替換策略 (完全替換或菁英保留) 更新族群
    5. 檢查最大世代數與自訂終止函數

    Example:
        >>> engine = EvolutionEngine(
        ...     genome=BitVectorGenome,
        ...     operators={'crossover': 0.9, 'mutation': 0.01},
        ...     fitness=binary_value,
        ...     selector='roulette',
        ...     pop_size=10, max_gen=25, preserve=1,
        ... )
        >>> result = engine.evolve()
    """

    def __init__(self,
                 genome: type,
                 operators: Mapping[str, float],
                 fitness: FitnessFunction,
                 selector: Union[str, Selector, None] = None,
                 max_gen: int = DEFAULT_MAX_GENERATIONS,
                 pop_size: int = DEFAULT_POPULATION_SIZE,
                 ordering: str = DEFAULT_ORDERING,
                 term_func: Optional[TerminationFunction] = None,
                 preserve: int = 0,
                 replacement: Optional[ReplacementPolicy] = None,
                 operation: Optional[OperationStrategy] = None,
                 handlers: Optional[Sequence[EventHandler]] = None):
        """
        初始化演化引擎

        Args:
            genome: 基因組類型 (Genome 的具體子類)
            operators: 運算子名稱 → 套用機率 [0, 1]，不可為空
            fitness: 適應度函數 (engine, genome) -> number
            selector: 選擇策略名稱或 (engine) -> genome 函數，預設 'uniform'
            max_gen: 最大世代數，預設 100
            pop_size: 族群大小，預設 500
            ordering: 'desc' (最佳在前，預設) 或 'asc'
            term_func: 終止函數 (engine) -> bool
            preserve: 菁英保留數量，0 表示不保留
            replacement: 自訂替換策略 (與 preserve 互斥)
            operation: 自訂子代產生策略，預設 SerialOperationStrategy
            handlers: 事件處理器列表

        Raises:
            ConfigurationError: 如果配置無效
        """
        if not is_genome_type(genome):
            raise ConfigurationError(f"genome must be a concrete Genome subclass, got {genome!r}")
        self._genome = genome

        self._registry = genome.build_operators()
        if not isinstance(self._registry, OperatorRegistry):
            raise ConfigurationError(
                f"{genome.__name__}.build_operators() must return an OperatorRegistry, got {type(self._registry)}"
            )
        self._operators = self._bind_operators(self._registry, operators)

        if not callable(fitness):
            raise ConfigurationError("fitness must be a callable (engine, genome) -> number")
        self._fitness_function = fitness

        if term_func is not None and not callable(term_func):
            raise ConfigurationError("term_func must be a callable (engine) -> bool")
        self._termination_function = term_func

        self._selectors = SelectorRegistry()
        try:
            self._selector = self._selectors.resolve(selector if selector is not None else 'uniform')
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"invalid selector: {e}") from e
        self._attach(self._selector)

        self._max_generations = self._positive_or_default('max_gen', max_gen, DEFAULT_MAX_GENERATIONS)
        self._population_size = self._positive_or_default('pop_size', pop_size, DEFAULT_POPULATION_SIZE)

        if isinstance(ordering, str) and _ORDERING_PATTERN.match(ordering):
            self._ordering = ordering.lower()
        else:
            logger.warning(f"無效的排序模式 {ordering!r}，使用預設值 {DEFAULT_ORDERING!r}")
            self._ordering = DEFAULT_ORDERING

        self._replacement = self._build_replacement(preserve, replacement)
        self._attach(self._replacement)

        self._operation = operation if operation is not None else SerialOperationStrategy()
        if not isinstance(self._operation, OperationStrategy):
            raise ConfigurationError(f"operation must be an OperationStrategy: {type(self._operation)}")
        self._attach(self._operation)

        self.handlers: List[EventHandler] = []
        for handler in handlers or []:
            self.add_handler(handler)

        self._current_generation = 0
        self._population: Tuple[Genome, ...] = ()
        self.recorder = StatisticsRecorder()

        logger.info(f"演化引擎已創建: 基因組={genome.__name__}, 族群={self._population_size}, "
                    f"世代={self._max_generations}, 排序={self._ordering}, 替換={self._replacement.name}")

        self.initialize_population()

    # ------------------------------------------------------------------
    # 建構輔助
    # ------------------------------------------------------------------

    @staticmethod
    def _bind_operators(registry: OperatorRegistry, rates: Mapping[str, float]) -> Dict[str, OperatorBinding]:
        if not isinstance(rates, Mapping) or not rates:
            raise ConfigurationError("you must provide a non-empty mapping of genetic operator rates")

        for name, rate in rates.items():
            if not _is_rate(rate):
                raise ConfigurationError(f"rate for operator {name!r} must be a number in [0, 1], got {rate!r}")

        missing = [name for name in registry.names() if name not in rates]
        if missing:
            raise ConfigurationError(f"missing rates for genome operators: {missing}")

        bindings = {name: OperatorBinding(name, registry.get(name), float(rate)) for name, rate in rates.items()}
        for binding in bindings.values():
            if binding.implementation is None:
                logger.debug(f"運算子 {binding.name!r} 沒有實作，套用時不產生任何個體")
        return bindings

    @staticmethod
    def _positive_or_default(label: str, value: Any, default: int) -> int:
        if _is_positive_int(value):
            return int(value)
        logger.warning(f"無效的 {label}={value!r}，使用預設值 {default}")
        return default

    def _build_replacement(self, preserve: Any, replacement: Optional[ReplacementPolicy]) -> ReplacementPolicy:
        if replacement is not None:
            if not isinstance(replacement, ReplacementPolicy):
                raise ConfigurationError(f"replacement must be a ReplacementPolicy: {type(replacement)}")
            if preserve:
                raise ConfigurationError("preserve and replacement cannot be combined")
            return replacement

        if preserve is None:
            preserve = 0
        if not isinstance(preserve, Integral) or isinstance(preserve, bool) \
                or not 0 <= preserve <= self._population_size:
            raise ConfigurationError(
                f"preserve must be an integer in [0, {self._population_size}], got {preserve!r}"
            )
        if preserve > 0:
            return ElitistReplacement(int(preserve))
        return GenerationalReplacement()

    def _attach(self, component: Any):
        if isinstance(component, EvolutionStrategy):
            component.set_engine(self)

    # ------------------------------------------------------------------
    # 演化流程
    # ------------------------------------------------------------------

    def initialize_population(self) -> GenerationStatistics:
        """
        建立 pop_size 個新個體並隨機初始化，然後評估

        Returns:
            目前世代的統計
        """
        population = []
        for _ in range(self._population_size):
            individual = self._genome.create()
            individual.initialize()
            population.append(individual)

        self._population = tuple(population)
        logger.debug(f"初始族群創建完成: {len(self._population)} 個個體")
        return self.evaluate()

    def evaluate(self) -> GenerationStatistics:
        """
        評估族群中每個個體的適應度，依排序模式排序並記錄統計

        排序後索引 0 永遠是目前排序模式下最優的個體。

        Returns:
            目前世代的統計
        """
        for individual in self._population:
            individual.fitness = self._fitness_function(self, individual)

        self._population = tuple(sorted(self._population, key=attrgetter('fitness'),
                                        reverse=self._ordering == 'desc'))

        stats = self.recorder.record(self._current_generation, self._population, self._ordering)
        logger.debug(f"第 {stats.generation} 世代: sum={stats.sum:.6f}, avg={stats.avg:.6f}, "
                     f"min={stats.min:.6f}, max={stats.max:.6f}")
        return stats

    def terminate(self) -> bool:
        """
        是否應該終止演化

        達到最大世代數，或終止函數回傳 True 時終止。
        """
        if self._current_generation >= self._max_generations:
            return True
        return self._termination_function is not None and bool(self._termination_function(self))

    def evolve(self) -> EvolutionResult:
        """
        執行演化直到終止

        每一輪：產生下一代 → 替換族群 → 世代數加一 → 評估。

        Returns:
            演化結果
        """
        logger.info(f"🚀 開始演化 (第 {self._current_generation} 世代, 最大 {self._max_generations} 世代)")
        start_time = time.perf_counter()
        self._fire_event('evolution_start', engine=self)

        while not self.terminate():
            self.population = self.next_generation()
            self.advance_generation()
            stats = self.evaluate()
            self._fire_event('generation_complete', engine=self,
                             generation=self._current_generation, statistics=stats)

        result = EvolutionResult(
            best_individual=self.fittest(),
            final_population=self._population,
            statistics=self.recorder.entries,
            generations_completed=self._current_generation,
            ordering=self._ordering,
            execution_time=time.perf_counter() - start_time,
        )

        self._fire_event('evolution_complete', engine=self, result=result)
        logger.info(f"✅ 演化完成! 世代數: {self._current_generation}, 最佳適應度: {result.best_fitness:.6f}")
        return result

    def next_generation(self) -> List[Genome]:
        """
        由目前族群計算下一代

        子代由操作策略產生 (截斷為 pop_size)，再交由替換策略組成新族群；
        菁英保留時新族群大小為 pop_size + preserve。
        """
        offspring = self._operation.breed(self)
        return self._replacement.replace(self._population, offspring)

    def can_apply(self, operator_name: str) -> bool:
        """
        以運算子的套用機率做一次獨立的伯努利試驗

        未設定機率的運算子永遠回傳 False。
        """
        binding = self._operators.get(operator_name)
        rate = binding.rate if binding is not None else 0.0
        return random.random() < rate

    def apply(self, operator_name: str, *genomes: Genome) -> List[Genome]:
        """
        套用遺傳運算子

        Args:
            operator_name: 運算子名稱
            *genomes: 傳給運算子的個體

        Returns:
            運算子產生的個體列表；運算子未實作時為空列表
        """
        binding = self._operators.get(operator_name)
        if binding is None or binding.implementation is None:
            return []
        produced = binding.implementation(*genomes)
        return list(produced) if produced is not None else []

    def select(self) -> Genome:
        """以目前的選擇策略選出一個個體"""
        return self._selector(self)

    def clone(self, genome: Genome) -> Genome:
        """深拷貝個體"""
        return self._registry.clone(genome)

    def advance_generation(self) -> int:
        """世代數加一並回傳新的世代數"""
        self._current_generation += 1
        return self._current_generation

    # ------------------------------------------------------------------
    # 查詢
    # ------------------------------------------------------------------

    def statistics(self) -> Tuple[GenerationStatistics, ...]:
        """每個世代的統計 (索引即世代編號)"""
        return self.recorder.entries

    def current_statistics(self) -> GenerationStatistics:
        """目前世代的統計"""
        return self.recorder[self._current_generation]

    def fittest(self) -> Genome:
        """目前族群中最優的個體 (評估後的索引 0)"""
        return self._population[0]

    def population_as_string(self) -> str:
        """目前族群的文字表示，每行一個個體 (依排序，最優在前)"""
        lines = []
        for individual in self._population:
            render = getattr(individual, 'as_string', None)
            lines.append(render() if callable(render) else repr(individual))
        return '\n'.join(lines)

    @property
    def genome(self) -> type:
        return self._genome

    @property
    def operators(self) -> Dict[str, float]:
        """運算子名稱 → 套用機率"""
        return {name: binding.rate for name, binding in self._operators.items()}

    @property
    def registry(self) -> OperatorRegistry:
        return self._registry

    @property
    def replacement(self) -> ReplacementPolicy:
        return self._replacement

    @property
    def current_generation(self) -> int:
        return self._current_generation

    # ------------------------------------------------------------------
    # 可變設定：無效的值會被忽略並保留原值
    # ------------------------------------------------------------------

    @property
    def population(self) -> Tuple[Genome, ...]:
        """目前族群 (唯讀 tuple)"""
        return self._population

    @population.setter
    def population(self, value: Sequence[Genome]):
        if not isinstance(value, (list, tuple)) or not value \
                or not all(isinstance(individual, Genome) for individual in value):
            logger.warning("忽略無效的族群：必須是非空的 Genome 序列")
            return
        self._population = tuple(value)

    @property
    def max_generations(self) -> int:
        return self._max_generations

    @max_generations.setter
    def max_generations(self, value: int):
        if not _is_positive_int(value):
            logger.warning(f"忽略無效的最大世代數: {value!r}")
            return
        self._max_generations = int(value)

    @property
    def population_size(self) -> int:
        return self._population_size

    @population_size.setter
    def population_size(self, value: int):
        if not _is_positive_int(value):
            logger.warning(f"忽略無效的族群大小: {value!r}")
            return
        self._population_size = int(value)

    @property
    def ordering(self) -> str:
        """'desc' (最佳在前) 或 'asc'；變更在下一次評估時生效"""
        return self._ordering

    @ordering.setter
    def ordering(self, value: str):
        if not isinstance(value, str) or not _ORDERING_PATTERN.match(value):
            logger.warning(f"忽略無效的排序模式: {value!r}")
            return
        self._ordering = value.lower()

    @property
    def fitness_function(self) -> FitnessFunction:
        return self._fitness_function

    @fitness_function.setter
    def fitness_function(self, value: FitnessFunction):
        if not callable(value):
            logger.warning("忽略無效的適應度函數：必須可呼叫")
            return
        self._fitness_function = value

    @property
    def termination_function(self) -> Optional[TerminationFunction]:
        return self._termination_function

    @termination_function.setter
    def termination_function(self, value: TerminationFunction):
        if not callable(value):
            logger.warning("忽略無效的終止函數：必須可呼叫")
            return
        self._termination_function = value

    @property
    def selector(self) -> Selector:
        return self._selector

    @selector.setter
    def selector(self, value: Union[str, Selector]):
        try:
            selector = self._selectors.resolve(value)
        except (KeyError, TypeError) as e:
            logger.warning(f"忽略無效的選擇策略: {e}")
            return
        self._attach(selector)
        self._selector = selector

    def register_selector(self, name: str, selector: Selector):
        """註冊具名選擇策略 (只對此引擎有效)"""
        self._selectors.register(name, selector)

    # ------------------------------------------------------------------
    # 事件
    # ------------------------------------------------------------------

    def add_handler(self, handler: EventHandler):
        """
        添加事件處理器

        Raises:
            TypeError: 如果不是 EventHandler
        """
        if not isinstance(handler, EventHandler):
            raise TypeError(f"處理器必須繼承自 EventHandler: {type(handler)}")

        self.handlers.append(handler)
        handler.set_engine(self)
        logger.debug(f"已添加事件處理器: {handler.__class__.__name__}")

    def _fire_event(self, event_name: str, **kwargs):
        """觸發事件，通知所有處理器；處理器的錯誤只記錄不中斷演化"""
        for handler in self.handlers:
            callback = getattr(handler, f'on_{event_name}', None)
            if callback is None:
                continue
            try:
                callback(**kwargs)
            except Exception:
                logger.exception(f"事件處理器 {handler.__class__.__name__} 處理 {event_name} 事件時出錯")

    def __repr__(self) -> str:
        return (f"EvolutionEngine(genome={self._genome.__name__}, generation={self._current_generation}, "
                f"pop_size={self._population_size}, ordering='{self._ordering}')")
