"""
配置載入與引擎工廠

從 JSON 配置文件建立完全配置好的演化引擎。配置中的名稱透過
明確的對照表轉換為基因組、適應度函數與各種策略。
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
import json
import logging
import random

from .exceptions import ConfigurationError
from .evolution.early_stopping import EarlyStopping, FitnessThreshold
from .evolution.engine import EvolutionEngine
from .evolution.handlers import EventHandler
from .evolution.strategies.replacement import ElitistReplacement, GenerationalReplacement
from .evolution.strategies.selection import RouletteStrategy, TournamentStrategy, UniformStrategy
from .genomes import BitVectorGenome, RealVectorGenome, binary_value, sphere

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ['evolution', 'genome', 'operators', 'fitness']

GENOME_FACTORIES: Dict[str, Callable[..., type]] = {
    'bit_vector': BitVectorGenome.with_bits,
    'real_vector': RealVectorGenome.configure,
}

FITNESS_FUNCTIONS: Dict[str, Callable] = {
    'binary_value': binary_value,
    'sphere': sphere,
}

SELECTION_STRATEGIES = {
    'uniform': UniformStrategy,
    'roulette': RouletteStrategy,
    'tournament': TournamentStrategy,
}

REPLACEMENT_POLICIES = {
    'generational': GenerationalReplacement,
    'elitist': ElitistReplacement,
}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    載入配置文件

    Args:
        config_path: 配置文件路徑

    Returns:
        配置字典

    Raises:
        FileNotFoundError: 如果文件不存在
        ConfigurationError: 如果缺少必要部分
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config = json.load(f)

    validate_config(config)
    logger.info(f"配置載入成功: {config.get('experiment', {}).get('name', config_file.stem)}")
    return config


def validate_config(config: Dict[str, Any]):
    """檢查配置是否包含所有必要部分"""
    missing = [section for section in REQUIRED_SECTIONS if section not in config]
    if missing:
        raise ConfigurationError(f"config is missing required sections: {missing}")


def _lookup(table: Dict[str, Any], kind: str, name: Any):
    if name not in table:
        raise ConfigurationError(f"unsupported {kind}: {name!r}. available: {list(table)}")
    return table[name]


def _build(kind: str, factory: Callable, parameters: Dict[str, Any]):
    try:
        return factory(**parameters)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"failed to create {kind} with parameters {parameters}: {e}") from e


def _build_termination(section: Dict[str, Any], ordering: str) -> Optional[Callable]:
    mode = 'min' if str(ordering).lower() == 'asc' else 'max'
    predicates: List[Callable] = []

    if section.get('early_stopping'):
        parameters = dict(section.get('parameters', {}))
        parameters.setdefault('mode', mode)
        predicates.append(_build('early stopping', EarlyStopping, parameters))

    if section.get('target') is not None:
        predicates.append(FitnessThreshold(section['target'], mode=mode))

    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]

    def any_predicate(engine) -> bool:
        # 每個條件都要被呼叫，早停計數才會逐代更新
        results = [predicate(engine) for predicate in predicates]
        return any(results)

    return any_predicate


def create_evolution_engine(config: Dict[str, Any],
                            fitness: Optional[Callable] = None,
                            handlers: Optional[Sequence[EventHandler]] = None) -> EvolutionEngine:
    """
    工廠函數：根據配置創建演化引擎

    Args:
        config: 配置字典
        fitness: 自訂適應度函數，省略時使用 config['fitness']['function']
        handlers: 事件處理器列表

    Returns:
        配置好的演化引擎 (初始族群已評估)

    Raises:
        ConfigurationError: 如果配置無效
    """
    validate_config(config)

    evolution = config['evolution']
    genome_config = config['genome']

    genome_factory = _lookup(GENOME_FACTORIES, 'genome type', genome_config.get('type'))
    genome = _build('genome', genome_factory, genome_config.get('parameters', {}))

    if fitness is None:
        fitness = _lookup(FITNESS_FUNCTIONS, 'fitness function', config['fitness'].get('function'))

    selection = config.get('selection', {})
    selector_class = _lookup(SELECTION_STRATEGIES, 'selection method', selection.get('method', 'uniform'))
    selector = _build('selection strategy', selector_class, selection.get('parameters', {}))

    replacement_config = config.get('replacement', {})
    replacement_class = _lookup(REPLACEMENT_POLICIES, 'replacement method',
                                replacement_config.get('method', 'generational'))
    replacement = _build('replacement policy', replacement_class, replacement_config.get('parameters', {}))

    # 菁英數量交給引擎的 preserve 檢查，確保落在 [0, pop_size]
    preserve = 0
    if isinstance(replacement, ElitistReplacement):
        preserve, replacement = replacement.elite_size, None

    ordering = evolution.get('ordering', 'desc')
    term_func = _build_termination(config.get('termination', {}), ordering)

    seed = evolution.get('seed')
    if seed is not None:
        random.seed(seed)
        logger.info(f"隨機種子: {seed}")

    return EvolutionEngine(
        genome=genome,
        operators=config['operators'],
        fitness=fitness,
        selector=selector,
        max_gen=evolution.get('generations', 100),
        pop_size=evolution.get('population_size', 500),
        ordering=ordering,
        term_func=term_func,
        preserve=preserve,
        replacement=replacement,
        handlers=handlers,
    )
