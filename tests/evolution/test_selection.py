"""
Tests for the selection strategies
"""

import logging
import random
from collections import Counter
from unittest.mock import patch

import pytest

from pyga.evolution.engine import EvolutionEngine
from pyga.evolution.genome import Genome, OperatorRegistry
from pyga.evolution.strategies.selection import (
    RouletteStrategy, SelectorRegistry, TournamentStrategy, UniformStrategy,
)


class ValueGenome(Genome):
    def __init__(self, value=None):
        super().__init__()
        self.value = value

    @classmethod
    def create(cls, genes=None):
        return cls(genes)

    def initialize(self):
        self.value = random.randint(1, 10)

    @classmethod
    def build_operators(cls):
        return OperatorRegistry()


def engine_with(values, selector='uniform', ordering='desc'):
    engine = EvolutionEngine(genome=ValueGenome,
                             operators={'crossover': 0.0},
                             fitness=lambda engine, ind: ind.value,
                             selector=selector,
                             pop_size=len(values),
                             ordering=ordering)
    engine.population = [ValueGenome(v) for v in values]
    engine.evaluate()
    return engine


def frequencies(engine, trials):
    counts = Counter(id(engine.select()) for _ in range(trials))
    return {ind.value: counts[id(ind)] / trials for ind in engine.population}


class TestUniformStrategy:

    def test_distribution_is_uniform(self):
        random.seed(1)
        engine = engine_with([1, 2, 3, 4, 5], selector='uniform')

        freq = frequencies(engine, 50000)

        for value in (1, 2, 3, 4, 5):
            assert freq[value] == pytest.approx(0.2, abs=0.01)

    def test_select_individuals(self):
        engine = engine_with([1, 2, 3])
        chosen = UniformStrategy().select_individuals(engine, 7)
        assert len(chosen) == 7
        assert all(ind in engine.population for ind in chosen)
        assert UniformStrategy().select_individuals(engine, 0) == []


class TestRouletteStrategy:

    def test_distribution_is_fitness_proportionate(self):
        random.seed(2)
        engine = engine_with([1, 2, 3, 4], selector='roulette')

        freq = frequencies(engine, 50000)

        for value in (1, 2, 3, 4):
            assert freq[value] == pytest.approx(value / 10, abs=0.01)

    def test_scan_stops_at_threshold(self):
        engine = engine_with([4, 3, 2, 1], selector='roulette')
        population = engine.population

        with patch('random.random', return_value=0.35):
            assert engine.select() is population[0]
        with patch('random.random', return_value=0.5):
            assert engine.select() is population[1]
        with patch('random.random', return_value=0.95):
            assert engine.select() is population[3]

    def test_zero_limit_selects_first_individual(self):
        engine = engine_with([4, 3, 2, 1], selector='roulette')

        with patch('random.random', return_value=0.0):
            assert engine.select() is engine.population[0]

    def test_uses_current_generation_sum(self):
        engine = engine_with([4, 3, 2, 1], selector='roulette')
        engine.population = [ValueGenome(v) for v in (1, 1, 1, 1)]
        engine.advance_generation()
        engine.evaluate()

        assert engine.current_statistics().sum == 4
        with patch('random.random', return_value=0.6):
            assert engine.select() is engine.population[2]

    def test_negative_fitness_falls_back_to_tournament(self, caplog):
        engine = engine_with([3, -1, 2], selector='roulette')

        with caplog.at_level(logging.WARNING):
            chosen = engine.select()

        assert chosen in engine.population
        assert "回退到錦標賽選擇" in caplog.text

    def test_zero_sum_falls_back_to_tournament(self):
        engine = engine_with([0, 0, 0], selector='roulette')
        assert engine.select() in engine.population


class TestTournamentStrategy:

    def test_lowest_index_aspirant_wins(self):
        engine = engine_with([9, 7, 5, 1])

        with patch('deap.tools.selRandom', return_value=[3, 1, 2]) as sel_random:
            chosen = TournamentStrategy(tournament_size=3)(engine)

        assert chosen is engine.population[1]
        assert list(sel_random.call_args[0][0]) == [0, 1, 2, 3]
        assert sel_random.call_args[0][1] == 3

    def test_respects_ascending_ordering(self):
        engine = engine_with([5, 9, 1, 7], ordering='asc')

        with patch('deap.tools.selRandom', return_value=[2, 0]):
            assert TournamentStrategy(tournament_size=2)(engine).value == 1

    def test_large_tournament_picks_fittest(self):
        random.seed(6)
        engine = engine_with([5, 9, 1, 7])
        strategy = TournamentStrategy(tournament_size=60)

        assert all(strategy(engine) is engine.fittest() for _ in range(100))

    def test_single_contender_is_uniform(self):
        random.seed(4)
        engine = engine_with([1, 2, 3, 4])
        engine.selector = TournamentStrategy(tournament_size=1)

        freq = frequencies(engine, 20000)
        assert all(f == pytest.approx(0.25, abs=0.02) for f in freq.values())

    def test_invalid_size(self):
        with pytest.raises(ValueError, match="tournament_size"):
            TournamentStrategy(tournament_size=0)


class TestElitistBreedingPool:
    """菁英附加在族群尾端後，選擇只從前 pop_size 個個體中抽取"""

    @staticmethod
    def evolved_elitist_engine(selector):
        engine = EvolutionEngine(genome=ValueGenome,
                                 operators={'crossover': 0.0},
                                 fitness=lambda engine, ind: ind.value,
                                 selector=selector,
                                 pop_size=4,
                                 max_gen=1,
                                 preserve=2)
        engine.evolve()
        return engine

    @pytest.mark.parametrize('selector', ['uniform', 'tournament'])
    def test_tail_is_never_selected(self, selector):
        random.seed(8)
        engine = self.evolved_elitist_engine(selector)
        assert len(engine.population) == 6

        index_of = {id(ind): i for i, ind in enumerate(engine.population)}
        picks = [index_of[id(engine.select())] for _ in range(6000)]

        assert max(picks) < engine.population_size

    def test_uniform_frequency_over_pop_size(self):
        random.seed(9)
        engine = self.evolved_elitist_engine('uniform')

        index_of = {id(ind): i for i, ind in enumerate(engine.population)}
        counts = Counter(index_of[id(engine.select())] for _ in range(40000))

        for index in range(engine.population_size):
            assert counts[index] / 40000 == pytest.approx(0.25, abs=0.01)


class TestSelectorRegistry:

    def test_builtins(self):
        registry = SelectorRegistry()
        assert registry.names() == ['uniform', 'roulette', 'tournament']
        assert isinstance(registry.resolve('roulette'), RouletteStrategy)

    def test_register_and_resolve(self):
        registry = SelectorRegistry()

        def first(engine):
            return engine.population[0]

        registry.register('first', first)
        assert 'first' in registry
        assert registry.resolve('first') is first
        assert registry.resolve(first) is first

    def test_errors(self):
        registry = SelectorRegistry()
        with pytest.raises(KeyError):
            registry.resolve('lottery')
        with pytest.raises(TypeError):
            registry.resolve(42)
        with pytest.raises(TypeError):
            registry.register('broken', 'not callable')

    def test_registries_are_independent(self):
        first, second = SelectorRegistry(), SelectorRegistry()
        first.register('custom', lambda engine: None)
        assert 'custom' not in second
        assert first.resolve('uniform') is not second.resolve('uniform')
