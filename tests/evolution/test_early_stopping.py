"""
Unit tests for the termination predicates
"""

from unittest.mock import MagicMock

import pytest

from pyga.evolution.early_stopping import EarlyStopping, FitnessThreshold
from pyga.evolution.statistics import GenerationStatistics


def stats(generation, best, worst=0.0):
    return GenerationStatistics(generation=generation, sum=best + worst, avg=(best + worst) / 2,
                                min=min(best, worst), max=max(best, worst), size=2)


def mock_engine(generation, statistics):
    engine = MagicMock()
    engine.current_generation = generation
    engine.current_statistics.return_value = statistics
    return engine


class TestEarlyStoppingSteps:
    """逐代餵入最佳適應度"""

    def test_initialization(self):
        es = EarlyStopping(patience=4, min_delta=0.05, mode='min')

        assert (es.patience, es.min_delta, es.mode) == (4, 0.05, 'min')
        assert es.counter == 0
        assert es.best_fitness is None
        assert es.should_stop is False
        assert es.generation == 0

    @pytest.mark.parametrize('kwargs, message', [
        ({'patience': 0}, "patience must be >= 1"),
        ({'mode': 'best'}, "mode must be 'max' or 'min'"),
    ])
    def test_invalid_arguments(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            EarlyStopping(**kwargs)

    def test_stops_after_patience_plateau(self):
        es = EarlyStopping(patience=3, mode='max')

        for value in (0.25, 0.5, 0.75):
            assert not es.step(value)
        assert es.counter == 0
        assert es.best_fitness == 0.75

        assert not es.step(0.75)
        assert not es.step(0.5)
        assert es.step(0.75)
        assert es.counter == 3
        assert es.should_stop is True

    def test_min_delta(self):
        es = EarlyStopping(patience=2, min_delta=0.1, mode='max')

        es.step(1.0)
        assert not es.step(1.05)
        assert es.best_fitness == 1.0
        assert es.step(1.08)

    def test_improvement_resets_counter(self):
        es = EarlyStopping(patience=3, mode='max')

        es.step(1.0)
        es.step(1.0)
        es.step(1.0)
        assert es.counter == 2

        assert not es.step(1.5)
        assert es.counter == 0
        assert es.best_fitness == 1.5

    def test_mode_min(self):
        es = EarlyStopping(patience=2, mode='min')

        es.step(10.0)
        assert not es.step(5.0)
        assert es.best_fitness == 5.0
        assert not es.step(6.0)
        assert es.step(5.0)

    def test_status_and_reset(self):
        es = EarlyStopping(patience=5, min_delta=0.01)
        es.step(1.0)
        es.step(1.0)

        status = es.get_status()
        assert status['counter'] == 1
        assert status['generation'] == 2
        assert status['mode'] == 'max'

        es.reset()
        assert es.get_status()['best_fitness'] is None
        assert es.generation == 0

    def test_repr(self):
        es = EarlyStopping(patience=10, min_delta=0.001)
        es.step(1.0)

        text = repr(es)
        assert 'patience=10' in text
        assert "mode='max'" in text
        assert 'generation=1' in text


class TestEarlyStoppingAsTermination:
    """直接作為引擎的終止函數"""

    def test_reads_best_of_current_generation(self):
        es = EarlyStopping(patience=1, mode='max')

        assert not es(mock_engine(0, stats(0, best=0.5)))
        assert es.best_fitness == 0.5
        assert es(mock_engine(1, stats(1, best=0.5)))

    def test_mode_min_uses_minimum(self):
        es = EarlyStopping(patience=2, mode='min')

        es(mock_engine(0, stats(0, best=3.0, worst=1.0)))
        assert es.best_fitness == 1.0

    def test_counts_each_generation_once(self):
        es = EarlyStopping(patience=2, mode='max')
        engine = mock_engine(0, stats(0, best=0.5))

        for _ in range(5):
            assert not es(engine)
        assert es.generation == 1

        engine.current_generation = 1
        es(engine)
        es(engine)
        assert es.generation == 2
        assert es.counter == 1

    def test_reset_forgets_last_generation(self):
        es = EarlyStopping(patience=2)
        engine = mock_engine(0, stats(0, best=0.5))
        es(engine)
        es.reset()
        es(engine)
        assert es.generation == 1


class TestFitnessThreshold:

    def test_maximization(self):
        threshold = FitnessThreshold(0.9)
        assert not threshold(mock_engine(0, stats(0, best=0.85)))
        assert threshold(mock_engine(1, stats(1, best=0.9)))

    def test_minimization(self):
        threshold = FitnessThreshold(1e-4, mode='min')
        assert not threshold(mock_engine(0, stats(0, best=5.0, worst=0.01)))
        assert threshold(mock_engine(1, stats(1, best=5.0, worst=0.0)))

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            FitnessThreshold(1.0, mode='desc')
