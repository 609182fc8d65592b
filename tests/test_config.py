"""
Tests for configuration loading, the engine factory and the CLI entry point
"""

import json
import re
from pathlib import Path

import pytest

from main_evolution import main
from pyga.config import create_evolution_engine, load_config
from pyga.evolution.early_stopping import EarlyStopping
from pyga.evolution.strategies.replacement import ElitistReplacement
from pyga.evolution.strategies.selection import RouletteStrategy, TournamentStrategy
from pyga.exceptions import ConfigurationError, PygaError
from pyga.genomes import BitVectorGenome, RealVectorGenome

CONFIG_DIR = Path(__file__).parents[1] / 'configs'
SAMPLE_CONFIG = CONFIG_DIR / 'sample_config.json'
SPHERE_CONFIG = CONFIG_DIR / 'sphere_config.json'

STATS_LINE = re.compile(r'^-?\d+\.\d{2};-?\d+\.\d{2};-?\d+\.\d{2}$')


@pytest.fixture
def sample_config():
    return load_config(SAMPLE_CONFIG)


class TestLoadConfig:

    def test_load_sample(self, sample_config):
        assert sample_config['evolution']['population_size'] == 10
        assert sample_config['operators'] == {'crossover': 0.9, 'mutation': 0.01}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.json')

    def test_missing_section(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text(json.dumps({'evolution': {}, 'genome': {}}), encoding='utf-8')

        with pytest.raises(ConfigurationError, match="operators"):
            load_config(path)


class TestCreateEvolutionEngine:

    def test_sample_engine(self, sample_config):
        engine = create_evolution_engine(sample_config)

        assert issubclass(engine.genome, BitVectorGenome)
        assert engine.population_size == 10
        assert engine.max_generations == 25
        assert engine.operators == {'crossover': 0.9, 'mutation': 0.01}
        assert isinstance(engine.selector, RouletteStrategy)
        assert isinstance(engine.replacement, ElitistReplacement)
        assert engine.replacement.elite_size == 1
        assert engine.termination_function is None
        assert len(engine.statistics()) == 1

    def test_sphere_engine(self):
        engine = create_evolution_engine(load_config(SPHERE_CONFIG))

        assert issubclass(engine.genome, RealVectorGenome)
        assert engine.ordering == 'asc'
        assert isinstance(engine.selector, TournamentStrategy)
        assert callable(engine.termination_function)

    def test_single_early_stopping_uses_ordering(self, sample_config):
        sample_config['evolution']['ordering'] = 'ASC'
        sample_config['termination'] = {'early_stopping': True, 'parameters': {'patience': 3}}

        engine = create_evolution_engine(sample_config)

        assert isinstance(engine.termination_function, EarlyStopping)
        assert engine.termination_function.mode == 'min'

    def test_seed_makes_runs_repeatable(self, sample_config):
        sample_config['evolution']['seed'] = 5
        first = create_evolution_engine(sample_config).evolve()
        second = create_evolution_engine(sample_config).evolve()

        assert [s.as_dict() for s in first.statistics] == [s.as_dict() for s in second.statistics]

    def test_custom_fitness(self, sample_config):
        engine = create_evolution_engine(sample_config, fitness=lambda engine, ind: sum(ind.genes))
        assert engine.fittest().fitness == max(sum(ind.genes) for ind in engine.population)

    @pytest.mark.parametrize('section, value', [
        ('genome', {'type': 'tree'}),
        ('genome', {'type': 'bit_vector', 'parameters': {'bits': 1}}),
        ('fitness', {'function': 'rastrigin'}),
        ('selection', {'method': 'lottery'}),
        ('selection', {'method': 'tournament', 'parameters': {'size': 3}}),
        ('replacement', {'method': 'elitist', 'parameters': {'elite_size': -1}}),
        ('replacement', {'method': 'elitist', 'parameters': {'elite_size': 50}}),
        ('operators', {}),
    ])
    def test_invalid_sections(self, sample_config, section, value):
        sample_config[section] = value

        with pytest.raises(ConfigurationError) as excinfo:
            create_evolution_engine(sample_config)

        assert isinstance(excinfo.value, PygaError)
        assert isinstance(excinfo.value, ValueError)


class TestMain:

    def test_sample_run_prints_every_generation(self, capsys):
        result = main(['--config', str(SAMPLE_CONFIG), '--seed', '3'])

        lines = capsys.readouterr().out.splitlines()
        stats_lines = [line for line in lines if STATS_LINE.match(line)]

        assert len(stats_lines) == 26
        assert result.generations_completed == 25
        assert result.best_individual.as_string() in lines

    def test_summary_file(self, tmp_path):
        summary = tmp_path / 'out' / 'summary.json'

        main(['--config', str(SAMPLE_CONFIG), '--test', '--summary', str(summary)])

        data = json.loads(summary.read_text(encoding='utf-8'))
        assert data['summary']['generations_completed'] == 5
        assert len(data['statistics']) == 6

    def test_missing_config_exits_with_code_2(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(['--config', str(tmp_path / 'nope.json')])
        assert excinfo.value.code == 2

    def test_verbose_run_dumps_final_population(self, capsys):
        result = main(['--config', str(SAMPLE_CONFIG), '--test', '--verbose', '--no-progress'])

        lines = capsys.readouterr().out.splitlines()
        start = lines.index("🧬 最終族群:") + 1
        dumped = lines[start:start + len(result.final_population)]

        assert dumped == [ind.as_string() for ind in result.final_population]
