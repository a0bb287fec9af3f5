"""
===============================================================================
GRAVMATH - Command-Line Test Suite
===============================================================================
Tests for configuration loading, flag overrides and the exit status of the
gravmath-sim entry point.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import pandas as pd
import pytest

from gravmath import main as cli


@pytest.fixture
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoadConfig:

    def test_repository_default(self):
        config = cli.load_config()
        assert config['simulation']['dt'] == 0.05
        assert config['scenario']['warp'] == 20
        assert config['scenario']['comet']['elements']['a_km'] == -1800000.0
        assert config['run']['frames'] == 300

    def test_missing_sections_filled(self, tmp_path):
        path = tmp_path / 'partial.yaml'
        path.write_text("run:\n  frames: 4\n")
        config = cli.load_config(str(path))
        assert config['run']['frames'] == 4
        assert config['scenario'] == {}
        assert config['simulation'] == {}

    def test_flags_override_yaml(self, tmp_path):
        path = tmp_path / 'run.yaml'
        path.write_text("scenario:\n  warp: 3\nrun:\n  frames: 9\n  output_dir: somewhere\n")
        args = cli.build_parser().parse_args(['--frames', '2', '--warp', '7.5',
                                              '--output', str(tmp_path)])
        config = cli.apply_overrides(cli.load_config(str(path)), args)
        assert config['run']['frames'] == 2
        assert config['scenario']['warp'] == 7.5
        assert config['run']['output_dir'] == str(tmp_path)


class TestMain:

    def test_run_writes_telemetry_and_log(self, tmp_path, restore_logging):
        status = cli.main(['--frames', '2', '--warp', '1', '--output', str(tmp_path)])
        assert status == 0

        df = pd.read_csv(tmp_path / 'telemetry.csv', index_col='time')
        assert len(df) == 2
        assert (tmp_path / 'simulation.log').exists()

    def test_invalid_scenario_exit_status(self, tmp_path, restore_logging):
        status = cli.main(['--frames', '1', '--warp', '30', '--output', str(tmp_path)])
        assert status == 2
        assert not (tmp_path / 'telemetry.csv').exists()

    @pytest.mark.parametrize("yaml_text", [
        "simulation:\n  dt: -1\n",
        "simulation:\n  dt: .nan\n",
        "scenario:\n  satellite:\n    elements:\n      a_km: 1.2e6\n      e: 0.5\n      w: 3\n",
        "scenario:\n  warp: fast\n",
    ])
    def test_bad_config_exit_status(self, tmp_path, restore_logging, yaml_text):
        path = tmp_path / 'bad.yaml'
        path.write_text(yaml_text)
        status = cli.main(['--config', str(path), '--frames', '1', '--output', str(tmp_path)])
        assert status == 2
        assert not (tmp_path / 'telemetry.csv').exists()
