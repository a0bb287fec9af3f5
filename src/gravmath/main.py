#!/usr/bin/env python3
"""
===============================================================================
GRAVMATH SIMULATION - MAIN ENTRY POINT
===============================================================================
Jupiter, an orbiting satellite and a flyby comet.

Builds the scenario from the YAML configuration, runs the headless frame
loop and writes the telemetry and a run summary.

USAGE:
    gravmath-sim                           # Default scenario, config file
    gravmath-sim --frames 500              # Override the frame count
    gravmath-sim --warp 5                  # Override the time warp
    gravmath-sim --config my_run.yaml      # Alternate configuration
    gravmath-sim --output runs/today -v    # Output directory, DEBUG logging

OUTPUTS:
    <output>/telemetry.csv    - Per-frame diagnostics and body positions
    <output>/simulation.log   - Run log

EXIT STATUS:
    0 on success, 2 if the scenario is invalid or an orbit cannot be built.
===============================================================================
"""

import sys
import argparse
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from gravmath.core.errors import GravmathError
from gravmath.simulation.runner import SimulationRunner
from gravmath.simulation.scenario import ScenarioConfig, build_simulation

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG = PROJECT_ROOT / 'config' / 'sim_config.yaml'

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

logger = logging.getLogger('GRAVMATH_MAIN')


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the run configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to config/sim_config.yaml;
            if that default is missing, built-in defaults are used.

    Returns:
        Dictionary with the (possibly empty) sections simulation, scenario
        and run.
    """
    if config_path is None:
        if not DEFAULT_CONFIG.exists():
            logger.info("No configuration file found, using built-in defaults")
            return {'simulation': {}, 'scenario': {}, 'run': {}}
        config_path = str(DEFAULT_CONFIG)

    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    for section in ('simulation', 'scenario', 'run'):
        config[section] = config.get(section) or {}
    return config


def setup_logging(output_dir: Path, verbose: bool = False) -> None:
    """Log to stdout and to <output_dir>/simulation.log."""
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(str(output_dir / 'simulation.log'), mode='w'),
        ],
        force=True,
    )


def apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Command-line flags take precedence over the YAML values."""
    if args.frames is not None:
        config['run']['frames'] = args.frames
    if args.warp is not None:
        config['scenario']['warp'] = args.warp
    if args.output is not None:
        config['run']['output_dir'] = args.output
    return config


def run_simulation(config: Dict[str, Any]) -> SimulationRunner:
    """
    Build the scenario described by *config* and run it.

    Returns the runner so callers can inspect telemetry and summary.
    """
    run_cfg = config['run']
    scenario = ScenarioConfig.from_dict(config['scenario'], config['simulation'])

    simulator = build_simulation(scenario)
    runner = SimulationRunner(simulator, warp=scenario.warp)
    runner.run(int(run_cfg.get('frames', 300)))
    runner.get_summary()

    if run_cfg.get('save_telemetry', True):
        output_dir = Path(run_cfg.get('output_dir', 'output'))
        output_dir.mkdir(parents=True, exist_ok=True)
        runner.save_telemetry(str(output_dir / 'telemetry.csv'))

    return runner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gravmath-sim',
        description='Headless Jupiter / satellite / comet simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gravmath-sim                        Default scenario
  gravmath-sim --frames 1000          Longer run
  gravmath-sim --warp 2 --verbose     Slow warp with DEBUG logging
        """
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to run config YAML')
    parser.add_argument('--frames', type=int, default=None,
                        help='Number of frames to render')
    parser.add_argument('--warp', type=float, default=None,
                        help='Time warp, 0-25 (1000 * warp steps per frame)')
    parser.add_argument('--output', type=str, default=None,
                        help='Output directory for telemetry and log')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='DEBUG-level logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.  Parses command line arguments and runs the
    simulation.

    Returns the process exit status.
    """
    args = build_parser().parse_args(argv)

    config = apply_overrides(load_config(args.config), args)
    output_dir = Path(config['run'].get('output_dir', 'output'))
    setup_logging(output_dir, verbose=args.verbose)

    start = time.time()
    try:
        runner = run_simulation(config)
    except GravmathError as exc:
        logger.error("Simulation aborted: %s", exc)
        return 2

    logger.info(
        "Done in %.1f s wall time.  Final status: %s.  Outputs in %s",
        time.time() - start, runner.status, output_dir,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
