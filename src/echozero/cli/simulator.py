#!/usr/bin/env python3
"""
Command-line interface for running Echo Zero scenarios.
"""

import argparse
import logging
import os
import random
import sys
import yaml

from echozero.utils.logger import setup_logging
from echozero.simulation.scenario_builder import build_scenario_from_config
from echozero.simulation.engine import SimulationEngine
from echozero.simulation.metrics import calculate_asset_status, calculate_signal_dominance
from echozero.simulation.recorder import StateRecorder

def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Echo Zero RF Propagation and Jamming Simulator")

    parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to scenario configuration file"
    )

    parser.add_argument(
        "-o", "--output-dir",
        default="./results",
        help="Directory to store simulation results"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level"
    )

    parser.add_argument(
        "--duration",
        type=float,
        help="Simulated seconds to run (overrides the scenario)"
    )

    parser.add_argument(
        "--time-step",
        type=float,
        help="Seconds per tick (overrides the scenario)"
    )

    parser.add_argument(
        "--record-interval",
        type=int,
        default=1,
        help="Record a state snapshot every N ticks"
    )

    return parser.parse_args(argv)

def main(argv=None):
    """Main entry point for the Echo Zero simulator CLI."""
    args = parse_args(argv)

    log_level = getattr(logging, args.log_level)
    setup_logging(level=log_level)

    try:
        scenario = build_scenario_from_config(args.config)
    except Exception as e:
        logging.error(f"Failed to build scenario: {e}")
        sys.exit(1)

    os.makedirs(args.output_dir, exist_ok=True)

    duration = args.duration if args.duration is not None else scenario.duration
    time_step = args.time_step if args.time_step is not None else scenario.time_step
    recorder = StateRecorder(interval=args.record_interval)
    engine = SimulationEngine(
        scenario.store,
        scenario.config,
        rng=random.Random(scenario.seed),
        data_recorder=recorder,
    )

    try:
        logging.info(f"Starting simulation: {scenario.name}")
        ticks = engine.run(duration, time_step)

        status = calculate_asset_status(
            scenario.store, scenario.player_jammers, scenario.player_drones
        )
        results = {
            'scenario': scenario.name,
            'ticks': ticks,
            'sim_time': round(engine.sim_time, 6),
            'signal_dominance': calculate_signal_dominance(
                scenario.store, scenario.player_jammers, scenario.enemy_jammers
            ),
            'assets': {'active': status.active, 'total': status.total},
            'snapshots': recorder.snapshots,
        }

        safe_name = scenario.name.replace(' ', '_').lower()
        result_path = os.path.join(args.output_dir, f"{safe_name}_results.yaml")
        with open(result_path, 'w') as f:
            yaml.safe_dump(results, f, sort_keys=False)

        logging.info(f"Simulation completed. Results saved to: {result_path}")

    except Exception as e:
        logging.error(f"Simulation failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        engine.shutdown()

if __name__ == "__main__":
    main()
