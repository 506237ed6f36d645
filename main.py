"""
Entry point for the Tetris engine.

Supports two modes:
  - play:     Play manually with keyboard controls.
  - simulate: Run headless games with random inputs and print the results.

Usage:
    python main.py --mode play
    python main.py --mode play --config config/settings.yaml
    python main.py --mode simulate --games 5 --seed 42
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

from tetris_engine.config import load_config

DEFAULT_CONFIG_PATH = "config/settings.yaml"


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with mode, config, seed, games, max_ticks and log_level.
    """
    parser = argparse.ArgumentParser(
        description="Tetris — play manually or run headless simulations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["play", "simulate"],
        default="play",
        help="Run mode: 'play' (manual play), 'simulate' (random inputs, no window).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_PATH} if present).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for piece selection (overrides the config).",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to run in 'simulate' mode.",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=10_000,
        help="Gravity ticks per simulated game before giving up.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides the config), e.g. DEBUG.",
    )
    return parser.parse_args()


def resolve_config(config_arg: str | None) -> dict:
    """Load the config named on the command line.

    Without --config, the bundled settings file is used when it exists
    relative to the working directory, else the built-in defaults.
    """
    if config_arg is not None:
        return load_config(config_arg)
    if pathlib.Path(DEFAULT_CONFIG_PATH).exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return load_config()


def main() -> None:
    """Main entry point: parse args, load config, and dispatch to the selected mode."""
    args = parse_args()
    try:
        config = resolve_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.seed is not None:
        config["seed"] = args.seed

    logging.basicConfig(
        level=(args.log_level or config.get("log_level", "INFO")).upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.mode == "play":
        from tetris_engine.play import play_manual
        play_manual(config)

    elif args.mode == "simulate":
        from tetris_engine.play import simulate
        base_seed = config.get("seed")
        for game in range(1, args.games + 1):
            if base_seed is not None:
                config["seed"] = base_seed + game - 1
            summary = simulate(config, max_ticks=args.max_ticks)
            print(
                f"Game {game}/{args.games} | Score: {summary['score']}"
                f" | High score: {summary['high_score']} | Ticks: {summary['ticks']}"
            )

    else:
        print(f"Unknown mode: {args.mode}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
