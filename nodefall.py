"""
nodefall.py

Real entrypoint that launches the game.

Integration
- Loads config (file, env overrides, command line overrides)
- Configures logging
- Either runs the pure logic self checks, a headless simulation, or the Qt window
"""

from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
from pathlib import Path
from typing import List, Optional

from config import GameConfig, load_config


def _run_self_tests() -> None:
    import character_motion
    import collision
    import field_models
    import game_engine
    import goal_machine
    import path_tracker
    import row_generator
    import row_window
    import scroll_clock

    for module in (
        field_models,
        scroll_clock,
        row_generator,
        row_window,
        path_tracker,
        collision,
        goal_machine,
        character_motion,
        game_engine,
    ):
        module._run_unit_tests()
        print(f"{module.__name__}.py: ok")


def _load_game_config(config_path: Optional[str], seed: Optional[int]) -> GameConfig:
    config, _resolved_path = load_config(Path(config_path) if config_path else None)
    if seed is not None:
        config = config.model_copy(update={"seed": int(seed)})
    return config


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nodefall arcade game")
    parser.add_argument("--config", default=None, help="Path to a nodefall_config.json file.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible field.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--run-tests",
        action="store_true",
        help="Run pure logic self checks (no Qt).",
    )
    parser.add_argument(
        "--headless-ticks",
        type=int,
        default=0,
        help="Simulate this many ticks without a window and print a JSON summary.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argument_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.run_tests:
        _run_self_tests()
        print("Self checks passed.")
        return 0

    try:
        config = _load_game_config(args.config, args.seed)
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    if args.headless_ticks > 0:
        import game_engine

        summary = game_engine.run_headless(config, int(args.headless_ticks))
        print(json.dumps({"ok": True, "summary": asdict(summary)}, ensure_ascii=False, indent=2))
        return 0

    import game_window

    return game_window.run_app(config)


if __name__ == "__main__":
    raise SystemExit(main())
