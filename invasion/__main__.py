"""Entry point: ``python -m invasion``.

Supports two modes:
  - ``python -m invasion``          → Launch the FastAPI server
  - ``python -m invasion run``      → Headless seeded invasion with an optional JSON replay
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dungeon Invasion Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=str, default="invasion-42")
    srv.add_argument("--day", type=int, default=12)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless mode ---
    run = sub.add_parser("run", help="Run one headless invasion against the sample dungeon")
    run.add_argument("--seed", type=str, default="invasion-42")
    run.add_argument("--day", type=int, default=12)
    run.add_argument("--max-turns", type=int, default=30)
    run.add_argument("--replay", type=str, default=None, help="Write a JSON replay to this path")
    run.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from invasion.api.app import create_app
    from invasion.config import InvasionConfig

    config = InvasionConfig(seed=args.seed, day=args.day, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_headless(args: argparse.Namespace) -> None:
    from invasion.config import InvasionConfig
    from invasion.core.content import DEFAULT_CATALOG
    from invasion.core.dungeon import sample_layout
    from invasion.engine.encounter import InvasionEncounter
    from invasion.systems.composition import calculate_dungeon_profile, generate_invasion_party
    from invasion.utils.logging import setup_logging
    from invasion.utils.replay import ReplayRecorder

    config = InvasionConfig(
        seed=args.seed,
        day=args.day,
        max_turns=args.max_turns,
        log_level=args.log_level,
        replay_file=args.replay or InvasionConfig.replay_file,
    )
    setup_logging(config.log_level)

    dungeon = sample_layout(config.day)
    profile = calculate_dungeon_profile(dungeon, DEFAULT_CATALOG)
    logger.info(
        "Dungeon profile: corruption %d, wealth %d, knowledge %d, %d rooms, threat %d",
        profile.corruption, profile.wealth, profile.knowledge, profile.size, profile.threat_level,
    )
    invaders = generate_invasion_party(profile, config.seed, DEFAULT_CATALOG)

    recorder = ReplayRecorder(config.replay_file, config.seed) if args.replay else None
    encounter = InvasionEncounter(config, DEFAULT_CATALOG, dungeon, invaders=invaders, recorder=recorder)
    report = encounter.run(config.seed)

    for objective in report.objectives:
        logger.info(
            "  %-16s %3d%%%s", objective.name, objective.progress, " (completed)" if objective.is_completed else "",
        )
    if report.rewards is not None:
        logger.info("Rewards: %s", report.rewards)
    if report.penalties is not None:
        logger.info("Penalties: %s", report.penalties)
    for prisoner in report.prisoners:
        logger.info("Prisoner taken: %s (%s)", prisoner.name, prisoner.invader_class)

    if recorder is not None:
        recorder.flush()
        logger.info("Done. Replay written to %s", config.replay_file)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "run":
        _run_headless(args)


if __name__ == "__main__":
    main()
