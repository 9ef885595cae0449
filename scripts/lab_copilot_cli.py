"""Lab Copilot diagnostics CLI."""

from __future__ import annotations

import argparse
import json
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import yaml

from lab_copilot.config import LabCopilotSettings
from lab_copilot.configuration import ConfigurationModel, InvalidConfigurationError
from lab_copilot.seeds import SeedLoadError, SeedLoader, SessionSeed
from lab_copilot.session import MockLogFeed, SessionModel


def seed_loader(settings: LabCopilotSettings) -> SeedLoader:
    return SeedLoader(settings.seed_paths)


def load_task_model(path: Path) -> ConfigurationModel:
    try:
        document = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        print(f"Cannot read task file: {exc}")
        raise SystemExit(1)
    if not isinstance(document, dict):
        print(f"Task file {path} must contain a mapping")
        raise SystemExit(1)
    try:
        return ConfigurationModel.from_document(document)
    except ValueError as exc:
        print(f"Invalid task file {path}: {exc}")
        raise SystemExit(1)


def cmd_artifact(args: argparse.Namespace) -> None:
    model = load_task_model(args.task_file)
    try:
        artifact = model.generate_artifact()
    except InvalidConfigurationError as exc:
        print(str(exc))
        raise SystemExit(1)
    for note in model.recommendations():
        print(f"Recommendation: {note}", file=sys.stderr)
    print(artifact.to_json(indent=None if args.compact else 2))


def cmd_seeds(args: argparse.Namespace) -> None:
    settings = LabCopilotSettings()
    loader = seed_loader(settings)
    try:
        seeds = loader.load_all()
    except SeedLoadError as exc:
        print(f"Seeds unavailable: {exc}")
        raise SystemExit(1)
    if args.json:
        print(json.dumps([seed.model_dump() for seed in seeds.values()], indent=2))
    else:
        sources = loader.sources()
        for seed in seeds.values():
            print(
                f"{seed.id} [{seed.estimated_duration_minutes:g} min] -> {seed.task_name}"
                f" ({sources[seed.id]})"
            )


def cmd_simulate(args: argparse.Namespace) -> None:
    """Replay a session on a synthetic clock and print the final snapshot."""

    settings = LabCopilotSettings()
    if args.task_file:
        model = load_task_model(args.task_file)
        try:
            seed = SessionSeed.from_artifact(model.generate_artifact())
        except InvalidConfigurationError as exc:
            print(str(exc))
            raise SystemExit(1)
    else:
        try:
            seed = seed_loader(settings).get(args.seed or settings.default_seed)
        except SeedLoadError as exc:
            print(f"Seeds unavailable: {exc}")
            raise SystemExit(1)

    current = datetime.now(timezone.utc)

    def clock() -> datetime:
        return current

    session_model = SessionModel(clock=clock)
    feed = MockLogFeed(rng=random.Random(args.rng_seed))
    session_model.start(seed)

    step = timedelta(seconds=settings.tick_interval)
    ticks = int(args.elapsed / settings.tick_interval)
    log_every = max(ticks // args.logs, 1) if args.logs else 0
    emitted = 0
    for index in range(1, ticks + 1):
        current += step
        session_model.tick()
        if log_every and emitted < args.logs and index % log_every == 0:
            feed.emit(session_model)
            emitted += 1

    print(json.dumps(session_model.snapshot(), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lab Copilot diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_artifact = sub.add_parser("artifact", help="Build a configuration artifact from a task file")
    p_artifact.add_argument("task_file", type=Path)
    p_artifact.add_argument("--compact", action="store_true", help="Single-line JSON")
    p_artifact.set_defaults(func=cmd_artifact)

    p_seeds = sub.add_parser("seeds", help="List available session seeds")
    p_seeds.add_argument("--json", action="store_true", help="Output JSON")
    p_seeds.set_defaults(func=cmd_seeds)

    p_simulate = sub.add_parser("simulate", help="Replay a monitoring session on a synthetic clock")
    p_simulate.add_argument("--seed", help="Seed id (defaults to LAB_COPILOT_DEFAULT_SEED)")
    p_simulate.add_argument("--task-file", type=Path, help="Seed the session from a task file")
    p_simulate.add_argument(
        "--elapsed", type=float, default=60.0, help="Simulated seconds of monitoring"
    )
    p_simulate.add_argument("--logs", type=int, default=0, help="Number of simulated log entries")
    p_simulate.add_argument("--rng-seed", type=int, default=None)
    p_simulate.set_defaults(func=cmd_simulate)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
