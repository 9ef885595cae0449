"""Discovery of session seeds: built-in presets plus YAML seed files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from .models import BUILTIN_SEEDS, SessionSeed

logger = logging.getLogger(__name__)

BUILTIN_SOURCE = "builtin"

_SEED_SUFFIXES = (".yml", ".yaml")


class SeedLoadError(RuntimeError):
    """Raised when one or more seed files cannot be parsed."""


def _seed_files(base: Path) -> list[Path]:
    return sorted(path for path in base.iterdir() if path.suffix in _SEED_SUFFIXES)


class SeedLoader:
    """Builds the seed catalog a session can be started from.

    Built-in presets come first. Each YAML file under a search path then adds
    or replaces a seed; a file without an ``id`` is keyed by its file stem, so
    ``titration.yaml`` becomes seed ``titration``, and a missing title falls
    back to the task name. Later search paths win.
    """

    def __init__(
        self,
        search_paths: Iterable[Path] | None = None,
        *,
        include_builtin: bool = True,
    ) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.is_dir()]
        self._include_builtin = include_builtin
        self._sources: dict[str, str] = {}

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def _read_seed(self, path: Path) -> SessionSeed | None:
        document: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
        if document is None:
            return None
        if not isinstance(document, dict):
            raise ValueError("a seed file must contain a mapping")
        document.setdefault("id", path.stem)
        if not document.get("title"):
            document["title"] = document.get("task_name", "")
        return SessionSeed.model_validate(document)

    def load_all(self) -> dict[str, SessionSeed]:
        """Return seeds keyed by id; all file errors are raised together."""

        seeds: dict[str, SessionSeed] = {}
        sources: dict[str, str] = {}
        if self._include_builtin:
            for seed in BUILTIN_SEEDS:
                seeds[seed.id] = seed
                sources[seed.id] = BUILTIN_SOURCE

        errors: list[str] = []
        for base in self._search_paths:
            for path in _seed_files(base):
                try:
                    seed = self._read_seed(path)
                except yaml.YAMLError as exc:
                    errors.append(f"Failed to parse YAML in {path}: {exc}")
                    continue
                except (ValidationError, ValueError) as exc:
                    errors.append(f"Seed validation error in {path}: {exc}")
                    continue
                if seed is None:
                    continue
                if seed.id in sources and sources[seed.id] != BUILTIN_SOURCE:
                    logger.debug(
                        "Seed overridden",
                        extra={"seed_id": seed.id, "previous": sources[seed.id], "source": str(path)},
                    )
                seeds[seed.id] = seed
                sources[seed.id] = str(path)

        if errors:
            raise SeedLoadError("; ".join(errors))

        self._sources = sources
        return seeds

    def sources(self) -> dict[str, str]:
        """Where each seed of the last :meth:`load_all` came from.

        Values are a file path, or ``"builtin"`` for the presets.
        """

        return dict(self._sources)

    def catalog(self) -> list[dict[str, Any]]:
        """Summaries of every seed, for listing to a user."""

        seeds = self.load_all()
        return [
            {
                "id": seed.id,
                "title": seed.title,
                "task_name": seed.task_name,
                "estimated_duration_minutes": seed.estimated_duration_minutes,
                "source": self._sources[seed.id],
            }
            for seed in seeds.values()
        ]

    def get(self, seed_id: str) -> SessionSeed:
        seeds = self.load_all()
        try:
            return seeds[seed_id]
        except KeyError as exc:
            raise SeedLoadError(
                f"Seed '{seed_id}' not found; available: {', '.join(sorted(seeds))}"
            ) from exc


__all__ = ["BUILTIN_SOURCE", "SeedLoadError", "SeedLoader"]
