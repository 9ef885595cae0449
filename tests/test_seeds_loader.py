from datetime import datetime, timezone
from pathlib import Path
import textwrap

import pytest

from lab_copilot.configuration import ConfigurationModel
from lab_copilot.seeds import BUILTIN_SOURCE, SeedLoadError, SeedLoader, SessionSeed


def write_seed(path: Path, *, seed_id: str = "titration", minutes: int = 45) -> None:
    path.write_text(
        textwrap.dedent(
            """
            id: {seed_id}
            title: Acid-base titration
            task_name: Titration of Acetic Acid
            chemicals:
              - Acetic Acid
              - Sodium Hydroxide
            procedures:
              - Titration
            safety_controls:
              - Safety Goggles
            estimated_duration_minutes: {minutes}
            """
        ).strip().format(seed_id=seed_id, minutes=minutes),
        encoding="utf-8",
    )


def test_loader_includes_builtin_preset(tmp_path: Path) -> None:
    loader = SeedLoader([tmp_path])

    seeds = loader.load_all()

    assert list(seeds) == ["methanol-distillation"]
    assert seeds["methanol-distillation"].estimated_duration_minutes == 120


def test_loader_merges_paths(tmp_path: Path) -> None:
    base = tmp_path / "base"
    base.mkdir()
    override = tmp_path / "override"
    override.mkdir()

    write_seed(base / "titration.yaml", minutes=45)
    write_seed(override / "titration.yml", minutes=60)

    loader = SeedLoader([base, override, tmp_path / "missing"])
    seeds = loader.load_all()

    assert loader.search_paths == [base, override]
    assert seeds["titration"].estimated_duration_minutes == 60
    assert seeds["titration"].chemicals == ["Acetic Acid", "Sodium Hydroxide"]


def test_files_override_builtin_preset(tmp_path: Path) -> None:
    write_seed(tmp_path / "methanol.yaml", seed_id="methanol-distillation", minutes=90)

    seed = SeedLoader([tmp_path]).get("methanol-distillation")

    assert seed.estimated_duration_minutes == 90


def test_loader_reports_validation_error(tmp_path: Path) -> None:
    invalid = tmp_path / "invalid"
    invalid.mkdir()
    (invalid / "broken.yaml").write_text("id: \ntask_name: test", encoding="utf-8")

    loader = SeedLoader([invalid])

    with pytest.raises(SeedLoadError):
        loader.load_all()


def test_loader_reports_unknown_seed(tmp_path: Path) -> None:
    with pytest.raises(SeedLoadError):
        SeedLoader([tmp_path]).get("does-not-exist")


def test_seed_from_artifact() -> None:
    model = ConfigurationModel()
    model.set_field("task_name", "Recrystallization")
    model.add_item("chemicals", "Ethanol")
    model.add_item("procedures", "Hot filtration")
    model.set_field("exposure.duration_value", "1.5")
    model.set_field("exposure.duration_unit", "hours")
    artifact = model.generate_artifact(now=datetime(2025, 1, 1, tzinfo=timezone.utc))

    seed = SessionSeed.from_artifact(artifact)

    assert seed.task_name == "Recrystallization"
    assert seed.chemicals == ["Ethanol"]
    assert seed.safety_controls == []
    assert seed.estimated_duration_minutes == 90


def test_seed_without_id_is_keyed_by_file_stem(tmp_path: Path) -> None:
    (tmp_path / "recrystallization.yaml").write_text(
        "task_name: Recrystallization of Benzoic Acid\nestimated_duration_minutes: 30\n",
        encoding="utf-8",
    )

    seed = SeedLoader([tmp_path]).get("recrystallization")

    assert seed.id == "recrystallization"
    assert seed.title == "Recrystallization of Benzoic Acid"


def test_loader_reports_where_seeds_came_from(tmp_path: Path) -> None:
    write_seed(tmp_path / "titration.yaml")
    loader = SeedLoader([tmp_path])

    assert loader.sources() == {}
    loader.load_all()

    assert loader.sources() == {
        "methanol-distillation": BUILTIN_SOURCE,
        "titration": str(tmp_path / "titration.yaml"),
    }
