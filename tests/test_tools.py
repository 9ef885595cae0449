from __future__ import annotations

import random
from pathlib import Path

import pytest

from lab_copilot.config import LabCopilotSettings
from lab_copilot.configuration import InvalidConfigurationError
from lab_copilot.seeds import SeedLoader
from lab_copilot.session import MockLogFeed
from lab_copilot.tools import ToolHandles, register_tools


class StubTool:
    def __init__(self, fn, name):
        self.fn = fn
        self.name = name


class StubServer:
    def __init__(self) -> None:
        self._tools: dict[str, StubTool] = {}

    def tool(self, *args, **kwargs):
        provided_name = None
        if args and isinstance(args[0], str):
            provided_name = args[0]
        provided_name = kwargs.get("name", provided_name)

        def decorator(fn):
            tool_name = provided_name or fn.__name__
            tool = StubTool(fn, tool_name)
            self._tools[tool_name] = tool
            return tool

        return decorator


class StubLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict]] = []

    def info(self, message, extra=None):
        self.records.append(("info", message, extra or {}))

    def debug(self, message, extra=None):
        self.records.append(("debug", message, extra or {}))

    def warning(self, message, extra=None):
        self.records.append(("warning", message, extra or {}))


class StubContext:
    def __init__(self) -> None:
        self.logger = StubLogger()


def _register(tmp_path: Path, clock) -> tuple[StubServer, ToolHandles]:
    server = StubServer()
    settings = LabCopilotSettings(LAB_COPILOT_SEED_PATHS=[str(tmp_path)])
    handles = register_tools(
        server,
        settings=settings,
        seeds=SeedLoader(settings.seed_paths),
        clock=clock,
        feed=MockLogFeed(rng=random.Random(3)),
    )
    return server, handles


def test_all_tools_are_registered(tmp_path: Path, clock) -> None:
    server, _ = _register(tmp_path, clock)

    assert set(server._tools) == {
        "add_item",
        "remove_item",
        "set_field",
        "validate_configuration",
        "generate_artifact",
        "list_seeds",
        "start_session",
        "tick_session",
        "pause_session",
        "resume_session",
        "reset_session",
        "complete_session",
        "append_log",
        "simulate_log",
        "session_snapshot",
    }


def test_configuration_tools_build_an_artifact(tmp_path: Path, clock) -> None:
    _, handles = _register(tmp_path, clock)
    context = StubContext()

    handles.set_field.fn("taskName", "Methanol Distillation", context=context)
    assert handles.add_item.fn("chemicals", " Methanol ", context=context)["items"] == ["Methanol"]
    assert handles.add_item.fn("chemicals", "Methanol")["added"] is False
    handles.add_item.fn("procedures", "Distillation")
    handles.add_item.fn("procedures", "Fraction Collection")
    removed = handles.remove_item.fn("procedures", 1)
    assert removed == {"field": "procedures", "removed": "Fraction Collection", "items": ["Distillation"]}

    state = handles.set_field.fn("exposure.duration_value", "2")
    assert state["valid"] is True
    assert state["recommendations"] == ["at least one safety control is recommended"]

    schema = handles.generate_artifact.fn(context=context)

    assert schema["taskConfiguration"]["exposure"]["durationInMinutes"] == 120
    assert schema["taskConfiguration"]["timestamp"] == clock().isoformat()
    assert any(message == "Generated artifact" for _, message, _ in context.logger.records)


def test_generate_artifact_reports_missing_fields(tmp_path: Path, clock) -> None:
    _, handles = _register(tmp_path, clock)
    context = StubContext()

    with pytest.raises(InvalidConfigurationError):
        handles.generate_artifact.fn(context=context)

    level, message, extra = context.logger.records[-1]
    assert level == "warning"
    assert extra["missing"] == ["task_name", "chemicals", "procedures", "duration"]


def test_session_tools_follow_the_clock(tmp_path: Path, clock) -> None:
    _, handles = _register(tmp_path, clock)

    started = handles.start_session.fn()
    assert started["task_name"] == "Methanol Distillation Process"
    assert started["status"] == "in_progress"

    clock.advance(1500)
    assert handles.tick_session.fn()["elapsed_seconds"] == 1500

    paused = handles.pause_session.fn()
    assert paused["changed"] is True
    clock.advance(1500)
    assert handles.tick_session.fn()["elapsed_seconds"] == 1500

    assert handles.resume_session.fn()["status"] == "in_progress"
    clock.advance(500)
    snapshot = handles.tick_session.fn()
    assert snapshot["elapsed_seconds"] == 2000
    assert snapshot["progress_ratio"] == pytest.approx(2000 / 7200)

    entry = handles.append_log.fn("ai_agent_interpretation", "Flask secured", confidence=0.9)
    assert entry["label"] == "AI Vision"
    simulated = handles.simulate_log.fn()
    assert simulated["id"] != entry["id"]

    reset = handles.reset_session.fn()
    assert reset["elapsed_seconds"] == 0
    assert len(reset["logs"]) == 2

    completed = handles.complete_session.fn()
    assert completed["status"] == "completed"
    assert handles.resume_session.fn()["changed"] is False
    assert handles.session_snapshot.fn()["status_label"] == "COMPLETED"


def test_start_session_from_artifact(tmp_path: Path, clock) -> None:
    _, handles = _register(tmp_path, clock)

    with pytest.raises(RuntimeError):
        handles.start_session.fn(from_artifact=True)

    handles.set_field.fn("task_name", "Extraction")
    handles.add_item.fn("chemicals", "Diethyl Ether")
    handles.add_item.fn("procedures", "Liquid-liquid Extraction")
    handles.set_field.fn("exposure.duration_value", "45")
    handles.set_field.fn("exposure.duration_unit", "minutes")
    handles.generate_artifact.fn()

    snapshot = handles.start_session.fn(from_artifact=True)

    assert snapshot["task_name"] == "Extraction"
    assert snapshot["estimated_duration_minutes"] == 45
    assert snapshot["estimated_display"] == "00:45:00"


def test_list_seeds_reads_seed_directory(tmp_path: Path, clock) -> None:
    (tmp_path / "titration.yaml").write_text(
        "id: titration\ntask_name: Titration\nestimated_duration_minutes: 30\n",
        encoding="utf-8",
    )
    _, handles = _register(tmp_path, clock)

    catalog = handles.list_seeds.fn()

    sources = {item["id"]: item["source"] for item in catalog}
    assert sources == {
        "methanol-distillation": "builtin",
        "titration": str(tmp_path / "titration.yaml"),
    }
    started = handles.start_session.fn(seed_id="titration")
    assert started["estimated_duration_minutes"] == 30
