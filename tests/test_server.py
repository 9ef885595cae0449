from __future__ import annotations

import json
from pathlib import Path

from lab_copilot.config import LabCopilotSettings
from lab_copilot.seeds import METHANOL_DISTILLATION
from lab_copilot.server import create_server


class StubContext:
    request_id = "req-1"


def test_create_server_wires_shared_models(tmp_path: Path) -> None:
    settings = LabCopilotSettings(LAB_COPILOT_SEED_PATHS=[str(tmp_path)])

    server = create_server(settings)

    handles = server.tool_handles
    assert server.configuration is handles.configuration
    assert server.session_model is handles.session_model
    assert server.seed_loader.search_paths == [tmp_path]
    assert server.session_model.session is None


def test_status_resource_reports_configuration_and_session(tmp_path: Path) -> None:
    settings = LabCopilotSettings(LAB_COPILOT_SEED_PATHS=[str(tmp_path)])
    server = create_server(settings)

    before = json.loads(server.status_resource(StubContext()))

    assert before["session"] is None
    assert before["configuration"]["valid"] is False
    assert before["configuration"]["missing"] == ["task_name", "chemicals", "procedures", "duration"]
    assert before["configuration"]["latest_artifact_at"] is None
    assert before["seeds"]["ids"] == ["methanol-distillation"]
    assert before["request_id"] == "req-1"

    server.session_model.start(METHANOL_DISTILLATION)
    after = json.loads(server.status_resource(StubContext()))

    session = after["session"]
    assert session["task_name"] == "Methanol Distillation Process"
    assert session["status"] == "in_progress"
    assert session["log_count"] == 0
    assert session["progress_ratio"] == 0
