"""Tool registration for the Lab Copilot MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from fastmcp import Context, FastMCP

from ..config import LabCopilotSettings
from ..configuration import ConfigurationModel, InvalidConfigurationError
from ..seeds import SeedLoader, SessionSeed
from ..session import MockLogFeed, SessionModel


@dataclass(slots=True)
class ToolHandles:
    add_item: Any
    remove_item: Any
    set_field: Any
    validate_configuration: Any
    generate_artifact: Any
    list_seeds: Any
    start_session: Any
    tick_session: Any
    pause_session: Any
    resume_session: Any
    reset_session: Any
    complete_session: Any
    append_log: Any
    simulate_log: Any
    session_snapshot: Any
    configuration: ConfigurationModel
    session_model: SessionModel


def register_tools(
    server: FastMCP,
    *,
    settings: LabCopilotSettings,
    seeds: SeedLoader,
    clock: Callable[[], datetime] | None = None,
    feed: MockLogFeed | None = None,
) -> ToolHandles:
    """Register Lab Copilot's MCP tools on the server.

    All tools share one configuration and one session for the lifetime of the
    server.
    """

    configuration = ConfigurationModel(clock=clock)
    session_model = SessionModel(clock=clock)
    log_feed = feed or MockLogFeed()

    def _configuration_state() -> dict[str, Any]:
        return {
            "configuration": configuration.snapshot().model_dump(mode="json"),
            "valid": configuration.is_valid(),
            "missing": configuration.missing_requirements(),
            "recommendations": configuration.recommendations(),
        }

    def _add_item(field: str, value: str, context: Context | None = None) -> dict[str, Any]:
        """Add a chemical, procedure or safety control."""

        added = configuration.add_item(field, value)
        _emit_log(context, "debug", "Add item", extra={"field": field, "added": added})
        return {"field": field, "added": added, "items": list(configuration.items(field))}

    def _remove_item(field: str, index: int, context: Context | None = None) -> dict[str, Any]:
        """Remove a list item by position."""

        removed = configuration.remove_item(field, index)
        _emit_log(context, "debug", "Remove item", extra={"field": field, "index": index})
        return {"field": field, "removed": removed, "items": list(configuration.items(field))}

    def _set_field(path: str, value: Any = None, context: Context | None = None) -> dict[str, Any]:
        """Set a scalar configuration field by dotted path."""

        configuration.set_field(path, value)
        _emit_log(context, "debug", "Set configuration field", extra={"path": path})
        return _configuration_state()

    def _validate_configuration(context: Context | None = None) -> dict[str, Any]:
        return _configuration_state()

    def _generate_artifact(context: Context | None = None) -> dict[str, Any]:
        """Generate the canonical configuration artifact."""

        try:
            artifact = configuration.generate_artifact()
        except InvalidConfigurationError as exc:
            _emit_log(context, "warning", "Artifact rejected", extra={"missing": exc.missing})
            raise
        _emit_log(
            context,
            "info",
            "Generated artifact",
            extra={"task_name": artifact.task_name},
        )
        return artifact.to_schema()

    tool_add = server.tool(
        name="add_item",
        description=(
            "Add a trimmed item to chemicals, procedures or safety_controls. Blank and "
            "duplicate values are ignored."
        ),
    )(_add_item)

    tool_remove = server.tool(
        name="remove_item",
        description="Remove the item at a zero-based index; out-of-range indices are ignored.",
    )(_remove_item)

    tool_set = server.tool(
        name="set_field",
        description=(
            "Set task_name, additional_notes, exposure.personnel_count, "
            "exposure.duration_value or exposure.duration_unit."
        ),
    )(_set_field)

    tool_validate = server.tool(
        name="validate_configuration",
        description="Report validity, unmet requirements and recommendations for the configuration.",
    )(_validate_configuration)

    tool_generate = server.tool(
        name="generate_artifact",
        description="Produce the taskConfiguration JSON artifact for downstream risk assessment.",
    )(_generate_artifact)

    def _list_seeds(context: Context | None = None) -> list[dict[str, Any]]:
        """List the session seeds available to start_session."""

        catalog = seeds.catalog()
        _emit_log(context, "debug", "Listing session seeds", extra={"count": len(catalog)})
        return catalog

    def _start_session(
        seed_id: str | None = None,
        from_artifact: bool = False,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Start monitoring from a named seed or from the latest artifact."""

        if from_artifact:
            artifact = configuration.latest_artifact
            if artifact is None:
                raise RuntimeError("No configuration artifact has been generated yet")
            seed = SessionSeed.from_artifact(artifact)
        else:
            seed = seeds.get(seed_id or settings.default_seed)

        session = session_model.start(seed)
        _emit_log(
            context,
            "info",
            "Started session",
            extra={"session_id": session.session_id, "seed_id": seed.id},
        )
        return session_model.snapshot()

    def _tick_session(context: Context | None = None) -> dict[str, Any]:
        session_model.tick()
        return session_model.snapshot()

    def _pause_session(context: Context | None = None) -> dict[str, Any]:
        changed = session_model.pause()
        _emit_log(context, "info", "Pause requested", extra={"changed": changed})
        return {"changed": changed, **session_model.snapshot()}

    def _resume_session(context: Context | None = None) -> dict[str, Any]:
        changed = session_model.resume()
        _emit_log(context, "info", "Resume requested", extra={"changed": changed})
        return {"changed": changed, **session_model.snapshot()}

    def _reset_session(context: Context | None = None) -> dict[str, Any]:
        session_model.reset()
        _emit_log(context, "info", "Reset requested")
        return session_model.snapshot()

    def _complete_session(context: Context | None = None) -> dict[str, Any]:
        changed = session_model.complete()
        _emit_log(context, "info", "Completion requested", extra={"changed": changed})
        return {"changed": changed, **session_model.snapshot()}

    def _append_log(
        kind: str,
        content: str,
        confidence: float | None = None,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Append an operator or AI entry to the session log."""

        entry = session_model.append_log(kind, content, confidence=confidence)
        _emit_log(context, "debug", "Appended log", extra={"entry_id": entry.id, "kind": entry.kind})
        return {**entry.model_dump(mode="json"), "label": entry.label}

    def _simulate_log(context: Context | None = None) -> dict[str, Any]:
        entry = log_feed.emit(session_model)
        _emit_log(context, "debug", "Simulated log", extra={"entry_id": entry.id, "kind": entry.kind})
        return {**entry.model_dump(mode="json"), "label": entry.label}

    def _session_snapshot(context: Context | None = None) -> dict[str, Any]:
        return session_model.snapshot()

    tool_seeds = server.tool(
        name="list_seeds",
        description="List session seeds (built-in presets and YAML files).",
    )(_list_seeds)

    tool_start = server.tool(
        name="start_session",
        description=(
            "Start a monitoring session from seed_id (default seed when omitted) or, with "
            "from_artifact=true, from the latest generated configuration artifact."
        ),
    )(_start_session)

    tool_tick = server.tool(
        name="tick_session",
        description="Advance the session clock to the current time; no effect unless running.",
    )(_tick_session)

    tool_pause = server.tool(name="pause_session", description="Pause the session clock.")(
        _pause_session
    )

    tool_resume = server.tool(
        name="resume_session",
        description="Resume a paused session; paused time is not counted.",
    )(_resume_session)

    tool_reset = server.tool(
        name="reset_session",
        description="Zero the elapsed time and re-base the start time, keeping status and logs.",
    )(_reset_session)

    tool_complete = server.tool(
        name="complete_session",
        description="Mark the session completed. Completed sessions cannot be resumed.",
    )(_complete_session)

    tool_append = server.tool(
        name="append_log",
        description=(
            "Append a log entry of kind operator_transcript, ai_agent_transcript or "
            "ai_agent_interpretation (confidence 0-1 only for interpretations)."
        ),
    )(_append_log)

    tool_simulate = server.tool(
        name="simulate_log",
        description="Append a randomly chosen canned log entry to the session.",
    )(_simulate_log)

    tool_snapshot = server.tool(
        name="session_snapshot",
        description="Return the current session state, progress and log stream.",
    )(_session_snapshot)

    return ToolHandles(
        add_item=tool_add,
        remove_item=tool_remove,
        set_field=tool_set,
        validate_configuration=tool_validate,
        generate_artifact=tool_generate,
        list_seeds=tool_seeds,
        start_session=tool_start,
        tick_session=tool_tick,
        pause_session=tool_pause,
        resume_session=tool_resume,
        reset_session=tool_reset,
        complete_session=tool_complete,
        append_log=tool_append,
        simulate_log=tool_simulate,
        session_snapshot=tool_snapshot,
        configuration=configuration,
        session_model=session_model,
    )


__all__ = ["register_tools", "ToolHandles"]

logger = logging.getLogger(__name__)


def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Best-effort logging that prefers the MCP context logger when available."""

    payload = extra or {}

    if context is not None:
        ctx_logger = getattr(context, "logger", None)
        if ctx_logger is not None:
            log_method = getattr(ctx_logger, level, None)
            if callable(log_method):
                log_method(message, extra=payload)
                return

    fallback = getattr(logger, level, logger.info)
    fallback(message, extra=payload)
