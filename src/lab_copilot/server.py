"""FastMCP server bootstrap for Lab Copilot."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastmcp import Context, FastMCP

from . import __version__
from .config import LabCopilotSettings, get_settings
from .seeds import SeedLoadError, SeedLoader
from .tools import register_tools


def configure_logging(level: str) -> None:
    """Configure root logging for the Lab Copilot server."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def create_server(settings: Optional[LabCopilotSettings] = None) -> FastMCP:
    """Instantiate the FastMCP server with configuration and session tools."""

    settings = settings or get_settings()

    seed_loader = SeedLoader(settings.seed_paths)

    server = FastMCP(
        name="Lab Copilot",
        version=__version__,
        instructions=(
            "Lab Copilot captures a laboratory task configuration (chemicals, "
            "procedures, safety controls, exposure) and tracks a monitoring session "
            "with elapsed time, progress and a classified operator/AI log."
        ),
    )

    handles = register_tools(server, settings=settings, seeds=seed_loader)
    configuration = handles.configuration
    session_model = handles.session_model

    def status_resource(context: Context) -> str:
        """Return a JSON string summarizing basic runtime state."""

        try:
            seed_ids = sorted(seed_loader.load_all().keys())
            seed_error: str | None = None
        except SeedLoadError as exc:
            seed_ids = []
            seed_error = str(exc)

        session = session_model.session
        session_summary = None
        if session is not None:
            session_summary = {
                "session_id": session.session_id,
                "task_name": session.task_name,
                "status": session.status,
                "elapsed_seconds": session.elapsed_seconds,
                "progress_ratio": session_model.progress_ratio(),
                "log_count": len(session.logs),
            }

        artifact = configuration.latest_artifact
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server_version": __version__,
            "log_level": settings.log_level,
            "tick_interval": settings.tick_interval,
            "seeds": {
                "count": len(seed_ids),
                "ids": seed_ids,
                "default": settings.default_seed,
                "error": seed_error,
            },
            "configuration": {
                "valid": configuration.is_valid(),
                "missing": configuration.missing_requirements(),
                "recommendations": configuration.recommendations(),
                "latest_artifact_at": artifact.generated_at.isoformat() if artifact else None,
            },
            "session": session_summary,
            "request_id": getattr(context, "request_id", None),
        }
        return json.dumps(payload)

    server.resource(
        "resource://lab-copilot/status",
        name="lab_copilot_status",
        title="Lab Copilot Status",
        description="Provides the current configuration and session state.",
        mime_type="application/json",
        tags={"status", "health"},
    )(status_resource)

    setattr(server, "seed_loader", seed_loader)
    setattr(server, "tool_handles", handles)
    setattr(server, "configuration", configuration)
    setattr(server, "session_model", session_model)
    setattr(server, "status_resource", status_resource)
    return server


def main() -> None:
    """Entry point for running the Lab Copilot server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching Lab Copilot server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "seed_paths": [str(path) for path in settings.seed_paths],
        },
    )
    server.run()


if __name__ == "__main__":
    main()
