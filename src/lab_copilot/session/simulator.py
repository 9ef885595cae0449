"""Simulated log stream standing in for live transcription and vision."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from .engine import SessionModel
from .models import LogEntry


@dataclass(frozen=True, slots=True)
class LogDraft:
    kind: str
    content: str
    confidence: float | None = None


DEFAULT_DRAFTS: tuple[LogDraft, ...] = (
    LogDraft(
        kind="operator_transcript",
        content="Temperature reached 64°C, seeing more vapor production.",
    ),
    LogDraft(
        kind="ai_agent_transcript",
        content=(
            "Perfect. You should start seeing more consistent distillate flow. "
            "Monitor the head temperature."
        ),
    ),
    LogDraft(
        kind="ai_agent_interpretation",
        content="Increased vapor in distillation column. Process efficiency improving.",
        confidence=0.87,
    ),
)


class MockLogFeed:
    """Picks canned entries at random and appends them to a session."""

    def __init__(
        self,
        drafts: Sequence[LogDraft] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._drafts = tuple(drafts) if drafts is not None else DEFAULT_DRAFTS
        if not self._drafts:
            raise ValueError("MockLogFeed requires at least one draft")
        self._rng = rng or random.Random()

    @property
    def drafts(self) -> tuple[LogDraft, ...]:
        return self._drafts

    def next_draft(self) -> LogDraft:
        return self._rng.choice(self._drafts)

    def emit(self, model: SessionModel) -> LogEntry:
        draft = self.next_draft()
        return model.append_log(draft.kind, draft.content, confidence=draft.confidence)


__all__ = ["DEFAULT_DRAFTS", "LogDraft", "MockLogFeed"]
