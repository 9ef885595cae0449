"""Task configuration models and the canonical configuration artifact."""

from __future__ import annotations

import json
import math
import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DurationUnit = Literal["minutes", "hours", "days"]

UNIT_FACTORS: dict[str, int] = {"minutes": 1, "hours": 60, "days": 1440}

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def duration_in_minutes(value: str, unit: str) -> float:
    """Convert a free-text duration into minutes.

    Only the leading number of the text is read, so ``"2 hours"`` is 2 and
    ``"1_000"`` is 1. Text without a leading finite number counts as zero.
    """

    match = _LEADING_NUMBER.match(value or "")
    if match is None:
        return 0.0
    amount = float(match.group(0))
    if not math.isfinite(amount):
        return 0.0
    return amount * UNIT_FACTORS.get(unit, 0)


class Exposure(BaseModel):
    """Personnel exposure for a laboratory task."""

    personnel_count: int = Field(default=1, ge=1, description="Number of people exposed.")
    duration_value: str = Field(
        default="", description="Estimated duration as entered; numeric text or empty."
    )
    duration_unit: DurationUnit = Field(default="hours", description="Unit of duration_value.")


class TaskConfiguration(BaseModel):
    """The task definition an operator is authoring."""

    task_name: str = Field(default="", description="Display name of the laboratory task.")
    chemicals: list[str] = Field(default_factory=list, description="Chemicals in use.")
    procedures: list[str] = Field(default_factory=list, description="Procedures to perform.")
    safety_controls: list[str] = Field(
        default_factory=list, description="Safety measures and controls in place."
    )
    exposure: Exposure = Field(default_factory=Exposure)
    additional_notes: str | None = Field(
        default=None, description="Additional context or special considerations."
    )


class ConfigurationArtifact(BaseModel):
    """Immutable snapshot of a validated task configuration."""

    model_config = ConfigDict(frozen=True)

    task_name: str
    chemicals: tuple[str, ...]
    procedures: tuple[str, ...]
    safety_controls: tuple[str, ...]
    personnel_count: int = Field(ge=1)
    duration_value: str
    duration_unit: DurationUnit
    duration_in_minutes: float
    additional_notes: str | None = None
    generated_at: datetime
    risk_assessment_required: Literal[True] = True

    @field_validator("task_name")
    @classmethod
    def _require_task_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Artifact task name must not be empty")
        return value

    @property
    def estimated_duration(self) -> str:
        return f"{self.duration_value} {self.duration_unit}"

    def to_schema(self) -> dict[str, Any]:
        """Return the canonical JSON-compatible shape consumed downstream."""

        minutes = self.duration_in_minutes
        return {
            "taskConfiguration": {
                "taskName": self.task_name,
                "chemicals": list(self.chemicals),
                "procedures": list(self.procedures),
                "safetyControls": list(self.safety_controls),
                "exposure": {
                    "personnelCount": self.personnel_count,
                    "estimatedDuration": self.estimated_duration,
                    "durationInMinutes": int(minutes) if minutes.is_integer() else minutes,
                },
                "additionalContext": self.additional_notes or None,
                "timestamp": self.generated_at.isoformat(),
                "riskAssessmentRequired": self.risk_assessment_required,
            }
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_schema(), indent=indent)


__all__ = [
    "ConfigurationArtifact",
    "DurationUnit",
    "Exposure",
    "TaskConfiguration",
    "UNIT_FACTORS",
    "duration_in_minutes",
]
