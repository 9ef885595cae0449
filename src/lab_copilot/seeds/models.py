"""Session seed models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..configuration import ConfigurationArtifact


class SessionSeed(BaseModel):
    """Task snapshot a monitoring session starts from."""

    id: str = Field(..., description="Unique identifier for the seed.")
    title: str = Field(default="", description="Display title for seed listings.")
    task_name: str = Field(..., description="Name of the monitored laboratory task.")
    chemicals: list[str] = Field(default_factory=list, description="Chemicals in use.")
    procedures: list[str] = Field(default_factory=list, description="Active procedures.")
    safety_controls: list[str] = Field(
        default_factory=list, description="Safety controls expected to be active."
    )
    estimated_duration_minutes: float = Field(
        ..., ge=0, description="Expected duration of the task in minutes."
    )

    @field_validator("id", "task_name")
    @classmethod
    def _require_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Seed id and task name must not be empty")
        return normalized

    @field_validator("chemicals", "procedures", "safety_controls", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any):
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("Chemicals, procedures and safety controls must be sequences of strings")

    @classmethod
    def from_artifact(cls, artifact: ConfigurationArtifact, *, seed_id: str = "artifact") -> "SessionSeed":
        """Build a seed from an accepted configuration artifact."""

        return cls(
            id=seed_id,
            title=artifact.task_name,
            task_name=artifact.task_name,
            chemicals=list(artifact.chemicals),
            procedures=list(artifact.procedures),
            safety_controls=list(artifact.safety_controls),
            estimated_duration_minutes=max(artifact.duration_in_minutes, 0.0),
        )


METHANOL_DISTILLATION = SessionSeed(
    id="methanol-distillation",
    title="Methanol Distillation",
    task_name="Methanol Distillation Process",
    chemicals=["Methanol", "Distilled Water", "Sodium Chloride"],
    procedures=["Simple Distillation", "Temperature Monitoring", "Fraction Collection"],
    safety_controls=[
        "Fume Hood Operation",
        "Safety Goggles",
        "Heat-Resistant Gloves",
        "Fire Extinguisher Ready",
    ],
    estimated_duration_minutes=120,
)

BUILTIN_SEEDS: tuple[SessionSeed, ...] = (METHANOL_DISTILLATION,)


__all__ = ["BUILTIN_SEEDS", "METHANOL_DISTILLATION", "SessionSeed"]
