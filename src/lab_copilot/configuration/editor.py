"""Editable task configuration with forgiving list semantics."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Mapping, get_args

from .models import (
    ConfigurationArtifact,
    DurationUnit,
    TaskConfiguration,
    duration_in_minutes,
)

logger = logging.getLogger(__name__)

ListField = Literal["chemicals", "procedures", "safety_controls"]

LIST_FIELDS: tuple[str, ...] = get_args(ListField)

_FIELD_ALIASES: dict[str, str] = {
    "taskName": "task_name",
    "safetyControls": "safety_controls",
    "additionalNotes": "additional_notes",
    "exposure.personnelCount": "exposure.personnel_count",
    "exposure.peopleCount": "exposure.personnel_count",
    "exposure.durationValue": "exposure.duration_value",
    "exposure.duration": "exposure.duration_value",
    "exposure.durationUnit": "exposure.duration_unit",
}

REQUIREMENT_MESSAGES: dict[str, str] = {
    "task_name": "task name is required",
    "chemicals": "at least one chemical is required",
    "procedures": "at least one procedure is required",
    "duration": "estimated duration is required",
}


class InvalidConfigurationError(ValueError):
    """Raised when an artifact is requested for an incomplete configuration."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        details = "; ".join(REQUIREMENT_MESSAGES.get(item, item) for item in self.missing)
        super().__init__(f"Configuration is incomplete: {details}")


def _canonical_path(path: str) -> str:
    return _FIELD_ALIASES.get(path, path)


def _canonical_list_field(field: str) -> str:
    name = _canonical_path(field)
    if name not in LIST_FIELDS:
        raise ValueError(f"Unknown list field '{field}'; expected one of {', '.join(LIST_FIELDS)}")
    return name


def _as_item_list(key: str, value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"'{key}' must be a string or a sequence of strings")


def parse_personnel_count(value: Any) -> int:
    """Parse a personnel count, falling back to 1 for anything unusable."""

    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        count = value
    else:
        text = str(value).strip() if value is not None else ""
        try:
            count = int(text)
        except ValueError:
            try:
                count = int(float(text))
            except (ValueError, OverflowError):
                return 1
    return count if count >= 1 else 1


class ConfigurationModel:
    """Accumulates a :class:`TaskConfiguration` and produces artifacts from it.

    Rejected edits (blank or duplicate items, out-of-range removals) are
    silent no-ops so that form editing never blocks on an exception.
    """

    def __init__(
        self,
        configuration: TaskConfiguration | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = configuration.model_copy(deep=True) if configuration else TaskConfiguration()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._latest_artifact: ConfigurationArtifact | None = None

    @classmethod
    def from_document(
        cls,
        document: Mapping[str, Any],
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> "ConfigurationModel":
        """Build a model from a task document (YAML or JSON mapping).

        Values go through :meth:`add_item` and :meth:`set_field`, so the same
        trimming, duplicate and clamping rules apply as for interactive edits.
        """

        model = cls(clock=clock)
        for key, value in document.items():
            name = _canonical_path(key)
            if name in LIST_FIELDS:
                for item in _as_item_list(key, value):
                    model.add_item(name, str(item))
            elif name == "exposure":
                for sub_key, sub_value in (value or {}).items():
                    model.set_field(f"exposure.{sub_key}", sub_value)
            else:
                model.set_field(name, value)
        return model

    @property
    def latest_artifact(self) -> ConfigurationArtifact | None:
        return self._latest_artifact

    def snapshot(self) -> TaskConfiguration:
        return self._config.model_copy(deep=True)

    def items(self, field: str) -> tuple[str, ...]:
        return tuple(getattr(self._config, _canonical_list_field(field)))

    def add_item(self, field: str, raw_value: str) -> bool:
        """Append a trimmed item unless it is blank or already present."""

        name = _canonical_list_field(field)
        target: list[str] = getattr(self._config, name)
        value = (raw_value or "").strip()
        if not value or value in target:
            logger.debug("Ignored item", extra={"field": name, "value": value})
            return False
        target.append(value)
        return True

    def remove_item(self, field: str, index: int) -> str | None:
        """Remove the item at ``index``; out-of-range indices are ignored."""

        name = _canonical_list_field(field)
        target: list[str] = getattr(self._config, name)
        if not 0 <= index < len(target):
            logger.debug("Ignored removal", extra={"field": name, "index": index})
            return None
        return target.pop(index)

    def set_field(self, path: str, value: Any) -> None:
        """Set one of the scalar fields by dotted path."""

        name = _canonical_path(path)
        exposure = self._config.exposure
        if name == "task_name":
            self._config.task_name = "" if value is None else str(value)
        elif name == "additional_notes":
            self._config.additional_notes = None if value is None else str(value)
        elif name == "exposure.personnel_count":
            exposure.personnel_count = parse_personnel_count(value)
        elif name == "exposure.duration_value":
            exposure.duration_value = "" if value is None else str(value)
        elif name == "exposure.duration_unit":
            if value not in get_args(DurationUnit):
                raise ValueError(
                    f"Unknown duration unit '{value}'; expected one of "
                    f"{', '.join(get_args(DurationUnit))}"
                )
            exposure.duration_unit = value
        else:
            raise ValueError(f"Unknown configuration field '{path}'")

    def missing_requirements(self) -> list[str]:
        missing: list[str] = []
        if not self._config.task_name.strip():
            missing.append("task_name")
        if not self._config.chemicals:
            missing.append("chemicals")
        if not self._config.procedures:
            missing.append("procedures")
        if self._config.exposure.duration_value == "":
            missing.append("duration")
        return missing

    def is_valid(self) -> bool:
        return not self.missing_requirements()

    def recommendations(self) -> list[str]:
        """Advisory notes that do not block artifact generation."""

        notes: list[str] = []
        if not self._config.safety_controls:
            notes.append("at least one safety control is recommended")
        return notes

    def generate_artifact(self, now: datetime | None = None) -> ConfigurationArtifact:
        """Validate and snapshot the configuration.

        Raises:
            InvalidConfigurationError: if any required field is missing.
        """

        missing = self.missing_requirements()
        if missing:
            raise InvalidConfigurationError(missing)

        config = self._config
        exposure = config.exposure
        artifact = ConfigurationArtifact(
            task_name=config.task_name,
            chemicals=tuple(config.chemicals),
            procedures=tuple(config.procedures),
            safety_controls=tuple(config.safety_controls),
            personnel_count=exposure.personnel_count,
            duration_value=exposure.duration_value,
            duration_unit=exposure.duration_unit,
            duration_in_minutes=duration_in_minutes(exposure.duration_value, exposure.duration_unit),
            additional_notes=config.additional_notes,
            generated_at=now or self._clock(),
        )
        self._latest_artifact = artifact
        logger.info(
            "Generated configuration artifact",
            extra={
                "task_name": artifact.task_name,
                "duration_in_minutes": artifact.duration_in_minutes,
            },
        )
        return artifact


__all__ = [
    "ConfigurationModel",
    "InvalidConfigurationError",
    "LIST_FIELDS",
    "ListField",
    "parse_personnel_count",
]
