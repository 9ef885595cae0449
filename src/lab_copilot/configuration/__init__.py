"""Task configuration authoring and artifact generation."""

from .editor import (
    LIST_FIELDS,
    ConfigurationModel,
    InvalidConfigurationError,
    ListField,
    parse_personnel_count,
)
from .models import (
    UNIT_FACTORS,
    ConfigurationArtifact,
    DurationUnit,
    Exposure,
    TaskConfiguration,
    duration_in_minutes,
)

__all__ = [
    "ConfigurationArtifact",
    "ConfigurationModel",
    "DurationUnit",
    "Exposure",
    "InvalidConfigurationError",
    "LIST_FIELDS",
    "ListField",
    "TaskConfiguration",
    "UNIT_FACTORS",
    "duration_in_minutes",
    "parse_personnel_count",
]
