"""Session seed models and loader exports."""

from .loader import BUILTIN_SOURCE, SeedLoadError, SeedLoader
from .models import BUILTIN_SEEDS, METHANOL_DISTILLATION, SessionSeed

__all__ = [
    "BUILTIN_SEEDS",
    "BUILTIN_SOURCE",
    "METHANOL_DISTILLATION",
    "SeedLoadError",
    "SeedLoader",
    "SessionSeed",
]
