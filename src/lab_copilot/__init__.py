"""Lab Copilot task configuration and monitoring session engine."""

__version__ = "0.1.0"
