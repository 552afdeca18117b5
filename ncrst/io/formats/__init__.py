"""File format implementations."""

from .amber_restart import AmberRestartFormat, ConventionViolation, RestartState

__all__ = [
    "AmberRestartFormat",
    "ConventionViolation",
    "RestartState",
]
