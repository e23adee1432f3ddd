"""Data models for the Lira Checker service."""

from .constants import (
    DEFAULT_STATUS_TARGETS,
    DISPLAY_NAMES,
    MAX_STATUS_TARGETS,
)  # re-export
from .rates import ConvertOut, ProviderPayload, RateSnapshot

__all__ = [
    "DEFAULT_STATUS_TARGETS",
    "DISPLAY_NAMES",
    "MAX_STATUS_TARGETS",
    "ConvertOut",
    "ProviderPayload",
    "RateSnapshot",
]
