"""Core configuration, constants and exceptions."""

from ideamerge.core.config import MergeConfig
from ideamerge.core.exceptions import (
    ConfigurationError,
    IdeaMergeError,
    MergeFailedError,
    NoValidSuggestionsError,
    ResolveFailedError,
    StoreError,
)

__all__ = [
    "MergeConfig",
    "IdeaMergeError",
    "ConfigurationError",
    "StoreError",
    "NoValidSuggestionsError",
    "MergeFailedError",
    "ResolveFailedError",
]
