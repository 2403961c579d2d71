"""Data models for suggestions, conflicts and merges."""

from ideamerge.models.conflict import (
    ConflictDescriptor,
    ConflictKind,
    ConflictStats,
    ResolutionStatus,
    SuggestionConflict,
)
from ideamerge.models.merge import (
    AnalysisResult,
    Change,
    ChangeKind,
    MergeOptions,
    MergeStrategy,
    MergeType,
    Recommendation,
    SuggestionMerge,
)
from ideamerge.models.suggestion import Suggestion, SuggestionState, SuggestionType

__all__ = [
    "Suggestion",
    "SuggestionState",
    "SuggestionType",
    "ConflictDescriptor",
    "ConflictKind",
    "ConflictStats",
    "ResolutionStatus",
    "SuggestionConflict",
    "AnalysisResult",
    "Change",
    "ChangeKind",
    "MergeOptions",
    "MergeStrategy",
    "MergeType",
    "Recommendation",
    "SuggestionMerge",
]
