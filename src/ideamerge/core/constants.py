"""Engine constants and default values."""

from pathlib import Path
from typing import Final


# Directory structure
IDEAMERGE_ROOT_DIR: Final[str] = ".ideamerge"
CONFIG_FILE: Final[str] = "merge.config.json"

# Database files
MERGE_DB: Final[str] = "merge.db"

# Conflict detection
CONTENT_OVERLAP_THRESHOLD: Final[float] = 0.70
CONTENT_OVERLAP_DESCRIPTION: Final[str] = (
    "Suggestions have similar content that may be redundant"
)
LOGICAL_CONFLICT_DESCRIPTION: Final[str] = (
    "Conflicting suggestions: some suggest positive changes "
    "while others suggest removal/reduction"
)

# Polarity lexicons for logical conflict detection
POSITIVE_WORDS: Final[tuple[str, ...]] = (
    "add",
    "include",
    "implement",
    "create",
    "increase",
    "expand",
    "enhance",
)
NEGATIVE_WORDS: Final[tuple[str, ...]] = (
    "remove",
    "delete",
    "reduce",
    "eliminate",
    "exclude",
)

# Consensus grouping
GROUPING_THRESHOLD: Final[float] = 0.60
MIN_CONSENSUS_GROUP_SIZE: Final[int] = 2

# Merge strategies
DEFAULT_STRATEGY: Final[str] = "consensus"
PRIORITY_TOP_N: Final[int] = 3
LATEST_TOP_N: Final[int] = 5
MERGE_SUMMARY_FORMAT: Final[str] = (
    "Merged {total} suggestions into {changes} consolidated changes"
)

# Recommendations
MIN_SUGGESTIONS_FOR_RECOMMENDATION: Final[int] = 2
HIGH_REPUTATION_POINTS: Final[int] = 100
MIN_HIGH_REPUTATION_SUGGESTIONS: Final[int] = 3

# Points awarded per event
POINT_EVENTS: Final[dict[str, int]] = {
    "suggestion_accepted": 10,
    "merge_performed": 15,
    "conflict_resolved": 5,
}
POINT_EVENT_DESCRIPTIONS: Final[dict[str, str]] = {
    "suggestion_accepted": "Suggestion was accepted",
    "merge_performed": "Successfully merged suggestions",
    "conflict_resolved": "Resolved a merge conflict",
}

# Record ID formats
CONFLICT_ID_PREFIX: Final[str] = "conflict"
MERGE_ID_PREFIX: Final[str] = "merge"
SUGGESTION_ID_PREFIX: Final[str] = "sug"


def get_ideamerge_root(base_path: Path | None = None) -> Path:
    """Get the .ideamerge root directory path."""
    if base_path is None:
        base_path = Path.cwd()
    return base_path / IDEAMERGE_ROOT_DIR


def get_merge_db_path(base_path: Path | None = None) -> Path:
    """Get the merge database path."""
    return get_ideamerge_root(base_path) / MERGE_DB


def get_config_path(base_path: Path | None = None) -> Path:
    """Get the configuration file path."""
    return get_ideamerge_root(base_path) / CONFIG_FILE
