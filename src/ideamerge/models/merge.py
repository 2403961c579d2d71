"""Merge data models.

This module defines merge strategies, the change entries a strategy
produces, the durable merge record, merge options supplied by callers, and
the analysis and recommendation results returned to them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ideamerge.models.conflict import ConflictDescriptor


class MergeStrategy(str, Enum):
    """Rules used to pick which content survives a merge."""

    CONSENSUS = "consensus"
    PRIORITY = "priority"
    LATEST = "latest"

    @classmethod
    def parse(cls, value: "str | MergeStrategy | None") -> "MergeStrategy | None":
        """Match a strategy name exactly, returning None when unknown."""
        if isinstance(value, MergeStrategy):
            return value
        for strategy in cls:
            if strategy.value == value:
                return strategy
        return None


class MergeType(str, Enum):
    """How a merge was initiated."""

    AUTO = "auto"
    MANUAL = "manual"


class ChangeKind(str, Enum):
    """Kind of change emitted by each strategy."""

    CONSENSUS = "consensus_change"
    PRIORITY = "priority_change"
    LATEST = "latest_change"


@dataclass(frozen=True)
class Change:
    """A content fragment selected by a merge strategy."""

    kind: ChangeKind
    content: str
    support: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat dictionary for serialization."""
        return {"type": self.kind.value, "content": self.content, **self.support}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Change":
        """Create from a flat dictionary."""
        support = {k: v for k, v in data.items() if k not in ("type", "content")}
        return cls(
            kind=ChangeKind(data["type"]),
            content=data["content"],
            support=support,
        )


@dataclass
class SuggestionMerge:
    """The audit record of one merge operation."""

    id: str
    idea_id: str
    merged_by: str
    merged_suggestions: list[str]
    merge_summary: str
    changes_applied: list[Change]
    merge_type: MergeType = MergeType.MANUAL
    has_conflicts: bool = False
    conflict_resolution: dict[str, Any] | None = None
    strategy: MergeStrategy = MergeStrategy.CONSENSUS
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "idea_id": self.idea_id,
            "merged_by": self.merged_by,
            "merged_suggestions": list(self.merged_suggestions),
            "merge_summary": self.merge_summary,
            "changes_applied": [c.to_dict() for c in self.changes_applied],
            "merge_type": self.merge_type.value,
            "has_conflicts": self.has_conflicts,
            "conflict_resolution": self.conflict_resolution,
            "strategy": self.strategy.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SuggestionMerge":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            idea_id=data["idea_id"],
            merged_by=data["merged_by"],
            merged_suggestions=list(data["merged_suggestions"]),
            merge_summary=data["merge_summary"],
            changes_applied=[Change.from_dict(c) for c in data.get("changes_applied", [])],
            merge_type=MergeType(data.get("merge_type", "manual")),
            has_conflicts=bool(data.get("has_conflicts", False)),
            conflict_resolution=data.get("conflict_resolution"),
            strategy=MergeStrategy(data.get("strategy", "consensus")),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class MergeOptions(BaseModel):
    """Options supplied by the caller of a merge."""

    strategy: Optional[str] = Field(
        default=None, description="Strategy: consensus, priority, latest"
    )
    auto_merge: bool = Field(default=False, description="Record the merge as automatic")
    conflict_resolution: Optional[dict[str, Any]] = Field(
        default=None, description="Caller-supplied account of how conflicts were handled"
    )


@dataclass
class AnalysisResult:
    """Read-only preview of the conflicts in a batch of suggestions."""

    conflicts: list[ConflictDescriptor]
    suggestions_count: int

    @property
    def can_merge(self) -> bool:
        """A batch is cleanly mergeable only when nothing conflicts."""
        return self.suggestions_count > 0 and not self.conflicts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "conflicts": [c.to_dict() for c in self.conflicts],
            "suggestions_count": self.suggestions_count,
            "can_merge": self.can_merge,
        }


@dataclass
class Recommendation:
    """A suggested next step for consolidating an idea's suggestions."""

    kind: str
    title: str
    description: str
    priority: str
    suggestion_ids: list[str] = field(default_factory=list)
    strategy: MergeStrategy | None = None
    auto_merge: bool = False
    action_required: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.kind,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "suggested_suggestion_ids": list(self.suggestion_ids),
            "strategy": self.strategy.value if self.strategy else None,
            "auto_merge": self.auto_merge,
            "action_required": self.action_required,
        }
