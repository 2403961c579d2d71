"""Conflict data models.

This module defines the transient conflict descriptors produced by the
detector and the durable conflict records kept in the conflict ledger.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ideamerge.models.suggestion import Suggestion


class ConflictKind(str, Enum):
    """Kinds of conflicts between suggestions."""

    CONTENT_OVERLAP = "content_overlap"
    FIELD_CONFLICT = "field_conflict"
    LOGICAL_CONFLICT = "logical_conflict"


class ResolutionStatus(str, Enum):
    """Resolution status of a recorded conflict."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ConflictDescriptor:
    """A conflict found during analysis, before it is persisted.

    Content-overlap descriptors are pairwise and carry both suggestions and
    their similarity. Logical-conflict descriptors summarise the whole batch
    with polarity counts instead.
    """

    kind: ConflictKind
    description: str
    suggestion_1: Suggestion | None = None
    suggestion_2: Suggestion | None = None
    similarity: float | None = None
    positive_count: int | None = None
    negative_count: int | None = None

    @property
    def is_pairwise(self) -> bool:
        """Check if the descriptor names two participant suggestions."""
        return self.suggestion_1 is not None and self.suggestion_2 is not None

    @property
    def suggestion_ids(self) -> tuple[str, str] | None:
        """Get the participant suggestion IDs for pairwise descriptors."""
        if not self.is_pairwise:
            return None
        return (self.suggestion_1.id, self.suggestion_2.id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "type": self.kind.value,
            "description": self.description,
        }
        if self.is_pairwise:
            data["suggestion_1"] = self.suggestion_1.to_dict()
            data["suggestion_2"] = self.suggestion_2.to_dict()
            data["similarity"] = self.similarity
        if self.positive_count is not None:
            data["positive_count"] = self.positive_count
        if self.negative_count is not None:
            data["negative_count"] = self.negative_count
        return data


@dataclass
class SuggestionConflict:
    """A durable record of a conflict between two suggestions."""

    id: str
    idea_id: str
    suggestion_1_id: str
    suggestion_2_id: str
    conflict_type: ConflictKind
    description: str
    conflicting_values: dict[str, Any] = field(default_factory=dict)
    field_name: str | None = None
    resolution_status: ResolutionStatus = ResolutionStatus.UNRESOLVED
    resolved_by: str | None = None
    resolution_notes: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_resolved(self) -> bool:
        """Check if the conflict was explicitly resolved."""
        return self.resolution_status is ResolutionStatus.RESOLVED

    @property
    def is_closed(self) -> bool:
        """Check if the conflict left the unresolved state."""
        return self.resolution_status is not ResolutionStatus.UNRESOLVED

    @property
    def suggestion_ids(self) -> tuple[str, str]:
        """Get both participant suggestion IDs."""
        return (self.suggestion_1_id, self.suggestion_2_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "idea_id": self.idea_id,
            "suggestion_1_id": self.suggestion_1_id,
            "suggestion_2_id": self.suggestion_2_id,
            "conflict_type": self.conflict_type.value,
            "field_name": self.field_name,
            "description": self.description,
            "conflicting_values": self.conflicting_values,
            "resolution_status": self.resolution_status.value,
            "resolved_by": self.resolved_by,
            "resolution_notes": self.resolution_notes,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SuggestionConflict":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            idea_id=data["idea_id"],
            suggestion_1_id=data["suggestion_1_id"],
            suggestion_2_id=data["suggestion_2_id"],
            conflict_type=ConflictKind(data["conflict_type"]),
            description=data["description"],
            conflicting_values=data.get("conflicting_values") or {},
            field_name=data.get("field_name"),
            resolution_status=ResolutionStatus(data.get("resolution_status", "unresolved")),
            resolved_by=data.get("resolved_by"),
            resolution_notes=data.get("resolution_notes"),
            resolved_at=datetime.fromisoformat(data["resolved_at"]) if data.get("resolved_at") else None,
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class ConflictStats:
    """Statistics about the conflicts recorded for an idea."""

    total: int
    unresolved: int
    resolved: int
    ignored: int
    by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "unresolved": self.unresolved,
            "resolved": self.resolved,
            "ignored": self.ignored,
            "by_type": self.by_type,
        }
