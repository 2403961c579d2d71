"""Suggestion data model.

A suggestion is a unit of feedback on an idea. Its acceptance lifecycle is
an explicit state machine: a suggestion starts pending and may move once to
either accepted or rejected. Accepted and rejected suggestions are frozen.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from ideamerge.core.exceptions import InvalidTransitionError


class SuggestionType(str, Enum):
    """Kinds of feedback a contributor can leave on an idea."""

    IMPROVEMENT = "improvement"
    QUESTION = "question"
    CONCERN = "concern"
    SUPPORT = "support"
    GENERAL = "general"


class SuggestionState(str, Enum):
    """Acceptance state of a suggestion."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are possible."""
        return self is not SuggestionState.PENDING

    def can_transition_to(self, target: "SuggestionState") -> bool:
        """Check if moving to the target state is allowed."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[SuggestionState, frozenset[SuggestionState]] = {
    SuggestionState.PENDING: frozenset({SuggestionState.ACCEPTED, SuggestionState.REJECTED}),
    SuggestionState.ACCEPTED: frozenset(),
    SuggestionState.REJECTED: frozenset(),
}


@dataclass(frozen=True)
class Suggestion:
    """A piece of feedback proposed against an idea."""

    id: str
    idea_id: str
    author_id: str
    content: str
    type: SuggestionType = SuggestionType.GENERAL
    state: SuggestionState = SuggestionState.PENDING
    parent_id: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    accepted_by: str | None = None
    accepted_at: datetime | None = None
    consumed_by_merge_id: str | None = None

    @property
    def is_pending(self) -> bool:
        """Check if the suggestion is still awaiting a decision."""
        return self.state is SuggestionState.PENDING

    @property
    def is_merged(self) -> bool:
        """Check if the suggestion was consumed by a merge."""
        return self.consumed_by_merge_id is not None

    def transition(
        self,
        target: SuggestionState,
        actor_id: str | None = None,
        merge_id: str | None = None,
        at: datetime | None = None,
    ) -> "Suggestion":
        """Return a copy of this suggestion in the target state.

        Args:
            target: The requested state.
            actor_id: Who accepted the suggestion (accepted only).
            merge_id: The merge that consumed the suggestion, if any.
            at: Timestamp of the decision, defaults to now.

        Returns:
            A new Suggestion in the target state.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if not self.state.can_transition_to(target):
            raise InvalidTransitionError(
                f"Suggestion {self.id} cannot move from {self.state.value} to {target.value}",
                current=self.state.value,
                requested=target.value,
            )

        if target is SuggestionState.ACCEPTED:
            return replace(
                self,
                state=target,
                accepted_by=actor_id,
                accepted_at=at or datetime.utcnow(),
                consumed_by_merge_id=merge_id,
            )
        return replace(self, state=target)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "idea_id": self.idea_id,
            "author_id": self.author_id,
            "content": self.content,
            "type": self.type.value,
            "state": self.state.value,
            "parent_id": self.parent_id,
            "created_at": self.created_at.isoformat(),
            "accepted_by": self.accepted_by,
            "accepted_at": self.accepted_at.isoformat() if self.accepted_at else None,
            "consumed_by_merge_id": self.consumed_by_merge_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Suggestion":
        """Create from dictionary."""
        accepted_at = None
        if data.get("accepted_at"):
            accepted_at = datetime.fromisoformat(data["accepted_at"])

        return cls(
            id=data["id"],
            idea_id=data["idea_id"],
            author_id=data["author_id"],
            content=data["content"],
            type=SuggestionType(data.get("type", "general")),
            state=SuggestionState(data.get("state", "pending")),
            parent_id=data.get("parent_id"),
            created_at=datetime.fromisoformat(data["created_at"]),
            accepted_by=data.get("accepted_by"),
            accepted_at=accepted_at,
            consumed_by_merge_id=data.get("consumed_by_merge_id"),
        )
