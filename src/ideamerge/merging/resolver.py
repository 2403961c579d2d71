"""Conflict resolution.

Recorded conflicts move from unresolved to either resolved or ignored,
both terminal. Each transition stamps the actor, notes and time, and is
appended to the resolution log. Resolving awards points to the actor;
ignoring does not.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from ideamerge.core.exceptions import (
    ConflictAlreadyResolvedError,
    ConflictNotFoundError,
)
from ideamerge.models.conflict import ResolutionStatus, SuggestionConflict

if TYPE_CHECKING:
    from ideamerge.merging.points import PointsService
    from ideamerge.merging.store import MergeStore


logger = logging.getLogger(__name__)


class ConflictResolver:
    """Closes recorded conflicts."""

    def __init__(self, store: "MergeStore", points: "PointsService") -> None:
        self._store = store
        self._points = points

    def resolve(
        self,
        conflict_id: str,
        actor_id: str,
        notes: str | None = None,
    ) -> SuggestionConflict:
        """Mark a conflict as resolved.

        Args:
            conflict_id: The conflict ID.
            actor_id: The user resolving the conflict.
            notes: Optional resolution notes.

        Returns:
            The updated conflict.

        Raises:
            ConflictNotFoundError: If the conflict does not exist.
            ConflictAlreadyResolvedError: If the conflict is already closed.
        """
        return self._close(conflict_id, ResolutionStatus.RESOLVED, actor_id, notes)

    def ignore(
        self,
        conflict_id: str,
        actor_id: str,
        notes: str | None = None,
    ) -> SuggestionConflict:
        """Mark a conflict as ignored.

        Raises:
            ConflictNotFoundError: If the conflict does not exist.
            ConflictAlreadyResolvedError: If the conflict is already closed.
        """
        return self._close(conflict_id, ResolutionStatus.IGNORED, actor_id, notes)

    def _close(
        self,
        conflict_id: str,
        status: ResolutionStatus,
        actor_id: str,
        notes: str | None,
    ) -> SuggestionConflict:
        with self._store.transaction():
            conflict = self._store.get_conflict(conflict_id)
            if conflict is None:
                raise ConflictNotFoundError(
                    f"Conflict not found: {conflict_id}",
                    conflict_id=conflict_id,
                )

            if conflict.is_closed:
                raise ConflictAlreadyResolvedError(
                    f"Conflict already {conflict.resolution_status.value}: {conflict_id}",
                    conflict_id=conflict_id,
                    status=conflict.resolution_status.value,
                )

            now = datetime.utcnow()
            closed = self._store.close_conflict(conflict_id, status, actor_id, notes, now)
            if not closed:
                current = self._store.get_conflict(conflict_id)
                raise ConflictAlreadyResolvedError(
                    f"Conflict was closed concurrently: {conflict_id}",
                    conflict_id=conflict_id,
                    status=current.resolution_status.value if current else None,
                )

            action = "resolve" if status is ResolutionStatus.RESOLVED else "ignore"
            self._store.log_resolution(conflict_id, action, actor_id, notes)

            if status is ResolutionStatus.RESOLVED:
                self._points.award(actor_id, "conflict_resolved")

        logger.info(f"Conflict {conflict_id} {status.value} by {actor_id}")

        conflict.resolution_status = status
        conflict.resolved_by = actor_id
        conflict.resolution_notes = notes
        conflict.resolved_at = now
        return conflict
