"""Points awarded to contributors for merge activity."""

import logging

from ideamerge.core.config import PointsConfig
from ideamerge.core.constants import POINT_EVENT_DESCRIPTIONS
from ideamerge.core.exceptions import PointsError
from ideamerge.merging.store import MergeStore


logger = logging.getLogger(__name__)


class PointsService:
    """Awards and totals contributor points.

    Awards join any transaction already open on the store, so points
    granted during a merge commit or roll back with it.
    """

    def __init__(self, store: MergeStore, config: PointsConfig | None = None) -> None:
        self._store = store
        self._config = config or PointsConfig()

    def award(self, user_id: str, event: str) -> int:
        """Award the configured points for an event.

        Args:
            user_id: The user receiving points.
            event: Event name, e.g. ``merge_performed``.

        Returns:
            The number of points awarded.

        Raises:
            PointsError: If the event is unknown.
        """
        if event not in self._config.events:
            raise PointsError(f"Unknown points event: {event}", event=event)

        amount = self._config.events[event]
        reason = POINT_EVENT_DESCRIPTIONS.get(event, event.replace("_", " "))
        self._store.add_points(user_id, amount, event, reason)

        logger.debug(f"Awarded {amount} points to {user_id} for {event}")
        return amount

    def total_points(self, user_id: str) -> int:
        """Get a user's total points."""
        return self._store.total_points(user_id)

    def leaderboard(self, limit: int = 10) -> list[tuple[str, int]]:
        """Get the top users by total points."""
        return self._store.points_leaderboard(limit)
