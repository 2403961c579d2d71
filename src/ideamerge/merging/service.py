"""Public entry point for suggestion merging.

``MergeService`` ties the store, orchestrator, resolver, recommender and
points service together behind one interface. ``create_service`` builds a
fully wired service for a project directory.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from ideamerge.core.config import MergeConfig
from ideamerge.core.constants import SUGGESTION_ID_PREFIX, get_ideamerge_root
from ideamerge.core.exceptions import (
    ConflictNotFoundError,
    InvalidTransitionError,
    MergeNotFoundError,
    PermissionDeniedError,
    PointsError,
    ResolveFailedError,
    StoreError,
    SuggestionNotFoundError,
)
from ideamerge.merging.detector import ConflictDetector
from ideamerge.merging.grouper import SimilarityGrouper
from ideamerge.merging.orchestrator import MergeNotifier, MergeOrchestrator
from ideamerge.merging.points import PointsService
from ideamerge.merging.recommender import MergeRecommender
from ideamerge.merging.resolver import ConflictResolver
from ideamerge.merging.store import MergeStore, new_record_id
from ideamerge.merging.strategies import MergeStrategySelector
from ideamerge.models.conflict import ConflictStats, SuggestionConflict
from ideamerge.models.merge import (
    AnalysisResult,
    MergeOptions,
    Recommendation,
    SuggestionMerge,
)
from ideamerge.models.suggestion import Suggestion, SuggestionState, SuggestionType


logger = logging.getLogger(__name__)

Authorizer = Callable[[str, str], bool]


class MergeService:
    """Suggestion, merge and conflict operations for ideas."""

    def __init__(
        self,
        store: MergeStore,
        points: PointsService,
        orchestrator: MergeOrchestrator,
        resolver: ConflictResolver,
        recommender: MergeRecommender,
        authorizer: Authorizer | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: The merge store.
            points: Points service.
            orchestrator: Merge orchestrator.
            resolver: Conflict resolver.
            recommender: Merge recommender.
            authorizer: Returns whether an actor may change an idea.
                Every actor is allowed when omitted.
        """
        self._store = store
        self._points = points
        self._orchestrator = orchestrator
        self._resolver = resolver
        self._recommender = recommender
        self._authorizer = authorizer

    @property
    def store(self) -> MergeStore:
        return self._store

    @property
    def points(self) -> PointsService:
        return self._points

    # -------------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------------

    def add_suggestion(
        self,
        idea_id: str,
        author_id: str,
        content: str,
        suggestion_type: SuggestionType = SuggestionType.GENERAL,
        parent_id: str | None = None,
    ) -> Suggestion:
        """Record a new pending suggestion on an idea."""
        suggestion = Suggestion(
            id=new_record_id(SUGGESTION_ID_PREFIX),
            idea_id=idea_id,
            author_id=author_id,
            content=content,
            type=suggestion_type,
            parent_id=parent_id,
        )
        self._store.add_suggestion(suggestion)
        logger.debug(f"Added suggestion {suggestion.id} on idea {idea_id}")
        return suggestion

    def get_suggestion(self, suggestion_id: str) -> Suggestion:
        """Get a suggestion by ID.

        Raises:
            SuggestionNotFoundError: If the suggestion does not exist.
        """
        suggestion = self._store.get_suggestion(suggestion_id)
        if suggestion is None:
            raise SuggestionNotFoundError(
                f"Suggestion not found: {suggestion_id}",
                suggestion_id=suggestion_id,
            )
        return suggestion

    def list_suggestions(self, idea_id: str, pending_only: bool = False) -> list[Suggestion]:
        """List the suggestions on an idea, oldest first."""
        if pending_only:
            return self._store.get_pending_suggestions(idea_id)
        return self._store.get_suggestions_by_idea(idea_id)

    def accept_suggestion(self, suggestion_id: str, actor_id: str) -> Suggestion:
        """Accept a single pending suggestion and reward its author.

        Raises:
            SuggestionNotFoundError: If the suggestion does not exist.
            InvalidTransitionError: If the suggestion is not pending.
            PermissionDeniedError: If the actor may not change the idea.
        """
        return self._decide(suggestion_id, actor_id, SuggestionState.ACCEPTED)

    def reject_suggestion(self, suggestion_id: str, actor_id: str) -> Suggestion:
        """Reject a single pending suggestion.

        Raises:
            SuggestionNotFoundError: If the suggestion does not exist.
            InvalidTransitionError: If the suggestion is not pending.
            PermissionDeniedError: If the actor may not change the idea.
        """
        return self._decide(suggestion_id, actor_id, SuggestionState.REJECTED)

    def _decide(
        self,
        suggestion_id: str,
        actor_id: str,
        state: SuggestionState,
    ) -> Suggestion:
        suggestion = self.get_suggestion(suggestion_id)
        self._authorize(actor_id, suggestion.idea_id)

        now = datetime.utcnow()
        decided = suggestion.transition(state, actor_id=actor_id, at=now)

        with self._store.transaction():
            if not self._store.transition_suggestion(suggestion_id, state, actor_id=actor_id, at=now):
                raise InvalidTransitionError(
                    f"Suggestion {suggestion_id} is no longer pending",
                    current=SuggestionState.PENDING.value,
                    requested=state.value,
                )
            if state is SuggestionState.ACCEPTED:
                self._points.award(suggestion.author_id, "suggestion_accepted")

        logger.info(f"Suggestion {suggestion_id} {state.value} by {actor_id}")
        return decided

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    def analyze(
        self,
        idea_id: str,
        suggestion_ids: list[str] | None = None,
    ) -> AnalysisResult:
        """Preview the conflicts among pending suggestions without writing.

        Every pending suggestion on the idea is analyzed when no IDs are given.
        """
        suggestions = self._store.get_pending_suggestions(idea_id, suggestion_ids)
        return self._orchestrator.analyze(suggestions)

    def merge(
        self,
        idea_id: str,
        suggestion_ids: list[str] | None,
        actor_id: str,
        strategy: str | None = None,
        auto_merge: bool = False,
        conflict_resolution: dict[str, Any] | None = None,
    ) -> SuggestionMerge:
        """Merge pending suggestions on an idea.

        IDs that are unknown, belong to another idea, or are no longer
        pending are skipped. ``None`` merges every pending suggestion.

        Raises:
            PermissionDeniedError: If the actor may not change the idea.
            NoValidSuggestionsError: If no pending suggestion remains.
            MergeFailedError: If the merge was rolled back.
        """
        self._authorize(actor_id, idea_id)

        options = MergeOptions(
            strategy=strategy,
            auto_merge=auto_merge,
            conflict_resolution=conflict_resolution,
        )
        suggestions = self._store.get_pending_suggestions(idea_id, suggestion_ids)
        return self._orchestrator.merge(idea_id, suggestions, actor_id, options)

    def list_merge_history(self, idea_id: str) -> list[SuggestionMerge]:
        """List the merges performed on an idea, newest first."""
        return self._store.get_merge_history(idea_id)

    def get_merge(self, merge_id: str) -> SuggestionMerge:
        """Get a merge record.

        Raises:
            MergeNotFoundError: If the merge does not exist.
        """
        merge = self._store.get_merge(merge_id)
        if merge is None:
            raise MergeNotFoundError(f"Merge not found: {merge_id}", merge_id=merge_id)
        return merge

    def merged_suggestions(self, merge_id: str) -> list[Suggestion]:
        """Get the suggestions consumed by a merge, in merge order."""
        merge = self.get_merge(merge_id)
        return self._store.get_suggestions(merge.merged_suggestions)

    def recommend(self, idea_id: str) -> list[Recommendation]:
        """Recommend merges for the pending suggestions on an idea."""
        suggestions = self._store.get_pending_suggestions(idea_id)
        return self._recommender.recommend(suggestions)

    # -------------------------------------------------------------------------
    # Conflicts
    # -------------------------------------------------------------------------

    def list_unresolved_conflicts(self, idea_id: str) -> list[SuggestionConflict]:
        """List the unresolved conflicts on an idea."""
        return self._store.get_unresolved_conflicts(idea_id)

    def list_conflicts(self, idea_id: str) -> list[SuggestionConflict]:
        """List every conflict recorded on an idea."""
        return self._store.get_conflicts_by_idea(idea_id)

    def resolve_conflict(
        self,
        conflict_id: str,
        actor_id: str,
        notes: str | None = None,
    ) -> SuggestionConflict:
        """Mark a conflict as resolved.

        Raises:
            ResolveFailedError: If the conflict is missing, already closed,
                or could not be updated.
            PermissionDeniedError: If the actor may not change the idea.
        """
        self._authorize_conflict(conflict_id, actor_id)
        try:
            return self._resolver.resolve(conflict_id, actor_id, notes)
        except (StoreError, PointsError) as e:
            raise ResolveFailedError(f"Failed to resolve conflict: {e}", conflict_id=conflict_id) from e

    def ignore_conflict(
        self,
        conflict_id: str,
        actor_id: str,
        notes: str | None = None,
    ) -> SuggestionConflict:
        """Mark a conflict as ignored.

        Raises:
            ResolveFailedError: If the conflict is missing, already closed,
                or could not be updated.
            PermissionDeniedError: If the actor may not change the idea.
        """
        self._authorize_conflict(conflict_id, actor_id)
        try:
            return self._resolver.ignore(conflict_id, actor_id, notes)
        except StoreError as e:
            raise ResolveFailedError(f"Failed to ignore conflict: {e}", conflict_id=conflict_id) from e

    def conflict_stats(self, idea_id: str) -> ConflictStats:
        """Get conflict counts for an idea."""
        return self._store.get_conflict_stats(idea_id)

    def resolution_log(self, conflict_id: str) -> list[dict]:
        """Get the audit trail of a conflict."""
        return self._store.get_resolution_log(conflict_id)

    # -------------------------------------------------------------------------
    # Authorization
    # -------------------------------------------------------------------------

    def _authorize(self, actor_id: str, idea_id: str) -> None:
        if self._authorizer is None:
            return
        if not self._authorizer(actor_id, idea_id):
            logger.warning(f"Denied {actor_id} on idea {idea_id}")
            raise PermissionDeniedError(
                f"{actor_id} may not modify idea {idea_id}",
                actor_id=actor_id,
                idea_id=idea_id,
            )

    def _authorize_conflict(self, conflict_id: str, actor_id: str) -> None:
        if self._authorizer is None:
            return
        conflict = self._store.get_conflict(conflict_id)
        if conflict is None:
            raise ConflictNotFoundError(
                f"Conflict not found: {conflict_id}",
                conflict_id=conflict_id,
            )
        self._authorize(actor_id, conflict.idea_id)


def create_service(
    base_path: Path | None = None,
    config: MergeConfig | None = None,
    authorizer: Authorizer | None = None,
    notifier: MergeNotifier | None = None,
) -> MergeService:
    """Build a wired service for a project directory.

    Args:
        base_path: Project directory holding ``.ideamerge``. Defaults to cwd.
        config: Configuration; loaded from the project when omitted.
        authorizer: Optional permission check.
        notifier: Optional callback for committed merges.

    Returns:
        A service over an initialized store.
    """
    config = config or MergeConfig.load(base_path)

    store = MergeStore(get_ideamerge_root(base_path) / config.storage.merge_db)
    store.initialize()

    points = PointsService(store, config.points)
    detector = ConflictDetector(config.detection)
    grouper = SimilarityGrouper(config.grouping)
    selector = MergeStrategySelector(
        reputation=points.total_points,
        grouper=grouper,
        config=config.strategy,
    )

    return MergeService(
        store=store,
        points=points,
        orchestrator=MergeOrchestrator(
            store,
            points,
            detector=detector,
            selector=selector,
            notifier=notifier,
        ),
        resolver=ConflictResolver(store, points),
        recommender=MergeRecommender(
            reputation=points.total_points,
            detector=detector,
            grouper=grouper,
            config=config.recommendation,
        ),
        authorizer=authorizer,
    )
