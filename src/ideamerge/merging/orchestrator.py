"""Merge orchestration.

A merge detects conflicts in a batch of suggestions, records the pairwise
ones, applies a strategy, writes the merge record, awards points, and
marks every consumed suggestion as accepted. All writes share one store
transaction: either the whole merge is visible or none of it is.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from ideamerge.core.constants import (
    CONFLICT_ID_PREFIX,
    MERGE_ID_PREFIX,
    MERGE_SUMMARY_FORMAT,
)
from ideamerge.core.exceptions import MergeFailedError, NoValidSuggestionsError
from ideamerge.merging.detector import ConflictDetector
from ideamerge.merging.store import new_record_id
from ideamerge.merging.strategies import MergeStrategySelector
from ideamerge.models.conflict import ConflictDescriptor, SuggestionConflict
from ideamerge.models.merge import (
    AnalysisResult,
    MergeOptions,
    MergeType,
    SuggestionMerge,
)
from ideamerge.models.suggestion import Suggestion, SuggestionState

if TYPE_CHECKING:
    from ideamerge.merging.points import PointsService
    from ideamerge.merging.store import MergeStore


logger = logging.getLogger(__name__)

MergeNotifier = Callable[[SuggestionMerge], None]


class MergeOrchestrator:
    """Runs the merge pipeline against the store."""

    def __init__(
        self,
        store: "MergeStore",
        points: "PointsService",
        detector: ConflictDetector | None = None,
        selector: MergeStrategySelector | None = None,
        notifier: MergeNotifier | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: The merge store.
            points: Points service sharing the same store.
            detector: Conflict detector.
            selector: Strategy selector.
            notifier: Called with each committed merge record.
        """
        self._store = store
        self._points = points
        self._detector = detector or ConflictDetector()
        self._selector = selector or MergeStrategySelector(reputation=points.total_points)
        self._notifier = notifier

    def analyze(self, suggestions: Sequence[Suggestion]) -> AnalysisResult:
        """Preview the conflicts in a batch without writing anything."""
        return AnalysisResult(
            conflicts=self._detector.detect(suggestions),
            suggestions_count=len(suggestions),
        )

    def merge(
        self,
        idea_id: str,
        suggestions: Sequence[Suggestion],
        actor_id: str,
        options: MergeOptions | None = None,
    ) -> SuggestionMerge:
        """Merge a batch of pending suggestions.

        Args:
            idea_id: The idea the suggestions belong to.
            suggestions: Pending suggestions, in caller order.
            actor_id: The user performing the merge.
            options: Strategy, merge type and conflict resolution notes.

        Returns:
            The committed merge record.

        Raises:
            NoValidSuggestionsError: If there is nothing to merge.
            MergeFailedError: If any step fails; nothing is written.
        """
        if not suggestions:
            raise NoValidSuggestionsError("No valid suggestions to merge")

        options = options or MergeOptions()

        try:
            with self._store.transaction():
                merge = self._merge_in_transaction(idea_id, list(suggestions), actor_id, options)
        except MergeFailedError as e:
            logger.error(f"Merge on idea {idea_id} aborted: {e}")
            raise
        except Exception as e:
            logger.error(f"Merge on idea {idea_id} failed: {e}")
            raise MergeFailedError(f"Merge failed: {e}", idea_id=idea_id) from e

        logger.info(
            f"Merged {len(merge.merged_suggestions)} suggestions on idea {idea_id} "
            f"into {len(merge.changes_applied)} changes ({merge.strategy.value})"
        )

        self._notify(merge)
        return merge

    def _merge_in_transaction(
        self,
        idea_id: str,
        suggestions: list[Suggestion],
        actor_id: str,
        options: MergeOptions,
    ) -> SuggestionMerge:
        now = datetime.utcnow()

        descriptors = self._detector.detect(suggestions)
        self._record_conflicts(idea_id, descriptors, now)

        strategy = self._selector.resolve_strategy(options.strategy)
        changes = self._selector.apply(suggestions, strategy)

        merge = SuggestionMerge(
            id=new_record_id(MERGE_ID_PREFIX),
            idea_id=idea_id,
            merged_by=actor_id,
            merged_suggestions=[s.id for s in suggestions],
            merge_summary=MERGE_SUMMARY_FORMAT.format(
                total=len(suggestions),
                changes=len(changes),
            ),
            changes_applied=changes,
            merge_type=MergeType.AUTO if options.auto_merge else MergeType.MANUAL,
            has_conflicts=len(descriptors) > 0,
            conflict_resolution=options.conflict_resolution,
            strategy=strategy,
            created_at=now,
        )
        self._store.create_merge(merge)

        self._points.award(actor_id, "merge_performed")

        for suggestion in suggestions:
            consumed = self._store.transition_suggestion(
                suggestion.id,
                SuggestionState.ACCEPTED,
                actor_id=actor_id,
                merge_id=merge.id,
                at=now,
            )
            if not consumed:
                raise MergeFailedError(
                    f"Suggestion {suggestion.id} is no longer pending",
                    idea_id=idea_id,
                    details={"suggestion_id": suggestion.id},
                )

        return merge

    def _record_conflicts(
        self,
        idea_id: str,
        descriptors: list[ConflictDescriptor],
        now: datetime,
    ) -> None:
        """Persist one ledger entry per pairwise descriptor."""
        for descriptor in descriptors:
            if not descriptor.is_pairwise:
                continue

            suggestion_1_id, suggestion_2_id = descriptor.suggestion_ids
            self._store.create_conflict(SuggestionConflict(
                id=new_record_id(CONFLICT_ID_PREFIX),
                idea_id=idea_id,
                suggestion_1_id=suggestion_1_id,
                suggestion_2_id=suggestion_2_id,
                conflict_type=descriptor.kind,
                description=descriptor.description,
                conflicting_values={"similarity": descriptor.similarity},
                created_at=now,
            ))

    def _notify(self, merge: SuggestionMerge) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier(merge)
        except Exception as e:
            logger.warning(f"Merge notifier failed for {merge.id}: {e}")
