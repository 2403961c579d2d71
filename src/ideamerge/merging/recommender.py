"""Merge recommendations for an idea's pending suggestions."""

from collections.abc import Sequence

from ideamerge.core.config import RecommendationConfig
from ideamerge.merging.detector import ConflictDetector
from ideamerge.merging.grouper import SimilarityGrouper
from ideamerge.merging.strategies import ReputationLookup
from ideamerge.models.conflict import ConflictDescriptor
from ideamerge.models.merge import MergeStrategy, Recommendation
from ideamerge.models.suggestion import Suggestion


class MergeRecommender:
    """Suggests how an idea's pending suggestions could be consolidated.

    Recommendations are produced in a fixed order:
    - consensus_merge: groups of similar suggestions exist
    - priority_merge: enough suggestions come from high-reputation authors
    - conflict_resolution: the batch has conflicts to look at first
    - auto_merge: enough suggestions overlap with nothing else
    """

    def __init__(
        self,
        reputation: ReputationLookup | None = None,
        detector: ConflictDetector | None = None,
        grouper: SimilarityGrouper | None = None,
        config: RecommendationConfig | None = None,
    ) -> None:
        self._reputation = reputation
        self._detector = detector or ConflictDetector()
        self._grouper = grouper or SimilarityGrouper()
        self._config = config or RecommendationConfig()

    def recommend(self, suggestions: Sequence[Suggestion]) -> list[Recommendation]:
        """Build recommendations for a set of pending suggestions.

        Args:
            suggestions: Pending suggestions on one idea.

        Returns:
            Recommendations, empty when there are too few suggestions.
        """
        if len(suggestions) < self._config.min_suggestions:
            return []

        conflicts = self._detector.detect(suggestions)
        recommendations = []

        groups = self._grouper.consensus_groups(suggestions)
        if groups:
            recommendations.append(Recommendation(
                kind="consensus_merge",
                title="Merge Similar Suggestions",
                description=(
                    f"Found {len(groups)} groups of similar suggestions "
                    "that can be consolidated"
                ),
                priority="high",
                suggestion_ids=[s.id for group in groups for s in group],
                strategy=MergeStrategy.CONSENSUS,
            ))

        trusted = self._high_reputation(suggestions)
        if len(trusted) >= self._config.min_high_reputation_suggestions:
            recommendations.append(Recommendation(
                kind="priority_merge",
                title="Priority-Based Merge",
                description="Merge suggestions from high-reputation contributors first",
                priority="medium",
                suggestion_ids=[s.id for s in trusted],
                strategy=MergeStrategy.PRIORITY,
            ))

        if conflicts:
            recommendations.append(Recommendation(
                kind="conflict_resolution",
                title="Resolve Conflicts First",
                description=f"Found {len(conflicts)} conflicts that need resolution before merging",
                priority="high",
                action_required="resolve_conflicts",
            ))

        safe = self._non_conflicting(suggestions, conflicts)
        if len(safe) >= 2:
            recommendations.append(Recommendation(
                kind="auto_merge",
                title="Auto-Merge Safe Suggestions",
                description="Automatically merge suggestions that don't conflict with each other",
                priority="low",
                suggestion_ids=[s.id for s in safe],
                auto_merge=True,
            ))

        return recommendations

    def _high_reputation(self, suggestions: Sequence[Suggestion]) -> list[Suggestion]:
        if self._reputation is None:
            return []

        points: dict[str, int] = {}
        trusted = []
        for suggestion in suggestions:
            if suggestion.author_id not in points:
                points[suggestion.author_id] = int(self._reputation(suggestion.author_id))
            if points[suggestion.author_id] > self._config.high_reputation_points:
                trusted.append(suggestion)
        return trusted

    def _non_conflicting(
        self,
        suggestions: Sequence[Suggestion],
        conflicts: list[ConflictDescriptor],
    ) -> list[Suggestion]:
        conflicting: set[str] = set()
        for conflict in conflicts:
            if conflict.is_pairwise:
                conflicting.update(conflict.suggestion_ids)
        return [s for s in suggestions if s.id not in conflicting]
