"""Merge strategies.

Each strategy turns a batch of suggestions into an ordered list of changes
for the merge record:
- consensus: one change per group of similar suggestions
- priority: suggestions from the highest-reputation authors
- latest: the most recently created suggestions

Author reputation is supplied by an injected lookup so strategies stay
pure functions of their inputs.
"""

import logging
from collections.abc import Callable, Sequence

from ideamerge.core.config import StrategyConfig
from ideamerge.merging.grouper import SimilarityGrouper
from ideamerge.models.merge import Change, ChangeKind, MergeStrategy
from ideamerge.models.suggestion import Suggestion


logger = logging.getLogger(__name__)

ReputationLookup = Callable[[str], int]


class MergeStrategySelector:
    """Applies a named merge strategy to a batch of suggestions."""

    def __init__(
        self,
        reputation: ReputationLookup | None = None,
        grouper: SimilarityGrouper | None = None,
        config: StrategyConfig | None = None,
    ) -> None:
        """Initialize the selector.

        Args:
            reputation: Returns an author's total awarded points.
            grouper: Grouper used by the consensus strategy.
            config: Optional strategy configuration.
        """
        self._reputation = reputation
        self._grouper = grouper or SimilarityGrouper()
        self._config = config or StrategyConfig()

    def resolve_strategy(self, strategy: "str | MergeStrategy | None") -> MergeStrategy:
        """Map a requested strategy name onto a known strategy.

        Missing names use the configured default. Unknown names fall back
        to consensus.
        """
        if strategy is None:
            strategy = self._config.default_strategy

        resolved = MergeStrategy.parse(strategy)
        if resolved is None:
            logger.warning(f"Unknown merge strategy {strategy!r}, using consensus")
            return MergeStrategy.CONSENSUS
        return resolved

    def apply(
        self,
        suggestions: Sequence[Suggestion],
        strategy: "str | MergeStrategy | None" = None,
    ) -> list[Change]:
        """Produce the changes for a merge.

        Args:
            suggestions: Suggestions being merged, in caller order.
            strategy: Strategy name; unknown values fall back to consensus.

        Returns:
            Ordered list of changes.
        """
        resolved = self.resolve_strategy(strategy)

        if resolved is MergeStrategy.PRIORITY:
            return self.priority(suggestions)
        elif resolved is MergeStrategy.LATEST:
            return self.latest(suggestions)
        return self.consensus(suggestions)

    def consensus(self, suggestions: Sequence[Suggestion]) -> list[Change]:
        """Emit one change per group of at least two similar suggestions."""
        changes = []

        for group in self._grouper.consensus_groups(suggestions):
            changes.append(Change(
                kind=ChangeKind.CONSENSUS,
                content=group[0].content,
                support={
                    "support_count": len(group),
                    "authors": [s.author_id for s in group],
                },
            ))

        return changes

    def priority(self, suggestions: Sequence[Suggestion]) -> list[Change]:
        """Emit changes from the authors with the most points."""
        points = self._author_points(suggestions)

        ranked = sorted(suggestions, key=lambda s: points[s.author_id], reverse=True)

        return [
            Change(
                kind=ChangeKind.PRIORITY,
                content=s.content,
                support={
                    "author": s.author_id,
                    "author_points": points[s.author_id],
                },
            )
            for s in ranked[:self._config.priority_top_n]
        ]

    def latest(self, suggestions: Sequence[Suggestion]) -> list[Change]:
        """Emit changes from the most recently created suggestions."""
        ranked = sorted(suggestions, key=lambda s: s.created_at, reverse=True)

        return [
            Change(
                kind=ChangeKind.LATEST,
                content=s.content,
                support={
                    "created_at": s.created_at.isoformat(),
                    "author": s.author_id,
                },
            )
            for s in ranked[:self._config.latest_top_n]
        ]

    def _author_points(self, suggestions: Sequence[Suggestion]) -> dict[str, int]:
        """Look up each distinct author's points once."""
        points: dict[str, int] = {}
        for suggestion in suggestions:
            if suggestion.author_id in points:
                continue
            if self._reputation is None:
                points[suggestion.author_id] = 0
            else:
                points[suggestion.author_id] = int(self._reputation(suggestion.author_id))
        return points
