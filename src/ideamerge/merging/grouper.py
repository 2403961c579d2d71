"""Greedy similarity grouping for consensus merges.

Each group is represented by its first member. A suggestion joins the first
group, in group order, whose representative it resembles closely enough,
and otherwise starts a new group. Grouping is order-sensitive and not
transitive: a suggestion close to a later member but not to the
representative starts its own group.
"""

from collections.abc import Sequence

from ideamerge.core.config import GroupingConfig
from ideamerge.merging.similarity import similarity
from ideamerge.models.suggestion import Suggestion


class SimilarityGrouper:
    """Partitions suggestions into clusters of similar content."""

    def __init__(self, config: GroupingConfig | None = None) -> None:
        self._config = config or GroupingConfig()

    def group(self, suggestions: Sequence[Suggestion]) -> list[list[Suggestion]]:
        """Partition suggestions into similarity groups.

        Args:
            suggestions: Suggestions in caller order.

        Returns:
            Non-empty groups covering every suggestion exactly once.
        """
        groups: list[list[Suggestion]] = []

        for suggestion in suggestions:
            for group in groups:
                score = similarity(suggestion.content, group[0].content)
                if score > self._config.threshold:
                    group.append(suggestion)
                    break
            else:
                groups.append([suggestion])

        return groups

    def consensus_groups(
        self,
        suggestions: Sequence[Suggestion],
    ) -> list[list[Suggestion]]:
        """Get only the groups large enough to count as consensus."""
        return [
            group for group in self.group(suggestions)
            if len(group) >= self._config.min_group_size
        ]
