"""Conflict detection over a batch of suggestions.

Two passes run over the batch:
- content overlap: every pair whose texts are too similar
- logical conflict: the batch mixes additive and subtractive suggestions

Overlap descriptors come first, in pair evaluation order, followed by at
most one batch-level logical descriptor.
"""

import logging
from collections.abc import Sequence

from ideamerge.core.config import DetectionConfig
from ideamerge.core.constants import (
    CONTENT_OVERLAP_DESCRIPTION,
    LOGICAL_CONFLICT_DESCRIPTION,
)
from ideamerge.merging.similarity import similarity
from ideamerge.models.conflict import ConflictDescriptor, ConflictKind
from ideamerge.models.suggestion import Suggestion


logger = logging.getLogger(__name__)


class ConflictDetector:
    """Finds overlapping and contradictory suggestions."""

    def __init__(self, config: DetectionConfig | None = None) -> None:
        """Initialize the detector.

        Args:
            config: Optional detection configuration.
        """
        self._config = config or DetectionConfig()

    def detect(self, suggestions: Sequence[Suggestion]) -> list[ConflictDescriptor]:
        """Detect all conflicts in a batch.

        Args:
            suggestions: Suggestions in caller order.

        Returns:
            Conflict descriptors, overlap descriptors first.
        """
        conflicts = self.detect_content_overlap(suggestions)

        logical = self.detect_logical_conflict(suggestions)
        if logical is not None:
            conflicts.append(logical)

        logger.debug(
            f"Detected {len(conflicts)} conflicts among {len(suggestions)} suggestions"
        )
        return conflicts

    def detect_content_overlap(
        self,
        suggestions: Sequence[Suggestion],
    ) -> list[ConflictDescriptor]:
        """Find every pair whose similarity exceeds the overlap threshold."""
        conflicts = []

        for i, first in enumerate(suggestions):
            for second in suggestions[i + 1:]:
                score = similarity(first.content, second.content)

                if score > self._config.overlap_threshold:
                    conflicts.append(ConflictDescriptor(
                        kind=ConflictKind.CONTENT_OVERLAP,
                        description=CONTENT_OVERLAP_DESCRIPTION,
                        suggestion_1=first,
                        suggestion_2=second,
                        similarity=score,
                    ))

        return conflicts

    def detect_logical_conflict(
        self,
        suggestions: Sequence[Suggestion],
    ) -> ConflictDescriptor | None:
        """Check whether the batch mixes additive and subtractive suggestions."""
        positive_count = sum(1 for s in suggestions if self.is_positive(s.content))
        negative_count = len(suggestions) - positive_count

        if positive_count == 0 or negative_count == 0:
            return None

        return ConflictDescriptor(
            kind=ConflictKind.LOGICAL_CONFLICT,
            description=LOGICAL_CONFLICT_DESCRIPTION,
            positive_count=positive_count,
            negative_count=negative_count,
        )

    def is_positive(self, content: str) -> bool:
        """Classify content as additive.

        Each lexicon word counts once when it appears anywhere in the
        lower-cased content. Ties classify as not positive.
        """
        text = content.lower()
        positive = sum(1 for word in self._config.positive_words if word in text)
        negative = sum(1 for word in self._config.negative_words if word in text)
        return positive > negative

    def is_negative(self, content: str) -> bool:
        """Classify content as subtractive (anything not positive)."""
        return not self.is_positive(content)
