"""Unit tests for merge and conflict models."""

import pytest
from pydantic import ValidationError

from ideamerge.models.conflict import ConflictDescriptor, ConflictKind, SuggestionConflict
from ideamerge.models.merge import (
    AnalysisResult,
    Change,
    ChangeKind,
    MergeOptions,
    MergeStrategy,
    SuggestionMerge,
)


class TestMergeStrategy:
    """Tests for strategy parsing."""

    def test_parse(self):
        """Test exact names parse and others do not."""
        assert MergeStrategy.parse("latest") == MergeStrategy.LATEST
        assert MergeStrategy.parse(MergeStrategy.PRIORITY) == MergeStrategy.PRIORITY
        assert MergeStrategy.parse("LATEST") is None
        assert MergeStrategy.parse(None) is None


class TestChange:
    """Tests for Change serialization."""

    def test_flat_dict(self):
        """Test support fields sit beside type and content."""
        change = Change(
            kind=ChangeKind.PRIORITY,
            content="dark mode please",
            support={"author": "bob", "author_points": 200},
        )

        data = change.to_dict()

        assert data == {
            "type": "priority_change",
            "content": "dark mode please",
            "author": "bob",
            "author_points": 200,
        }
        assert Change.from_dict(data) == change


class TestSuggestionMerge:
    """Tests for SuggestionMerge serialization."""

    def test_round_trip(self):
        """Test a merge record survives serialization."""
        merge = SuggestionMerge(
            id="merge_1",
            idea_id="idea_1",
            merged_by="owner",
            merged_suggestions=["sug_1", "sug_2"],
            merge_summary="Merged 2 suggestions into 1 consolidated changes",
            changes_applied=[Change(ChangeKind.CONSENSUS, "dark mode please", {"support_count": 2})],
            has_conflicts=True,
        )

        restored = SuggestionMerge.from_dict(merge.to_dict())

        assert restored.to_dict() == merge.to_dict()


class TestMergeOptions:
    """Tests for caller-supplied merge options."""

    def test_defaults(self):
        """Test options default to a manual merge with the default strategy."""
        options = MergeOptions()

        assert options.strategy is None
        assert options.auto_merge is False
        assert options.conflict_resolution is None

    def test_validation(self):
        """Test malformed options are rejected."""
        with pytest.raises(ValidationError):
            MergeOptions(conflict_resolution="keep the first one")


class TestAnalysisResult:
    """Tests for AnalysisResult."""

    def test_can_merge(self, make_suggestion):
        """Test mergeability requires suggestions and no conflicts."""
        descriptor = ConflictDescriptor(
            kind=ConflictKind.LOGICAL_CONFLICT,
            description="mixed",
            positive_count=1,
            negative_count=1,
        )

        assert AnalysisResult(conflicts=[], suggestions_count=2).can_merge
        assert not AnalysisResult(conflicts=[], suggestions_count=0).can_merge
        assert not AnalysisResult(conflicts=[descriptor], suggestions_count=2).can_merge

    def test_to_dict(self, make_suggestion):
        """Test pairwise descriptors embed both suggestions."""
        a = make_suggestion("dark mode please")
        b = make_suggestion("dark mode please")
        descriptor = ConflictDescriptor(
            kind=ConflictKind.CONTENT_OVERLAP,
            description="similar",
            suggestion_1=a,
            suggestion_2=b,
            similarity=1.0,
        )

        data = AnalysisResult(conflicts=[descriptor], suggestions_count=2).to_dict()

        assert data["can_merge"] is False
        assert data["conflicts"][0]["type"] == "content_overlap"
        assert data["conflicts"][0]["suggestion_1"]["id"] == a.id
        assert data["conflicts"][0]["similarity"] == 1.0


class TestSuggestionConflict:
    """Tests for SuggestionConflict."""

    def test_round_trip(self):
        """Test a conflict record survives serialization."""
        conflict = SuggestionConflict(
            id="conflict_1",
            idea_id="idea_1",
            suggestion_1_id="sug_1",
            suggestion_2_id="sug_2",
            conflict_type=ConflictKind.CONTENT_OVERLAP,
            description="similar",
            conflicting_values={"similarity": 0.8},
        )

        restored = SuggestionConflict.from_dict(conflict.to_dict())

        assert restored.to_dict() == conflict.to_dict()
        assert not restored.is_closed
