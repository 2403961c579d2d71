"""Unit tests for MergeOrchestrator."""

import logging
from unittest.mock import MagicMock

import pytest

from ideamerge.core.exceptions import MergeFailedError, NoValidSuggestionsError
from ideamerge.merging.orchestrator import MergeOrchestrator
from ideamerge.merging.strategies import MergeStrategySelector
from ideamerge.models.conflict import ConflictKind
from ideamerge.models.merge import ChangeKind, MergeOptions, MergeStrategy, MergeType
from ideamerge.models.suggestion import SuggestionState


@pytest.fixture
def orchestrator(store, points):
    """Create an orchestrator on the test store."""
    return MergeOrchestrator(store, points)


class TestAnalyze:
    """Tests for read-only analysis."""

    def test_clean_batch(self, orchestrator, make_suggestion):
        """Test unrelated suggestions can merge."""
        result = orchestrator.analyze([
            make_suggestion("dark mode please"),
            make_suggestion("faster search results"),
        ])

        assert result.conflicts == []
        assert result.suggestions_count == 2
        assert result.can_merge

    def test_conflicting_batch(self, orchestrator, make_suggestion):
        """Test mixed polarity blocks a clean merge."""
        result = orchestrator.analyze([
            make_suggestion("Please add a search filter"),
            make_suggestion("We should add search filters too"),
            make_suggestion("Remove the export button"),
        ])

        assert [c.kind for c in result.conflicts] == [ConflictKind.LOGICAL_CONFLICT]
        assert not result.can_merge

    def test_empty_batch(self, orchestrator):
        """Test nothing to analyze is not mergeable."""
        result = orchestrator.analyze([])

        assert result.suggestions_count == 0
        assert not result.can_merge

    def test_analyze_writes_nothing(self, orchestrator, store, stored_suggestion):
        """Test analysis leaves the ledger untouched."""
        a = stored_suggestion("dark mode please")
        b = stored_suggestion("dark mode please")

        orchestrator.analyze([a, b])

        assert store.get_conflicts_by_idea("idea_1") == []
        assert store.get_suggestion(a.id).is_pending


class TestMerge:
    """Tests for performing merges."""

    def test_identical_pair_consensus(self, orchestrator, store, points, stored_suggestion):
        """Test two identical suggestions merge into one change."""
        a = stored_suggestion("dark mode please", author_id="alice")
        b = stored_suggestion("dark mode please", author_id="bob")

        merge = orchestrator.merge("idea_1", [a, b], "owner")

        assert merge.merged_suggestions == [a.id, b.id]
        assert merge.strategy == MergeStrategy.CONSENSUS
        assert merge.merge_type == MergeType.MANUAL
        assert merge.merge_summary == "Merged 2 suggestions into 1 consolidated changes"
        assert len(merge.changes_applied) == 1
        change = merge.changes_applied[0]
        assert change.kind == ChangeKind.CONSENSUS
        assert change.support == {"support_count": 2, "authors": ["alice", "bob"]}
        assert merge.has_conflicts

        for suggestion in (a, b):
            saved = store.get_suggestion(suggestion.id)
            assert saved.state == SuggestionState.ACCEPTED
            assert saved.consumed_by_merge_id == merge.id
            assert saved.accepted_by == "owner"

        assert store.get_merge(merge.id).to_dict() == merge.to_dict()
        assert points.total_points("owner") == 15

    def test_pairwise_conflicts_recorded(self, orchestrator, store, stored_suggestion):
        """Test overlap descriptors become unresolved ledger entries."""
        a = stored_suggestion("dark mode please")
        b = stored_suggestion("dark mode please")

        orchestrator.merge("idea_1", [a, b], "owner")

        conflicts = store.get_unresolved_conflicts("idea_1")
        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.suggestion_ids == (a.id, b.id)
        assert conflict.conflict_type == ConflictKind.CONTENT_OVERLAP
        assert conflict.conflicting_values == {"similarity": 1.0}

    def test_logical_conflicts_not_recorded(self, orchestrator, store, stored_suggestion):
        """Test batch-level descriptors only set the conflict flag."""
        a = stored_suggestion("Add a search filter")
        b = stored_suggestion("Remove the search filter")

        merge = orchestrator.merge("idea_1", [a, b], "owner")

        assert merge.has_conflicts
        assert store.get_conflicts_by_idea("idea_1") == []

    def test_options_recorded(self, orchestrator, stored_suggestion):
        """Test merge type, strategy and resolution notes are kept."""
        a = stored_suggestion("dark mode please")
        b = stored_suggestion("faster search results")
        options = MergeOptions(
            strategy="latest",
            auto_merge=True,
            conflict_resolution={"kept": "newest"},
        )

        merge = orchestrator.merge("idea_1", [a, b], "owner", options)

        assert merge.merge_type == MergeType.AUTO
        assert merge.strategy == MergeStrategy.LATEST
        assert merge.conflict_resolution == {"kept": "newest"}
        assert not merge.has_conflicts
        assert [c.content for c in merge.changes_applied] == [
            "faster search results",
            "dark mode please",
        ]

    def test_unknown_strategy_recorded_as_consensus(self, orchestrator, stored_suggestion):
        """Test fallback strategy is what the record shows."""
        a = stored_suggestion("dark mode please")

        merge = orchestrator.merge("idea_1", [a], "owner", MergeOptions(strategy="bogus"))

        assert merge.strategy == MergeStrategy.CONSENSUS
        assert merge.changes_applied == []
        assert merge.merge_summary == "Merged 1 suggestions into 0 consolidated changes"

    def test_empty_batch_writes_nothing(self, orchestrator, store, points):
        """Test an empty merge is refused before any write."""
        with pytest.raises(NoValidSuggestionsError) as exc_info:
            orchestrator.merge("idea_1", [], "owner")

        assert exc_info.value.code == "no_valid_suggestions"
        assert store.get_merge_history("idea_1") == []
        assert points.total_points("owner") == 0


class TestMergeFailures:
    """Tests for aborted merges."""

    def test_stale_suggestion_aborts(self, orchestrator, store, points, stored_suggestion):
        """Test a suggestion decided elsewhere rolls the whole merge back."""
        a = stored_suggestion("dark mode please")
        b = stored_suggestion("dark mode please")
        store.transition_suggestion(b.id, SuggestionState.ACCEPTED, actor_id="rival")

        with pytest.raises(MergeFailedError) as exc_info:
            orchestrator.merge("idea_1", [a, b], "owner")

        assert exc_info.value.code == "merge_failed"
        assert store.get_merge_history("idea_1") == []
        assert store.get_conflicts_by_idea("idea_1") == []
        assert points.total_points("owner") == 0
        assert store.get_suggestion(a.id).is_pending

    def test_unknown_suggestion_aborts(self, orchestrator, store, stored_suggestion, make_suggestion):
        """Test a suggestion missing from the store aborts the merge."""
        a = stored_suggestion("dark mode please")
        ghost = make_suggestion("faster search results")

        with pytest.raises(MergeFailedError):
            orchestrator.merge("idea_1", [a, ghost], "owner")

        assert store.get_suggestion(a.id).is_pending
        assert store.get_merge_history("idea_1") == []

    def test_failure_chains_cause(self, store, stored_suggestion, caplog):
        """Test unexpected errors are wrapped with their cause."""
        failing_points = MagicMock()
        failing_points.award.side_effect = RuntimeError("ledger offline")
        orchestrator = MergeOrchestrator(
            store,
            failing_points,
            selector=MergeStrategySelector(),
        )
        a = stored_suggestion("dark mode please")
        b = stored_suggestion("dark mode please")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(MergeFailedError) as exc_info:
                orchestrator.merge("idea_1", [a, b], "owner")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "ledger offline" in caplog.text
        assert store.get_merge_history("idea_1") == []
        assert store.get_conflicts_by_idea("idea_1") == []


class TestNotifier:
    """Tests for post-commit notification."""

    def test_notifier_receives_record(self, store, points, stored_suggestion):
        """Test the notifier sees the committed merge."""
        notifier = MagicMock()
        orchestrator = MergeOrchestrator(store, points, notifier=notifier)
        a = stored_suggestion("dark mode please")

        merge = orchestrator.merge("idea_1", [a], "owner")

        notifier.assert_called_once_with(merge)

    def test_notifier_failure_keeps_merge(self, store, points, stored_suggestion, caplog):
        """Test notifier errors are logged and the merge stands."""
        notifier = MagicMock(side_effect=RuntimeError("webhook down"))
        orchestrator = MergeOrchestrator(store, points, notifier=notifier)
        a = stored_suggestion("dark mode please")

        with caplog.at_level(logging.WARNING):
            merge = orchestrator.merge("idea_1", [a], "owner")

        assert store.get_merge(merge.id) is not None
        assert "webhook down" in caplog.text
