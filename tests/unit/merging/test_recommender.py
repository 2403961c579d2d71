"""Unit tests for MergeRecommender."""

from ideamerge.core.config import RecommendationConfig
from ideamerge.merging.recommender import MergeRecommender
from ideamerge.models.merge import MergeStrategy


def _kinds(recommendations):
    return [r.kind for r in recommendations]


class TestRecommender:
    """Tests for merge recommendations."""

    def test_too_few_suggestions(self, make_suggestion):
        """Test a single suggestion yields no recommendations."""
        assert MergeRecommender().recommend([make_suggestion("dark mode please")]) == []
        assert MergeRecommender().recommend([]) == []

    def test_consensus_and_conflicts(self, make_suggestion):
        """Test duplicates recommend consolidation and resolution."""
        a = make_suggestion("dark mode please")
        b = make_suggestion("dark mode please")
        c = make_suggestion("faster search results")

        recommendations = MergeRecommender().recommend([a, b, c])

        assert _kinds(recommendations) == ["consensus_merge", "conflict_resolution"]
        consensus = recommendations[0]
        assert consensus.priority == "high"
        assert consensus.strategy == MergeStrategy.CONSENSUS
        assert consensus.suggestion_ids == [a.id, b.id]
        assert consensus.description == (
            "Found 1 groups of similar suggestions that can be consolidated"
        )
        assert recommendations[1].action_required == "resolve_conflicts"

    def test_priority_and_auto_merge(self, make_suggestion):
        """Test high-reputation authors and conflict-free batches."""
        suggestions = [
            make_suggestion("dark mode please", author_id="alice"),
            make_suggestion("faster search results", author_id="bob"),
            make_suggestion("better onboarding flow", author_id="carol"),
        ]
        recommender = MergeRecommender(reputation=lambda _: 150)

        recommendations = recommender.recommend(suggestions)

        assert _kinds(recommendations) == ["priority_merge", "auto_merge"]
        priority, auto = recommendations
        assert priority.priority == "medium"
        assert priority.strategy == MergeStrategy.PRIORITY
        assert priority.suggestion_ids == [s.id for s in suggestions]
        assert auto.priority == "low"
        assert auto.auto_merge
        assert auto.suggestion_ids == [s.id for s in suggestions]

    def test_reputation_must_exceed_threshold(self, make_suggestion):
        """Test authors at exactly the threshold are not high reputation."""
        suggestions = [
            make_suggestion("dark mode please"),
            make_suggestion("faster search results"),
            make_suggestion("better onboarding flow"),
        ]

        recommendations = MergeRecommender(reputation=lambda _: 100).recommend(suggestions)

        assert "priority_merge" not in _kinds(recommendations)

    def test_configurable_reputation(self, make_suggestion):
        """Test the reputation threshold comes from configuration."""
        suggestions = [
            make_suggestion("dark mode please"),
            make_suggestion("faster search results"),
        ]
        recommender = MergeRecommender(
            reputation=lambda _: 20,
            config=RecommendationConfig(
                high_reputation_points=10,
                min_high_reputation_suggestions=2,
            ),
        )

        assert "priority_merge" in _kinds(recommender.recommend(suggestions))

    def test_logical_conflict_keeps_auto_merge(self, make_suggestion):
        """Test batch-level conflicts do not exclude suggestions from auto merge."""
        a = make_suggestion("Add a search filter")
        b = make_suggestion("Remove the search filter")

        recommendations = MergeRecommender().recommend([a, b])

        assert _kinds(recommendations) == ["conflict_resolution", "auto_merge"]
        assert recommendations[0].description == (
            "Found 1 conflicts that need resolution before merging"
        )

    def test_to_dict(self, make_suggestion):
        """Test serialization uses the suggested IDs key."""
        a = make_suggestion("dark mode please")
        b = make_suggestion("faster search results")

        data = MergeRecommender().recommend([a, b])[0].to_dict()

        assert data["type"] == "auto_merge"
        assert data["suggested_suggestion_ids"] == [a.id, b.id]
        assert data["auto_merge"] is True
