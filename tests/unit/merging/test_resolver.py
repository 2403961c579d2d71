"""Unit tests for ConflictResolver."""

import pytest

from ideamerge.core.exceptions import (
    ConflictAlreadyResolvedError,
    ConflictNotFoundError,
    ResolveFailedError,
)
from ideamerge.merging.resolver import ConflictResolver
from ideamerge.models.conflict import ConflictKind, ResolutionStatus, SuggestionConflict


@pytest.fixture
def resolver(store, points):
    """Create a resolver on the test store."""
    return ConflictResolver(store, points)


@pytest.fixture
def conflict_id(store, stored_suggestion):
    """Store an unresolved conflict and return its ID."""
    a = stored_suggestion("dark mode please")
    b = stored_suggestion("dark mode please")
    store.create_conflict(SuggestionConflict(
        id="conflict_test_001",
        idea_id="idea_1",
        suggestion_1_id=a.id,
        suggestion_2_id=b.id,
        conflict_type=ConflictKind.CONTENT_OVERLAP,
        description="Suggestions have similar content that may be redundant",
        conflicting_values={"similarity": 1.0},
    ))
    return "conflict_test_001"


class TestResolve:
    """Tests for resolving conflicts."""

    def test_resolve(self, resolver, store, points, conflict_id):
        """Test resolving stamps the conflict and awards points."""
        conflict = resolver.resolve(conflict_id, "owner", "kept the first")

        assert conflict.resolution_status == ResolutionStatus.RESOLVED
        assert conflict.resolved_by == "owner"
        assert conflict.resolution_notes == "kept the first"
        assert conflict.resolved_at is not None

        saved = store.get_conflict(conflict_id)
        assert saved.is_resolved
        assert saved.resolved_by == "owner"
        assert points.total_points("owner") == 5

        log = store.get_resolution_log(conflict_id)
        assert [(e["action"], e["actor"]) for e in log] == [("resolve", "owner")]

    def test_ignore(self, resolver, store, points, conflict_id):
        """Test ignoring closes the conflict without points."""
        conflict = resolver.ignore(conflict_id, "owner")

        assert conflict.resolution_status == ResolutionStatus.IGNORED
        assert conflict.is_closed
        assert not conflict.is_resolved
        assert store.get_conflict(conflict_id).resolution_status == ResolutionStatus.IGNORED
        assert points.total_points("owner") == 0
        assert [e["action"] for e in store.get_resolution_log(conflict_id)] == ["ignore"]

    def test_unknown_conflict(self, resolver):
        """Test missing conflicts raise ConflictNotFoundError."""
        with pytest.raises(ConflictNotFoundError) as exc_info:
            resolver.resolve("missing", "owner")

        assert isinstance(exc_info.value, ResolveFailedError)
        assert exc_info.value.code == "resolve_failed"

    def test_resolve_twice(self, resolver, store, points, conflict_id):
        """Test a resolved conflict cannot be resolved again."""
        resolver.resolve(conflict_id, "owner")

        with pytest.raises(ConflictAlreadyResolvedError) as exc_info:
            resolver.resolve(conflict_id, "someone_else")

        assert exc_info.value.status == "resolved"
        assert store.get_conflict(conflict_id).resolved_by == "owner"
        assert points.total_points("someone_else") == 0
        assert len(store.get_resolution_log(conflict_id)) == 1

    def test_ignored_is_terminal(self, resolver, store, conflict_id):
        """Test an ignored conflict cannot be resolved later."""
        resolver.ignore(conflict_id, "owner")

        with pytest.raises(ConflictAlreadyResolvedError):
            resolver.resolve(conflict_id, "owner")

        assert store.get_conflict(conflict_id).resolution_status == ResolutionStatus.IGNORED
