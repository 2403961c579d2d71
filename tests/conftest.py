"""Pytest configuration and fixtures for IdeaMerge tests."""

import itertools
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Generator

import pytest

from ideamerge.core.config import MergeConfig
from ideamerge.merging.points import PointsService
from ideamerge.merging.service import MergeService, create_service
from ideamerge.merging.store import MergeStore
from ideamerge.models.suggestion import Suggestion, SuggestionType


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def config() -> MergeConfig:
    """Create default configuration."""
    return MergeConfig()


@pytest.fixture
def store(temp_dir: Path) -> Generator[MergeStore, None, None]:
    """Create and initialize a merge store."""
    store = MergeStore(temp_dir / ".ideamerge" / "merge.db")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def points(store: MergeStore) -> PointsService:
    """Create a points service on the test store."""
    return PointsService(store)


@pytest.fixture
def service(temp_dir: Path) -> Generator[MergeService, None, None]:
    """Create a fully wired service in the temp directory."""
    service = create_service(temp_dir)
    yield service
    service.store.close()


@pytest.fixture
def make_suggestion() -> Callable[..., Suggestion]:
    """Factory for suggestions with unique IDs and increasing timestamps."""
    counter = itertools.count(1)
    base_time = datetime(2025, 1, 1, 12, 0, 0)

    def _make(
        content: str,
        author_id: str = "alice",
        idea_id: str = "idea_1",
        suggestion_id: str | None = None,
        created_at: datetime | None = None,
        suggestion_type: SuggestionType = SuggestionType.GENERAL,
    ) -> Suggestion:
        n = next(counter)
        return Suggestion(
            id=suggestion_id or f"sug_{n:03d}",
            idea_id=idea_id,
            author_id=author_id,
            content=content,
            type=suggestion_type,
            created_at=created_at or base_time + timedelta(minutes=n),
        )

    return _make


@pytest.fixture
def stored_suggestion(
    store: MergeStore,
    make_suggestion: Callable[..., Suggestion],
) -> Callable[..., Suggestion]:
    """Factory that also persists the suggestion in the test store."""

    def _make(content: str, **kwargs) -> Suggestion:
        suggestion = make_suggestion(content, **kwargs)
        store.add_suggestion(suggestion)
        return suggestion

    return _make
