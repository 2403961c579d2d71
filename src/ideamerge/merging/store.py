"""Suggestion, conflict and merge persistence layer.

This module handles all database operations for the merge engine:
suggestion state, the conflict ledger with its resolution log, merge
records, and awarded points. Multi-step writes run inside a single
transaction obtained from ``MergeStore.transaction()``.
"""

import json
import secrets
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from ideamerge.core.exceptions import StoreError
from ideamerge.models.conflict import (
    ConflictKind,
    ConflictStats,
    ResolutionStatus,
    SuggestionConflict,
)
from ideamerge.models.merge import (
    Change,
    MergeStrategy,
    MergeType,
    SuggestionMerge,
)
from ideamerge.models.suggestion import Suggestion, SuggestionState, SuggestionType


MERGE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS suggestions (
    id TEXT PRIMARY KEY,
    idea_id TEXT NOT NULL,
    author_id TEXT NOT NULL,
    parent_id TEXT REFERENCES suggestions(id) ON DELETE CASCADE,
    content TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'general' CHECK (type IN (
        'improvement', 'question', 'concern', 'support', 'general'
    )),
    state TEXT NOT NULL DEFAULT 'pending' CHECK (state IN (
        'pending', 'accepted', 'rejected'
    )),
    created_at TEXT NOT NULL,
    accepted_by TEXT,
    accepted_at TEXT,
    consumed_by_merge_id TEXT
);

CREATE INDEX IF NOT EXISTS idx_suggestions_idea ON suggestions(idea_id, created_at);
CREATE INDEX IF NOT EXISTS idx_suggestions_state ON suggestions(idea_id, state);
CREATE INDEX IF NOT EXISTS idx_suggestions_author ON suggestions(author_id, state);

CREATE TABLE IF NOT EXISTS suggestion_conflicts (
    id TEXT PRIMARY KEY,
    idea_id TEXT NOT NULL,
    suggestion_1_id TEXT NOT NULL REFERENCES suggestions(id) ON DELETE CASCADE,
    suggestion_2_id TEXT NOT NULL REFERENCES suggestions(id) ON DELETE CASCADE,
    conflict_type TEXT NOT NULL CHECK (conflict_type IN (
        'content_overlap', 'field_conflict', 'logical_conflict'
    )),
    field_name TEXT,
    description TEXT NOT NULL,
    conflicting_values_json TEXT NOT NULL DEFAULT '{}',
    resolution_status TEXT NOT NULL DEFAULT 'unresolved' CHECK (resolution_status IN (
        'unresolved', 'resolved', 'ignored'
    )),
    resolved_by TEXT,
    resolution_notes TEXT,
    resolved_at TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_conflicts_idea_status ON suggestion_conflicts(idea_id, resolution_status);
CREATE INDEX IF NOT EXISTS idx_conflicts_pair ON suggestion_conflicts(suggestion_1_id, suggestion_2_id);

CREATE TABLE IF NOT EXISTS suggestion_merges (
    id TEXT PRIMARY KEY,
    idea_id TEXT NOT NULL,
    merged_by TEXT NOT NULL,
    merged_suggestions_json TEXT NOT NULL,
    merge_summary TEXT NOT NULL,
    changes_applied_json TEXT NOT NULL,
    merge_type TEXT NOT NULL DEFAULT 'manual' CHECK (merge_type IN ('auto', 'manual')),
    has_conflicts INTEGER NOT NULL DEFAULT 0,
    conflict_resolution_json TEXT,
    strategy TEXT NOT NULL DEFAULT 'consensus',
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_merges_idea ON suggestion_merges(idea_id, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_merges_user ON suggestion_merges(merged_by, created_at DESC);

-- Resolution audit log
CREATE TABLE IF NOT EXISTS resolution_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    conflict_id TEXT NOT NULL,
    action TEXT NOT NULL,
    actor TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    notes TEXT
);

CREATE INDEX IF NOT EXISTS idx_resolution_log_conflict ON resolution_log(conflict_id);

-- Awarded points
CREATE TABLE IF NOT EXISTS points (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    amount INTEGER NOT NULL,
    event TEXT NOT NULL,
    reason TEXT NOT NULL,
    awarded_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_points_user ON points(user_id);

CREATE TABLE IF NOT EXISTS merge_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

INIT_META_SQL = """
INSERT OR IGNORE INTO merge_meta (key, value, updated_at) VALUES
    ('schema_version', '1', datetime('now'));
"""


def new_record_id(prefix: str) -> str:
    """Generate a unique record ID such as ``merge_20250101_120000_1a2b3c4d``."""
    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}_{secrets.token_hex(4)}"


class MergeStore:
    """SQLite storage for suggestions, conflicts, merges and points."""

    def __init__(self, db_path: Path) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = Path(db_path)
        self._connection: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get the shared database connection."""
        with self._lock:
            if self._connection is None:
                self._connection = self._create_connection()
            yield self._connection

    def _create_connection(self) -> sqlite3.Connection:
        """Create and configure a database connection."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row

        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")

        return conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run a block of writes atomically.

        Nested calls join the outermost transaction; only the outermost
        block commits or rolls back.
        """
        with self._get_connection() as conn:
            if self._depth == 0:
                try:
                    conn.execute("BEGIN IMMEDIATE")
                except sqlite3.Error as e:
                    raise StoreError(f"Failed to begin transaction: {e}", operation="begin")
            self._depth += 1
            try:
                yield conn
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    conn.rollback()
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    conn.commit()

    @property
    def in_transaction(self) -> bool:
        """Check if a transaction is currently open."""
        return self._depth > 0

    def initialize(self) -> None:
        """Create tables if they do not exist."""
        try:
            with self._get_connection() as conn:
                conn.executescript(MERGE_SCHEMA_SQL)
                conn.executescript(INIT_META_SQL)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize merge store: {e}", operation="initialize")

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                self._depth = 0

    # -------------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------------

    def add_suggestion(self, suggestion: Suggestion) -> str:
        """Insert a suggestion.

        Args:
            suggestion: The suggestion to store.

        Returns:
            The suggestion ID.

        Raises:
            StoreError: If insertion fails.
        """
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO suggestions (
                        id, idea_id, author_id, parent_id, content, type, state,
                        created_at, accepted_by, accepted_at, consumed_by_merge_id
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        suggestion.id,
                        suggestion.idea_id,
                        suggestion.author_id,
                        suggestion.parent_id,
                        suggestion.content,
                        suggestion.type.value,
                        suggestion.state.value,
                        suggestion.created_at.isoformat(),
                        suggestion.accepted_by,
                        suggestion.accepted_at.isoformat() if suggestion.accepted_at else None,
                        suggestion.consumed_by_merge_id,
                    ),
                )
                return suggestion.id

        except sqlite3.Error as e:
            raise StoreError(f"Failed to add suggestion: {e}", operation="add_suggestion")

    def get_suggestion(self, suggestion_id: str) -> Suggestion | None:
        """Get a suggestion by ID."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM suggestions WHERE id = ?",
                    (suggestion_id,),
                ).fetchone()
                return self._row_to_suggestion(row) if row else None

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get suggestion: {e}", operation="get_suggestion")

    def get_suggestions_by_idea(self, idea_id: str) -> list[Suggestion]:
        """Get every suggestion on an idea, oldest first."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT * FROM suggestions WHERE idea_id = ? ORDER BY created_at, rowid",
                    (idea_id,),
                )
                return [self._row_to_suggestion(row) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get suggestions: {e}", operation="get_suggestions_by_idea")

    def get_pending_suggestions(
        self,
        idea_id: str,
        suggestion_ids: list[str] | None = None,
    ) -> list[Suggestion]:
        """Get pending suggestions on an idea.

        Args:
            idea_id: The idea ID.
            suggestion_ids: Optional subset of IDs. Unknown IDs, IDs from
                other ideas and decided suggestions are skipped.

        Returns:
            Pending suggestions, in the order of ``suggestion_ids`` when
            given and oldest first otherwise.
        """
        if suggestion_ids is None:
            return [
                s for s in self.get_suggestions_by_idea(idea_id)
                if s.state is SuggestionState.PENDING
            ]

        if not suggestion_ids:
            return []

        try:
            with self._get_connection() as conn:
                placeholders = ",".join("?" * len(suggestion_ids))
                cursor = conn.execute(
                    f"""
                    SELECT * FROM suggestions
                    WHERE idea_id = ? AND state = 'pending' AND id IN ({placeholders})
                    """,
                    [idea_id, *suggestion_ids],
                )
                by_id = {row["id"]: self._row_to_suggestion(row) for row in cursor.fetchall()}

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get pending suggestions: {e}", operation="get_pending_suggestions")

        ordered = []
        for suggestion_id in dict.fromkeys(suggestion_ids):
            if suggestion_id in by_id:
                ordered.append(by_id[suggestion_id])
        return ordered

    def get_suggestions(self, suggestion_ids: list[str]) -> list[Suggestion]:
        """Get suggestions by ID, in the given order, skipping unknown IDs."""
        if not suggestion_ids:
            return []

        try:
            with self._get_connection() as conn:
                placeholders = ",".join("?" * len(suggestion_ids))
                cursor = conn.execute(
                    f"SELECT * FROM suggestions WHERE id IN ({placeholders})",
                    suggestion_ids,
                )
                by_id = {row["id"]: self._row_to_suggestion(row) for row in cursor.fetchall()}

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get suggestions: {e}", operation="get_suggestions")

        return [by_id[i] for i in suggestion_ids if i in by_id]

    def transition_suggestion(
        self,
        suggestion_id: str,
        state: SuggestionState,
        actor_id: str | None = None,
        merge_id: str | None = None,
        at: datetime | None = None,
    ) -> bool:
        """Move a pending suggestion to a decided state.

        The update only applies while the suggestion is still pending, so
        two concurrent decisions cannot both succeed.

        Returns:
            True if the suggestion was updated, False if it was not pending.
        """
        at = at or datetime.utcnow()

        try:
            with self.transaction() as conn:
                if state is SuggestionState.ACCEPTED:
                    cursor = conn.execute(
                        """
                        UPDATE suggestions SET
                            state = ?,
                            accepted_by = ?,
                            accepted_at = ?,
                            consumed_by_merge_id = ?
                        WHERE id = ? AND state = 'pending'
                        """,
                        (state.value, actor_id, at.isoformat(), merge_id, suggestion_id),
                    )
                else:
                    cursor = conn.execute(
                        "UPDATE suggestions SET state = ? WHERE id = ? AND state = 'pending'",
                        (state.value, suggestion_id),
                    )
                return cursor.rowcount > 0

        except sqlite3.Error as e:
            raise StoreError(f"Failed to update suggestion: {e}", operation="transition_suggestion")

    # -------------------------------------------------------------------------
    # Conflicts
    # -------------------------------------------------------------------------

    def create_conflict(self, conflict: SuggestionConflict) -> str:
        """Insert a conflict record.

        Raises:
            StoreError: If creation fails.
        """
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO suggestion_conflicts (
                        id, idea_id, suggestion_1_id, suggestion_2_id, conflict_type,
                        field_name, description, conflicting_values_json,
                        resolution_status, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        conflict.id,
                        conflict.idea_id,
                        conflict.suggestion_1_id,
                        conflict.suggestion_2_id,
                        conflict.conflict_type.value,
                        conflict.field_name,
                        conflict.description,
                        json.dumps(conflict.conflicting_values),
                        conflict.resolution_status.value,
                        conflict.created_at.isoformat(),
                    ),
                )
                return conflict.id

        except sqlite3.Error as e:
            raise StoreError(f"Failed to create conflict: {e}", operation="create_conflict")

    def get_conflict(self, conflict_id: str) -> SuggestionConflict | None:
        """Get a conflict by ID."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM suggestion_conflicts WHERE id = ?",
                    (conflict_id,),
                ).fetchone()
                return self._row_to_conflict(row) if row else None

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get conflict: {e}", operation="get_conflict")

    def get_conflicts_by_idea(
        self,
        idea_id: str,
        status: ResolutionStatus | None = None,
    ) -> list[SuggestionConflict]:
        """Get the conflicts recorded for an idea, oldest first.

        Args:
            idea_id: The idea ID.
            status: Optional status filter.
        """
        query = "SELECT * FROM suggestion_conflicts WHERE idea_id = ?"
        params: list[Any] = [idea_id]
        if status is not None:
            query += " AND resolution_status = ?"
            params.append(status.value)
        query += " ORDER BY created_at, rowid"

        try:
            with self._get_connection() as conn:
                cursor = conn.execute(query, params)
                return [self._row_to_conflict(row) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get conflicts: {e}", operation="get_conflicts_by_idea")

    def get_unresolved_conflicts(self, idea_id: str) -> list[SuggestionConflict]:
        """Get the unresolved conflicts for an idea."""
        return self.get_conflicts_by_idea(idea_id, ResolutionStatus.UNRESOLVED)

    def close_conflict(
        self,
        conflict_id: str,
        status: ResolutionStatus,
        actor_id: str,
        notes: str | None = None,
        at: datetime | None = None,
    ) -> bool:
        """Move an unresolved conflict to a terminal status.

        Returns:
            True if updated, False if the conflict was not unresolved.
        """
        if status is ResolutionStatus.UNRESOLVED:
            raise ValueError("A conflict cannot be closed as unresolved")

        try:
            with self.transaction() as conn:
                cursor = conn.execute(
                    """
                    UPDATE suggestion_conflicts SET
                        resolution_status = ?,
                        resolved_by = ?,
                        resolution_notes = ?,
                        resolved_at = ?
                    WHERE id = ? AND resolution_status = 'unresolved'
                    """,
                    (
                        status.value,
                        actor_id,
                        notes,
                        (at or datetime.utcnow()).isoformat(),
                        conflict_id,
                    ),
                )
                return cursor.rowcount > 0

        except sqlite3.Error as e:
            raise StoreError(f"Failed to update conflict: {e}", operation="close_conflict")

    def log_resolution(
        self,
        conflict_id: str,
        action: str,
        actor: str,
        notes: str | None = None,
    ) -> None:
        """Append an entry to the resolution audit log."""
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO resolution_log (conflict_id, action, actor, timestamp, notes)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (conflict_id, action, actor, datetime.utcnow().isoformat(), notes),
                )

        except sqlite3.Error as e:
            raise StoreError(f"Failed to log resolution: {e}", operation="log_resolution")

    def get_resolution_log(self, conflict_id: str) -> list[dict]:
        """Get the audit log entries for a conflict, oldest first."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT * FROM resolution_log WHERE conflict_id = ? ORDER BY id",
                    (conflict_id,),
                )
                return [
                    {
                        "conflict_id": row["conflict_id"],
                        "action": row["action"],
                        "actor": row["actor"],
                        "timestamp": row["timestamp"],
                        "notes": row["notes"],
                    }
                    for row in cursor.fetchall()
                ]

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get resolution log: {e}", operation="get_resolution_log")

    def get_conflict_stats(self, idea_id: str) -> ConflictStats:
        """Get conflict statistics for an idea."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    """
                    SELECT
                        COUNT(*) as total,
                        SUM(CASE WHEN resolution_status = 'unresolved' THEN 1 ELSE 0 END) as unresolved,
                        SUM(CASE WHEN resolution_status = 'resolved' THEN 1 ELSE 0 END) as resolved,
                        SUM(CASE WHEN resolution_status = 'ignored' THEN 1 ELSE 0 END) as ignored
                    FROM suggestion_conflicts
                    WHERE idea_id = ?
                    """,
                    (idea_id,),
                ).fetchone()

                by_type_cursor = conn.execute(
                    """
                    SELECT conflict_type, COUNT(*) as count FROM suggestion_conflicts
                    WHERE idea_id = ? GROUP BY conflict_type
                    """,
                    (idea_id,),
                )
                by_type = {r["conflict_type"]: r["count"] for r in by_type_cursor.fetchall()}

                return ConflictStats(
                    total=row["total"] or 0,
                    unresolved=row["unresolved"] or 0,
                    resolved=row["resolved"] or 0,
                    ignored=row["ignored"] or 0,
                    by_type=by_type,
                )

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get conflict stats: {e}", operation="get_conflict_stats")

    # -------------------------------------------------------------------------
    # Merges
    # -------------------------------------------------------------------------

    def create_merge(self, merge: SuggestionMerge) -> str:
        """Insert a merge record.

        Raises:
            StoreError: If the record is empty or insertion fails.
        """
        if not merge.merged_suggestions:
            raise StoreError("A merge must consume at least one suggestion", operation="create_merge")

        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO suggestion_merges (
                        id, idea_id, merged_by, merged_suggestions_json, merge_summary,
                        changes_applied_json, merge_type, has_conflicts,
                        conflict_resolution_json, strategy, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        merge.id,
                        merge.idea_id,
                        merge.merged_by,
                        json.dumps(merge.merged_suggestions),
                        merge.merge_summary,
                        json.dumps([c.to_dict() for c in merge.changes_applied]),
                        merge.merge_type.value,
                        int(merge.has_conflicts),
                        json.dumps(merge.conflict_resolution)
                        if merge.conflict_resolution is not None else None,
                        merge.strategy.value,
                        merge.created_at.isoformat(),
                    ),
                )
                return merge.id

        except sqlite3.Error as e:
            raise StoreError(f"Failed to create merge: {e}", operation="create_merge")

    def get_merge(self, merge_id: str) -> SuggestionMerge | None:
        """Get a merge record by ID."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM suggestion_merges WHERE id = ?",
                    (merge_id,),
                ).fetchone()
                return self._row_to_merge(row) if row else None

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get merge: {e}", operation="get_merge")

    def get_merge_history(self, idea_id: str, limit: int = 100) -> list[SuggestionMerge]:
        """Get the merges performed on an idea, newest first."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT * FROM suggestion_merges
                    WHERE idea_id = ?
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ?
                    """,
                    (idea_id, limit),
                )
                return [self._row_to_merge(row) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get merge history: {e}", operation="get_merge_history")

    # -------------------------------------------------------------------------
    # Points
    # -------------------------------------------------------------------------

    def add_points(self, user_id: str, amount: int, event: str, reason: str) -> None:
        """Record points awarded to a user."""
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO points (user_id, amount, event, reason, awarded_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (user_id, amount, event, reason, datetime.utcnow().isoformat()),
                )

        except sqlite3.Error as e:
            raise StoreError(f"Failed to add points: {e}", operation="add_points")

    def total_points(self, user_id: str) -> int:
        """Get the sum of points awarded to a user."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT COALESCE(SUM(amount), 0) as total FROM points WHERE user_id = ?",
                    (user_id,),
                ).fetchone()
                return int(row["total"])

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get points: {e}", operation="total_points")

    def points_leaderboard(self, limit: int = 50) -> list[tuple[str, int]]:
        """Get users ordered by total points, highest first."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT user_id, SUM(amount) as total FROM points
                    GROUP BY user_id
                    ORDER BY total DESC, user_id
                    LIMIT ?
                    """,
                    (limit,),
                )
                return [(row["user_id"], int(row["total"])) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StoreError(f"Failed to get leaderboard: {e}", operation="points_leaderboard")

    # -------------------------------------------------------------------------
    # Row conversion
    # -------------------------------------------------------------------------

    def _row_to_suggestion(self, row: sqlite3.Row) -> Suggestion:
        """Convert a database row to a Suggestion."""
        accepted_at = None
        if row["accepted_at"]:
            accepted_at = datetime.fromisoformat(row["accepted_at"])

        return Suggestion(
            id=row["id"],
            idea_id=row["idea_id"],
            author_id=row["author_id"],
            content=row["content"],
            type=SuggestionType(row["type"]),
            state=SuggestionState(row["state"]),
            parent_id=row["parent_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            accepted_by=row["accepted_by"],
            accepted_at=accepted_at,
            consumed_by_merge_id=row["consumed_by_merge_id"],
        )

    def _row_to_conflict(self, row: sqlite3.Row) -> SuggestionConflict:
        """Convert a database row to a SuggestionConflict."""
        resolved_at = None
        if row["resolved_at"]:
            resolved_at = datetime.fromisoformat(row["resolved_at"])

        return SuggestionConflict(
            id=row["id"],
            idea_id=row["idea_id"],
            suggestion_1_id=row["suggestion_1_id"],
            suggestion_2_id=row["suggestion_2_id"],
            conflict_type=ConflictKind(row["conflict_type"]),
            description=row["description"],
            conflicting_values=json.loads(row["conflicting_values_json"] or "{}"),
            field_name=row["field_name"],
            resolution_status=ResolutionStatus(row["resolution_status"]),
            resolved_by=row["resolved_by"],
            resolution_notes=row["resolution_notes"],
            resolved_at=resolved_at,
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_merge(self, row: sqlite3.Row) -> SuggestionMerge:
        """Convert a database row to a SuggestionMerge."""
        conflict_resolution = None
        if row["conflict_resolution_json"]:
            conflict_resolution = json.loads(row["conflict_resolution_json"])

        return SuggestionMerge(
            id=row["id"],
            idea_id=row["idea_id"],
            merged_by=row["merged_by"],
            merged_suggestions=json.loads(row["merged_suggestions_json"]),
            merge_summary=row["merge_summary"],
            changes_applied=[Change.from_dict(c) for c in json.loads(row["changes_applied_json"])],
            merge_type=MergeType(row["merge_type"]),
            has_conflicts=bool(row["has_conflicts"]),
            conflict_resolution=conflict_resolution,
            strategy=MergeStrategy(row["strategy"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
