"""Custom exception hierarchy for the merge engine."""

from typing import Any


class IdeaMergeError(Exception):
    """Base exception for all engine errors."""

    code: str = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ConfigurationError(IdeaMergeError):
    """Raised when configuration is invalid or missing."""

    pass


class StoreError(IdeaMergeError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.operation = operation


# =============================================================================
# Suggestions
# =============================================================================


class SuggestionError(IdeaMergeError):
    """Base exception for suggestion operations."""

    pass


class SuggestionNotFoundError(SuggestionError):
    """Raised when a suggestion does not exist."""

    def __init__(
        self,
        message: str,
        suggestion_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if suggestion_id:
            details["suggestion_id"] = suggestion_id
        super().__init__(message, details)
        self.suggestion_id = suggestion_id


class InvalidTransitionError(SuggestionError):
    """Raised when a suggestion state change is not allowed."""

    def __init__(
        self,
        message: str,
        current: str | None = None,
        requested: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if current:
            details["current"] = current
        if requested:
            details["requested"] = requested
        super().__init__(message, details)
        self.current = current
        self.requested = requested


# =============================================================================
# Merging
# =============================================================================


class MergeError(IdeaMergeError):
    """Base exception for merge operations."""

    pass


class NoValidSuggestionsError(MergeError):
    """Raised when a merge is requested without any usable suggestions."""

    code = "no_valid_suggestions"


class MergeFailedError(MergeError):
    """Raised when a merge transaction is aborted."""

    code = "merge_failed"

    def __init__(
        self,
        message: str,
        idea_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if idea_id:
            details["idea_id"] = idea_id
        super().__init__(message, details)
        self.idea_id = idea_id


class MergeNotFoundError(MergeError):
    """Raised when a merge record does not exist."""

    code = "merge_not_found"

    def __init__(
        self,
        message: str,
        merge_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if merge_id:
            details["merge_id"] = merge_id
        super().__init__(message, details)
        self.merge_id = merge_id


class PermissionDeniedError(MergeError):
    """Raised when an actor may not act on an idea."""

    code = "permission_denied"

    def __init__(
        self,
        message: str,
        actor_id: str | None = None,
        idea_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if actor_id:
            details["actor_id"] = actor_id
        if idea_id:
            details["idea_id"] = idea_id
        super().__init__(message, details)
        self.actor_id = actor_id
        self.idea_id = idea_id


# =============================================================================
# Conflict resolution
# =============================================================================


class ResolveFailedError(IdeaMergeError):
    """Base exception for conflict resolution failures."""

    code = "resolve_failed"

    def __init__(
        self,
        message: str,
        conflict_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if conflict_id:
            details["conflict_id"] = conflict_id
        super().__init__(message, details)
        self.conflict_id = conflict_id


class ConflictNotFoundError(ResolveFailedError):
    """Raised when a conflict does not exist."""

    pass


class ConflictAlreadyResolvedError(ResolveFailedError):
    """Raised when a conflict has already left the unresolved state."""

    def __init__(
        self,
        message: str,
        conflict_id: str | None = None,
        status: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status:
            details["status"] = status
        super().__init__(message, conflict_id, details)
        self.status = status


# =============================================================================
# Points
# =============================================================================


class PointsError(IdeaMergeError):
    """Raised when points cannot be awarded."""

    def __init__(
        self,
        message: str,
        event: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if event:
            details["event"] = event
        super().__init__(message, details)
        self.event = event
