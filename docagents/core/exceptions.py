"""
Exception hierarchy for the document pipeline.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocAgentsError(Exception):
    """Base exception for all document pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocAgentsError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class InvalidTaskError(ValidationError):
    """Raised when a task cannot be published (missing type)."""


class NotFoundError(DocAgentsError):
    """Base exception for missing records."""


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = str(document_id)
        self.document_id = str(document_id)
        super().__init__("document not found", details)


class SummaryNotFoundError(NotFoundError):
    """Raised when a document has no summary yet."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = str(document_id)
        self.document_id = str(document_id)
        super().__init__("summary not ready", details)


class TransientError(DocAgentsError):
    """
    Base exception for failures of an external collaborator.

    Pipeline handlers let these reach the queue retry loop; the query
    path turns them into a failed request.
    """


class EnqueueError(TransientError):
    """Raised when a task could not be published after all attempts."""


class EmbeddingError(TransientError):
    """Raised when the embedding provider fails or returns a bad batch."""


class GenerationError(TransientError):
    """Raised when the chat model fails to summarize or answer."""


class SearchError(TransientError):
    """Raised when the vector top-K search fails."""


class CacheError(DocAgentsError):
    """Raised by cache backends; callers treat it as a miss or a no-op."""


class PermanentTaskFailure(DocAgentsError):
    """
    Describes a task dropped after exhausting its attempts.

    Logged by the queue, never raised to a caller.
    """

    def __init__(
        self,
        task_id: str,
        task_type: str,
        attempts: int,
        cause: BaseException | None = None,
    ) -> None:
        """
        Initialize permanent failure record.

        Args:
            task_id: ID of the dropped task
            task_type: Task type (parse, analyze)
            attempts: Attempts consumed
            cause: Error from the final attempt
        """
        details: dict[str, Any] = {
            "task_id": str(task_id),
            "task_type": task_type,
            "attempts": attempts,
        }
        if cause is not None:
            details["error"] = str(cause)
        self.cause = cause
        super().__init__("task permanently failed", details)


class IllegalTransitionError(DocAgentsError):
    """Raised when a document status change violates the lifecycle."""

    def __init__(
        self,
        document_id: str,
        current: str,
        requested: str,
    ) -> None:
        """
        Initialize illegal transition error.

        Args:
            document_id: Document UUID
            current: Status stored for the document
            requested: Status the caller tried to set
        """
        self.document_id = str(document_id)
        self.current = current
        self.requested = requested
        super().__init__(
            f"illegal status transition {current} -> {requested}",
            {"document_id": str(document_id), "current": current, "requested": requested},
        )
