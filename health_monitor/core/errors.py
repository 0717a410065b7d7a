"""Error Hierarchy — typed, categorized exceptions for all Health Monitor failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - HTTP status derives from the category via http_status_for() (single mapping)
    - to_response() produces the REST envelope
    - No driver details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with HealthMonitorError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


_HTTP_STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.RESOURCE_NOT_FOUND: 404,
    ErrorCategory.DATABASE: 500,
    ErrorCategory.INTERNAL: 500,
}


def http_status_for(category: ErrorCategory) -> int:
    """Map an error category to the HTTP status surfaced to clients."""
    return _HTTP_STATUS_BY_CATEGORY.get(category, 500)


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    patient_id: str | None = None
    prescription_id: str | None = None
    operation: str | None = None


class HealthMonitorError(Exception):
    """Base exception for all Health Monitor errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def http_status(self) -> int:
        return http_status_for(self.category)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "patient_id": self.context.patient_id,
                    "prescription_id": self.context.prescription_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidIdentifierError(HealthMonitorError):
    """Path identifier is not a valid ObjectId."""
    def __init__(self, value: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{value}' is not a valid {field}",
            "INVALID_IDENTIFIER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )
        self.value = value
        self.field = field


class ResourceNotFoundError(HealthMonitorError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(HealthMonitorError):
    """Storage operation failed at request time."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Failed to {operation}",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.operation = operation


class StorageConnectionError(HealthMonitorError):
    """Database unreachable on startup. Fatal, never retried."""
    def __init__(self, uri: str, context: ErrorContext | None = None):
        super().__init__(
            f"Could not connect to MongoDB at {uri}",
            "STORAGE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.uri = uri
