"""Error Hierarchy — typed, categorized exceptions for healthd failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_reply() produces the plain-text reply sent on the wire
    - No internal details leaked in user-facing bodies

Design Decisions:
    - Single hierarchy with HealthdError base: both listeners render errors the same way
    - Route misses and method mismatches collapse into one RouteNotFoundError (404)
"""

from enum import Enum

from healthd.core.reply import PlainTextReply, NOT_FOUND


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


class HealthdError(Exception):
    """Base exception for all healthd errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        body: str = "Internal Server Error\n",
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.body = body

    def to_reply(self) -> PlainTextReply:
        """Convert to the plain-text reply sent to the client."""
        return PlainTextReply(status=self.http_status, body=self.body)


class RouteNotFoundError(HealthdError):
    """No route matches the request method + path."""
    def __init__(self, method: str, path: str):
        super().__init__(
            f"No route for {method} {path}",
            "ROUTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, NOT_FOUND.status, NOT_FOUND.body,
        )
        self.method = method
        self.path = path
