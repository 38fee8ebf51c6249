"""Domain errors for content discovery.

Query errors are raised before any repository call. Repository errors are
recovered per path candidate by the orchestrator and only escalate to
``SearchExhaustedError`` when every listing call of a run has failed.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any


class ContentDiscoveryError(Exception):
    """Base error for the content discovery domain."""


class InvalidQueryError(ContentDiscoveryError):
    """Raised when a search query is rejected before execution."""

    def __init__(self, message: str, details: Sequence[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = list(details or [])


class RepositoryErrorKind(str, Enum):
    """Failure categories reported by repository clients."""

    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    ACCESS_DENIED = "access_denied"
    UNKNOWN = "unknown"


class RepositoryError(ContentDiscoveryError):
    """Tagged failure of a single repository call."""

    def __init__(self, kind: RepositoryErrorKind, path: str, message: str = "") -> None:
        super().__init__(message or f"{kind.value}: {path}")
        self.kind = kind
        self.path = path
        self.message = message or kind.value

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "path": self.path, "message": self.message}


class SearchExhaustedError(ContentDiscoveryError):
    """Raised when every listing call across every strategy failed."""

    def __init__(self, errors: Sequence[Any]) -> None:
        self.errors = list(errors)
        super().__init__(f"All {len(self.errors)} repository listing attempts failed")
