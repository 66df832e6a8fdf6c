"""
Core type definitions for swiftscaffold.

Provides the result wrapper returned to the host integration, so every
failure reaches it as a typed value rather than an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .exceptions import ScaffoldError


T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Result wrapper for pipeline operations.

    Provides a consistent return type that includes success/failure status,
    the result data, and any errors or warnings.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    exception: ScaffoldError | None = None
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def from_error(cls, exc: ScaffoldError, **metadata: Any) -> ServiceResult[T]:
        """Create a failed result that keeps the typed error."""
        category = getattr(exc, "category", None)
        if category is not None:
            metadata.setdefault("category", category.value)
        return cls(success=False, error=exc.user_message, exception=exc, metadata=metadata)
