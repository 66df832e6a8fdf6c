"""
Custom exception hierarchy for swiftscaffold.

All exceptions inherit from ScaffoldError to enable consistent error handling
across the pipeline. Each exception type carries an ErrorCategory so callers
can present distinct messages without matching on concrete classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class ErrorCategory(str, Enum):
    """Top-level error taxonomy exposed at the host boundary."""

    EMPTY_INPUT = "empty_input"
    NOT_A_RECOGNIZED_SOURCE = "not_a_recognized_source"
    REQUIRED_NAME_NOT_FOUND = "required_name_not_found"
    MISSING_REQUIRED_SECTION = "missing_required_section"
    INVALID_MODEL_FOR_GENERATION = "invalid_model_for_generation"
    EXTERNAL_SERVICE = "external_service"


class ServiceErrorKind(str, Enum):
    """Failure kinds reported by the generative service boundary."""

    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    MALFORMED_REQUEST = "malformed_request"
    MALFORMED_RESPONSE = "malformed_response"
    NETWORK = "network"


_SERVICE_MESSAGES: dict[ServiceErrorKind, str] = {
    ServiceErrorKind.INVALID_CREDENTIALS: (
        "Invalid or missing API key. Set the key for the configured provider in the environment."
    ),
    ServiceErrorKind.RATE_LIMITED: "Rate limit exceeded for the generative service. Please try again later.",
    ServiceErrorKind.MALFORMED_REQUEST: "The generative service rejected the request.",
    ServiceErrorKind.MALFORMED_RESPONSE: "The generative service returned a response that could not be used.",
    ServiceErrorKind.NETWORK: "Network error. Please check your internet connection and try again.",
}


@dataclass
class ScaffoldError(Exception):
    """Base exception for all swiftscaffold errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    category: ClassVar[ErrorCategory]
    default_user_message: ClassVar[str] = "Failed to generate tests."

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"

    @property
    def user_message(self) -> str:
        """Message suitable for showing to the person who invoked the tool."""
        return self.default_user_message


@dataclass
class ExtractionError(ScaffoldError):
    """Raised when feature extraction cannot start."""


@dataclass
class EmptyInputError(ExtractionError):
    """Raised for empty source text; no pattern matching is attempted."""

    category: ClassVar[ErrorCategory] = ErrorCategory.EMPTY_INPUT
    default_user_message: ClassVar[str] = "The source is empty. Select or open some Swift code first."


@dataclass
class ModelError(ScaffoldError):
    """Raised when facts cannot be assembled into a model."""


@dataclass
class NotAViewSourceError(ModelError):
    """Raised when a view source lacks the SwiftUI framework marker."""

    category: ClassVar[ErrorCategory] = ErrorCategory.NOT_A_RECOGNIZED_SOURCE
    default_user_message: ClassVar[str] = (
        "This doesn't appear to be a SwiftUI file. UI test generation works only with SwiftUI views."
    )


@dataclass
class NameNotFoundError(ModelError):
    """Raised when no view declaration name can be found."""

    category: ClassVar[ErrorCategory] = ErrorCategory.REQUIRED_NAME_NOT_FOUND
    default_user_message: ClassVar[str] = "Could not identify a View struct name in the source."


@dataclass
class MissingBodyError(ModelError):
    """Raised when the view has no body declaration at all."""

    category: ClassVar[ErrorCategory] = ErrorCategory.MISSING_REQUIRED_SECTION
    default_user_message: ClassVar[str] = "Missing body property in SwiftUI view."


@dataclass
class GenerationError(ScaffoldError):
    """Raised when a model cannot be rendered."""


@dataclass
class InvalidViewInfoError(GenerationError):
    """Raised when a view model is not fit for rendering."""

    category: ClassVar[ErrorCategory] = ErrorCategory.INVALID_MODEL_FOR_GENERATION
    default_user_message: ClassVar[str] = "Invalid view information: the view name cannot be empty."


@dataclass
class ExternalServiceError(ScaffoldError):
    """Raised when the generative service call fails."""

    kind: ServiceErrorKind = ServiceErrorKind.NETWORK
    provider: str = ""
    status_code: int | None = None

    category: ClassVar[ErrorCategory] = ErrorCategory.EXTERNAL_SERVICE

    def __str__(self) -> str:
        base = super().__str__()
        status = f" status={self.status_code}" if self.status_code is not None else ""
        return f"[{self.provider or 'service'}:{self.kind.value}{status}] {base}"

    @property
    def user_message(self) -> str:
        return _SERVICE_MESSAGES[self.kind]

    @property
    def transient(self) -> bool:
        """Whether retrying the same request could succeed."""
        return self.kind is ServiceErrorKind.NETWORK
