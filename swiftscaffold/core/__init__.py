"""Core infrastructure components for swiftscaffold."""

from .config import Config, get_config
from .exceptions import (
    EmptyInputError,
    ErrorCategory,
    ExternalServiceError,
    ExtractionError,
    GenerationError,
    InvalidViewInfoError,
    MissingBodyError,
    ModelError,
    NameNotFoundError,
    NotAViewSourceError,
    ScaffoldError,
    ServiceErrorKind,
)
from .logging import get_logger, setup_logging
from .types import ServiceResult

__all__ = [
    "Config",
    "get_config",
    "EmptyInputError",
    "ErrorCategory",
    "ExternalServiceError",
    "ExtractionError",
    "GenerationError",
    "InvalidViewInfoError",
    "MissingBodyError",
    "ModelError",
    "NameNotFoundError",
    "NotAViewSourceError",
    "ScaffoldError",
    "ServiceErrorKind",
    "get_logger",
    "setup_logging",
    "ServiceResult",
]
