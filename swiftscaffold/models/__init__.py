"""
swiftscaffold Data Models.

Pydantic models for the facts extracted from source text, the aggregate
models rendered into tests, and the structured replies of the generative
service.
"""

from .facts import DeclarationModel, Fact, FactKind, ViewModel
from .payloads import (
    DeclarationPayload,
    ExternalDeclaration,
    ExternalElement,
    ExternalViewPayload,
    declarations_from_payload,
)

__all__ = [
    # Facts and models
    "DeclarationModel",
    "Fact",
    "FactKind",
    "ViewModel",
    # Service payloads
    "DeclarationPayload",
    "ExternalDeclaration",
    "ExternalElement",
    "ExternalViewPayload",
    "declarations_from_payload",
]
