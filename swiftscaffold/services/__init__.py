"""Services package for swiftscaffold."""

from .escalation import EscalationCoordinator, EscalationState, Resolution
from .extraction import ExtractionProfile, FeatureExtractor, ModelBuilder, PatternLibrary
from .generation import UITestGenerator, UnitTestGenerator, derive_identifier

__all__ = [
    "EscalationCoordinator",
    "EscalationState",
    "Resolution",
    "ExtractionProfile",
    "FeatureExtractor",
    "ModelBuilder",
    "PatternLibrary",
    "UITestGenerator",
    "UnitTestGenerator",
    "derive_identifier",
]
