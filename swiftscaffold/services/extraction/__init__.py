"""Pattern-based extraction of structural facts from Swift source."""

from .builder import ModelBuilder
from .extractor import ExtractionProfile, FeatureExtractor, ViewScan
from .patterns import PatternLibrary, infer_literal_type

__all__ = [
    "ExtractionProfile",
    "FeatureExtractor",
    "ModelBuilder",
    "PatternLibrary",
    "ViewScan",
    "infer_literal_type",
]
