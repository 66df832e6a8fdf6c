"""
swiftscaffold: scaffold test generation for Swift sources.

Extracts structural facts from Swift and SwiftUI source text with pattern
matching and renders XCTest / XCUITest scaffolds from them, escalating to an
external generative service when local extraction is not enough.
"""

__version__ = "1.0.0"
__author__ = "swiftscaffold Team"
