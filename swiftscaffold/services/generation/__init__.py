"""Template-driven rendering of XCTest and XCUITest scaffolds."""

from .identifiers import derive_identifier, effective_identifier, element_query
from .ui_tests import NO_ELEMENTS_MARKER, SUGGESTIONS_HEADER, UITestGenerator
from .unit_tests import UnitTestGenerator, call_arguments

__all__ = [
    "NO_ELEMENTS_MARKER",
    "SUGGESTIONS_HEADER",
    "UITestGenerator",
    "UnitTestGenerator",
    "call_arguments",
    "derive_identifier",
    "effective_identifier",
    "element_query",
]
