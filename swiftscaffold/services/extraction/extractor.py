"""
Feature Extraction Service.

Applies the pattern library to Swift source text and consolidates raw
matches into typed, immutable facts.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ...core.config import get_config
from ...core.exceptions import EmptyInputError
from ...core.logging import get_logger
from ...models import Fact, FactKind
from .patterns import DeclarationMatch, ElementMatch, PatternLibrary

logger = get_logger(__name__)


class ExtractionProfile(str, Enum):
    """Which family of facts to extract."""

    DECLARATIONS = "declarations"
    VIEW_ELEMENTS = "view_elements"


@dataclass(frozen=True)
class ViewScan:
    """Element facts together with the span they were scanned from."""

    elements: list[Fact]
    span: str
    body_isolated: bool


# Five passes, in the order their facts appear in a view model.
_ELEMENT_PASSES: tuple[Callable[[str], list[ElementMatch]], ...] = (
    PatternLibrary.buttons,
    PatternLibrary.text_inputs,
    PatternLibrary.static_texts,
    PatternLibrary.toggles,
    PatternLibrary.navigation_links,
)

_ACTION_KINDS = frozenset({FactKind.BUTTON, FactKind.NAVIGATION_LINK})


class FeatureExtractor:
    """Turns source text into facts.

    Extraction is a pure function of the input text. The only state held is
    the lookahead window size, which bounds how far past an element match
    identifiers and modifiers are associated with it.
    """

    def __init__(self, lookahead_window: int | None = None) -> None:
        """Initialize the extractor.

        Args:
            lookahead_window: Characters scanned past each element match.
                Defaults to ``extraction.lookahead_window`` from config.
        """
        if lookahead_window is None:
            lookahead_window = get_config().extraction.lookahead_window
        self.lookahead_window = lookahead_window

    def extract(self, source: str, profile: ExtractionProfile) -> list[Fact]:
        """Extract facts for the given profile.

        Args:
            source: Swift source text.
            profile: Declarations or view elements.

        Returns:
            Facts in pass order.

        Raises:
            EmptyInputError: If the source is empty or whitespace only.
        """
        self._require_input(source)
        if profile is ExtractionProfile.DECLARATIONS:
            return self._extract_declarations(source)
        return self.scan_view(source).elements

    def scan_view(self, source: str) -> ViewScan:
        """Extract view elements, reporting which span was scanned.

        The body region is tried first. When it cannot be isolated, or yields
        no elements, the whole source is scanned instead.
        """
        self._require_input(source)

        body = PatternLibrary.isolate_body(source)
        if body is not None:
            elements = self._extract_elements(body)
            if elements:
                logger.debug("Extracted view elements", scope="body", count=len(elements))
                return ViewScan(elements=elements, span=body, body_isolated=True)

        elements = self._extract_elements(source)
        logger.debug(
            "Extracted view elements",
            scope="source",
            count=len(elements),
            body_found=body is not None,
        )
        return ViewScan(elements=elements, span=source, body_isolated=False)

    @staticmethod
    def _require_input(source: str) -> None:
        if not source or not source.strip():
            raise EmptyInputError("Source text is empty")

    def _extract_declarations(self, source: str) -> list[Fact]:
        facts = self._declaration_pass(PatternLibrary.functions(source))
        facts.extend(self._declaration_pass(PatternLibrary.properties(source)))
        logger.debug("Extracted declarations", count=len(facts), size=len(source))
        return facts

    @staticmethod
    def _declaration_pass(matches: list[DeclarationMatch]) -> list[Fact]:
        facts: list[Fact] = []
        seen: set[str] = set()
        for match in matches:
            if match.name in seen:
                continue
            seen.add(match.name)
            modifiers = tuple(
                token for token in match.qualifiers if token not in ("static", "class")
            ) + match.effects
            facts.append(
                Fact(
                    kind=match.kind,
                    name=match.name,
                    is_static=match.is_static,
                    modifiers=modifiers,
                    declared_type=match.declared_type,
                    parameters=match.parameters,
                    position=match.start,
                )
            )
        return facts

    def _extract_elements(self, span: str) -> list[Fact]:
        facts: list[Fact] = []
        for run_pass in _ELEMENT_PASSES:
            for match in run_pass(span):
                if not match.label.strip():
                    continue
                window = span[match.end : match.end + self.lookahead_window]
                facts.append(
                    Fact(
                        kind=match.kind,
                        name=match.label,
                        identifier=PatternLibrary.identifier(window),
                        modifiers=tuple(PatternLibrary.modifiers(window)),
                        has_action=match.kind in _ACTION_KINDS,
                        position=match.start,
                    )
                )
        return facts
