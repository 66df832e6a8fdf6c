"""
Model Builder Service.

Assembles extracted facts into the declaration and view models consumed by
the test generators.
"""

from __future__ import annotations

from collections.abc import Iterable

from ...core.exceptions import EmptyInputError, MissingBodyError, NameNotFoundError, NotAViewSourceError
from ...core.logging import get_logger
from ...models import DeclarationModel, Fact, ViewModel
from .extractor import FeatureExtractor
from .patterns import PatternLibrary

logger = get_logger(__name__)


class ModelBuilder:
    """Builds read-only models from facts.

    ``build_declarations`` is total. ``build_view`` validates the source in a
    fixed order before any element extraction runs.
    """

    def __init__(self, extractor: FeatureExtractor | None = None) -> None:
        """Initialize the builder.

        Args:
            extractor: Extractor used when ``build_view`` is called without facts.
        """
        self.extractor = extractor or FeatureExtractor()

    def build_declarations(self, facts: Iterable[Fact], source: str | None = None) -> DeclarationModel:
        """Build a declaration model.

        Facts are ordered by source position and later duplicates by name are
        dropped. Facts without a position keep their relative order after the
        positioned ones.

        Args:
            facts: Function and property facts.
            source: Original source, used to name the type under test.

        Returns:
            The declaration model, empty when no facts are given.
        """
        declarations = [fact for fact in facts if fact.kind.is_declaration]
        ordered = sorted(
            enumerate(declarations),
            key=lambda item: (item[1].position < 0, item[1].position, item[0]),
        )

        units: list[Fact] = []
        seen: set[str] = set()
        for _, fact in ordered:
            if fact.name in seen:
                continue
            seen.add(fact.name)
            units.append(fact)

        type_name = None
        if source:
            type_names = PatternLibrary.type_names(source)
            type_name = type_names[0] if type_names else None

        return DeclarationModel(units=tuple(units), type_name=type_name)

    def build_view(self, source: str, facts: list[Fact] | None = None) -> ViewModel:
        """Build a view model from a SwiftUI source.

        Args:
            source: Swift source text of one view.
            facts: Pre-extracted element facts. When None the extractor runs
                after the source checks pass.

        Returns:
            The view model.

        Raises:
            EmptyInputError: If the source is empty or whitespace only.
            NotAViewSourceError: No ``import SwiftUI`` in the source.
            NameNotFoundError: No ``struct Name: View`` declaration.
            MissingBodyError: No ``var body`` declaration at all.
        """
        if not source or not source.strip():
            raise EmptyInputError("Source text is empty")

        if not PatternLibrary.has_framework_marker(source):
            raise NotAViewSourceError(
                "Source does not import SwiftUI", context={"size": len(source)}
            )

        name = PatternLibrary.view_name(source)
        if not name:
            raise NameNotFoundError("No View struct declaration found")

        if not PatternLibrary.has_body_declaration(source):
            raise MissingBodyError("View has no body declaration", context={"view": name})

        if facts is None:
            scan = self.extractor.scan_view(source)
            elements, raw_body = scan.elements, scan.span
        else:
            elements = [fact for fact in facts if not fact.kind.is_declaration]
            raw_body = PatternLibrary.isolate_body(source) or source

        flags = PatternLibrary.structural_flags(source)
        model = ViewModel(
            name=name,
            state_variables=PatternLibrary.state_variables(source),
            elements=tuple(elements),
            is_navigation_container=flags.is_navigation_container,
            has_tab_container=flags.has_tab_container,
            has_alert=flags.has_alert,
            has_context_menu=flags.has_context_menu,
            environment_objects=PatternLibrary.environment_objects(source),
            raw_body=raw_body,
        )
        logger.info(
            "Built view model",
            view=name,
            elements=len(model.elements),
            state_variables=len(model.state_variables),
            navigation=model.is_navigation_container,
        )
        return model
