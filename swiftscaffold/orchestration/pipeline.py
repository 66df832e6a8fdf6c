"""
Scaffold pipeline facade.

The host-facing entry points. Every call returns a ServiceResult: typed
errors become failed results carrying the exception and its category, so
nothing raised inside the pipeline reaches the host.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Literal

from ..core.config import Config, GenerationOptions, get_config
from ..core.exceptions import ScaffoldError
from ..core.logging import bind_context, clear_context, get_logger
from ..core.types import ServiceResult
from ..models import ViewModel
from ..services.escalation import EscalationCoordinator, Resolution

logger = get_logger(__name__)

InsertionKind = Literal["unit", "ui"]

UNIT_HEADER = "// MARK: - Generated Unit Tests"
UI_HEADER = "// MARK: - Generated XCUITests"


def format_insertion(code: str, kind: InsertionKind, view_name: str | None = None) -> str:
    """Wrap generated code for insertion into the source buffer.

    Adds the section header and, for XCUITests, a suggested file name for
    moving the tests out of the view's file.
    """
    lines = ["", UNIT_HEADER if kind == "unit" else UI_HEADER]
    if kind == "ui":
        file_name = f"{view_name}Tests.swift" if view_name else "GeneratedTests.swift"
        lines.append(f"// Suggestion: Move these tests to a separate file named '{file_name}'")
    lines += ["", code.rstrip("\n"), ""]
    return "\n".join(lines)


class ScaffoldPipeline:
    """Generates XCTest and XCUITest scaffolds from Swift source."""

    def __init__(
        self,
        config: Config | None = None,
        coordinator: EscalationCoordinator | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Configuration. Uses global config if not provided.
            coordinator: Escalation coordinator running the pipeline stages.
        """
        self.config = config or get_config()
        self.coordinator = coordinator or EscalationCoordinator(self.config)

    def _result(self, operation: str, started: float, resolve: Callable[[], Resolution]) -> ServiceResult[str]:
        bind_context(operation=operation)
        try:
            resolution = resolve()
        except ScaffoldError as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.warning(
                "Generation failed",
                category=e.category.value,
                error=str(e),
                duration_ms=duration_ms,
            )
            result: ServiceResult[str] = ServiceResult.from_error(e)
            result.duration_ms = duration_ms
            return result
        finally:
            clear_context()

        duration_ms = (time.perf_counter() - started) * 1000
        metadata: dict[str, object] = {
            "escalated": resolution.escalated,
            "external": resolution.external,
            "state": resolution.state.value,
        }
        if isinstance(resolution.model, ViewModel):
            metadata["view_name"] = resolution.model.name
        if resolution.local_error is not None:
            category = getattr(resolution.local_error, "category", None)
            metadata["category"] = category.value if category else None

        result = ServiceResult.ok(resolution.output, **metadata)
        result.duration_ms = duration_ms
        if resolution.escalated and not resolution.external:
            result.warnings.append("The generative service could not help; local result returned")
        logger.info("Generation completed", operation=operation, duration_ms=duration_ms, **metadata)
        return result

    def generate_unit_tests(self, source: str, assist_bodies: bool = False) -> ServiceResult[str]:
        """Generate an XCTest case for the declarations in a source.

        Args:
            source: Swift source text.
            assist_bodies: Ask the service to write each test body.

        Returns:
            ServiceResult with the test code.
        """
        started = time.perf_counter()
        return self._result(
            "unit_tests",
            started,
            lambda: self.coordinator.resolve_unit_tests(source, assist_bodies=assist_bodies),
        )

    def generate_ui_tests(self, source: str, options: GenerationOptions | None = None) -> ServiceResult[str]:
        """Generate an XCUITest case for a SwiftUI view.

        Args:
            source: SwiftUI source text.
            options: Generation options. Defaults to ``generation`` from config.

        Returns:
            ServiceResult with the test code; ``metadata["view_name"]`` is set
            when a view model was built.
        """
        started = time.perf_counter()
        return self._result(
            "ui_tests",
            started,
            lambda: self.coordinator.resolve_ui_tests(source, options),
        )
