"""
XCUITest Generator.

Renders a view model into an XCUITest case. Sections are emitted in a fixed
order: element existence, text input, button taps, toggles, state changes,
navigation, followed by accessibility identifier suggestions after the class.
"""

from __future__ import annotations

from ...core.config import GenerationOptions, get_config
from ...core.exceptions import InvalidViewInfoError
from ...core.logging import get_logger
from ...models import Fact, FactKind, ViewModel
from .identifiers import comment_text, effective_identifier, element_query, swift_string, swift_variable

logger = get_logger(__name__)

INDENT = "    "
NO_ELEMENTS_MARKER = "// No UI elements found to test"
SUGGESTIONS_HEADER = "/* ACCESSIBILITY SUGGESTIONS"
SAMPLE_INPUT = "test input"
LAUNCH_ARGUMENT = "--uitesting"


class UITestGenerator:
    """Renders XCUITest scaffolds for SwiftUI views."""

    def __init__(self, options: GenerationOptions | None = None) -> None:
        """Initialize the generator.

        Args:
            options: Default generation options. Falls back to
                ``generation`` from config.
        """
        self.options = options or get_config().generation

    def render(self, model: ViewModel, options: GenerationOptions | None = None) -> str:
        """Render the XCUITest case for a view.

        Args:
            model: The analyzed view.
            options: Per-call options overriding the generator defaults.

        Returns:
            Swift source of the test case.

        Raises:
            InvalidViewInfoError: If the view name is empty.
        """
        if not model.name.strip():
            raise InvalidViewInfoError("View name cannot be empty")

        opts = options or self.options
        lines = self._header(model, opts)
        lines += self._existence_test(model, opts)
        lines += self._text_input_test(model, opts)
        lines += self._button_test(model, opts)
        lines += self._toggle_test(model, opts)
        if opts.include_state_tests:
            lines += self._state_change_test(model, opts)
        if opts.include_navigation_tests and model.is_navigation_container:
            lines += self._navigation_test(model, opts)
        lines.append("}")
        if opts.include_suggestions:
            lines += self._suggestions(model)

        logger.debug("Rendered UI tests", view=model.name, elements=len(model.elements))
        return "\n".join(lines) + "\n"

    @staticmethod
    def _comment(opts: GenerationOptions, level: int, *texts: str) -> list[str]:
        if not opts.include_comments:
            return []
        return [f"{INDENT * level}{text}" for text in texts]

    def _header(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        lines = [
            "import XCTest",
            "",
            f"class {model.name}Tests: XCTestCase {{",
            "",
            f"{INDENT}let app = XCUIApplication()",
            "",
            f"{INDENT}override func setUpWithError() throws {{",
            f"{INDENT * 2}continueAfterFailure = false",
        ]
        if opts.include_launch_arguments:
            lines.append(f'{INDENT * 2}app.launchArguments = ["{LAUNCH_ARGUMENT}"]')
        lines += self._comment(opts, 2, "// Launch the app and wait for it to be ready")
        lines.append(f"{INDENT * 2}app.launch()")
        lines += self._comment(
            opts, 2, f"// Navigate to {model.name} if needed", "// This depends on your app's structure"
        )
        lines.append(f"{INDENT}}}")
        return lines

    def _open_test(self, opts: GenerationOptions, doc: str, name: str) -> list[str]:
        return ["", *self._comment(opts, 1, f"/// {doc}"), f"{INDENT}func {name}() throws {{"]

    def _existence_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        lines = self._open_test(opts, "Test that verifies all UI elements exist", "testElementsExist")
        if model.is_empty:
            lines.append(f"{INDENT * 2}{NO_ELEMENTS_MARKER}")
        for element in model.elements:
            identifier = effective_identifier(element)
            if not identifier:
                continue
            lines += self._comment(opts, 2, f"// Check that {comment_text(element.label)} exists")
            lines.append(
                f'{INDENT * 2}XCTAssertTrue(app.{element_query(element.kind)}["{swift_string(identifier)}"].exists)'
            )
        lines.append(f"{INDENT}}}")
        return lines

    def _text_input_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        inputs = model.elements_of(FactKind.TEXT_FIELD, FactKind.SECURE_FIELD)
        if not inputs:
            return []

        lines = self._open_test(opts, "Test text input", "testTextInput")
        used: set[str] = set()
        for element in inputs:
            identifier = effective_identifier(element)
            var = swift_variable(identifier, used, "Field")
            lines += self._comment(opts, 2, f"// Test input for {comment_text(element.label)}")
            lines += [
                f'{INDENT * 2}let {var} = app.{element_query(element.kind)}["{swift_string(identifier)}"]',
                f"{INDENT * 2}XCTAssertTrue({var}.exists)",
                f"{INDENT * 2}{var}.tap()",
                f'{INDENT * 2}{var}.typeText("{SAMPLE_INPUT}")',
            ]
            if element.kind is FactKind.SECURE_FIELD:
                lines += self._comment(opts, 2, "// Secure fields do not expose their typed value")
            else:
                lines.append(f'{INDENT * 2}XCTAssertEqual({var}.value as? String, "{SAMPLE_INPUT}")')
        lines.append(f"{INDENT}}}")
        return lines

    def _button_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        buttons = [element for element in model.elements_of(FactKind.BUTTON) if element.has_action]
        if not buttons:
            return []

        lines = self._open_test(opts, "Test button taps", "testButtonTaps")
        used: set[str] = set()
        for element in buttons:
            identifier = effective_identifier(element)
            var = swift_variable(identifier, used)
            lines += self._comment(opts, 2, f"// Test tap on {comment_text(element.label)} button")
            lines += [
                f'{INDENT * 2}let {var} = app.buttons["{swift_string(identifier)}"]',
                f"{INDENT * 2}XCTAssertTrue({var}.exists)",
                f"{INDENT * 2}{var}.tap()",
            ]
            lines += self._comment(opts, 2, "// Add assertions for the expected result of tapping this button")
        lines.append(f"{INDENT}}}")
        return lines

    def _toggle_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        toggles = model.elements_of(FactKind.TOGGLE)
        if not toggles:
            return []

        lines = self._open_test(opts, "Test toggles", "testToggles")
        used: set[str] = set()
        for element in toggles:
            identifier = effective_identifier(element)
            var = swift_variable(identifier, used)
            initial = swift_variable(var, used, "Initial")
            updated = swift_variable(var, used, "Updated")
            lines += self._comment(opts, 2, f"// Test {comment_text(element.label)} toggle")
            lines += [
                f'{INDENT * 2}let {var} = app.switches["{swift_string(identifier)}"]',
                f"{INDENT * 2}XCTAssertTrue({var}.exists)",
                f"{INDENT * 2}let {initial} = {var}.value as? String",
                f"{INDENT * 2}{var}.tap()",
                f"{INDENT * 2}let {updated} = {var}.value as? String",
                f"{INDENT * 2}XCTAssertNotEqual({initial}, {updated})",
            ]
        lines.append(f"{INDENT}}}")
        return lines

    def _state_change_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        affected: list[tuple[str, Fact]] = []
        for state_name in model.boolean_state:
            for element in model.elements:
                in_label = state_name in element.label
                in_modifiers = any(state_name in modifier for modifier in element.modifiers)
                if in_label or in_modifiers:
                    affected.append((state_name, element))
        if not affected:
            return []

        lines = self._open_test(opts, "Test UI state changes", "testStateChanges")
        for state_name, element in affected:
            identifier = swift_string(effective_identifier(element))
            # Guidance only; text matching cannot prove the state drives the element.
            lines += [
                f"{INDENT * 2}// Find elements that may be affected by {state_name} state",
                f"{INDENT * 2}// Trigger the state change (app-specific), then verify the UI, e.g.:",
                f'{INDENT * 2}// XCTAssertTrue(app.{element_query(element.kind)}["{identifier}"].exists)',
            ]
        lines.append(f"{INDENT}}}")
        return lines

    def _navigation_test(self, model: ViewModel, opts: GenerationOptions) -> list[str]:
        links = model.elements_of(FactKind.NAVIGATION_LINK)
        lines = self._open_test(opts, "Test navigation", "testNavigation")
        if not links:
            lines += [
                f"{INDENT * 2}// No navigation links found in this view",
                f"{INDENT * 2}// Add custom navigation test code here",
            ]

        used: set[str] = set()
        for element in links:
            identifier = effective_identifier(element)
            var = swift_variable(identifier, used)
            lines += self._comment(opts, 2, f"// Test navigation for {comment_text(element.label)}")
            lines += [
                f'{INDENT * 2}let {var} = app.buttons["{swift_string(identifier)}"]',
                f"{INDENT * 2}XCTAssertTrue({var}.exists)",
                f"{INDENT * 2}{var}.tap()",
            ]
            lines += self._comment(
                opts,
                2,
                "// Verify navigation occurred (replace with the actual destination check)",
                '// Example: XCTAssertTrue(app.navigationBars["Destination"].exists)',
            )
            lines.append(f"{INDENT * 2}app.navigationBars.buttons.element(boundBy: 0).tap()")
        lines.append(f"{INDENT}}}")
        return lines

    @staticmethod
    def _suggestions(model: ViewModel) -> list[str]:
        missing = [element for element in model.elements if not element.identifier]
        if not missing:
            return []

        lines = [
            "",
            SUGGESTIONS_HEADER,
            " The following UI elements are missing accessibility identifiers.",
            " Consider adding them to improve testability:",
        ]
        for element in missing:
            lines += [
                f" - {comment_text(element.label)} ({element.kind_name}):",
                f'   .accessibility(identifier: "{swift_string(effective_identifier(element))}")',
            ]
        lines.append(" */")
        return lines
