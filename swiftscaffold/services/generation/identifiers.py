"""
Identifier helpers shared by the test generators.
"""

from __future__ import annotations

import re

from ...models import Fact, FactKind

_SUFFIXES: dict[FactKind, str] = {
    FactKind.BUTTON: "_button",
    FactKind.TEXT_FIELD: "_field",
    FactKind.SECURE_FIELD: "_sf",
    FactKind.TEXT: "_text",
    FactKind.TOGGLE: "_toggle",
    FactKind.PICKER: "_picker",
    FactKind.SLIDER: "_slider",
    FactKind.NAVIGATION_LINK: "_link",
    FactKind.LIST: "_list",
}

# XCUIApplication element query per kind; "descendants(matching: .any)" covers custom views.
_QUERIES: dict[FactKind, str] = {
    FactKind.BUTTON: "buttons",
    FactKind.NAVIGATION_LINK: "buttons",
    FactKind.TEXT_FIELD: "textFields",
    FactKind.SECURE_FIELD: "secureTextFields",
    FactKind.TEXT: "staticTexts",
    FactKind.TOGGLE: "switches",
    FactKind.PICKER: "pickers",
    FactKind.SLIDER: "sliders",
    FactKind.LIST: "tables",
}

_INVALID_VARIABLE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def derive_identifier(label: str, kind: FactKind | str) -> str:
    """Suggest an accessibility identifier for an element.

    Takes the first character of each lower-cased, whitespace-separated word
    of the label and appends a suffix for the element kind. A kind given as a
    plain string is treated as a custom view type.

    >>> derive_identifier("Sign In", FactKind.BUTTON)
    'si_button'
    """
    initials = "".join(word[0] for word in label.lower().split())
    if isinstance(kind, FactKind) and kind in _SUFFIXES:
        return initials + _SUFFIXES[kind]
    custom = kind.value if isinstance(kind, FactKind) else kind
    return f"{initials}_{custom.lower()}"


def effective_identifier(element: Fact) -> str:
    """Explicit identifier of an element, or the derived suggestion."""
    if element.identifier:
        return element.identifier
    kind: FactKind | str = element.kind
    if element.kind is FactKind.CUSTOM and element.custom_kind:
        kind = element.custom_kind
    return derive_identifier(element.label, kind)


def element_query(kind: FactKind) -> str:
    """The ``app.<query>`` collection that finds elements of this kind."""
    return _QUERIES.get(kind, "descendants(matching: .any)")


def swift_string(value: str) -> str:
    """Escape a value for use inside a Swift string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def comment_text(value: str) -> str:
    """Flatten a value onto one line for use in a Swift comment."""
    return " ".join(value.split()).replace("*/", "* /")


def swift_variable(identifier: str, used: set[str], suffix: str = "") -> str:
    """A Swift local name for an identifier, unique within ``used``.

    The chosen name is added to ``used``.
    """
    base = _INVALID_VARIABLE_CHARS.sub("_", identifier) + suffix
    if not base.strip("_"):
        base = "element" + suffix
    if base[0].isdigit():
        base = f"_{base}"
    name = base
    counter = 2
    while name in used:
        name = f"{base}{counter}"
        counter += 1
    used.add(name)
    return name


def capitalize_first(name: str) -> str:
    """Upper-case the first character only: ``fetchUser`` -> ``FetchUser``."""
    return name[:1].upper() + name[1:]
