"""
Structural patterns over Swift and SwiftUI source text.

Every pattern is compiled at import time, so a malformed expression fails the
import rather than an analysis call. Matchers are pure and total: no match
yields an empty result, never an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ...models import FactKind

# A double-quoted Swift string body, allowing escapes such as \" and \(name).
_STRING = r'"(?P<{name}>(?:[^"\\\n]|\\.)*)"'

_ACCESS = r"public|private|internal|fileprivate|open"

FUNCTION_DECLARATION = re.compile(
    rf"(?P<qualifiers>(?:\b(?:{_ACCESS}|static|class|final|override|mutating|nonisolated)(?:\(set\))?\s+)*)"
    r"\bfunc\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?:<[^>\n]*>)?\s*"
    r"\((?P<params>(?:[^()]|\([^()]*\))*)\)\s*"
    r"(?P<effects>(?:(?:async|throws|rethrows)\s*)*)"
    r"(?:->\s*(?P<returns>[^{\n]+?))?\s*(?:\{|\bwhere\b|$)",
    re.MULTILINE,
)

PROPERTY_DECLARATION = re.compile(
    rf"(?P<qualifiers>(?:\b(?:{_ACCESS}|static|class|final|override|lazy|weak|unowned|nonisolated)(?:\(set\))?\s+)*)"
    r"\b(?P<keyword>var|let)\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*:\s*"
    r"(?P<type>(?:(?:some|any)\s+)?(?:[A-Za-z_][\w.]*(?:<[^>\n]*>)?|\[[^\]\n]*\]|\([^)\n]*\))[?!]?)"
)

TYPE_DECLARATION = re.compile(r"\b(?:class|struct|enum|actor|extension)\s+(?P<name>[A-Z][A-Za-z0-9_]*)")

FRAMEWORK_MARKER = re.compile(r"^\s*(?:@preconcurrency\s+)?import\s+SwiftUI\b", re.MULTILINE)

VIEW_NAME = re.compile(r"\bstruct\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*:\s*(?:[\w.]+\s*,\s*)*View\b")

BODY_DECLARATION = re.compile(r"\bvar\s+body\b")

BODY_OPENING = re.compile(r"\bvar\s+body\s*:\s*some\s+View\s*\{")

BUTTON = re.compile(
    r"\bButton\s*(?:"
    rf"\(\s*{_STRING.format(name='label')}"
    rf"|\(\s*action:\s*(?:\{{[^{{}}]*\}}|[\w.]+)\s*\)\s*\{{\s*(?:Text|Label)\s*\(\s*{_STRING.format(name='content')}"
    rf"|\{{[^{{}}]*\}}\s*label:\s*\{{\s*(?:Text|Label)\s*\(\s*{_STRING.format(name='trailing')}"
    r")"
)

TEXT_INPUT = re.compile(
    rf"\b(?P<control>TextField|SecureField)\s*\(\s*{_STRING.format(name='label')}"
    r"\s*,\s*text:\s*(?P<binding>\$?[\w.]+)"
)

STATIC_TEXT = re.compile(rf"(?<![\w.])Text\s*\(\s*{_STRING.format(name='label')}\s*\)")

TOGGLE = re.compile(
    rf"\bToggle\s*\(\s*{_STRING.format(name='label')}\s*,\s*isOn:\s*(?P<binding>\$?[\w.]+)"
)

NAVIGATION_LINK = re.compile(
    r"\bNavigationLink\s*(?:"
    rf"\(\s*{_STRING.format(name='label')}"
    rf"|\(\s*destination:[^{{]*?\)\s*\{{\s*(?:Text|Label)\s*\(\s*{_STRING.format(name='content')}"
    rf"|\{{[^{{}}]*\}}\s*label:\s*\{{\s*(?:Text|Label)\s*\(\s*{_STRING.format(name='trailing')}"
    r")"
)

ACCESSIBILITY_IDENTIFIER = re.compile(
    r'\.accessibility(?:Identifier\s*\(\s*|\s*\(\s*identifier:\s*)"(?P<identifier>[^"\n]+)"'
)

MODIFIER = re.compile(r"\.(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\(")

STATE_VARIABLE = re.compile(
    r"@(?P<wrapper>State|Binding|ObservedObject|StateObject|Published)\s+"
    rf"(?:(?:{_ACCESS})(?:\(set\))?\s+)?var\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*"
    r"(?::\s*(?P<type>[^=\n/{]+))?"
    r"(?:=\s*(?P<initial>[^\n]+))?"
)

ENVIRONMENT_OBJECT = re.compile(
    rf"@(?:EnvironmentObject|ObservedObject)\s+(?:(?:{_ACCESS})\s+)?var\s+"
    r"(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*:\s*(?P<type>[A-Za-z_][\w.<>]*)"
)

NAVIGATION_CONTAINER = re.compile(r"\bNavigation(?:View|Stack|SplitView)\b")
TAB_CONTAINER = re.compile(r"\bTabView\b")
ALERT_ATTACHMENT = re.compile(r"\.alert\s*\(")
CONTEXT_MENU_ATTACHMENT = re.compile(r"\.contextMenu\b")

_INT_LITERAL = re.compile(r"-?\d[\d_]*")
_FLOAT_LITERAL = re.compile(r"-?\d[\d_]*\.\d[\d_]*")
_INITIALIZER = re.compile(r"(?P<type>[A-Z][\w.]*)\s*(?:<[^>]*>)?\s*\(")


@dataclass(frozen=True)
class DeclarationMatch:
    """A function or property declaration found in source."""

    kind: FactKind
    name: str
    start: int
    qualifiers: tuple[str, ...] = ()
    effects: tuple[str, ...] = ()
    declared_type: str | None = None
    parameters: str | None = None

    @property
    def is_static(self) -> bool:
        return "static" in self.qualifiers or "class" in self.qualifiers


@dataclass(frozen=True)
class ElementMatch:
    """A UI construction call site found in source."""

    kind: FactKind
    label: str
    start: int
    end: int
    binding: str | None = None


@dataclass(frozen=True)
class StructuralFlags:
    """Presence of view-level structural markers."""

    is_navigation_container: bool = False
    has_tab_container: bool = False
    has_alert: bool = False
    has_context_menu: bool = False


def _qualifier_tokens(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(token.split("(")[0] for token in raw.split())


def _first_group(match: re.Match[str], *names: str) -> str | None:
    for name in names:
        value = match.group(name)
        if value is not None:
            return value
    return None


def infer_literal_type(expression: str) -> str | None:
    """Infer a Swift type name from a simple initializer expression."""
    expression = expression.split("//")[0].strip()
    if not expression:
        return None
    if expression.startswith('"'):
        return "String"
    if expression in ("true", "false"):
        return "Bool"
    if _FLOAT_LITERAL.fullmatch(expression):
        return "Double"
    if _INT_LITERAL.fullmatch(expression):
        return "Int"
    initializer = _INITIALIZER.match(expression)
    if initializer:
        return initializer.group("type")
    return None


class PatternLibrary:
    """The fixed set of structural matchers."""

    @staticmethod
    def functions(text: str) -> list[DeclarationMatch]:
        matches = []
        for match in FUNCTION_DECLARATION.finditer(text):
            returns = (match.group("returns") or "").strip() or None
            params = match.group("params").strip()
            matches.append(
                DeclarationMatch(
                    kind=FactKind.FUNCTION,
                    name=match.group("name"),
                    start=match.start("name"),
                    qualifiers=_qualifier_tokens(match.group("qualifiers")),
                    effects=tuple(match.group("effects").split()),
                    declared_type=returns,
                    parameters=params or None,
                )
            )
        return matches

    @staticmethod
    def properties(text: str) -> list[DeclarationMatch]:
        return [
            DeclarationMatch(
                kind=FactKind.PROPERTY,
                name=match.group("name"),
                start=match.start("name"),
                qualifiers=_qualifier_tokens(match.group("qualifiers")),
                declared_type=match.group("type").strip(),
            )
            for match in PROPERTY_DECLARATION.finditer(text)
        ]

    @staticmethod
    def type_names(text: str) -> list[str]:
        return [match.group("name") for match in TYPE_DECLARATION.finditer(text)]

    @staticmethod
    def buttons(text: str) -> list[ElementMatch]:
        return [
            ElementMatch(
                kind=FactKind.BUTTON,
                label=_first_group(match, "label", "content", "trailing") or "",
                start=match.start(),
                end=match.end(),
            )
            for match in BUTTON.finditer(text)
        ]

    @staticmethod
    def text_inputs(text: str) -> list[ElementMatch]:
        return [
            ElementMatch(
                kind=FactKind.SECURE_FIELD if match.group("control") == "SecureField" else FactKind.TEXT_FIELD,
                label=match.group("label"),
                start=match.start(),
                end=match.end(),
                binding=match.group("binding"),
            )
            for match in TEXT_INPUT.finditer(text)
        ]

    @staticmethod
    def static_texts(text: str) -> list[ElementMatch]:
        return [
            ElementMatch(kind=FactKind.TEXT, label=match.group("label"), start=match.start(), end=match.end())
            for match in STATIC_TEXT.finditer(text)
        ]

    @staticmethod
    def toggles(text: str) -> list[ElementMatch]:
        return [
            ElementMatch(
                kind=FactKind.TOGGLE,
                label=match.group("label"),
                start=match.start(),
                end=match.end(),
                binding=match.group("binding"),
            )
            for match in TOGGLE.finditer(text)
        ]

    @staticmethod
    def navigation_links(text: str) -> list[ElementMatch]:
        return [
            ElementMatch(
                kind=FactKind.NAVIGATION_LINK,
                label=_first_group(match, "label", "content", "trailing") or "",
                start=match.start(),
                end=match.end(),
            )
            for match in NAVIGATION_LINK.finditer(text)
        ]

    @staticmethod
    def identifier(span: str) -> str | None:
        """First accessibility identifier attached in the span."""
        match = ACCESSIBILITY_IDENTIFIER.search(span)
        return match.group("identifier") if match else None

    @staticmethod
    def modifiers(span: str) -> list[str]:
        """Modifier invocations in the span, in order."""
        return [match.group("name") for match in MODIFIER.finditer(span)]

    @staticmethod
    def state_variables(text: str) -> dict[str, str]:
        variables: dict[str, str] = {}
        for match in STATE_VARIABLE.finditer(text):
            declared = (match.group("type") or "").strip()
            if not declared and match.group("initial"):
                declared = infer_literal_type(match.group("initial")) or ""
            variables[match.group("name")] = declared or "Any"
        return variables

    @staticmethod
    def environment_objects(text: str) -> dict[str, str]:
        return {match.group("name"): match.group("type") for match in ENVIRONMENT_OBJECT.finditer(text)}

    @staticmethod
    def view_name(text: str) -> str | None:
        match = VIEW_NAME.search(text)
        return match.group("name") if match else None

    @staticmethod
    def has_framework_marker(text: str) -> bool:
        return FRAMEWORK_MARKER.search(text) is not None

    @staticmethod
    def has_body_declaration(text: str) -> bool:
        return BODY_DECLARATION.search(text) is not None

    @staticmethod
    def structural_flags(text: str) -> StructuralFlags:
        return StructuralFlags(
            is_navigation_container=NAVIGATION_CONTAINER.search(text) is not None,
            has_tab_container=TAB_CONTAINER.search(text) is not None,
            has_alert=ALERT_ATTACHMENT.search(text) is not None,
            has_context_menu=CONTEXT_MENU_ATTACHMENT.search(text) is not None,
        )

    @staticmethod
    def isolate_body(text: str) -> str | None:
        """Text between the body opening brace and its matching close.

        Returns None when there is no body opening or the braces never
        balance. String literals and line comments are skipped while counting.
        """
        opening = BODY_OPENING.search(text)
        if opening is None:
            return None
        start = opening.end()
        depth = 1
        index = start
        length = len(text)
        while index < length:
            if text.startswith('"""', index):
                close = text.find('"""', index + 3)
                if close == -1:
                    return None
                index = close + 3
                continue
            char = text[index]
            if char == '"':
                index += 1
                while index < length and text[index] not in '"\n':
                    index += 2 if text[index] == "\\" else 1
                index += 1
                continue
            if text.startswith("//", index):
                newline = text.find("\n", index)
                if newline == -1:
                    return None
                index = newline + 1
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index]
            index += 1
        return None
