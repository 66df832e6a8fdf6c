"""
Structural fact and model definitions.

Facts are the normalized, immutable records produced by pattern extraction.
Models aggregate the facts of one analyzed source unit and are what the
template generators consume.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class FactKind(str, Enum):
    """Kinds of structural elements discovered in source text."""

    FUNCTION = "function"
    PROPERTY = "property"
    BUTTON = "button"
    TEXT_FIELD = "textField"
    SECURE_FIELD = "secureField"
    TEXT = "text"
    TOGGLE = "toggle"
    PICKER = "picker"
    SLIDER = "slider"
    NAVIGATION_LINK = "navigationLink"
    LIST = "list"
    CUSTOM = "custom"

    @property
    def is_declaration(self) -> bool:
        """Whether this kind describes a function or property declaration."""
        return self in (FactKind.FUNCTION, FactKind.PROPERTY)

    @property
    def is_text_input(self) -> bool:
        """Whether this kind accepts typed text."""
        return self in (FactKind.TEXT_FIELD, FactKind.SECURE_FIELD)


class Fact(BaseModel):
    """One discovered structural element.

    Declarations use ``name``; UI elements expose the same value as ``label``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: FactKind
    name: str = Field(validation_alias=AliasChoices("name", "label"))
    custom_kind: str | None = Field(default=None, description="Type name when kind is CUSTOM")
    is_static: bool = Field(default=False, validation_alias=AliasChoices("is_static", "isStatic"))
    identifier: str | None = Field(default=None, description="Explicit accessibility identifier")
    modifiers: tuple[str, ...] = Field(default=())
    has_action: bool = Field(default=False, validation_alias=AliasChoices("has_action", "hasAction"))
    declared_type: str | None = Field(
        default=None, description="Return type for functions, annotation for properties"
    )
    parameters: str | None = Field(default=None, description="Raw parameter list of a function")
    position: int = Field(default=-1, description="Source offset of the match, -1 if unknown")

    @property
    def label(self) -> str:
        """Display label of a UI element."""
        return self.name

    @property
    def kind_name(self) -> str:
        """Kind name, using the custom type name for CUSTOM facts."""
        if self.kind is FactKind.CUSTOM and self.custom_kind:
            return self.custom_kind
        return self.kind.value

    @property
    def is_throwing(self) -> bool:
        return "throws" in self.modifiers or "rethrows" in self.modifiers

    @property
    def is_async(self) -> bool:
        return "async" in self.modifiers


class DeclarationModel(BaseModel):
    """Ordered functions and properties of one source unit."""

    model_config = ConfigDict(frozen=True)

    units: tuple[Fact, ...] = Field(default=())
    type_name: str | None = Field(default=None, description="First type declared in the source")

    @property
    def is_empty(self) -> bool:
        return not self.units

    @property
    def functions(self) -> list[Fact]:
        return [unit for unit in self.units if unit.kind is FactKind.FUNCTION]

    @property
    def properties(self) -> list[Fact]:
        return [unit for unit in self.units if unit.kind is FactKind.PROPERTY]


class ViewModel(BaseModel):
    """One analyzed SwiftUI view."""

    model_config = ConfigDict(frozen=True)

    name: str
    state_variables: dict[str, str] = Field(default_factory=dict)
    elements: tuple[Fact, ...] = Field(default=())
    is_navigation_container: bool = False
    has_tab_container: bool = False
    has_alert: bool = False
    has_context_menu: bool = False
    environment_objects: dict[str, str] = Field(default_factory=dict)
    raw_body: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def elements_of(self, *kinds: FactKind) -> list[Fact]:
        """Elements of the given kinds, in model order."""
        return [element for element in self.elements if element.kind in kinds]

    @property
    def boolean_state(self) -> list[str]:
        """Names of state variables declared as Bool."""
        return [name for name, type_name in self.state_variables.items() if type_name == "Bool"]
