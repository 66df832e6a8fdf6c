"""
Schemas for structured replies from the generative service.

The service answers escalation prompts with JSON whose field names mirror the
fact and model attributes. These models validate that JSON and convert it
into the same Fact / Model shapes that local extraction produces.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .facts import DeclarationModel, Fact, FactKind, ViewModel

_ELEMENT_KINDS: dict[str, FactKind] = {
    "button": FactKind.BUTTON,
    "textField": FactKind.TEXT_FIELD,
    "secureField": FactKind.SECURE_FIELD,
    "text": FactKind.TEXT,
    "toggle": FactKind.TOGGLE,
    "picker": FactKind.PICKER,
    "slider": FactKind.SLIDER,
    "navigationLink": FactKind.NAVIGATION_LINK,
    "list": FactKind.LIST,
}


class ExternalDeclaration(BaseModel):
    """A function or property reported by the service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    type: str = Field(default="function", description="'function' or 'property'")
    is_static: bool = Field(default=False, alias="isStatic")
    return_type: str | None = Field(default=None, alias="returnType")

    def to_fact(self, position: int) -> Fact:
        kind = FactKind.PROPERTY if self.type.lower() == "property" else FactKind.FUNCTION
        return Fact(
            kind=kind,
            name=self.name,
            is_static=self.is_static,
            declared_type=self.return_type,
            position=position,
        )


class DeclarationPayload(BaseModel):
    """Declaration extraction reply; a bare JSON array is accepted too."""

    model_config = ConfigDict(extra="ignore")

    type_name: str | None = Field(default=None, alias="typeName")
    declarations: list[ExternalDeclaration] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _wrap_array(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"declarations": data}
        return data

    def to_facts(self) -> list[Fact]:
        return [
            declaration.to_fact(index)
            for index, declaration in enumerate(self.declarations)
            if declaration.name.strip()
        ]


class ExternalElement(BaseModel):
    """A UI element reported by the service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    label: str = ""
    identifier: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    has_action: bool = Field(default=False, alias="hasAction")

    def to_fact(self, position: int) -> Fact:
        kind = _ELEMENT_KINDS.get(self.type, FactKind.CUSTOM)
        return Fact(
            kind=kind,
            name=self.label,
            custom_kind=self.type if kind is FactKind.CUSTOM else None,
            identifier=self.identifier or None,
            modifiers=tuple(self.modifiers),
            has_action=self.has_action,
            position=position,
        )


class ExternalViewPayload(BaseModel):
    """View analysis reply."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    elements: list[ExternalElement] = Field(default_factory=list)
    state_variables: dict[str, str] = Field(default_factory=dict, alias="stateVariables")
    is_navigation_view: bool = Field(default=False, alias="isNavigationView")
    has_tab_bar: bool = Field(default=False, alias="hasTabBar")
    has_alert: bool = Field(default=False, alias="hasAlert")
    has_context_menu: bool = Field(default=False, alias="hasContextMenu")
    environment_objects: dict[str, str] = Field(default_factory=dict, alias="environmentObjects")

    @field_validator("state_variables", "environment_objects", mode="before")
    @classmethod
    def _name_type_list(cls, value: Any) -> Any:
        # The service may answer with [{"name": ..., "type": ...}] instead of a mapping.
        if isinstance(value, list):
            return {
                item["name"]: item.get("type", "")
                for item in value
                if isinstance(item, dict) and item.get("name")
            }
        return value

    def to_view_model(self, source: str) -> ViewModel:
        elements = [
            element.to_fact(index)
            for index, element in enumerate(self.elements)
            if element.label.strip()
        ]
        return ViewModel(
            name=self.name,
            state_variables=self.state_variables,
            elements=tuple(elements),
            is_navigation_container=self.is_navigation_view,
            has_tab_container=self.has_tab_bar,
            has_alert=self.has_alert,
            has_context_menu=self.has_context_menu,
            environment_objects=self.environment_objects,
            raw_body=source,
        )


def declarations_from_payload(payload: DeclarationPayload) -> DeclarationModel:
    """Build a declaration model from a service reply, first name wins."""
    seen: set[str] = set()
    units: list[Fact] = []
    for fact in payload.to_facts():
        if fact.name in seen:
            continue
        seen.add(fact.name)
        units.append(fact)
    return DeclarationModel(units=tuple(units), type_name=payload.type_name)
