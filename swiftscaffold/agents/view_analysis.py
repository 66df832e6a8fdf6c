"""
View Analysis Agent.

Asks the service for a structured description of a SwiftUI view. The reply
is either a JSON view document, converted into a ViewModel, or a fenced code
block that is used verbatim as the XCUITest scaffold.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..models import ExternalViewPayload
from .base import Agent, PromptTemplate
from .client import GeneratedCode, extract_code_block
from .registry import AgentRegistry


class ViewAnalysisRequest(BaseModel):
    """Input for the View Analysis Agent."""

    source: str = Field(description="SwiftUI source text")
    failure: str = Field(default="", description="Why local analysis was insufficient")


class ViewAnalysisResult(BaseModel):
    """Either a structured view or verbatim code, never both."""

    view: ExternalViewPayload | None = None
    code: GeneratedCode | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> ViewAnalysisResult:
        if (self.view is None) == (self.code is None):
            raise ValueError("exactly one of view or code must be set")
        return self


@AgentRegistry.register
class ViewAnalysisAgent(Agent[ViewAnalysisRequest, ViewAnalysisResult]):
    """Agent for analyzing SwiftUI views into UI elements and state."""

    NAME = "view_analysis"

    @property
    def description(self) -> str:
        return "Analyzes SwiftUI views into elements, state and structure"

    @property
    def input_type(self) -> type[ViewAnalysisRequest]:
        return ViewAnalysisRequest

    @property
    def output_type(self) -> type[ViewAnalysisResult]:
        return ViewAnalysisResult

    def get_prompt_template(self) -> PromptTemplate:
        return PromptTemplate(
            template_id="view_analysis_v1",
            version="1.0.0",
            system_prompt="""You are an expert iOS developer specializing in SwiftUI and XCUITest.
You describe SwiftUI views so that UI tests can be generated for them.

ELEMENT TYPES:
button, textField, secureField, text, toggle, picker, slider, navigationLink, list.
Use the SwiftUI type name for any other interactive view.

RULES:
1. Report elements in the order they appear in the body
2. Use the visible label text as the label
3. Report an identifier only if the code attaches one
4. hasAction is true for buttons and navigation links
5. Reply with JSON only
""",
            user_prompt_template="""Analyze the following SwiftUI code and return a JSON representation of the UI elements, including their types, labels, and identifiers.

Local analysis result: {failure}

```swift
{source}
```""",
            output_format_instructions="""Respond with a JSON object of this shape:
{
  "name": "LoginView",
  "elements": [
    {"type": "button", "label": "Login", "identifier": "login_button", "modifiers": ["padding"], "hasAction": true}
  ],
  "stateVariables": [{"name": "isLoggedIn", "type": "Bool"}],
  "isNavigationView": false,
  "hasTabBar": false,
  "hasAlert": false,
  "hasContextMenu": false,
  "environmentObjects": [{"name": "session", "type": "SessionStore"}]
}""",
        )

    def prepare_input(self, input_data: ViewAnalysisRequest) -> dict[str, Any]:
        return {
            "source": input_data.source,
            "failure": input_data.failure or "no UI elements found",
        }

    def _parse_output(self, response_text: str) -> ViewAnalysisResult:
        block = extract_code_block(response_text)
        is_json = block is not None and (
            (block.language or "").lower() == "json" or block.code.lstrip().startswith("{")
        )
        if block is not None and not is_json:
            return ViewAnalysisResult(code=block)

        return ViewAnalysisResult(view=self._parse_json(response_text, ExternalViewPayload))

    def validate_output(self, output: ViewAnalysisResult) -> list[str]:
        if output.view is not None and not output.view.elements:
            return ["Service reported no UI elements"]
        return []

