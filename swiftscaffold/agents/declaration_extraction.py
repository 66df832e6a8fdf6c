"""
Declaration Extraction Agent.

Asks the service for the functions and properties of a Swift source when
local pattern extraction finds none or cannot run.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..models import DeclarationPayload
from .base import Agent, PromptTemplate
from .registry import AgentRegistry


class DeclarationRequest(BaseModel):
    """Input for the Declaration Extraction Agent."""

    source: str = Field(description="Swift source text")
    failure: str = Field(default="", description="Why local extraction was insufficient")


@AgentRegistry.register
class DeclarationExtractionAgent(Agent[DeclarationRequest, DeclarationPayload]):
    """Agent for extracting declared functions and properties."""

    NAME = "declaration_extraction"

    @property
    def description(self) -> str:
        return "Extracts functions and properties from Swift source"

    @property
    def input_type(self) -> type[DeclarationRequest]:
        return DeclarationRequest

    @property
    def output_type(self) -> type[DeclarationPayload]:
        return DeclarationPayload

    def get_prompt_template(self) -> PromptTemplate:
        """Get the prompt template for declaration extraction.

        Returns:
            PromptTemplate: System and user prompts asking for a JSON list of
                declarations with name, kind, static flag and return type.
        """
        return PromptTemplate(
            template_id="declaration_extraction_v1",
            version="1.0.0",
            system_prompt="""You are an expert Swift developer. You read Swift source code and
list the declarations a unit test should cover.

RULES:
1. Report every function and every stored or computed property
2. A declaration is static only if it is marked `static` or `class`
3. Use the exact identifier from the source as the name
4. Omit the return type for functions that return nothing
5. Reply with JSON only
""",
            user_prompt_template="""Extract all the functions in this code, also include the name, the return type, and if it is static. Extract all the properties in this code, also include the name and if it is static.

Local analysis result: {failure}

```swift
{source}
```""",
            output_format_instructions="""Respond with a JSON object of this shape:
{
  "typeName": "the first type declared in the code, or null",
  "declarations": [
    {"name": "run", "type": "function", "isStatic": true, "returnType": "Int"},
    {"name": "title", "type": "property", "isStatic": false, "returnType": "String"}
  ]
}""",
        )

    def prepare_input(self, input_data: DeclarationRequest) -> dict[str, Any]:
        return {
            "source": input_data.source,
            "failure": input_data.failure or "no declarations found",
        }

    def validate_output(self, output: DeclarationPayload) -> list[str]:
        warnings = []
        if not output.declarations:
            warnings.append("Service reported no declarations")
        unnamed = [d for d in output.declarations if not d.name.strip()]
        if unnamed:
            warnings.append(f"{len(unnamed)} declarations without a name were dropped")
        return warnings
