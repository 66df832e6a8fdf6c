"""
Base agent abstraction.

An agent pairs a versioned prompt template with a response schema. It renders
the prompt from typed input, sends it through the generative service client
once, and parses the reply into its output model.
"""

from __future__ import annotations

import hashlib
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

from ..core.exceptions import ExternalServiceError, ServiceErrorKind
from ..core.logging import get_logger
from .client import GenerativeServiceClient, extract_code_block

logger = get_logger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ModelT = TypeVar("ModelT", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AgentContext(BaseModel):
    """Context passed to agent invocations."""

    operation: str = Field(default="escalation", description="Pipeline operation that invoked the agent")
    timestamp: datetime = Field(default_factory=_utcnow)
    trace_id: str | None = Field(default=None)


class AgentResponse(BaseModel, Generic[OutputT]):
    """Response from an agent invocation."""

    success: bool = Field(description="Whether the invocation succeeded")
    output: OutputT | None = Field(default=None)
    error: str | None = Field(default=None)
    error_kind: ServiceErrorKind | None = Field(default=None)

    latency_ms: float = Field(default=0.0)
    model_used: str = Field(default="")
    prompt_hash: str = Field(default="")
    timestamp: datetime = Field(default_factory=_utcnow)


@dataclass
class PromptTemplate:
    """A versioned prompt template."""

    template_id: str
    version: str
    system_prompt: str
    user_prompt_template: str
    output_format_instructions: str = ""
    examples: list[dict[str, str]] = field(default_factory=list)

    def render_system(self) -> str:
        return self.system_prompt

    def render_user(self, **kwargs: Any) -> str:
        """Render the user prompt with variables.

        Args:
            **kwargs: Template variables to substitute in the user prompt.

        Returns:
            The rendered user prompt with output format instructions appended
            if available.
        """
        prompt = self.user_prompt_template.format(**kwargs)
        if self.output_format_instructions:
            prompt += f"\n\n{self.output_format_instructions}"
        return prompt

    def get_hash(self) -> str:
        """Get deterministic hash of the prompt template.

        Returns:
            A 16-character hexadecimal hash string.
        """
        content = f"{self.template_id}:{self.version}:{self.system_prompt}:{self.user_prompt_template}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]


class Agent(ABC, Generic[InputT, OutputT]):
    """Base class for all swiftscaffold agents.

    Agents are stateless, type-safe wrappers around one service request.
    They never retry: a failed request is reported in the AgentResponse.
    """

    NAME: str = ""
    expects_json: bool = True

    def __init__(self, client: GenerativeServiceClient | None = None) -> None:
        """Initialize the agent.

        Args:
            client: Service client. A client over the global config is
                created if not provided.
        """
        self.client = client or GenerativeServiceClient()

    @property
    def name(self) -> str:
        return self.NAME or type(self).__name__

    @property
    @abstractmethod
    def description(self) -> str:
        """Agent description."""
        ...

    @property
    @abstractmethod
    def input_type(self) -> type[InputT]:
        """Pydantic model type for input."""
        ...

    @property
    @abstractmethod
    def output_type(self) -> type[OutputT]:
        """Pydantic model type for output."""
        ...

    @abstractmethod
    def get_prompt_template(self) -> PromptTemplate:
        """Get the prompt template for this agent."""
        ...

    @abstractmethod
    def prepare_input(self, input_data: InputT) -> dict[str, Any]:
        """Prepare input data for prompt rendering.

        Args:
            input_data: The validated input data.

        Returns:
            Dictionary of template variables for prompt rendering.
        """
        ...

    def validate_output(self, output: OutputT) -> list[str]:
        """Validate the agent output and return any warnings.

        Override this method to add custom validation logic.
        """
        return []

    def _malformed(self, message: str, cause: Exception | None = None) -> ExternalServiceError:
        return ExternalServiceError(
            message=message,
            kind=ServiceErrorKind.MALFORMED_RESPONSE,
            provider=self.client.provider,
            context={"agent": self.name},
            cause=cause,
        )

    def _parse_output(self, response_text: str) -> OutputT:
        """Parse a JSON reply into the output type."""
        return self._parse_json(response_text, self.output_type)

    def _parse_json(self, response_text: str, schema: type[ModelT]) -> ModelT:
        """Parse a JSON reply into a schema.

        A reply wrapped in a ``json`` code fence is unwrapped first.

        Raises:
            ExternalServiceError: If the reply is not valid JSON for the schema.
        """
        block = extract_code_block(response_text)
        if block is not None:
            response_text = block.code

        try:
            data = json.loads(response_text)
            return schema.model_validate(data)
        except json.JSONDecodeError as e:
            raise self._malformed(f"Failed to parse JSON response: {e}", cause=e) from e
        except ValidationError as e:
            raise self._malformed(f"Failed to validate output: {e}", cause=e) from e

    async def invoke(
        self,
        input_data: InputT,
        context: AgentContext | None = None,
    ) -> AgentResponse[OutputT]:
        """Invoke the agent with the given input.

        Args:
            input_data: Validated input data matching the agent's input type.
            context: Invocation context.

        Returns:
            Response containing either the validated output or the error
            message and kind, along with latency and provenance data.
        """
        context = context or AgentContext()
        start_time = time.perf_counter()
        prompt_template = self.get_prompt_template()
        prompt_hash = prompt_template.get_hash()

        try:
            template_vars = self.prepare_input(input_data)
            system_prompt = prompt_template.render_system()
            user_prompt = prompt_template.render_user(**template_vars)

            logger.info(
                "Agent invocation started",
                agent=self.name,
                operation=context.operation,
                prompt_hash=prompt_hash,
            )

            response_text = await self.client.complete(
                user_prompt, system_prompt=system_prompt, expect_json=self.expects_json
            )
            output = self._parse_output(response_text)

            warnings = self.validate_output(output)
            if warnings:
                logger.warning("Agent output warnings", agent=self.name, warnings=warnings)

            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.info("Agent invocation completed", agent=self.name, latency_ms=latency_ms)

            return AgentResponse(
                success=True,
                output=output,
                latency_ms=latency_ms,
                model_used=self.client.model_name,
                prompt_hash=prompt_hash,
            )

        except ExternalServiceError as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Agent invocation failed",
                agent=self.name,
                error_kind=e.kind.value,
                error=str(e),
                latency_ms=latency_ms,
            )
            return AgentResponse(
                success=False,
                error=e.user_message,
                error_kind=e.kind,
                latency_ms=latency_ms,
                model_used=self.client.model_name,
                prompt_hash=prompt_hash,
            )
