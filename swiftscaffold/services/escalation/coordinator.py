"""
Escalation Coordinator.

Runs the local extraction and generation pipeline and, when it fails or comes
back empty, hands the source to the generative service exactly once. The
service's reply either replaces the local model, and the same templates are
rendered from it, or is used verbatim as the scaffold.

Callers are synchronous. Each escalation is a single rendezvous with a hard
deadline: the agent call runs as an asyncio task under ``asyncio.wait_for``,
on a helper thread when the caller already owns a running event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from ...agents import (
    Agent,
    AgentContext,
    AgentResponse,
    DeclarationRequest,
    GenerativeServiceClient,
    TestAuthoringRequest,
    ViewAnalysisRequest,
    get_agent,
)
from ...core.config import Config, GenerationOptions, get_config
from ...core.exceptions import GenerationError, ScaffoldError
from ...core.logging import get_logger
from ...models import DeclarationModel, ViewModel, declarations_from_payload
from ..extraction import ExtractionProfile, FeatureExtractor, ModelBuilder
from ..generation import UITestGenerator, UnitTestGenerator

logger = get_logger(__name__)

T = TypeVar("T")


class EscalationState(str, Enum):
    """Per-call escalation state. ESCALATED is terminal."""

    LOCAL = "local"
    ESCALATED = "escalated"


@dataclass(frozen=True)
class Resolution:
    """Outcome of one pipeline call."""

    output: str
    state: EscalationState
    model: DeclarationModel | ViewModel | None = None
    local_error: ScaffoldError | None = None
    external: bool = False

    @property
    def escalated(self) -> bool:
        return self.state is EscalationState.ESCALATED


def run_blocking(factory: Callable[[], Awaitable[T]]) -> T:
    """Run a coroutine to completion from synchronous code.

    Uses a one-worker thread with its own event loop when called from inside
    a running loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_as_coroutine(factory))

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="escalation") as pool:
        return pool.submit(asyncio.run, _as_coroutine(factory)).result()


async def _as_coroutine(factory: Callable[[], Awaitable[T]]) -> T:
    return await factory()


class EscalationCoordinator:
    """Runs the pipeline with at most one escalation per call."""

    def __init__(
        self,
        config: Config | None = None,
        client: GenerativeServiceClient | None = None,
        extractor: FeatureExtractor | None = None,
        unit_generator: UnitTestGenerator | None = None,
        ui_generator: UITestGenerator | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            config: Configuration. Uses global config if not provided.
            client: Service client used by the agents.
            extractor: Feature extractor shared with the model builder.
            unit_generator: Renderer for declaration models.
            ui_generator: Renderer for view models.
        """
        self.config = config or get_config()
        self.extractor = extractor or FeatureExtractor(self.config.extraction.lookahead_window)
        self.builder = ModelBuilder(self.extractor)
        self.unit_generator = unit_generator or UnitTestGenerator()
        self.ui_generator = ui_generator or UITestGenerator(self.config.generation)
        self._client = client

    @property
    def available(self) -> bool:
        """Whether a service is configured to escalate to."""
        return self.config.escalation_available

    @property
    def client(self) -> GenerativeServiceClient:
        if self._client is None:
            self._client = GenerativeServiceClient(self.config)
        return self._client

    def _agent(self, name: str) -> Agent[Any, Any]:
        """Build the registered agent for one request kind over the shared client."""
        agent_class = get_agent(name)
        if agent_class is None:
            raise KeyError(f"No agent registered as {name!r}")
        return agent_class(self.client)

    def _invoke(self, agent: Any, request: Any, operation: str) -> AgentResponse[Any] | None:
        """Invoke an agent once and block until its reply or the deadline.

        Returns:
            The agent response, or None when the deadline passed.
        """
        timeout = self.config.escalation.timeout_seconds

        async def call() -> AgentResponse[Any]:
            try:
                return await asyncio.wait_for(
                    agent.invoke(request, AgentContext(operation=operation)), timeout
                )
            finally:
                await self.client.aclose()

        try:
            return run_blocking(call)
        except asyncio.TimeoutError:
            logger.warning("Escalation timed out", operation=operation, timeout_seconds=timeout)
            return None

    def resolve_unit_tests(self, source: str, assist_bodies: bool = False) -> Resolution:
        """Generate XCTest code for the declarations in a source.

        Args:
            source: Swift source text.
            assist_bodies: Ask the service for each test body.

        Returns:
            The resolution. Escalation happens when extraction raises or finds
            no declarations.

        Raises:
            ScaffoldError: The local error, when escalation is unavailable or fails.
        """
        model: DeclarationModel | None = None
        local_error: ScaffoldError | None = None
        try:
            facts = self.extractor.extract(source, ExtractionProfile.DECLARATIONS)
            model = self.builder.build_declarations(facts, source)
        except ScaffoldError as e:
            local_error = e

        if model is not None and not model.is_empty:
            bodies = self._author_bodies(source, model) if assist_bodies and self.available else None
            logger.info("Resolved locally", operation="unit_tests", units=len(model.units))
            return Resolution(self.unit_generator.render(model, bodies), EscalationState.LOCAL, model)

        if not self.available:
            return self._local_outcome(local_error, model, EscalationState.LOCAL)

        reason = local_error.message if local_error else "no declarations found"
        logger.info("Escalating", operation="unit_tests", reason=reason)
        response = self._invoke(
            self._agent("declaration_extraction"),
            DeclarationRequest(source=source, failure=reason),
            "unit_tests",
        )
        if response is not None and response.success and response.output is not None:
            external = declarations_from_payload(response.output)
            if external.is_empty:
                logger.warning("Service found no declarations", operation="unit_tests")
            else:
                if external.type_name is None and model is not None and model.type_name:
                    external = external.model_copy(update={"type_name": model.type_name})
                return Resolution(
                    self.unit_generator.render(external),
                    EscalationState.ESCALATED,
                    external,
                    local_error,
                    external=True,
                )

        return self._local_outcome(local_error, model, EscalationState.ESCALATED)

    def _local_outcome(
        self,
        local_error: ScaffoldError | None,
        model: DeclarationModel | None,
        state: EscalationState,
    ) -> Resolution:
        if local_error is not None:
            raise local_error
        assert model is not None
        return Resolution(self.unit_generator.render(model), state, model)

    def _author_bodies(self, source: str, model: DeclarationModel) -> dict[str, str]:
        """Ask the service for one test body per unit.

        All requests share one deadline. A unit whose request fails, or that
        is not answered before the deadline, keeps the heuristic body.
        """
        agent = self._agent("test_authoring")
        timeout = self.config.escalation.timeout_seconds

        async def author_each(bodies: dict[str, str]) -> None:
            for unit in model.units:
                request = TestAuthoringRequest(
                    source=source,
                    target="unit_body",
                    unit_name=unit.name,
                    unit_type=unit.declared_type or unit.kind.value,
                )
                response = await agent.invoke(request, AgentContext(operation="unit_body"))
                if response.success and response.output is not None:
                    bodies[unit.name] = response.output.code
                else:
                    logger.warning(
                        "Test body request failed",
                        unit=unit.name,
                        error_kind=response.error_kind.value if response.error_kind else None,
                    )

        async def author_all() -> dict[str, str]:
            bodies: dict[str, str] = {}
            try:
                await asyncio.wait_for(author_each(bodies), timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Test body requests timed out",
                    authored=len(bodies),
                    units=len(model.units),
                    timeout_seconds=timeout,
                )
            finally:
                await self.client.aclose()
            return bodies

        return run_blocking(author_all)

    def resolve_ui_tests(self, source: str, options: GenerationOptions | None = None) -> Resolution:
        """Generate XCUITest code for a SwiftUI view.

        Args:
            source: SwiftUI source text.
            options: Generation options for this call.

        Returns:
            The resolution. Escalation happens when model building raises,
            finds no elements, or rendering raises a GenerationError.

        Raises:
            ScaffoldError: The local error, when escalation is unavailable or fails.
        """
        model: ViewModel | None = None
        local_error: ScaffoldError | None = None
        try:
            model = self.builder.build_view(source)
        except ScaffoldError as e:
            local_error = e

        if model is not None and not model.is_empty:
            try:
                output = self.ui_generator.render(model, options)
            except GenerationError as e:
                return self._escalate_rendering(source, model, e)
            logger.info("Resolved locally", operation="ui_tests", elements=len(model.elements))
            return Resolution(output, EscalationState.LOCAL, model)

        if not self.available:
            return self._local_view_outcome(local_error, model, options, EscalationState.LOCAL)

        reason = local_error.message if local_error else "no UI elements found"
        logger.info("Escalating", operation="ui_tests", reason=reason)
        response = self._invoke(
            self._agent("view_analysis"),
            ViewAnalysisRequest(source=source, failure=reason),
            "ui_tests",
        )
        if response is not None and response.success and response.output is not None:
            result = response.output
            if result.code is not None:
                return Resolution(
                    result.code.code, EscalationState.ESCALATED, None, local_error, external=True
                )
            assert result.view is not None
            external = result.view.to_view_model(source)
            if external.is_empty:
                logger.warning("Service found no UI elements", operation="ui_tests")
            else:
                try:
                    output = self.ui_generator.render(external, options)
                except GenerationError as e:
                    logger.warning("Service view could not be rendered", error=str(e))
                else:
                    return Resolution(
                        output, EscalationState.ESCALATED, external, local_error, external=True
                    )

        return self._local_view_outcome(local_error, model, options, EscalationState.ESCALATED)

    def _local_view_outcome(
        self,
        local_error: ScaffoldError | None,
        model: ViewModel | None,
        options: GenerationOptions | None,
        state: EscalationState,
    ) -> Resolution:
        if local_error is not None:
            raise local_error
        assert model is not None
        return Resolution(self.ui_generator.render(model, options), state, model)

    def _escalate_rendering(self, source: str, model: ViewModel, error: GenerationError) -> Resolution:
        """Escalate a rendering failure by asking for the XCUITest code itself."""
        if not self.available:
            raise error

        logger.info("Escalating", operation="ui_render", reason=error.message)
        response = self._invoke(
            self._agent("test_authoring"),
            TestAuthoringRequest(source=source, target="ui", failure=error.message),
            "ui_render",
        )
        if response is not None and response.success and response.output is not None:
            return Resolution(
                response.output.code, EscalationState.ESCALATED, model, error, external=True
            )
        raise error
