"""
Generative service client.

A stateless request/response wrapper over the supported providers. Chat
providers go through their official async SDKs; the raw ``completions``
provider is a single JSON POST through httpx. Every provider failure is
mapped onto an ExternalServiceError with a ServiceErrorKind.
"""

from __future__ import annotations

import re
from typing import Any

import anthropic
import httpx
import openai
from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from ..core.config import Config, get_config
from ..core.exceptions import ExternalServiceError, ServiceErrorKind
from ..core.logging import get_logger

logger = get_logger(__name__)

CONNECTION_PROBE = "Say 'Connection successful'"

_FENCED_REPLY = re.compile(r"^\s*```[\w+#.-]*[ \t]*\n?(?P<code>.*?)\n?[ \t]*```\s*$", re.DOTALL)
_SWIFT_BLOCK = re.compile(r"```swift[ \t]*\n?(?P<code>.*?)```", re.DOTALL)
_ANY_BLOCK = re.compile(r"```[\w+#.-]*[ \t]*\n?(?P<code>.*?)```", re.DOTALL)


class GeneratedCode(BaseModel):
    """Code returned verbatim by the service."""

    code: str = Field(description="Code with the fence markers removed")
    language: str | None = Field(default=None, description="Fence language tag, if any")


def extract_code_block(text: str) -> GeneratedCode | None:
    """Recognize a reply that is exactly one fenced code block.

    Returns None when the reply does not start and end with a fence.
    """
    match = _FENCED_REPLY.match(text)
    if match is None or not match.group("code").strip():
        return None
    tag = text.strip()[3:].split("\n", 1)[0].strip()
    return GeneratedCode(code=match.group("code").strip(), language=tag or None)


def find_code_block(text: str) -> str | None:
    """Find a code block anywhere in a reply, preferring ``swift`` blocks."""
    for pattern in (_SWIFT_BLOCK, _ANY_BLOCK):
        match = pattern.search(text)
        if match:
            return match.group("code").strip()
    return None


def classify_status(status_code: int) -> ServiceErrorKind:
    """Map an HTTP status code onto a service error kind."""
    if status_code in (401, 403):
        return ServiceErrorKind.INVALID_CREDENTIALS
    if status_code == 429:
        return ServiceErrorKind.RATE_LIMITED
    if 400 <= status_code < 500:
        return ServiceErrorKind.MALFORMED_REQUEST
    return ServiceErrorKind.MALFORMED_RESPONSE


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ExternalServiceError) and error.transient


class GenerativeServiceClient:
    """Request/response client for the configured generative service.

    The client holds no per-request state; SDK and HTTP clients are created
    lazily and reused.
    """

    def __init__(
        self,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        probe_wait: wait_base | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Configuration. Uses global config if not provided.
            transport: Optional httpx transport for the ``completions`` provider.
            probe_wait: Wait strategy between connection probe attempts.
        """
        self.config = config or get_config()
        self.transport = transport
        self.probe_wait = probe_wait or wait_exponential(multiplier=1, min=1, max=8)
        self._client: Any = None

    @property
    def provider(self) -> str:
        return self.config.service.provider

    @property
    def model_name(self) -> str:
        """Model identifier sent to the provider."""
        service = self.config.service
        if self.provider == "azure_openai" and service.azure_deployment_name:
            return service.azure_deployment_name
        return service.model

    def _error(self, message: str, kind: ServiceErrorKind, **kwargs: Any) -> ExternalServiceError:
        return ExternalServiceError(message=message, kind=kind, provider=self.provider, **kwargs)

    def _api_key(self) -> str:
        key = self.config.api_key()
        if key is None:
            raise self._error(
                f"No API key configured for provider {self.provider}",
                ServiceErrorKind.INVALID_CREDENTIALS,
            )
        return key.get_secret_value()

    def _get_client(self) -> Any:
        """Get or create the provider client.

        Raises:
            ExternalServiceError: If no API key is configured.
        """
        if self._client is not None:
            return self._client

        api_key = self._api_key()
        service = self.config.service
        timeout = service.request_timeout_seconds

        if self.provider == "openai":
            self._client = openai.AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        elif self.provider == "anthropic":
            self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        elif self.provider == "azure_openai":
            self._client = openai.AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=service.azure_endpoint or "",
                api_version=service.azure_api_version,
                timeout=timeout,
                max_retries=0,
            )
        else:
            self._client = httpx.AsyncClient(
                timeout=timeout,
                transport=self.transport,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        expect_json: bool = False,
    ) -> str:
        """Send one prompt and return the reply text.

        Args:
            prompt: The user prompt.
            system_prompt: Optional system instructions.
            expect_json: Ask chat providers for a JSON object reply.

        Returns:
            The raw reply text.

        Raises:
            ExternalServiceError: On any provider, transport or decoding failure.
        """
        client = self._get_client()
        logger.info(
            "Service request starting",
            provider=self.provider,
            model=self.model_name,
            prompt_chars=len(prompt),
        )

        try:
            if self.provider in ("openai", "azure_openai"):
                text = await self._complete_chat(client, prompt, system_prompt, expect_json)
            elif self.provider == "anthropic":
                text = await self._complete_anthropic(client, prompt, system_prompt)
            else:
                text = await self._complete_raw(client, prompt, system_prompt)
        except (openai.APIStatusError, anthropic.APIStatusError) as e:
            raise self._error(
                f"Service returned HTTP {e.status_code}",
                classify_status(e.status_code),
                status_code=e.status_code,
                cause=e,
            ) from e
        except (openai.APIConnectionError, anthropic.APIConnectionError, httpx.TransportError) as e:
            raise self._error(f"Could not reach service: {e}", ServiceErrorKind.NETWORK, cause=e) from e

        logger.info("Service response received", provider=self.provider, response_chars=len(text))
        return text

    async def _complete_chat(
        self, client: Any, prompt: str, system_prompt: str | None, expect_json: bool
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}

        response = await client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=self.config.service.temperature,
            max_completion_tokens=self.config.service.max_tokens,
            **kwargs,
        )
        if not response.choices:
            raise self._error("Reply contained no choices", ServiceErrorKind.MALFORMED_RESPONSE)
        return response.choices[0].message.content or ""

    async def _complete_anthropic(self, client: Any, prompt: str, system_prompt: str | None) -> str:
        kwargs: dict[str, Any] = {}
        if system_prompt:
            kwargs["system"] = system_prompt
        response = await client.messages.create(
            model=self.model_name,
            max_tokens=self.config.service.max_tokens,
            temperature=self.config.service.temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")

    async def _complete_raw(self, client: httpx.AsyncClient, prompt: str, system_prompt: str | None) -> str:
        if system_prompt:
            prompt = f"{system_prompt}\n\n{prompt}"
        payload = {
            "model": self.config.service.model,
            "prompt": prompt,
            "max_tokens": self.config.service.max_tokens,
            "n": 1,
        }
        response = await client.post(self.config.service.endpoint, json=payload)
        if response.status_code >= 400:
            raise self._error(
                f"Service returned HTTP {response.status_code}",
                classify_status(response.status_code),
                status_code=response.status_code,
            )
        try:
            return response.json()["choices"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise self._error(
                "Could not decode completions reply",
                ServiceErrorKind.MALFORMED_RESPONSE,
                status_code=response.status_code,
                cause=e,
            ) from e

    async def check_connection(self) -> bool:
        """Send a fixed probe prompt to verify credentials and reachability.

        Transient network failures are retried; every other failure is
        raised on the first attempt.

        Raises:
            ExternalServiceError: If the probe fails.
        """
        async for attempt in AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(3),
            wait=self.probe_wait,
            reraise=True,
        ):
            with attempt:
                reply = await self.complete(CONNECTION_PROBE)
        logger.info("Connection check succeeded", provider=self.provider, reply_chars=len(reply))
        return True

    async def aclose(self) -> None:
        """Close the underlying client, if one was created."""
        if self._client is None:
            return
        if isinstance(self._client, httpx.AsyncClient):
            await self._client.aclose()
        else:
            await self._client.close()
        self._client = None
