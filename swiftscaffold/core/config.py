"""
Configuration management for swiftscaffold.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for extraction, generation and service escalation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

DEFAULT_COMPLETIONS_ENDPOINT = "https://api.github.com/copilot_internal/v2/completions"


class ServiceConfig(BaseModel):
    """External generative service configuration."""

    provider: Literal["openai", "anthropic", "azure_openai", "completions"] = Field(
        default="openai", description="Generative service provider"
    )
    # Azure OpenAI specific settings
    azure_endpoint: str | None = Field(default=None, description="Azure OpenAI endpoint URL")
    azure_api_version: str = Field(default="2024-02-15-preview", description="Azure OpenAI API version")
    azure_deployment_name: str | None = Field(default=None, description="Azure OpenAI deployment name")
    # Raw completions endpoint settings
    endpoint: str = Field(
        default=DEFAULT_COMPLETIONS_ENDPOINT,
        description="Completions endpoint used by the 'completions' provider",
    )
    model: str = Field(default="gpt-4o", description="Model identifier")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=2000, ge=256, description="Max output tokens")
    request_timeout_seconds: float = Field(default=60.0, gt=0, description="Per-request transport timeout")


class ExtractionConfig(BaseModel):
    """Pattern extraction configuration."""

    lookahead_window: int = Field(
        default=100,
        ge=0,
        description="Characters scanned past an element match for identifiers and modifiers",
    )


class EscalationConfig(BaseModel):
    """Escalation to the external service."""

    enabled: bool = Field(default=True, description="Allow escalation when local extraction fails")
    timeout_seconds: float = Field(
        default=30.0, gt=0, description="Hard deadline for one escalation round trip"
    )


class GenerationOptions(BaseModel):
    """XCUITest generation options."""

    include_suggestions: bool = Field(
        default=True, description="Append accessibility identifier suggestions"
    )
    include_state_tests: bool = Field(default=True, description="Generate state change guidance")
    include_navigation_tests: bool = Field(default=True, description="Generate navigation tests")
    include_comments: bool = Field(default=True, description="Emit explanatory comments")
    include_launch_arguments: bool = Field(
        default=True, description="Set UI testing launch arguments in setUp"
    )


class Config(BaseModel):
    """Root configuration for swiftscaffold."""

    project_name: str = Field(default="swiftscaffold", description="Project identifier")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    escalation: EscalationConfig = Field(default_factory=EscalationConfig)
    generation: GenerationOptions = Field(default_factory=GenerationOptions)

    # API Keys (loaded from environment)
    openai_api_key: SecretStr | None = Field(
        default_factory=lambda: SecretStr(os.environ.get("OPENAI_API_KEY", "")) or None
    )
    anthropic_api_key: SecretStr | None = Field(
        default_factory=lambda: SecretStr(os.environ.get("ANTHROPIC_API_KEY", "")) or None
    )
    azure_openai_api_key: SecretStr | None = Field(
        default_factory=lambda: SecretStr(os.environ.get("AZURE_OPENAI_API_KEY", "")) or None
    )
    completions_api_key: SecretStr | None = Field(
        default_factory=lambda: SecretStr(os.environ.get("SCAFFOLD_API_KEY", "")) or None
    )

    model_config = {"extra": "ignore"}

    def api_key(self) -> SecretStr | None:
        """Return the API key for the configured provider, if any."""
        keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "azure_openai": self.azure_openai_api_key,
            "completions": self.completions_api_key,
        }
        key = keys.get(self.service.provider)
        if key is None or not key.get_secret_value():
            return None
        return key

    @property
    def escalation_available(self) -> bool:
        """Whether escalation is enabled and credentials exist for it."""
        return self.escalation.enabled and self.api_key() is not None

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("SCAFFOLD_LOG_LEVEL", "INFO"),  # type: ignore
            service=ServiceConfig(
                provider=os.environ.get("SCAFFOLD_PROVIDER", "openai"),  # type: ignore
                model=os.environ.get("SCAFFOLD_MODEL", "gpt-4o"),
                endpoint=os.environ.get("SCAFFOLD_ENDPOINT", DEFAULT_COMPLETIONS_ENDPOINT),
                temperature=float(os.environ.get("SCAFFOLD_TEMPERATURE", "0.1")),
                azure_endpoint=os.environ.get("AZURE_OPENAI_ENDPOINT"),
                azure_api_version=os.environ.get("AZURE_OPENAI_API_VERSION", "2024-02-15-preview"),
                azure_deployment_name=os.environ.get("AZURE_OPENAI_DEPLOYMENT_NAME"),
            ),
            extraction=ExtractionConfig(
                lookahead_window=int(os.environ.get("SCAFFOLD_LOOKAHEAD_WINDOW", "100")),
            ),
            escalation=EscalationConfig(
                enabled=os.environ.get("SCAFFOLD_ESCALATION_ENABLED", "true").lower() == "true",
                timeout_seconds=float(os.environ.get("SCAFFOLD_ESCALATION_TIMEOUT", "30")),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
