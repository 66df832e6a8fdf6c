"""
Service agents for swiftscaffold.

Each agent wraps one kind of request to the generative service: a prompt
template and the schema its reply is parsed into.
"""

from .base import Agent, AgentContext, AgentResponse, PromptTemplate
from .client import (
    GeneratedCode,
    GenerativeServiceClient,
    classify_status,
    extract_code_block,
    find_code_block,
)
from .declaration_extraction import DeclarationExtractionAgent, DeclarationRequest
from .registry import AgentRegistry, get_agent
from .test_authoring import TestAuthoringAgent, TestAuthoringRequest
from .view_analysis import ViewAnalysisAgent, ViewAnalysisRequest, ViewAnalysisResult

__all__ = [
    # Base
    "Agent",
    "AgentContext",
    "AgentResponse",
    "PromptTemplate",
    "AgentRegistry",
    "get_agent",
    # Client
    "GeneratedCode",
    "GenerativeServiceClient",
    "classify_status",
    "extract_code_block",
    "find_code_block",
    # Agents
    "DeclarationExtractionAgent",
    "DeclarationRequest",
    "TestAuthoringAgent",
    "TestAuthoringRequest",
    "ViewAnalysisAgent",
    "ViewAnalysisRequest",
    "ViewAnalysisResult",
]
