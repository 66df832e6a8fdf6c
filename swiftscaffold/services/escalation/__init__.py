"""Escalation from local extraction to the generative service."""

from .coordinator import EscalationCoordinator, EscalationState, Resolution, run_blocking

__all__ = ["EscalationCoordinator", "EscalationState", "Resolution", "run_blocking"]
