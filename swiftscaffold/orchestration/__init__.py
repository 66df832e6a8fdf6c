"""Host-facing pipeline entry points."""

from .pipeline import UI_HEADER, UNIT_HEADER, ScaffoldPipeline, format_insertion

__all__ = ["ScaffoldPipeline", "format_insertion", "UI_HEADER", "UNIT_HEADER"]
