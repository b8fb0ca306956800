"""Interactive collaborator around the pipeline core."""

from .core import PipelineShell

__all__ = ["PipelineShell"]
