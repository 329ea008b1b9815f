"""
Pipeline Layer - Everything that talks to the server besides slider writes.

Contains:
- RemoteStateSynchronizer: Seeds local state from the server snapshot
- VisualRefreshPipeline: Re-fetches the preview images after each write
- CommitWorkflow: Validates and submits a named colour
"""

from .sync import RemoteStateSynchronizer
from .refresh import Artifact, VisualRefreshPipeline
from .commit import CommitWorkflow, InvalidColourName, validate_colour_name

__all__ = [
    "RemoteStateSynchronizer",
    "Artifact",
    "VisualRefreshPipeline",
    "CommitWorkflow",
    "InvalidColourName",
    "validate_colour_name",
]
