"""Shared testing fixtures for the rules_translator test suite."""

from .providers import RecordingProvider, SyncRecordingProvider  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "RecordingProvider",
    "SyncRecordingProvider",
    "WorkspaceBuilder",
    "build_tree",
]
