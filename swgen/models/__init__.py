"""Data models for swgen.

Public Interface:
    - Strategy: How a resource is served by the worker
    - Resource: A registered file or directory index
    - FallbackRule: Offline substitute for failing requests
    - Snapshot: Persisted state of the previous run
    - Manifest: Assembled resource lists and cleanup sets
    - BuildResult: Output of a finalized build run
"""

from .manifest import BuildResult
from .manifest import Manifest
from .resources import FallbackRule
from .resources import Resource
from .resources import Strategy
from .snapshot import Snapshot

__all__ = [
    "Strategy",
    "Resource",
    "FallbackRule",
    "Snapshot",
    "Manifest",
    "BuildResult",
]
