"""Storage module for swgen.

Provides path resolution against the document root and JSON persistence
of the build snapshot.

Public Interface:
    - resolve_in_root: Resolve a path, rejecting anything outside the root
    - to_url: Convert a resolved path into a root-relative url
    - iter_regular_files: Walk a directory in sorted order
    - SnapshotStore: Load/save the persisted snapshot
"""

from .paths import iter_regular_files
from .paths import resolve_in_root
from .paths import to_url
from .snapshot_store import SnapshotStore

__all__ = [
    "resolve_in_root",
    "to_url",
    "iter_regular_files",
    "SnapshotStore",
]
