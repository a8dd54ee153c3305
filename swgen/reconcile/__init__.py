"""Resource reconciliation for swgen.

Tracks which resources are still wanted across independent build runs:
- Registry: accumulates registrations and fingerprints for one run
- Reconciler: diffs the registry against the previous snapshot
- ManifestBuilder: assembles per-strategy lists and cleanup sets

Public Interface:
    - Registry: Per-run resource registry
    - normalize_directory_index: Pure-string directory index normalization
    - fingerprint_file: SHA-256 content fingerprint
    - sanitize_name: Cache/state-file name validation
    - Reconciler: Registry vs. snapshot diff
    - ReconcileResult: Manifest, changed flag, timestamp, next snapshot
    - ManifestBuilder: Manifest assembly
"""

from .fingerprints import fingerprint_file
from .manifest_builder import ManifestBuilder
from .names import DEFAULT_CACHE_NAME
from .names import sanitize_name
from .reconciler import ReconcileResult
from .reconciler import Reconciler
from .registry import Registry
from .registry import normalize_directory_index

__all__ = [
    "Registry",
    "normalize_directory_index",
    "fingerprint_file",
    "sanitize_name",
    "DEFAULT_CACHE_NAME",
    "Reconciler",
    "ReconcileResult",
    "ManifestBuilder",
]
