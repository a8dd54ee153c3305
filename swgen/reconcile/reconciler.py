"""Reconciliation of a registry against the previous run's snapshot.

Produces the cleanup sets, the changed flag, the next timestamp and the
snapshot to persist for the following run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from swgen.models.manifest import Manifest
from swgen.models.snapshot import Snapshot

from .manifest_builder import ManifestBuilder
from .registry import Registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation."""

    manifest: Manifest
    changed: bool
    next_timestamp: int
    next_snapshot: Snapshot


def compute_cleanup_files(registry: Registry, snapshot: Snapshot | None) -> set[str]:
    """Urls known to the snapshot that this run no longer registers.

    Active directory indexes are registry resources too, so they are
    never part of the result.
    """
    if snapshot is None:
        return set()
    known = set(snapshot.known_resources) | set(snapshot.known_directory_indexes)
    return known - registry.urls()


def compute_cleanup_caches(cache_name: str, snapshot: Snapshot | None) -> set[str]:
    """Superseded cache names, never including the current one."""
    if snapshot is None:
        return set()
    stale = set(snapshot.stale_cache_names)
    if snapshot.cache_name != cache_name:
        stale.add(snapshot.cache_name)
    stale.discard(cache_name)
    return stale


class Reconciler:
    """Diffs a registry against a snapshot."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize reconciler.

        Args:
            clock: Returns the current epoch time in seconds
        """
        self.clock = clock
        self.builder = ManifestBuilder()

    def reconcile(self, registry: Registry, snapshot: Snapshot | None) -> ReconcileResult:
        """Compute the manifest and next snapshot for this run.

        Cleanup on its own never bumps the timestamp: only fingerprint,
        membership or cache-name deltas do.

        Args:
            registry: Registry after all registrations
            snapshot: Previous run's state, if any

        Returns:
            Reconciliation result
        """
        cleanup_files = compute_cleanup_files(registry, snapshot)
        cleanup_caches = compute_cleanup_caches(registry.cache_name, snapshot)

        changed = registry.changed or snapshot is None
        if snapshot is not None and snapshot.cache_name != registry.cache_name:
            logger.debug(f"Cache name changed: {snapshot.cache_name} -> {registry.cache_name}")
            changed = True

        next_timestamp = int(self.clock()) if changed or snapshot is None else snapshot.timestamp

        manifest = self.builder.build(registry, snapshot, cleanup_caches, cleanup_files)

        next_snapshot = Snapshot(
            timestamp=next_timestamp,
            cache_name=registry.cache_name,
            stale_cache_names=sorted(cleanup_caches),
            known_resources=registry.file_fingerprints(),
            known_directory_indexes=registry.directory_indexes(),
        )

        logger.info(
            f"Reconciled: changed={changed}, ts={next_timestamp}, "
            f"cleanup {len(cleanup_caches)} cache(s), {len(cleanup_files)} file(s)"
        )
        return ReconcileResult(
            manifest=manifest,
            changed=changed,
            next_timestamp=next_timestamp,
            next_snapshot=next_snapshot,
        )
