"""Manifest assembly from a finished registry."""

from __future__ import annotations

from collections.abc import Iterable

from swgen.models.manifest import Manifest
from swgen.models.resources import Strategy
from swgen.models.snapshot import Snapshot

from .registry import Registry


class ManifestBuilder:
    """Buckets registered resources per strategy and attaches cleanup sets.

    Bucket order follows registration order so the rendered program is
    stable from run to run.
    """

    def build(
        self,
        registry: Registry,
        snapshot: Snapshot | None,
        cleanup_caches: Iterable[str],
        cleanup_files: Iterable[str],
    ) -> Manifest:
        """Assemble the manifest.

        Args:
            registry: Registry after all registrations
            snapshot: Previous run's state, if any
            cleanup_caches: Cache names to delete at activation
            cleanup_files: Urls to purge from the current cache at activation

        Returns:
            Immutable manifest
        """
        cache_first: list[str] = []
        on_demand: list[str] = []
        for resource in registry.resources():
            if resource.strategy is Strategy.ON_DEMAND:
                on_demand.append(resource.url)
            else:
                cache_first.append(resource.url)

        return Manifest(
            cache_first=tuple(cache_first),
            on_demand=tuple(on_demand),
            fallback_patterns=registry.fallback_rules(),
            cleanup_caches=frozenset(cleanup_caches),
            cleanup_files=frozenset(cleanup_files),
            refresh_files=frozenset(self._changed_on_demand(registry, snapshot, on_demand)),
            persist_on_demand=registry.persist_on_demand,
        )

    @staticmethod
    def _changed_on_demand(registry: Registry, snapshot: Snapshot | None, on_demand: list[str]) -> set[str]:
        if snapshot is None:
            return set()

        fingerprints = registry.file_fingerprints()
        changed = set()
        for url in on_demand:
            previous = snapshot.known_resources.get(url)
            if previous is not None and previous != fingerprints[url]:
                changed.add(url)
        return changed
