"""Manifest and build result models.

A Manifest is produced exactly once per run, by finalize, and is immutable.
"""

from __future__ import annotations

from dataclasses import dataclass

from .resources import FallbackRule
from .snapshot import Snapshot


@dataclass(frozen=True)
class Manifest:
    """Per-strategy resource lists, fallback rules and cleanup sets for one run."""

    cache_first: tuple[str, ...] = ()
    on_demand: tuple[str, ...] = ()
    fallback_patterns: tuple[FallbackRule, ...] = ()
    cleanup_caches: frozenset[str] = frozenset()
    cleanup_files: frozenset[str] = frozenset()
    refresh_files: frozenset[str] = frozenset()  # on-demand urls whose content changed
    persist_on_demand: bool = False

    @property
    def fallback_map(self) -> dict[str, str]:
        """Fallback patterns as an ordered pattern -> url mapping."""
        return {rule.pattern: rule.target_url for rule in self.fallback_patterns}

    def summary(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"{len(self.cache_first)} cache-first, {len(self.on_demand)} on-demand, "
            f"{len(self.fallback_patterns)} fallback pattern(s); "
            f"cleanup {len(self.cleanup_caches)} cache(s), {len(self.cleanup_files)} file(s)"
        )


@dataclass(frozen=True)
class BuildResult:
    """Everything finalize produces: program text, next snapshot and the manifest."""

    program_text: str
    snapshot: Snapshot
    manifest: Manifest
    cache_name: str
    changed: bool
    timestamp: int
