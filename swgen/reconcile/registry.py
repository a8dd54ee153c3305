"""Resource registry for one build run.

The registry accumulates registrations, fingerprints file content and
notes, as it goes, whether anything differs from the loaded snapshot.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from swgen.errors import InvalidDirectoryIndexPathError
from swgen.models.resources import FallbackRule
from swgen.models.resources import Resource
from swgen.models.resources import Strategy
from swgen.models.snapshot import Snapshot
from swgen.storage.paths import iter_regular_files
from swgen.storage.paths import resolve_in_root
from swgen.storage.paths import to_url

from .fingerprints import fingerprint_file
from .names import DEFAULT_CACHE_NAME
from .names import sanitize_name

logger = logging.getLogger(__name__)


def normalize_directory_index(path: str) -> str:
    """Resolve "." and ".." in a directory index path without touching the disk.

    Args:
        path: Root-relative directory path ending in "/"

    Returns:
        Normalized url with leading and trailing "/"

    Raises:
        InvalidDirectoryIndexPathError: If the path lacks the trailing "/",
            contains a hidden segment, or climbs above the root

    Example:
        >>> normalize_directory_index("docs/./api/../guide/")
        '/docs/guide/'
    """
    if not path.endswith("/"):
        raise InvalidDirectoryIndexPathError(f"Directory index path must end with '/': {path!r}")

    segments = path.split("/")
    for segment in segments:
        if segment.startswith(".") and segment not in (".", ".."):
            raise InvalidDirectoryIndexPathError(f"Directory index path must not contain hidden segments: {path!r}")

    parts: list[str] = []
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise InvalidDirectoryIndexPathError(f"Directory index path must not leave the document root: {path!r}")
            parts.pop()
        else:
            parts.append(segment)

    return "/" + "".join(f"{part}/" for part in parts)


class Registry:
    """Resources, fallback rules and build options registered in one run.

    Re-registering a url updates its fingerprint in place. When a url is
    registered both cache-first and on-demand, cache-first wins regardless
    of order.
    """

    def __init__(self, root: Path, snapshot: Snapshot | None = None, exclude: set[Path] | None = None) -> None:
        """Initialize registry.

        Args:
            root: Trusted document root
            snapshot: Previous run's state, if any
            exclude: Files never picked up by register_directory (state file, outputs)
        """
        self.root = Path(root).resolve()
        self.snapshot = snapshot
        self.exclude = {Path(p).resolve() for p in exclude or ()}
        self.cache_name = snapshot.cache_name if snapshot else DEFAULT_CACHE_NAME
        self.persist_on_demand = False

        self._resources: dict[str, Resource] = {}
        self._fallbacks: dict[str, str] = {}
        self.changes: list[str] = []

        if snapshot is None:
            self._mark_changed("no prior snapshot")

    @property
    def changed(self) -> bool:
        """Whether any registration differs from the snapshot."""
        return bool(self.changes)

    def _mark_changed(self, reason: str) -> None:
        logger.debug(f"Change detected: {reason}")
        self.changes.append(reason)

    # --- Registration ---

    def register_file(self, path: str | Path, strategy: Strategy = Strategy.CACHE_FIRST) -> str:
        """Register a single file.

        Args:
            path: File path, absolute or relative to the root
            strategy: CACHE_FIRST or ON_DEMAND

        Returns:
            The file's root-relative url

        Raises:
            PathOutsideRootError: If the file resolves outside the root
            FileNotFoundError: If the path is not a regular file
        """
        url, fingerprint = self._inspect_file(path, strategy)
        self._add_file(url, fingerprint, strategy)
        return url

    def register_directory(self, path: str | Path, strategy: Strategy = Strategy.CACHE_FIRST) -> list[str]:
        """Register every regular file under a directory, recursively.

        All files are validated before any of them is registered.

        Args:
            path: Directory path, absolute or relative to the root
            strategy: CACHE_FIRST or ON_DEMAND

        Returns:
            Urls registered, in sorted walk order
        """
        directory = resolve_in_root(path, self.root)
        inspected = [
            self._inspect_file(file_path, strategy)
            for file_path in iter_regular_files(directory)
            if file_path.resolve() not in self.exclude
        ]

        for url, fingerprint in inspected:
            self._add_file(url, fingerprint, strategy)

        logger.debug(f"Registered {len(inspected)} file(s) from {directory} as {strategy.value}")
        return [url for url, _ in inspected]

    def register_directory_index(self, path: str) -> str:
        """Register a directory url to be precached and served cache-first.

        Args:
            path: Root-relative directory path ending in "/"

        Returns:
            Normalized directory url
        """
        url = normalize_directory_index(path)

        if url not in self._resources:
            self._resources[url] = Resource(url=url, strategy=Strategy.DIRECTORY_INDEX)
            logger.debug(f"Registered directory index {url}")

        if self.snapshot is not None and url not in self.snapshot.known_directory_indexes:
            self._mark_changed(f"new directory index {url}")
        return url

    def register_fallback(self, pattern: str, path: str | Path) -> str:
        """Register an offline fallback; the target file is precached.

        Args:
            pattern: JavaScript regular expression matched against request URLs
            path: Substitute file served when the pattern matches

        Returns:
            The substitute's url

        Raises:
            ValueError: If the pattern is empty
        """
        if not pattern:
            raise ValueError("Fallback pattern can't be empty")
        try:
            re.compile(pattern)
        except re.error as e:
            logger.warning(f"Fallback pattern {pattern!r} is not a valid Python regex ({e}); passing it through")

        url = self.register_file(path, Strategy.CACHE_FIRST)
        self._fallbacks[pattern] = url
        return url

    def set_cache_name(self, name: str) -> str:
        """Set the cache name the worker will use.

        Raises:
            InvalidNameError: If the name has disallowed characters
        """
        self.cache_name = sanitize_name(name, "cache name")
        return self.cache_name

    # --- Queries ---

    def resources(self) -> list[Resource]:
        """All registered resources in registration order."""
        return list(self._resources.values())

    def urls(self) -> set[str]:
        return set(self._resources)

    def fallback_rules(self) -> tuple[FallbackRule, ...]:
        """Fallback rules in registration order."""
        return tuple(FallbackRule(pattern=pattern, target_url=url) for pattern, url in self._fallbacks.items())

    def file_fingerprints(self) -> dict[str, str]:
        """Url -> fingerprint for every registered file."""
        return {r.url: r.fingerprint for r in self._resources.values() if r.fingerprint is not None}

    def directory_indexes(self) -> list[str]:
        return [r.url for r in self._resources.values() if r.is_directory_index]

    # --- Internals ---

    def _inspect_file(self, path: str | Path, strategy: Strategy) -> tuple[str, str]:
        if strategy is Strategy.DIRECTORY_INDEX:
            raise ValueError("Use register_directory_index() for directory indexes")

        resolved = resolve_in_root(path, self.root)
        if not resolved.is_file():
            raise FileNotFoundError(f"Not a regular file: {path}")
        return to_url(resolved, self.root), fingerprint_file(resolved)

    def _add_file(self, url: str, fingerprint: str, strategy: Strategy) -> None:
        existing = self._resources.get(url)
        if existing is None:
            self._resources[url] = Resource(url=url, strategy=strategy, fingerprint=fingerprint)
        else:
            existing.fingerprint = fingerprint
            if strategy is Strategy.CACHE_FIRST:
                existing.strategy = Strategy.CACHE_FIRST

        if self.snapshot is None:
            return
        previous = self.snapshot.known_resources.get(url)
        if previous is None:
            self._mark_changed(f"new resource {url}")
        elif previous != fingerprint:
            self._mark_changed(f"modified resource {url}")
