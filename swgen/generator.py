"""Service worker generator: the builder API.

One generator owns one registry for one build run:

    generator = ServiceWorkerGenerator("/srv/www")
    generator.set_cache_name("site-v2")
    generator.register_file("index.html")
    generator.register_directory("vendor")
    generator.register_directory_index("/")
    generator.register_fallback(r"\\.svg$", "img/offline.svg")
    program_text, snapshot = generator.finalize_and_emit()

The snapshot is loaded once, in the constructor, and written once, by
finalize_and_emit(). finalize() is the only way to get a manifest, and
the generator refuses further registrations afterwards.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from swgen.emitter.renderer import ProtocolEmitter
from swgen.errors import GeneratorFinalizedError
from swgen.models.manifest import BuildResult
from swgen.models.resources import Strategy
from swgen.models.snapshot import Snapshot
from swgen.reconcile.names import STATE_FILE_CHARS
from swgen.reconcile.names import sanitize_name
from swgen.reconcile.reconciler import Reconciler
from swgen.reconcile.registry import Registry
from swgen.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ServiceWorkerGenerator:
    """Builds a service worker program incrementally from build to build."""

    def __init__(
        self,
        document_root: str | Path,
        state_file: str = "sw.lock.json",
        *,
        clock: Callable[[], float] = time.time,
        emitter: ProtocolEmitter | None = None,
    ) -> None:
        """Initialize generator and load the previous snapshot.

        Args:
            document_root: Trusted root every resource must live under
            state_file: Snapshot file, relative to document_root unless absolute
            clock: Returns the current epoch time in seconds
            emitter: Program emitter (default: ProtocolEmitter())

        Raises:
            InvalidNameError: If state_file has disallowed characters
        """
        self.document_root = Path(document_root).expanduser().resolve()

        state_path = Path(sanitize_name(state_file, "state file name", STATE_FILE_CHARS))
        if not state_path.is_absolute():
            state_path = self.document_root / state_path

        self.store = SnapshotStore(state_path)
        self.snapshot = self.store.load()
        self.registry = Registry(self.document_root, self.snapshot, exclude={state_path})
        self.reconciler = Reconciler(clock)
        self.emitter = emitter or ProtocolEmitter()
        self._result: BuildResult | None = None

        logger.info(
            f"Generator initialized: root={self.document_root}, "
            f"snapshot={'loaded' if self.snapshot else 'none'}"
        )

    @property
    def finalized(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> BuildResult | None:
        """The build result, once finalized."""
        return self._result

    @property
    def cache_name(self) -> str:
        return self.registry.cache_name

    def _ensure_open(self) -> None:
        if self._result is not None:
            raise GeneratorFinalizedError("Generator already finalized; create a new one for the next build")

    # --- Builder API ---

    def register_file(self, path: str | Path, strategy: Strategy = Strategy.CACHE_FIRST) -> ServiceWorkerGenerator:
        """Register one file to be served cache-first or on demand."""
        self._ensure_open()
        self.registry.register_file(path, strategy)
        return self

    def register_directory(
        self, path: str | Path, strategy: Strategy = Strategy.CACHE_FIRST
    ) -> ServiceWorkerGenerator:
        """Register every regular file under a directory."""
        self._ensure_open()
        self.registry.register_directory(path, strategy)
        return self

    def register_directory_index(self, path: str) -> ServiceWorkerGenerator:
        """Register a directory url (ending in "/") to be precached."""
        self._ensure_open()
        self.registry.register_directory_index(path)
        return self

    def register_fallback(self, pattern: str, path: str | Path) -> ServiceWorkerGenerator:
        """Serve path for failing requests whose url matches pattern."""
        self._ensure_open()
        self.registry.register_fallback(pattern, path)
        return self

    def set_cache_name(self, name: str) -> ServiceWorkerGenerator:
        """Change the cache name; the previous one is cleaned up by the worker."""
        self._ensure_open()
        self.registry.set_cache_name(name)
        return self

    def exclude_path(self, path: str | Path) -> ServiceWorkerGenerator:
        """Never pick up path when registering directories (e.g. generated output)."""
        self._ensure_open()
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.document_root / candidate
        self.registry.exclude.add(candidate.resolve())
        return self

    def set_on_demand_persistence(self, persist: bool) -> ServiceWorkerGenerator:
        """Keep on-demand cache entries across worker updates."""
        self._ensure_open()
        self.registry.persist_on_demand = bool(persist)
        return self

    # --- Finalization ---

    def finalize(self) -> BuildResult:
        """Reconcile against the snapshot and render the program.

        Returns:
            Build result with program text, next snapshot and manifest

        Raises:
            GeneratorFinalizedError: If called twice
        """
        self._ensure_open()

        reconciled = self.reconciler.reconcile(self.registry, self.snapshot)
        program_text = self.emitter.render(reconciled.manifest, self.registry.cache_name, reconciled.next_timestamp)

        self._result = BuildResult(
            program_text=program_text,
            snapshot=reconciled.next_snapshot,
            manifest=reconciled.manifest,
            cache_name=self.registry.cache_name,
            changed=reconciled.changed,
            timestamp=reconciled.next_timestamp,
        )
        logger.info(f"Finalized: {reconciled.manifest.summary()}")
        return self._result

    def finalize_and_emit(self, persist: bool = True) -> tuple[str, Snapshot]:
        """Finalize, persist the next snapshot and return the program.

        Args:
            persist: Write the next snapshot to the state file

        Returns:
            Tuple of (program text, next snapshot)
        """
        result = self.finalize()
        if persist:
            self.store.save(result.snapshot)
        return result.program_text, result.snapshot
