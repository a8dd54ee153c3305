"""Executable model of the runtime caching protocol.

ProtocolModel mirrors, step by step, what the rendered worker does in the
browser: install, the skip-waiting handshake, activation cleanup and the
ordered fetch chain. It runs against an in-memory CacheStorage and a
caller-supplied network function, so protocol behaviour can be exercised
without a browser.

Fallback patterns are evaluated with Python's re module. For the patterns
people actually write (suffixes, alternations, character classes) this
matches JavaScript's RegExp with the "i" flag.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from swgen.models.manifest import Manifest

from .messages import SKIP_WAITING
from .messages import WAIT_FINISHED
from .messages import LifecycleState
from .messages import MessageType
from .messages import envelope

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Raised by a network function when a request cannot complete."""


@dataclass(frozen=True)
class Response:
    """Minimal HTTP response."""

    status: int
    body: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def ok_or_redirect(self) -> bool:
        return 200 <= self.status < 400


Network = Callable[[str], Response]


class CacheStorage:
    """Named caches of url -> Response, shared across worker versions."""

    def __init__(self) -> None:
        self._caches: dict[str, dict[str, Response]] = {}

    def open(self, name: str) -> dict[str, Response]:
        return self._caches.setdefault(name, {})

    def delete(self, name: str) -> bool:
        return self._caches.pop(name, None) is not None

    def has(self, name: str) -> bool:
        return name in self._caches

    def names(self) -> list[str]:
        return sorted(self._caches)


def _ends_with_any(url: str, paths: tuple[str, ...] | list[str] | frozenset[str]) -> bool:
    return any(url.endswith(path) for path in paths)


class ProtocolModel:
    """One worker version, driven event by event.

    Example:
        >>> model = ProtocolModel(manifest, "v1", network=fetch_from_dict)
        >>> model.connect("tab-1")
        >>> model.install()
        True
        >>> model.receive_message("tab-1", "skip_waiting")
        >>> model.state
        <LifecycleState.ACTIVATED: 'activated'>
    """

    def __init__(
        self,
        manifest: Manifest,
        cache_name: str,
        network: Network,
        *,
        origin: str = "https://localhost",
        caches: CacheStorage | None = None,
    ) -> None:
        """Initialize model.

        Args:
            manifest: Manifest the worker was rendered from
            cache_name: Cache the worker stores its files in
            network: Returns a Response for an absolute url or raises NetworkError
            origin: Origin the worker is served from
            caches: Cache storage to share with other versions (default: fresh)
        """
        self.manifest = manifest
        self.cache_name = cache_name
        self.network = network
        self.origin = origin.rstrip("/")
        self.caches = caches if caches is not None else CacheStorage()
        self.state = LifecycleState.IDLE
        self.outbox: dict[str, list[str]] = {}

    # --- Clients ---

    def connect(self, client_id: str) -> None:
        """Make a page known to the worker."""
        self.outbox.setdefault(client_id, [])

    def disconnect(self, client_id: str) -> None:
        """Close a page; later broadcasts no longer reach it."""
        self.outbox.pop(client_id, None)

    def _broadcast(self, message_type: MessageType, *data: str) -> None:
        message = envelope(message_type, *data)
        for messages in self.outbox.values():
            messages.append(message)

    def messages_of_type(self, client_id: str, message_type: MessageType) -> list[str]:
        """Envelopes of one type delivered to a client."""
        wanted = f'"type":"{message_type.value}"'
        return [m for m in self.outbox.get(client_id, []) if wanted in m]

    # --- Lifecycle ---

    def install(self) -> bool:
        """Precache every cache-first url as one batch.

        Returns:
            True if installed; False if any fetch failed (nothing is cached)
        """
        if self.state is not LifecycleState.IDLE:
            raise ValueError(f"Cannot install worker in state {self.state}")
        self.state = LifecycleState.INSTALLING

        batch: dict[str, Response] = {}
        for path in self.manifest.cache_first:
            url = self._absolute(path)
            try:
                response = self.network(url)
            except NetworkError as e:
                logger.debug(f"Install failed fetching {url}: {e}")
                self.state = LifecycleState.REDUNDANT
                return False
            if not response.ok:
                logger.debug(f"Install failed fetching {url}: HTTP {response.status}")
                self.state = LifecycleState.REDUNDANT
                return False
            batch[url] = response

        self.caches.open(self.cache_name).update(batch)
        self.state = LifecycleState.INSTALLED
        self._broadcast(MessageType.INSTALL_DONE)
        return True

    def receive_message(self, client_id: str, data: str) -> None:
        """Handle a page -> worker message.

        The sender is remembered for broadcasts. "skip_waiting" activates an
        installed worker immediately; anything else is ignored.
        """
        self.connect(client_id)
        if data != SKIP_WAITING:
            return
        if self.state is LifecycleState.INSTALLED:
            self._broadcast(MessageType.MSG, WAIT_FINISHED)
            self.activate()

    def activate(self) -> None:
        """Delete stale caches, purge stale entries, announce activation."""
        if self.state is not LifecycleState.INSTALLED:
            raise ValueError(f"Cannot activate worker in state {self.state}")
        self.state = LifecycleState.ACTIVATING

        for name in sorted(self.manifest.cleanup_caches):
            self.caches.delete(name)

        if self.manifest.persist_on_demand:
            purge = self.manifest.cleanup_files | self.manifest.refresh_files
        else:
            purge = self.manifest.cleanup_files | frozenset(self.manifest.on_demand)

        if purge:
            cache = self.caches.open(self.cache_name)
            for url in list(cache):
                if _ends_with_any(url, purge):
                    del cache[url]

        self.state = LifecycleState.ACTIVATED
        self._broadcast(MessageType.ACTIVATION_DONE)

    # --- Fetch ---

    def fetch(self, url: str, method: str = "GET") -> Response | None:
        """Resolve a request the way the worker's fetch handler does.

        Args:
            url: Absolute request url
            method: HTTP method; only GET is intercepted

        Returns:
            The response served, or None for an explicit network failure
        """
        if method != "GET":
            return self._try_network(url)

        if _ends_with_any(url, self.manifest.cache_first) or _ends_with_any(url, self.manifest.on_demand):
            return self._cache_or_fetch(url)

        return self._pattern_fallback(url, self._try_network(url))

    def _cache_or_fetch(self, url: str) -> Response | None:
        cache = self.caches.open(self.cache_name)
        cached = cache.get(url)
        if cached is not None:
            return cached

        self._broadcast(MessageType.MSG, f"'{url}' is not cached yet, fetching ...")
        response = self._try_network(url)
        if response is not None and response.status == 200:
            cache[url] = response
            return response
        return self._pattern_fallback(url, response)

    def _pattern_fallback(self, url: str, response: Response | None) -> Response | None:
        if response is not None and response.ok_or_redirect:
            return response

        for rule in self.manifest.fallback_patterns:
            if re.search(rule.pattern, url, flags=re.IGNORECASE):
                substitute = self.caches.open(self.cache_name).get(self._absolute(rule.target_url))
                if substitute is not None:
                    return substitute
                break

        return response

    def _try_network(self, url: str) -> Response | None:
        try:
            return self.network(url)
        except NetworkError as e:
            logger.debug(f"Network failure for {url}: {e}")
            return None

    def _absolute(self, path: str) -> str:
        return self.origin + path
