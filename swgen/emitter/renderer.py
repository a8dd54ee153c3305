"""Service worker program rendering.

render() is pure: the same manifest, cache name and timestamp always give
byte-identical text. The host only reinstalls a worker whose bytes differ,
so sets are emitted sorted and sequences in manifest order.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from swgen.models.manifest import Manifest
from swgen.protocol.messages import SKIP_WAITING
from swgen.protocol.messages import WAIT_FINISHED
from swgen.protocol.messages import MessageType

from . import templates

logger = logging.getLogger(__name__)


def _js(value: object) -> str:
    return json.dumps(value, ensure_ascii=True)


def _js_array(literals: Iterable[str]) -> str:
    """One element per line; literals must already be JavaScript source."""
    items = list(literals)
    if not items:
        return "[]"
    return "[\n" + "".join(f"    {item},\n" for item in items) + "]"


def _js_strings(values: Iterable[str]) -> str:
    return _js_array(_js(value) for value in values)


def render_constants(manifest: Manifest, cache_name: str) -> str:
    """Render the constants block the templates read from."""
    return templates.fill(
        templates.CONSTANTS,
        CACHE_NAME=_js(cache_name),
        CACHE_FIRST=_js_strings(manifest.cache_first),
        ON_DEMAND=_js_strings(manifest.on_demand),
        PERSIST_ON_DEMAND=_js(manifest.persist_on_demand),
        REFRESH_FILES=_js_strings(sorted(manifest.refresh_files)),
        FALLBACK_PATTERNS=_js_array(_js([rule.pattern, rule.target_url]) for rule in manifest.fallback_patterns),
        CLEANUP_CACHES=_js_strings(sorted(manifest.cleanup_caches)),
        CLEANUP_FILES=_js_strings(sorted(manifest.cleanup_files)),
    )


def render(manifest: Manifest, cache_name: str, timestamp: int) -> str:
    """Render the complete service worker program.

    Args:
        manifest: Finalized manifest
        cache_name: Cache the worker stores its files in
        timestamp: Build timestamp written into the header

    Returns:
        JavaScript program text
    """
    protocol_tokens = {
        "SKIP_WAITING": SKIP_WAITING,
        "WAIT_FINISHED": WAIT_FINISHED,
        "INSTALL_DONE": MessageType.INSTALL_DONE.value,
        "ACTIVATION_DONE": MessageType.ACTIVATION_DONE.value,
    }
    fallback = templates.PATTERN_FALLBACK if manifest.fallback_patterns else templates.NO_PATTERN_FALLBACK

    sections = [
        templates.fill(templates.HEADER, TIMESTAMP=str(int(timestamp))),
        render_constants(manifest, cache_name),
        templates.fill(templates.COMMUNICATIONS, **protocol_tokens),
        templates.fill(templates.INSTALL, **protocol_tokens),
        templates.fill(templates.ACTIVATE, **protocol_tokens),
        templates.FETCH,
        fallback,
    ]
    return "\n".join(sections)


class ProtocolEmitter:
    """Renders manifests into worker programs.

    Thin object wrapper around render() for callers that want to inject
    the emitter.
    """

    def render(self, manifest: Manifest, cache_name: str, timestamp: int) -> str:
        text = render(manifest, cache_name, timestamp)
        logger.debug(f"Rendered worker program: {len(text)} bytes, ts={timestamp}")
        return text
