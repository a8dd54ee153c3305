"""
Unit tests for worker program and page script rendering.
"""

import json
import re

import pytest

from swgen.emitter import templates
from swgen.emitter.client import render_client_script
from swgen.emitter.renderer import ProtocolEmitter
from swgen.emitter.renderer import render
from swgen.emitter.renderer import render_constants
from swgen.models.manifest import Manifest
from swgen.models.resources import FallbackRule


def constant(program: str, name: str):
    """Parse the JSON literal assigned to a top-level const."""
    match = re.search(rf"^const {name} = (.*?);$", program, flags=re.MULTILINE | re.DOTALL)
    assert match, f"{name} not found"
    return json.loads(match.group(1).replace(",\n]", "\n]"))


@pytest.fixture
def manifest() -> Manifest:
    return Manifest(
        cache_first=("/index.html", "/", "/img/fallback.svg"),
        on_demand=("/vendor/lib.js",),
        fallback_patterns=(FallbackRule(pattern=r"\.svg$", target_url="/img/fallback.svg"),),
        cleanup_caches=frozenset({"v1", "v0"}),
        cleanup_files=frozenset({"/old.js", "/docs/"}),
        refresh_files=frozenset({"/vendor/lib.js"}),
        persist_on_demand=True,
    )


@pytest.mark.unit
class TestFill:
    """Test placeholder substitution."""

    def test_tokens_replaced(self) -> None:
        assert templates.fill("a __X__ b __Y_Z__", X="1", Y_Z="2") == "a 1 b 2"

    def test_unknown_tokens_kept(self) -> None:
        assert templates.fill("__MISSING__", X="1") == "__MISSING__"

    def test_values_are_not_rescanned(self) -> None:
        """Test a value that looks like a token is inserted literally."""
        assert templates.fill("__A__ __B__", A="__B__", B="x") == "__B__ x"


@pytest.mark.unit
class TestRender:
    """Test the worker program."""

    def test_header_carries_timestamp(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1_700_000_000)

        assert program.startswith("/* ts:1700000000 */\n\"use strict\";\n")

    def test_constants_match_manifest(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert constant(program, "CACHE_NAME") == "v2"
        assert constant(program, "CACHE_FIRST") == ["/index.html", "/", "/img/fallback.svg"]
        assert constant(program, "ON_DEMAND") == ["/vendor/lib.js"]
        assert constant(program, "PERSIST_ON_DEMAND") is True
        assert constant(program, "REFRESH_FILES") == ["/vendor/lib.js"]
        assert constant(program, "FALLBACK_PATTERNS") == [[r"\.svg$", "/img/fallback.svg"]]

    def test_sets_are_sorted(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert constant(program, "CLEANUP_CACHES") == ["v0", "v1"]
        assert constant(program, "CLEANUP_FILES") == ["/docs/", "/old.js"]

    def test_rendering_is_deterministic(self, manifest: Manifest) -> None:
        """Test equal inputs give byte-identical programs."""
        rebuilt = Manifest(
            cache_first=manifest.cache_first,
            on_demand=manifest.on_demand,
            fallback_patterns=manifest.fallback_patterns,
            cleanup_caches=frozenset(reversed(sorted(manifest.cleanup_caches))),
            cleanup_files=frozenset(reversed(sorted(manifest.cleanup_files))),
            refresh_files=manifest.refresh_files,
            persist_on_demand=True,
        )

        assert render(manifest, "v2", 5) == render(rebuilt, "v2", 5)

    def test_empty_manifest_renders_empty_arrays(self) -> None:
        block = render_constants(Manifest(), "__swgen__")

        assert "const CACHE_FIRST = [];" in block
        assert "const CLEANUP_FILES = [];" in block
        assert 'const CACHE_NAME = "__swgen__";' in block

    def test_no_placeholders_left(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert re.search(r"__[A-Z][A-Z_]*__", program) is None

    def test_pattern_fallback_variant(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert 'new RegExp(pattern, "i")' in program
        assert program.count("async function patternFallback") == 1

    def test_no_pattern_fallback_variant(self) -> None:
        program = render(Manifest(cache_first=("/index.html",)), "v2", 1)

        assert "new RegExp" not in program
        assert program.count("async function patternFallback") == 1

    def test_protocol_messages_present(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert '"skip_waiting"' in program
        assert 'broadcast("install_done")' in program
        assert 'broadcast("activation_done")' in program
        assert 'log("wait_finished")' in program

    def test_closed_clients_pruned_before_broadcast(self, manifest: Manifest) -> None:
        program = render(manifest, "v2", 1)

        assert "const live = new Set(clients.map((client) => client.id));" in program
        assert "if (!live.has(id)) {" in program

    def test_non_get_requests_not_intercepted(self, manifest: Manifest) -> None:
        assert 'event.request.method !== "GET"' in render(manifest, "v2", 1)

    def test_special_characters_escaped(self) -> None:
        """Test urls are emitted as JSON string literals."""
        manifest = Manifest(cache_first=('/a "quoted" ü.html',))

        program = render(manifest, "v2", 1)

        assert constant(program, "CACHE_FIRST") == ['/a "quoted" ü.html']
        assert "\\u00fc" in program

    def test_emitter_wraps_render(self, manifest: Manifest) -> None:
        assert ProtocolEmitter().render(manifest, "v2", 7) == render(manifest, "v2", 7)


@pytest.mark.unit
class TestClientScript:
    """Test the page registration script."""

    def test_defaults(self) -> None:
        script = render_client_script()

        assert '.register("./sw.js", { scope: "./" })' in script

    def test_custom_worker_url_and_scope(self) -> None:
        script = render_client_script("/static/sw.js", "/app/")

        assert '.register("/static/sw.js", { scope: "/app/" })' in script

    def test_handshake_messages(self) -> None:
        script = render_client_script()

        assert 'case "install_done":' in script
        assert 'case "activation_done":' in script
        assert 'case "msg":' in script
        assert script.count('postMessage("skip_waiting")') == 2
        assert "window.location.reload()" in script
