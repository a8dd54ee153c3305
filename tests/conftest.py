"""
Shared pytest fixtures for the swgen test suite.

Provides fixtures for:
- A temporary document root with sample files
- An environment without SWGEN_* variables
- A controllable clock
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

SAMPLE_FILES = {
    "index.html": "<!doctype html><title>home</title>",
    "css/site.css": "body { margin: 0; }",
    "js/app.js": "console.log('app');",
    "img/logo.svg": "<svg id='logo'/>",
    "img/fallback.svg": "<svg id='offline'/>",
    "vendor/lib.js": "export const lib = 1;",
    "vendor/nested/extra.js": "export const extra = 2;",
    "docs/index.html": "<h1>docs</h1>",
}


class FakeClock:
    """Callable clock whose time the test controls."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 60.0) -> None:
        self.now += seconds


@pytest.fixture
def temp_root_dir() -> Generator[Path, None, None]:
    """Create an empty, fully resolved temporary directory.

    Example:
        >>> def test_root(temp_root_dir):
        ...     assert temp_root_dir.is_absolute()
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def doc_root(temp_root_dir: Path) -> Path:
    """Document root populated with SAMPLE_FILES.

    Returns:
        Path to the document root
    """
    root = temp_root_dir / "www"
    for name, content in SAMPLE_FILES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def isolated_env(temp_root_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Drop SWGEN_* variables and run from a temporary working directory.

    This ensures config lookups and .env files on the developer machine
    don't leak into tests.

    Returns:
        The working directory
    """
    for key in list(os.environ):
        if key.upper().startswith("SWGEN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(temp_root_dir)
    return temp_root_dir


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at a fixed epoch time."""
    return FakeClock()
