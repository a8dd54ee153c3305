"""Declarative build runs.

Turns a GeneratorSettings + BuildDefinition pair into a generator run and
writes the generated files.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from swgen.config.settings import BuildDefinition
from swgen.config.settings import GeneratorSettings
from swgen.emitter.client import render_client_script
from swgen.generator import ServiceWorkerGenerator
from swgen.models.manifest import BuildResult
from swgen.models.resources import Strategy

logger = logging.getLogger(__name__)


def apply_definition(generator: ServiceWorkerGenerator, definition: BuildDefinition) -> ServiceWorkerGenerator:
    """Register everything a build definition lists.

    Cache-first entries are registered before on-demand ones, then
    directory indexes, then fallbacks.
    """
    for path in definition.files.cache_first:
        generator.register_file(path, Strategy.CACHE_FIRST)
    for path in definition.directories.cache_first:
        generator.register_directory(path, Strategy.CACHE_FIRST)
    for path in definition.files.on_demand:
        generator.register_file(path, Strategy.ON_DEMAND)
    for path in definition.directories.on_demand:
        generator.register_directory(path, Strategy.ON_DEMAND)
    for path in definition.directory_indexes:
        generator.register_directory_index(path)
    for entry in definition.fallbacks:
        generator.register_fallback(entry.pattern, entry.path)
    return generator


def _write_if_changed(path: Path, text: str) -> bool:
    if path.exists() and path.read_text(encoding="utf-8") == text:
        logger.debug(f"Unchanged: {path}")
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {path}")
    return True


def run_build(
    settings: GeneratorSettings,
    definition: BuildDefinition,
    *,
    dry_run: bool = False,
    clock: Callable[[], float] = time.time,
) -> BuildResult:
    """Run one build from configuration.

    Args:
        settings: Generator settings
        definition: Resources to register
        dry_run: Compute everything but write nothing
        clock: Returns the current epoch time in seconds

    Returns:
        Build result
    """
    generator = ServiceWorkerGenerator(settings.document_root, settings.state_file, clock=clock)
    generator.set_cache_name(settings.cache_name)
    generator.set_on_demand_persistence(settings.on_demand_persistence)
    generator.exclude_path(settings.resolve_output(settings.output))
    if settings.client_output:
        generator.exclude_path(settings.resolve_output(settings.client_output))
    apply_definition(generator, definition)

    result = generator.finalize()
    if dry_run:
        logger.info("Dry run: nothing written")
        return result

    generator.store.save(result.snapshot)

    _write_if_changed(settings.resolve_output(settings.output), result.program_text)
    if settings.client_output:
        client_text = render_client_script(settings.worker_url, settings.scope)
        _write_if_changed(settings.resolve_output(settings.client_output), client_text)
    return result
