"""Configuration loading for swgen.

This module loads generator settings and the resource definition from one
YAML file, with environment variables overriding YAML settings.

Contract:
- Inputs: Config file path, environment variables
- Outputs: GeneratorSettings and BuildDefinition objects
- Side Effects: Creates default config file if missing
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .settings import BuildDefinition
from .settings import GeneratorSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = """# swgen configuration
# Settings can be overridden with SWGEN_* environment variables
# (e.g. SWGEN_CACHE_NAME=v2).

# Trusted root; every resource must live under it.
# Relative paths are resolved against this file's directory.
document_root: "."

# Snapshot of the previous build, relative to document_root
state_file: "sw.lock.json"

# Generated files, relative to document_root
output: "sw.js"
# client_output: "sw-register.js"
worker_url: "./sw.js"
scope: "./"

cache_name: "__swgen__"
on_demand_persistence: false
log_level: "info"

# Resources
files:
  cache_first:
    - "index.html"
  on_demand: []

directories:
  cache_first: []
  on_demand: []

directory_indexes:
  - "/"

fallbacks: []
#  - pattern: "\\\\.svg$"
#    path: "img/offline.svg"
"""

_DEFINITION_KEYS = set(BuildDefinition.model_fields)


def get_config_path() -> Path:
    """Get path to config file.

    Returns:
        $SWGEN_CONFIG if set, otherwise swgen.yaml in the working directory
    """
    env_override = os.environ.get("SWGEN_CONFIG")
    if env_override:
        return Path(env_override).resolve()
    return Path("swgen.yaml").resolve()


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file if it doesn't exist.

    Args:
        config_path: Optional config file path (default: get_config_path())
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        logger.debug(f"Config file already exists: {config_path}")
        return

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    logger.info(f"Created default config: {config_path}")


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.info("Using default settings and environment variables")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {config_path}: top level is not a mapping")
        return {}
    logger.debug(f"Loaded config from {config_path}")
    return data


def load_config(config_path: Path | None = None) -> GeneratorSettings:
    """Load generator settings from YAML and environment.

    Precedence: defaults < YAML < SWGEN_* environment variables.

    Args:
        config_path: Optional config file path (default: get_config_path())

    Returns:
        Validated generator settings
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        create_default_config(config_path)

    yaml_settings = _read_yaml(config_path)

    # Only pass YAML values that don't have corresponding env vars
    filtered_yaml = {}
    for key, value in yaml_settings.items():
        if key in _DEFINITION_KEYS:
            continue
        if f"SWGEN_{key.upper()}" in os.environ:
            continue
        filtered_yaml[key] = value

    # Relative (or missing) document_root is anchored at the config file
    if "SWGEN_DOCUMENT_ROOT" not in os.environ:
        root = Path(str(filtered_yaml.get("document_root", "."))).expanduser()
        if not root.is_absolute():
            filtered_yaml["document_root"] = str(config_path.parent / root)

    settings = GeneratorSettings(**filtered_yaml)

    logger.info(f"Configuration loaded: document_root={settings.document_root}, cache_name={settings.cache_name}")
    return settings


def load_definition(config_path: Path | None = None) -> BuildDefinition:
    """Load the declarative resource definition from the config file.

    Args:
        config_path: Optional config file path (default: get_config_path())

    Returns:
        Validated build definition (empty if the file has none)
    """
    if config_path is None:
        config_path = get_config_path()

    data = _read_yaml(config_path)
    definition = BuildDefinition.model_validate({k: v for k, v in data.items() if k in _DEFINITION_KEYS})
    logger.debug(
        f"Build definition: {len(definition.files.cache_first)} cache-first file(s), "
        f"{len(definition.files.on_demand)} on-demand file(s), {len(definition.fallbacks)} fallback(s)"
    )
    return definition
