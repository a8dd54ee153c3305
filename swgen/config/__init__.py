"""Configuration module for swgen.

Provides generator settings and the declarative resource definition,
loaded from YAML and environment variables.

Public Interface:
    - GeneratorSettings: Settings model
    - BuildDefinition: Declarative resource list
    - load_config: Load settings
    - load_definition: Load the resource definition
    - create_default_config: Create default config file
    - get_config_path: Get config file path
"""

from .loader import create_default_config
from .loader import get_config_path
from .loader import load_config
from .loader import load_definition
from .settings import BuildDefinition
from .settings import FallbackEntry
from .settings import GeneratorSettings
from .settings import StrategyPaths

__all__ = [
    "GeneratorSettings",
    "BuildDefinition",
    "StrategyPaths",
    "FallbackEntry",
    "load_config",
    "load_definition",
    "create_default_config",
    "get_config_path",
]
