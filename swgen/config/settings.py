"""Settings models for swgen.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings and build definitions
- Side Effects: None (read-only)
"""

from pathlib import Path

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from swgen.reconcile.names import CACHE_NAME_CHARS
from swgen.reconcile.names import DEFAULT_CACHE_NAME
from swgen.reconcile.names import STATE_FILE_CHARS
from swgen.reconcile.names import sanitize_name


class GeneratorSettings(BaseSettings):
    """Configuration for a generator run.

    Attributes:
        document_root: Trusted root every resource must live under (default: cwd)
        state_file: Snapshot file, relative to the document root unless absolute
        output: Where the worker program is written
        client_output: Where the page registration script is written (optional)
        worker_url: Url the page registers the worker from
        scope: Worker registration scope
        cache_name: Cache the worker stores its files in
        on_demand_persistence: Keep on-demand entries across worker updates
        log_level: Logging level (default: info)

    Example:
        >>> settings = GeneratorSettings()
        >>> assert settings.state_file == "sw.lock.json"
    """

    model_config = SettingsConfigDict(
        env_prefix="SWGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    document_root: str = "."
    state_file: str = "sw.lock.json"
    output: str = "sw.js"
    client_output: str | None = None
    worker_url: str = "./sw.js"
    scope: str = "./"
    cache_name: str = DEFAULT_CACHE_NAME
    on_demand_persistence: bool = False
    log_level: str = "info"

    @field_validator("document_root")
    @classmethod
    def expand_and_resolve_path(cls, v: str) -> str:
        """Expand ~ and resolve to an absolute path."""
        return str(Path(v).expanduser().resolve())

    @field_validator("cache_name")
    @classmethod
    def check_cache_name(cls, v: str) -> str:
        return sanitize_name(v, "cache name", CACHE_NAME_CHARS)

    @field_validator("state_file")
    @classmethod
    def check_state_file(cls, v: str) -> str:
        return sanitize_name(v, "state file name", STATE_FILE_CHARS)

    @property
    def root_path(self) -> Path:
        return Path(self.document_root)

    def resolve_output(self, value: str) -> Path:
        """Resolve an output path relative to the document root."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.root_path / path


class StrategyPaths(BaseModel):
    """Paths grouped by serving strategy."""

    cache_first: list[str] = Field(default_factory=list)
    on_demand: list[str] = Field(default_factory=list)


class FallbackEntry(BaseModel):
    """One offline fallback rule."""

    pattern: str = Field(min_length=1, description="JavaScript regular expression")
    path: str = Field(description="Substitute file, precached")


class BuildDefinition(BaseModel):
    """Declarative list of resources for one worker.

    Example:
        >>> BuildDefinition.model_validate({"files": {"cache_first": ["index.html"]}})
    """

    files: StrategyPaths = Field(default_factory=StrategyPaths)
    directories: StrategyPaths = Field(default_factory=StrategyPaths)
    directory_indexes: list[str] = Field(default_factory=list)
    fallbacks: list[FallbackEntry] = Field(default_factory=list)
