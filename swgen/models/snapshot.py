"""Snapshot model: the previous build run's persisted state.

The on-disk field names are camelCase:

    {
      "timestamp": 1700000000,
      "cacheName": "v1",
      "staleCacheNames": ["v0"],
      "resourceFingerprints": {"/index.html": "<sha256>"},
      "directoryIndexes": ["/"]
    }

Every field is required. A record missing any of them is rejected as a whole
so a half-initialized snapshot can never leak into reconciliation.
"""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic.alias_generators import to_camel


class CamelCaseModel(BaseModel):
    """Base model using camelCase JSON serialization."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Snapshot(CamelCaseModel):
    """Persisted record of the previous run's fingerprints and cache metadata."""

    timestamp: int = Field(ge=0, description="Epoch seconds of the last content change")
    cache_name: str = Field(min_length=1, description="Cache name the last worker used")
    stale_cache_names: list[str] = Field(description="Superseded cache names still to be deleted")
    known_resources: dict[str, str] = Field(
        alias="resourceFingerprints",
        description="Root-relative url -> content fingerprint",
    )
    known_directory_indexes: list[str] = Field(
        alias="directoryIndexes",
        description="Directory index urls active in the last run",
    )

    @field_validator("stale_cache_names", "known_directory_indexes")
    @classmethod
    def dedupe_and_sort(cls, v: list[str]) -> list[str]:
        """Store set-valued fields sorted so the file content is stable."""
        return sorted(set(v))

    def to_json(self) -> str:
        """Serialize with the camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=2) + "\n"
