"""Resource models accumulated by the registry during one build run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Strategy(str, Enum):
    """How the generated worker serves a resource.

    - CACHE_FIRST: precached at install, served from cache before network
    - ON_DEMAND: cached lazily on first successful request, cache-first after
    - DIRECTORY_INDEX: a directory url (ending in "/") precached like CACHE_FIRST
    """

    CACHE_FIRST = "cache_first"
    ON_DEMAND = "on_demand"
    DIRECTORY_INDEX = "directory_index"

    @property
    def precached(self) -> bool:
        """Whether the worker fetches this resource during install."""
        return self is not Strategy.ON_DEMAND


@dataclass
class Resource:
    """A file (or directory index) made available to the caching layer.

    The url is root-relative and unique within a registry. Directory
    indexes carry no fingerprint.
    """

    url: str
    strategy: Strategy
    fingerprint: str | None = None

    @property
    def is_directory_index(self) -> bool:
        return self.strategy is Strategy.DIRECTORY_INDEX


@dataclass(frozen=True)
class FallbackRule:
    """Offline substitute for failing requests whose URL matches pattern.

    The pattern is a JavaScript regular expression evaluated
    case-insensitively by the worker; target_url is always precached.
    """

    pattern: str
    target_url: str
