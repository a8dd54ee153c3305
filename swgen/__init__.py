"""swgen - service worker generator.

Generates a service worker program that precaches registered files, serves
others on demand, falls back to substitutes offline and cleans up after
itself from one build to the next.

Public Interface:
    - ServiceWorkerGenerator: Builder API for one build run
    - Strategy: Serving strategy of a registered resource
    - Snapshot: Persisted state of the previous run
    - Manifest: Resource lists and cleanup sets for one run
    - BuildResult: Everything a finalized run produces
    - run_build: Run a build from configuration
"""

from .build import run_build
from .generator import ServiceWorkerGenerator
from .models import BuildResult
from .models import Manifest
from .models import Snapshot
from .models import Strategy

__all__ = [
    "ServiceWorkerGenerator",
    "Strategy",
    "Snapshot",
    "Manifest",
    "BuildResult",
    "run_build",
]
