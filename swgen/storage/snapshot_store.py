"""Snapshot store: JSON persistence of build-to-build state.

The snapshot is read once when a generator is constructed and written once
when it is finalized. Concurrent builds writing the same file are not
coordinated; the last writer wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from swgen.models.snapshot import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """JSON-file store for a single Snapshot."""

    def __init__(self, path: Path) -> None:
        """Initialize snapshot store.

        Args:
            path: Location of the state file
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Snapshot | None:
        """Load the persisted snapshot.

        Missing, unreadable or schema-violating files all mean "no prior
        snapshot".

        Returns:
            Snapshot if a valid one is stored, None otherwise
        """
        if not self.path.exists():
            logger.debug(f"No snapshot at {self.path}")
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read snapshot from {self.path}: {e}")
            return None

        try:
            snapshot = Snapshot.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed snapshot {self.path}: {e.error_count()} invalid field(s)")
            return None

        logger.info(
            f"Loaded snapshot from {self.path}: cache={snapshot.cache_name}, "
            f"{len(snapshot.known_resources)} resource(s), ts={snapshot.timestamp}"
        )
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Save snapshot atomically.

        Args:
            snapshot: Snapshot to persist

        Raises:
            RuntimeError: If the file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temporary file first
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            temp_path.write_text(snapshot.to_json(), encoding="utf-8")
            temp_path.replace(self.path)
            logger.info(f"Saved snapshot to {self.path}")
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise RuntimeError(f"Failed to save snapshot to {self.path}: {e}") from e
