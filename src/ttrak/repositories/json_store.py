"""JSON file repository for the task collection."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..models import DataStore
from ..utils import now_utc

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    Repository for the task collection stored in a single JSON file.

    Writes go to a temporary file in the same directory which then replaces
    the real file, so a failed save leaves the previous collection intact.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize repository.

        Args:
            path: Path to data.json
        """
        self.path = path

    def ensure_directory(self) -> None:
        """Create the parent directory if it doesn't exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> DataStore:
        """Load the collection, falling back to an empty one.

        A document that exists but cannot be parsed is moved aside to a
        timestamped backup before the empty collection is returned, so the
        next save cannot overwrite it.
        """
        if not self.path.exists():
            logger.debug("No %s found, starting with empty collection", self.path.name)
            return DataStore()

        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
            store = DataStore.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            backup = self._backup_invalid_file()
            logger.error("Invalid data store %s (moved to %s): %s", self.path, backup, e)
            return DataStore()

        logger.info("Loaded %d tasks from %s", len(store.tasks), self.path)
        return store

    def save(self, store: DataStore) -> None:
        """Write the full collection atomically."""
        self.ensure_directory()
        payload = json.dumps(store.to_document(), indent=2, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            logger.error("Failed to save %d tasks to %s", len(store.tasks), self.path)
            raise

        logger.debug("Saved %d tasks to %s", len(store.tasks), self.path)

    def _backup_invalid_file(self) -> Path:
        """Move an unreadable data file out of the way."""
        stamp = now_utc().strftime("%Y%m%d%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.invalid-{stamp}")
        self.path.replace(backup)
        return backup
