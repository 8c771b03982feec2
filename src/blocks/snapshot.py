"""On-disk snapshots of raw block listings.

A snapshot is the raw child listing of one container saved as
``<directory>/<container_id>.json``. When the resolver is given a snapshot
store it reads children from there instead of calling the API, which lets a
build run against content captured earlier.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from ..notion_api.errors import SyncError

logger = logging.getLogger(__name__)


class SnapshotError(SyncError):
    """Raised when a snapshot file exists but cannot be read or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Snapshot {path} unusable: {reason}")
        self.path = path
        self.reason = reason


class SnapshotStore:
    """Reads and writes raw child listings keyed by container id.

    Example:
        >>> store = SnapshotStore("tmp")
        >>> store.save("0f1d...", raw_children)
        >>> store.load("0f1d...")
    """

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, container_id: str) -> str:
        return os.path.join(self.directory, f"{container_id}.json")

    def exists(self, container_id: str) -> bool:
        return os.path.isfile(self.path_for(container_id))

    def load(self, container_id: str) -> Optional[List[Dict[str, Any]]]:
        """Load the raw children of a container.

        Accepts either a bare list or a listing envelope with ``results``.

        Returns:
            The raw child records, or None if no snapshot exists

        Raises:
            SnapshotError: If the file is not valid JSON or has the wrong shape
        """
        path = self.path_for(container_id)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(path, str(e))

        if isinstance(data, dict):
            data = data.get('results')
        if not isinstance(data, list):
            raise SnapshotError(path, "expected a list of blocks")

        logger.debug(f"Loaded {len(data)} blocks for {container_id} from snapshot")
        return data

    def save(self, container_id: str, results: List[Dict[str, Any]]) -> None:
        path = self.path_for(container_id)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(results, f, ensure_ascii=False)
        except OSError as e:
            raise SnapshotError(path, str(e))
