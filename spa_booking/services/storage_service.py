import json
import os
import tempfile
import time
from typing import Any, Dict, List

from spa_booking.core.errors import PersistenceError
from spa_booking.core.logger import logger


class JsonFileRepository:
    """
    Stores one collection as a JSON array snapshot.
    Every save rewrites the whole file; load reads it back in full.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Dict[str, Any]]:
        """
        Returns the stored records. A missing or unreadable file gives an empty list,
        logged as a warning, so the service can still start.
        """
        if not os.path.exists(self.path):
            logger.warning(f"⚠️ Storage file '{self.path}' not found, starting with an empty collection.")
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load '{self.path}': {e}. Starting with an empty collection.")
            return []

        if not isinstance(data, list):
            logger.warning(f"⚠️ '{self.path}' does not contain a JSON array. Starting with an empty collection.")
            return []

        logger.info(f"📂 Loaded {len(data)} records from {self.path}")
        return data

    def save(self, records: List[Dict[str, Any]]) -> None:
        """
        Writes the snapshot to a temp file next to the target and renames it into place.
        Raises PersistenceError if anything fails; the previous file is left untouched.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Failed to write {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceError("Failed to save changes. Please try again.") from e


class IdGenerator:
    """
    Hands out ids based on the current time in epoch milliseconds,
    always strictly greater than any id issued or seen before.
    """

    def __init__(self, last_id: int = 0):
        self._last_id = last_id

    def next_id(self) -> int:
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id
