import abc
import json
import os
import threading
from typing import List, Optional

from pydantic import ValidationError

from packages.aic_core.logging import get_logger
from packages.aic_history.dto import InterviewRecord

logger = get_logger("aic.history")

DEFAULT_HISTORY_LIMIT = 5


class HistoryStore(abc.ABC):
    """
    Bounded, most-recent-first list of completed interview records.
    Implementations only provide load/save; insertion and retention live here.
    """
    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        self.limit = limit
        self._lock = threading.RLock()

    @abc.abstractmethod
    def load(self) -> List[InterviewRecord]:
        """
        Return stored records, newest first. Never more than `limit`.
        """
        pass

    @abc.abstractmethod
    def save(self, records: List[InterviewRecord]) -> None:
        """
        Persist the given newest-first list, replacing what was stored.
        """
        pass

    def latest(self) -> Optional[InterviewRecord]:
        with self._lock:
            records = self.load()
        return records[0] if records else None

    def add(self, record: InterviewRecord) -> List[InterviewRecord]:
        """
        Prepend a record and evict the oldest beyond the limit.
        Returns the stored list.
        """
        with self._lock:
            records = [record] + self.load()
            evicted = max(0, len(records) - self.limit)
            records = records[:self.limit]
            self.save(records)
        logger.info(f"History record added. stored={len(records)} evicted={evicted}")
        return records


class FileHistoryStore(HistoryStore):
    """
    Local key-value storage in a single JSON file.
    History is kept as a serialized list under one well-known key, other keys are preserved.
    """
    def __init__(self, file_path: str, key: str = "interviewHistory", limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(limit=limit)
        self.file_path = file_path
        self.key = key

    def _read_storage(self) -> dict:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Local storage at {self.file_path} is unreadable, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Local storage at {self.file_path} is not a key-value object, treating as empty")
            return {}
        return data

    def load(self) -> List[InterviewRecord]:
        with self._lock:
            raw = self._read_storage().get(self.key) or []

        if not isinstance(raw, list):
            logger.warning(f"History key '{self.key}' does not hold a list, ignoring it")
            return []

        records = []
        for item in raw:
            try:
                records.append(InterviewRecord.model_validate(item))
            except ValidationError as e:
                # Skip malformed entries in list
                logger.warning(f"Skipping malformed history entry: {e.error_count()} error(s)")
        return records[:self.limit]

    def save(self, records: List[InterviewRecord]) -> None:
        with self._lock:
            storage = self._read_storage()
            storage[self.key] = [
                r.model_dump(mode="json", by_alias=True) for r in records[:self.limit]
            ]

            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            tmp_path = f"{self.file_path}.tmp"
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(storage, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.file_path)
            except OSError:
                logger.exception(f"Failed to save history to {self.file_path}")
                raise
