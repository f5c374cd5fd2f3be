from typing import List

from packages.aic_history.dto import InterviewRecord
from packages.aic_history.repository import DEFAULT_HISTORY_LIMIT, HistoryStore


class MemoryHistoryStore(HistoryStore):
    """
    In-Memory implementation of HistoryStore.
    Used for tests and for running without a writable disk.
    """
    def __init__(self, records: List[InterviewRecord] = None, limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(limit=limit)
        self._records: List[InterviewRecord] = list(records or [])[:limit]
        self.save_count = 0

    def load(self) -> List[InterviewRecord]:
        return list(self._records)

    def save(self, records: List[InterviewRecord]) -> None:
        self._records = list(records[:self.limit])
        self.save_count += 1
