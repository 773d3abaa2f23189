from abc import ABC, abstractmethod
from typing import List, Sequence

from .schemas import FileRecord


class FileStore(ABC):
    """Base class for stores holding FileRecord documents in one collection"""

    @abstractmethod
    def find_by_task(self, task_id: str) -> List[FileRecord]:
        """Return every record stored for a task, in the store's natural order

        Args:
            task_id: The task identifier to match

        Returns:
            All matching records, payloads included
        """
        pass

    @abstractmethod
    def insert_all(self, records: Sequence[FileRecord]) -> int:
        """Insert records as a single batch

        Args:
            records: Records to insert

        Returns:
            Number of records actually inserted
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Check that the store is reachable"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection"""
        pass
