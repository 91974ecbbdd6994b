"""
Abstract record store contract.

The console never talks to the database directly: every page and the clone
operation go through this small CRUD surface over named collections, with
records exchanged as plain dictionaries.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

Record = Dict[str, Any]


class RecordStore(ABC):
    """
    Generic CRUD capability over named collections.

    Filters are equality matches (a None value matches NULL). order_by is a
    sequence of field names; a leading "-" sorts that field descending.

    Failures are raised, never returned:
        - StoreReadError / StoreWriteError when the backend rejects a call
        - StoreTimeoutError when a call exceeds its time budget
        - NotFoundError when update/delete target a missing id
    """

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None
    ) -> List[Record]:
        """Return matching records"""
        pass

    @abstractmethod
    async def get_one(self, collection: str, filters: Dict[str, Any]) -> Optional[Record]:
        """Return the first matching record, or None when nothing matches"""
        pass

    @abstractmethod
    async def insert(self, collection: str, record: Record) -> Record:
        """Insert one record and return it with its generated id"""
        pass

    @abstractmethod
    async def insert_many(self, collection: str, records: List[Record]) -> List[Record]:
        """Insert a batch of records in one call; the batch succeeds or fails as a whole"""
        pass

    @abstractmethod
    async def update(self, collection: str, record_id: str, patch: Dict[str, Any]) -> Record:
        """Apply patch to one record and return the updated record"""
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """Delete one record"""
        pass

    @abstractmethod
    async def count(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count matching records"""
        pass
