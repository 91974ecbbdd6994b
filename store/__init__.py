"""
Record store: the console's only path to persistence.

Usage:
    from store import RecordStore, SQLAlchemyRecordStore

    store = SQLAlchemyRecordStore(session)
    rows = await store.find("checklist_categories", {"checklist_id": cid}, order_by=["position"])
"""

from store.base import Record, RecordStore
from store.sqlalchemy_store import COLLECTIONS, SQLAlchemyRecordStore

__all__ = [
    "Record",
    "RecordStore",
    "COLLECTIONS",
    "SQLAlchemyRecordStore",
]
