"""
Record store backed by SQLAlchemy asyncio sessions.

Each write is committed on its own, mirroring the per-call semantics of
the managed backend the console was built against. A rejected write is
rolled back before the error propagates, so the session stays usable.
"""

from typing import Any, Dict, List, Optional, Sequence, Type
import asyncio
import logging

from sqlalchemy import select, func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import (
    NotFoundError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    StoreTimeoutError
)
from models import (
    Base,
    Checklist,
    ChecklistCategory,
    ChecklistItem,
    Company,
    Team,
    User,
    LLMPrompt,
    IntegrationSettings,
    ProcessingLog
)
from store.base import Record, RecordStore

logger = logging.getLogger(__name__)

# Collection name -> ORM model
COLLECTIONS: Dict[str, Type[Base]] = {
    "checklists": Checklist,
    "checklist_categories": ChecklistCategory,
    "checklist_items": ChecklistItem,
    "companies": Company,
    "teams": Team,
    "users": User,
    "llm_prompts": LLMPrompt,
    "integration_settings": IntegrationSettings,
    "processing_logs": ProcessingLog,
}


class SQLAlchemyRecordStore(RecordStore):
    """
    RecordStore over an AsyncSession.

    Every call is bounded by timeout_seconds (STORE_CALL_TIMEOUT_SECONDS by
    default); expiry raises StoreTimeoutError.
    """

    def __init__(self, db_session: AsyncSession, timeout_seconds: Optional[float] = None):
        self.db = db_session
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None
            else settings.STORE_CALL_TIMEOUT_SECONDS
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None
    ) -> List[Record]:
        model = self._model(collection)

        async def work():
            stmt = self._where(select(model), model, collection, filters)
            for field in order_by or []:
                descending = field.startswith("-")
                column = self._attribute(model, collection, field.lstrip("-"), StoreReadError)
                stmt = stmt.order_by(column.desc() if descending else column.asc())
            if limit is not None:
                stmt = stmt.limit(limit)

            result = await self.db.execute(stmt)
            return [self._to_record(obj) for obj in result.scalars().all()]

        return await self._call("find", collection, work, StoreReadError)

    async def get_one(self, collection: str, filters: Dict[str, Any]) -> Optional[Record]:
        rows = await self.find(collection, filters=filters, limit=1)
        return rows[0] if rows else None

    async def count(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        model = self._model(collection)

        async def work():
            stmt = self._where(select(func.count()).select_from(model), model, collection, filters)
            result = await self.db.execute(stmt)
            return result.scalar() or 0

        return await self._call("count", collection, work, StoreReadError)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, collection: str, record: Record) -> Record:
        created = await self.insert_many(collection, [record])
        return created[0]

    async def insert_many(self, collection: str, records: List[Record]) -> List[Record]:
        if not records:
            return []

        model = self._model(collection)
        for record in records:
            self._check_fields(model, collection, record.keys(), StoreWriteError)

        async def work():
            objects = [model(**record) for record in records]
            self.db.add_all(objects)
            await self.db.flush()
            for obj in objects:
                await self.db.refresh(obj)
            created = [self._to_record(obj) for obj in objects]
            await self.db.commit()
            return created

        created = await self._call("insert", collection, work, StoreWriteError)
        logger.debug(f"Inserted {len(created)} record(s) into {collection}")
        return created

    async def update(self, collection: str, record_id: str, patch: Dict[str, Any]) -> Record:
        model = self._model(collection)
        self._check_fields(model, collection, patch.keys(), StoreWriteError)

        async def work():
            obj = await self.db.get(model, record_id)
            if obj is None:
                raise NotFoundError(
                    f"No record {record_id} in {collection}",
                    context={"collection": collection, "record_id": record_id}
                )
            for field, value in patch.items():
                setattr(obj, field, value)
            await self.db.flush()
            await self.db.refresh(obj)
            updated = self._to_record(obj)
            await self.db.commit()
            return updated

        return await self._call("update", collection, work, StoreWriteError)

    async def delete(self, collection: str, record_id: str) -> None:
        model = self._model(collection)

        async def work():
            obj = await self.db.get(model, record_id)
            if obj is None:
                raise NotFoundError(
                    f"No record {record_id} in {collection}",
                    context={"collection": collection, "record_id": record_id}
                )
            await self.db.delete(obj)
            await self.db.commit()
            # Foreign-key cascades may have changed other rows held by the session
            self.db.expire_all()

        await self._call("delete", collection, work, StoreWriteError)
        logger.debug(f"Deleted {record_id} from {collection}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _call(self, operation: str, collection: str, work, error_cls: Type[StoreError]):
        """Run one store call under the timeout and translate backend errors"""
        context = {"operation": operation, "collection": collection}
        try:
            return await asyncio.wait_for(work(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"Store {operation} on {collection} timed out after {self.timeout_seconds}s")
            raise StoreTimeoutError(
                f"Store {operation} on {collection} timed out",
                context={**context, "timeout_seconds": self.timeout_seconds},
                original_exception=e
            )
        except SQLAlchemyError as e:
            logger.error(f"Store {operation} on {collection} failed: {str(e)}")
            if error_cls is StoreWriteError:
                await self._rollback()
            raise error_cls(
                f"Store {operation} on {collection} failed",
                context=context,
                original_exception=e
            )

    async def _rollback(self):
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback after failed write also failed: {str(e)}")

    def _model(self, collection: str) -> Type[Base]:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StoreError(
                f"Unknown collection '{collection}'",
                context={"collection": collection}
            )
        return model

    def _check_fields(self, model, collection: str, fields, error_cls: Type[StoreError]):
        known = {attr.key for attr in inspect(model).column_attrs}
        unknown = sorted(set(fields) - known)
        if unknown:
            raise error_cls(
                f"Unknown field(s) for {collection}: {', '.join(unknown)}",
                context={"collection": collection, "fields": unknown}
            )

    def _attribute(self, model, collection: str, field: str, error_cls: Type[StoreError]):
        self._check_fields(model, collection, [field], error_cls)
        return getattr(model, field)

    def _where(self, stmt, model, collection: str, filters: Optional[Dict[str, Any]]):
        for field, value in (filters or {}).items():
            column = self._attribute(model, collection, field, StoreReadError)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return stmt

    @staticmethod
    def _to_record(obj) -> Record:
        return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}
