"""
Typed access to checklists, their categories and their items.
"""

from typing import List, Optional
from datetime import datetime
import logging

from core.exceptions import NotFoundError
from schemas.checklists import (
    ChecklistCreate,
    ChecklistUpdate,
    ChecklistRead,
    CategoryRead,
    CategoryWithItems,
    ChecklistDetail,
    ItemCreate,
    ItemRead,
)
from services.views import group_items_by_category
from store.base import RecordStore

logger = logging.getLogger(__name__)

CHECKLISTS = "checklists"
CATEGORIES = "checklist_categories"
ITEMS = "checklist_items"


class ChecklistRepository:
    """
    Checklist tree accessor built on a RecordStore.

    Ordering contract:
    - checklists newest first
    - categories by position ascending within a checklist
    - items by position ascending; grouped by category_id client side
    """

    def __init__(self, store: RecordStore):
        self.store = store

    # ------------------------------------------------------------------
    # Checklists
    # ------------------------------------------------------------------

    async def list_checklists(self) -> List[ChecklistRead]:
        rows = await self.store.find(CHECKLISTS, order_by=["-created_at"])
        return [ChecklistRead(**row) for row in rows]

    async def get_checklist(self, checklist_id: str) -> Optional[ChecklistRead]:
        row = await self.store.get_one(CHECKLISTS, {"id": checklist_id})
        return ChecklistRead(**row) if row else None

    async def require_checklist(self, checklist_id: str) -> ChecklistRead:
        checklist = await self.get_checklist(checklist_id)
        if checklist is None:
            raise NotFoundError(
                f"Checklist {checklist_id} not found",
                context={"collection": CHECKLISTS, "record_id": checklist_id}
            )
        return checklist

    async def create_checklist(self, data: ChecklistCreate) -> ChecklistRead:
        row = await self.store.insert(CHECKLISTS, data.model_dump())
        logger.info(f"Created checklist {row['id']} ({row['name']})")
        return ChecklistRead(**row)

    async def update_checklist(self, checklist_id: str, data: ChecklistUpdate) -> ChecklistRead:
        patch = data.model_dump(exclude_unset=True)
        patch["updated_at"] = datetime.utcnow()
        row = await self.store.update(CHECKLISTS, checklist_id, patch)
        return ChecklistRead(**row)

    async def delete_checklist(self, checklist_id: str) -> None:
        await self.store.delete(CHECKLISTS, checklist_id)
        logger.info(f"Deleted checklist {checklist_id}")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self, checklist_id: str) -> List[CategoryRead]:
        rows = await self.store.find(
            CATEGORIES,
            filters={"checklist_id": checklist_id},
            order_by=["position"]
        )
        return [CategoryRead(**row) for row in rows]

    async def get_category(self, category_id: str) -> Optional[CategoryRead]:
        row = await self.store.get_one(CATEGORIES, {"id": category_id})
        return CategoryRead(**row) if row else None

    async def create_category(self, checklist_id: str, name: str, position: int) -> CategoryRead:
        row = await self.store.insert(CATEGORIES, {
            "checklist_id": checklist_id,
            "name": name,
            "position": position,
        })
        return CategoryRead(**row)

    async def add_category(self, checklist_id: str, name: str) -> CategoryRead:
        """Append a category after the existing ones"""
        await self.require_checklist(checklist_id)
        position = await self.store.count(CATEGORIES, {"checklist_id": checklist_id})
        return await self.create_category(checklist_id, name, position)

    async def delete_category(self, category_id: str) -> None:
        await self.store.delete(CATEGORIES, category_id)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def list_items(self, category_id: Optional[str] = None) -> List[ItemRead]:
        filters = {"category_id": category_id} if category_id is not None else None
        rows = await self.store.find(ITEMS, filters=filters, order_by=["position"])
        return [ItemRead(**row) for row in rows]

    async def create_items(self, category_id: str, items: List[ItemCreate]) -> List[ItemRead]:
        """Bulk insert items under one category in a single store call"""
        if not items:
            return []
        rows = await self.store.insert_many(
            ITEMS,
            [{"category_id": category_id, **item.model_dump()} for item in items]
        )
        return [ItemRead(**row) for row in rows]

    async def add_item(
        self,
        category_id: str,
        name: str,
        description: Optional[str] = None
    ) -> ItemRead:
        """Append an active criterion after the existing ones in its category"""
        if await self.get_category(category_id) is None:
            raise NotFoundError(
                f"Category {category_id} not found",
                context={"collection": CATEGORIES, "record_id": category_id}
            )
        position = await self.store.count(ITEMS, {"category_id": category_id})
        created = await self.create_items(
            category_id,
            [ItemCreate(name=name, description=description, position=position, is_active=True)]
        )
        return created[0]

    async def delete_item(self, item_id: str) -> None:
        await self.store.delete(ITEMS, item_id)

    async def toggle_item_active(self, item_id: str) -> ItemRead:
        row = await self.store.get_one(ITEMS, {"id": item_id})
        if row is None:
            raise NotFoundError(
                f"Item {item_id} not found",
                context={"collection": ITEMS, "record_id": item_id}
            )
        updated = await self.store.update(ITEMS, item_id, {"is_active": not row["is_active"]})
        return ItemRead(**updated)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    async def get_checklist_tree(self, checklist_id: str) -> ChecklistDetail:
        checklist = await self.require_checklist(checklist_id)
        categories = await self.list_categories(checklist_id)

        # Items are read unfiltered and grouped locally
        grouped = group_items_by_category(await self.list_items())

        return ChecklistDetail(
            **checklist.model_dump(),
            categories=[
                CategoryWithItems(**category.model_dump(), items=grouped.get(category.id, []))
                for category in categories
            ]
        )
