# ============================================================================
# File: services/checklist_clone.py
# Description: Deep copy of a checklist with its category/item tree
# ============================================================================
"""
Checklist cloning.

A clone is a value copy: one new checklist, one new category per source
category and one new item per source item, all with fresh ids. Names,
descriptions, positions and is_active flags are copied verbatim, so gaps
or ties in the source positions survive the copy.

Categories are copied one at a time because each category's items can only
be inserted once the store has assigned that category's id.

The copy is all-or-nothing: if any write fails after the new checklist has
been created, everything created so far is deleted again (items, then
categories, then the checklist) and a single CloneFailedError is raised.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from core.config import settings
from core.exceptions import (
    AdminConsoleException,
    CloneFailedError,
    NotFoundError,
    PartialTreeCopyError,
)
from repositories.checklists import ChecklistRepository
from schemas.checklists import ChecklistCreate, ItemCreate

logger = logging.getLogger(__name__)


@dataclass
class CloneLedger:
    """Ids created by one clone attempt, in creation order"""
    checklist_id: Optional[str] = None
    category_ids: List[str] = field(default_factory=list)
    item_ids: List[str] = field(default_factory=list)

    def as_context(self) -> dict:
        return {
            "new_checklist_id": self.checklist_id,
            "categories_created": len(self.category_ids),
            "items_created": len(self.item_ids),
        }


class ChecklistCloner:
    """
    Clone a checklist and its full category/item tree.

    Holds no state between calls; concurrent clones of the same source are
    safe and simply produce independent copies.
    """

    def __init__(self, repository: ChecklistRepository, name_suffix: Optional[str] = None):
        self.repository = repository
        self.name_suffix = name_suffix if name_suffix is not None else settings.CLONE_NAME_SUFFIX

    async def clone(self, checklist_id: str) -> str:
        """
        Clone a checklist.

        Args:
            checklist_id: Id of the source checklist

        Returns:
            Id of the new, fully populated checklist

        Raises:
            NotFoundError: If the source checklist does not exist (nothing is created)
            CloneFailedError: If any copy step fails; created records are removed first
        """
        # --------------------------------------------------
        # STEP 1: LOAD SOURCE
        # --------------------------------------------------
        source = await self.repository.get_checklist(checklist_id)
        if source is None:
            raise NotFoundError(
                f"Checklist {checklist_id} not found",
                context={"collection": "checklists", "record_id": checklist_id}
            )

        logger.info(f"Cloning checklist {checklist_id} ({source.name})")
        ledger = CloneLedger()

        try:
            # --------------------------------------------------
            # STEP 2: NEW CHECKLIST
            # --------------------------------------------------
            new_checklist = await self.repository.create_checklist(
                ChecklistCreate(
                    name=f"{source.name}{self.name_suffix}",
                    description=source.description
                )
            )
            ledger.checklist_id = new_checklist.id

            # --------------------------------------------------
            # STEP 3: SOURCE CATEGORIES
            # --------------------------------------------------
            categories = await self.repository.list_categories(checklist_id)

            # --------------------------------------------------
            # STEP 4: CATEGORY BY CATEGORY
            # --------------------------------------------------
            for category in categories:
                new_category = await self.repository.create_category(
                    new_checklist.id,
                    name=category.name,
                    position=category.position
                )
                ledger.category_ids.append(new_category.id)

                source_items = await self.repository.list_items(category.id)
                if not source_items:
                    continue

                new_items = await self.repository.create_items(
                    new_category.id,
                    [
                        ItemCreate(
                            name=item.name,
                            description=item.description,
                            position=item.position,
                            is_active=item.is_active
                        )
                        for item in source_items
                    ]
                )
                ledger.item_ids.extend(item.id for item in new_items)

                if len(new_items) != len(source_items):
                    raise PartialTreeCopyError(
                        "Item copy created fewer rows than requested",
                        context={
                            "category_id": new_category.id,
                            "expected": len(source_items),
                            "created": len(new_items),
                        }
                    )

        except Exception as e:
            cleanup_errors = await self._rollback(ledger)
            context = {
                "source_checklist_id": checklist_id,
                **ledger.as_context(),
                "rolled_back": not cleanup_errors,
            }
            if cleanup_errors:
                context["cleanup_errors"] = cleanup_errors

            logger.error(
                f"Clone of checklist {checklist_id} failed: {str(e)}",
                extra={"error_context": context}
            )
            raise CloneFailedError(
                f"Could not clone checklist {checklist_id}",
                context=context,
                original_exception=e
            )

        logger.info(
            f"Cloned checklist {checklist_id} -> {ledger.checklist_id}: "
            f"{len(ledger.category_ids)} categories, {len(ledger.item_ids)} items"
        )
        return ledger.checklist_id

    async def _rollback(self, ledger: CloneLedger) -> List[str]:
        """
        Delete everything the failed attempt created, children first.

        Returns a description of every delete that failed; an empty list
        means the store is back to its pre-clone state.
        """
        errors: List[str] = []

        targets = (
            [(self.repository.delete_item, item_id) for item_id in reversed(ledger.item_ids)]
            + [(self.repository.delete_category, cat_id) for cat_id in reversed(ledger.category_ids)]
        )
        if ledger.checklist_id:
            targets.append((self.repository.delete_checklist, ledger.checklist_id))

        for delete, record_id in targets:
            try:
                await delete(record_id)
            except NotFoundError:
                # Already gone, e.g. removed by a store-side cascade
                continue
            except AdminConsoleException as e:
                logger.error(f"Cleanup of {record_id} failed: {e.message}")
                errors.append(f"{record_id}: {e.message}")

        if not errors and ledger.checklist_id:
            logger.info(f"Removed partial clone {ledger.checklist_id}")
        return errors
