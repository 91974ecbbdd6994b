"""
Checklist endpoints: checklist CRUD, category and item editing, cloning
"""

from fastapi import APIRouter, Depends, Request, status
from typing import List
import uuid
import logging

from api.dependencies import get_checklist_repository, get_checklist_cloner
from repositories.checklists import ChecklistRepository
from schemas.checklists import (
    ChecklistCreate,
    ChecklistUpdate,
    ChecklistRead,
    ChecklistDetail,
    CategoryCreate,
    CategoryRead,
    ItemAddRequest,
    ItemRead,
)
from services.checklist_clone import ChecklistCloner

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Checklists"])


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")


# ============================================================================
# Checklists
# ============================================================================

@router.get("/checklists", response_model=List[ChecklistRead])
async def list_checklists(repository: ChecklistRepository = Depends(get_checklist_repository)):
    """All checklists, newest first"""
    return await repository.list_checklists()


@router.post("/checklists", response_model=ChecklistRead, status_code=status.HTTP_201_CREATED)
async def create_checklist(
    data: ChecklistCreate,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    return await repository.create_checklist(data)


@router.get("/checklists/{checklist_id}", response_model=ChecklistDetail)
async def get_checklist(
    checklist_id: str,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    """A checklist with its categories and items in position order"""
    return await repository.get_checklist_tree(checklist_id)


@router.patch("/checklists/{checklist_id}", response_model=ChecklistRead)
async def update_checklist(
    checklist_id: str,
    data: ChecklistUpdate,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    return await repository.update_checklist(checklist_id, data)


@router.delete("/checklists/{checklist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_checklist(
    checklist_id: str,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    await repository.delete_checklist(checklist_id)


@router.post(
    "/checklists/{checklist_id}/clone",
    response_model=ChecklistRead,
    status_code=status.HTTP_201_CREATED
)
async def clone_checklist(
    checklist_id: str,
    request: Request,
    repository: ChecklistRepository = Depends(get_checklist_repository),
    cloner: ChecklistCloner = Depends(get_checklist_cloner)
):
    """
    Deep-copy a checklist with all of its categories and items.

    Either the complete copy exists afterwards or nothing does; retrying a
    failed clone is always safe.
    """
    request_id = _request_id(request)
    logger.info(f"[{request_id}] POST /checklists/{checklist_id}/clone")

    new_id = await cloner.clone(checklist_id)
    return await repository.require_checklist(new_id)


# ============================================================================
# Categories
# ============================================================================

@router.post(
    "/checklists/{checklist_id}/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED
)
async def add_category(
    checklist_id: str,
    data: CategoryCreate,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    """Append a category after the checklist's existing categories"""
    return await repository.add_category(checklist_id, data.name)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    await repository.delete_category(category_id)


# ============================================================================
# Items
# ============================================================================

@router.post(
    "/categories/{category_id}/items",
    response_model=ItemRead,
    status_code=status.HTTP_201_CREATED
)
async def add_item(
    category_id: str,
    data: ItemAddRequest,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    """Append an active criterion after the category's existing items"""
    return await repository.add_item(category_id, data.name, data.description)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    await repository.delete_item(item_id)


@router.post("/items/{item_id}/toggle", response_model=ItemRead)
async def toggle_item(
    item_id: str,
    repository: ChecklistRepository = Depends(get_checklist_repository)
):
    """Flip whether the criterion is evaluated"""
    return await repository.toggle_item_active(item_id)
