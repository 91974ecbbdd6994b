"""
FastAPI dependencies: database session, record store, repositories and the
API-key gate.
"""

from typing import AsyncGenerator, Optional
import secrets

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_session
from repositories.checklists import ChecklistRepository
from repositories.organization import OrganizationRepository
from repositories.pipeline import PipelineRepository
from services.checklist_clone import ChecklistCloner
from store.base import RecordStore
from store.sqlalchemy_store import SQLAlchemyRecordStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped database session"""
    async for session in get_session():
        yield session


def get_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    return SQLAlchemyRecordStore(db)


def get_checklist_repository(store: RecordStore = Depends(get_store)) -> ChecklistRepository:
    return ChecklistRepository(store)


def get_organization_repository(store: RecordStore = Depends(get_store)) -> OrganizationRepository:
    return OrganizationRepository(store)


def get_pipeline_repository(store: RecordStore = Depends(get_store)) -> PipelineRepository:
    return PipelineRepository(store)


def get_checklist_cloner(
    repository: ChecklistRepository = Depends(get_checklist_repository)
) -> ChecklistCloner:
    return ChecklistCloner(repository)


async def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """
    Reject requests without the configured X-API-Key.

    The gate is open when API_KEY is not set (local development).
    """
    if not settings.API_KEY:
        return
    if not x_api_key or not secrets.compare_digest(x_api_key, settings.API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key"
        )
