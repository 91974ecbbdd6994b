"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from models import Base
from repositories.checklists import ChecklistRepository
from repositories.organization import OrganizationRepository
from repositories.pipeline import PipelineRepository
from schemas.checklists import ChecklistCreate, ItemCreate
from services.checklist_clone import ChecklistCloner
from store.sqlalchemy_store import SQLAlchemyRecordStore
from typing import AsyncGenerator


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'admin_test.db'}",
        echo=False,
        poolclass=NullPool,
    )

    # SQLite leaves foreign keys off per connection; cascades and SET NULL need them
    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(db_session):
    return SQLAlchemyRecordStore(db_session)


@pytest.fixture
def checklist_repo(store):
    return ChecklistRepository(store)


@pytest.fixture
def organization_repo(store):
    return OrganizationRepository(store)


@pytest.fixture
def pipeline_repo(store):
    return PipelineRepository(store)


@pytest.fixture
def cloner(checklist_repo):
    return ChecklistCloner(checklist_repo)


@pytest_asyncio.fixture
async def qa_template(checklist_repo):
    """
    Checklist "QA Template" (v1) with one category "Intro" holding
    "Greeting" (active) and "Hold time" (inactive).
    """
    checklist = await checklist_repo.create_checklist(
        ChecklistCreate(name="QA Template", description="v1")
    )
    intro = await checklist_repo.create_category(checklist.id, name="Intro", position=0)
    await checklist_repo.create_items(intro.id, [
        ItemCreate(name="Greeting", position=0, is_active=True),
        ItemCreate(name="Hold time", position=1, is_active=False),
    ])
    return checklist


@pytest_asyncio.fixture
async def large_template(checklist_repo):
    """
    Three categories with gapped and tied positions, 2 + 0 + 3 items.
    """
    checklist = await checklist_repo.create_checklist(
        ChecklistCreate(name="Sales Call", description=None)
    )
    opening = await checklist_repo.create_category(checklist.id, name="Opening", position=0)
    await checklist_repo.create_category(checklist.id, name="Empty", position=5)
    closing = await checklist_repo.create_category(checklist.id, name="Closing", position=5)

    await checklist_repo.create_items(opening.id, [
        ItemCreate(name="Introduces self", description="Name and company", position=0),
        ItemCreate(name="States purpose", position=3, is_active=False),
    ])
    await checklist_repo.create_items(closing.id, [
        ItemCreate(name="Summarizes", position=1),
        ItemCreate(name="Next steps", position=1),
        ItemCreate(name="Thanks customer", position=7, description="Politely"),
    ])
    return checklist
