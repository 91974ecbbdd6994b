import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from core.config import settings
from core.logging import setup_logging
from models import Base
from repositories.pipeline import PipelineRepository
from schemas.pipeline import IntegrationSettingsUpdate
from store.sqlalchemy_store import SQLAlchemyRecordStore

setup_logging()
logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    engine = create_async_engine(settings.DATABASE_URL, echo=True)

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")

        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_maker() as session:
            pipeline = PipelineRepository(SQLAlchemyRecordStore(session))
            if await pipeline.get_integration_settings() is None:
                # The console edits a single settings row; make sure it exists
                await pipeline.save_integration_settings(IntegrationSettingsUpdate())
                logger.info("Seeded integration settings.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_database())
