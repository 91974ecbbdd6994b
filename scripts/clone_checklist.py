"""
Clone a checklist from the command line.

Usage:
    python scripts/clone_checklist.py <checklist_id>
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from core.config import settings
from core.exceptions import AdminConsoleException
from core.logging import setup_logging
from repositories.checklists import ChecklistRepository
from services.checklist_clone import ChecklistCloner
from store.sqlalchemy_store import SQLAlchemyRecordStore

setup_logging()
logger = logging.getLogger(__name__)


async def clone(checklist_id: str) -> int:
    """Clone one checklist; returns the process exit code"""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with session_maker() as session:
            cloner = ChecklistCloner(ChecklistRepository(SQLAlchemyRecordStore(session)))
            new_id = await cloner.clone(checklist_id)
            print(new_id)
            return 0
    except AdminConsoleException as e:
        logger.error(f"Clone failed: {e}")
        return 1
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Deep-copy a checklist with its categories and items")
    parser.add_argument("checklist_id", help="Id of the checklist to clone")
    args = parser.parse_args()

    sys.exit(asyncio.run(clone(args.checklist_id)))


if __name__ == "__main__":
    main()
