"""
SQLAlchemy ORM models for the record store tables.

Models:
    base: Declarative base, id factory and shared enums
    checklist: Checklist, ChecklistCategory, ChecklistItem (evaluation templates)
    organization: Company, Team, User
    pipeline: LLMPrompt, IntegrationSettings, ProcessingLog

Relationships (foreign keys only; the console never navigates them):
    - Checklist → ChecklistCategory → ChecklistItem (cascade on delete)
    - Company → Team → User (deleting a team clears User.team_id)
    - Company.active_checklist_id → Checklist (cleared on delete)

Importing this package registers every table on Base.metadata.
"""

from models.base import Base
from models.checklist import Checklist, ChecklistCategory, ChecklistItem
from models.organization import Company, Team, User
from models.pipeline import LLMPrompt, IntegrationSettings, ProcessingLog

__all__ = [
    "Base",
    "Checklist",
    "ChecklistCategory",
    "ChecklistItem",
    "Company",
    "Team",
    "User",
    "LLMPrompt",
    "IntegrationSettings",
    "ProcessingLog",
]
