"""
Typed access to companies, teams and users.
"""

from typing import Dict, List, Optional
from datetime import datetime
import logging

from core.exceptions import NotFoundError, ValidationError
from models.base import CompanyStatus, UserStatus
from schemas.organization import (
    CompanyCreate,
    CompanyUpdate,
    CompanyRead,
    TeamCreate,
    TeamUpdate,
    TeamRead,
    UserCreate,
    UserUpdate,
    UserRead,
)
from store.base import RecordStore

logger = logging.getLogger(__name__)

COMPANIES = "companies"
TEAMS = "teams"
USERS = "users"
CHECKLISTS = "checklists"


class OrganizationRepository:
    """Companies, their teams and their users"""

    def __init__(self, store: RecordStore):
        self.store = store

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    async def list_companies(self, order_by: str = "-created_at") -> List[CompanyRead]:
        rows = await self.store.find(COMPANIES, order_by=[order_by])
        return [CompanyRead(**row) for row in rows]

    async def get_company(self, company_id: str) -> CompanyRead:
        row = await self.store.get_one(COMPANIES, {"id": company_id})
        if row is None:
            raise NotFoundError(
                f"Company {company_id} not found",
                context={"collection": COMPANIES, "record_id": company_id}
            )
        return CompanyRead(**row)

    async def create_company(self, data: CompanyCreate) -> CompanyRead:
        await self._check_checklist(data.active_checklist_id)
        row = await self.store.insert(COMPANIES, data.model_dump())
        logger.info(f"Created company {row['id']} ({row['name']})")
        return CompanyRead(**row)

    async def update_company(self, company_id: str, data: CompanyUpdate) -> CompanyRead:
        patch = data.model_dump(exclude_unset=True)
        await self._check_checklist(patch.get("active_checklist_id"))
        patch["updated_at"] = datetime.utcnow()
        row = await self.store.update(COMPANIES, company_id, patch)
        return CompanyRead(**row)

    async def toggle_company_status(self, company_id: str) -> CompanyRead:
        company = await self.get_company(company_id)
        new_status = (
            CompanyStatus.INACTIVE if company.status == CompanyStatus.ACTIVE
            else CompanyStatus.ACTIVE
        )
        row = await self.store.update(COMPANIES, company_id, {
            "status": new_status,
            "updated_at": datetime.utcnow(),
        })
        logger.info(f"Company {company_id} is now {new_status.value}")
        return CompanyRead(**row)

    async def count_users_per_company(self, company_ids: List[str]) -> Dict[str, int]:
        counts = {}
        for company_id in company_ids:
            counts[company_id] = await self.store.count(USERS, {"company_id": company_id})
        return counts

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    async def list_teams(
        self,
        company_id: Optional[str] = None,
        order_by: str = "-created_at"
    ) -> List[TeamRead]:
        filters = {"company_id": company_id} if company_id else None
        rows = await self.store.find(TEAMS, filters=filters, order_by=[order_by])
        return [TeamRead(**row) for row in rows]

    async def get_team(self, team_id: str) -> TeamRead:
        row = await self.store.get_one(TEAMS, {"id": team_id})
        if row is None:
            raise NotFoundError(
                f"Team {team_id} not found",
                context={"collection": TEAMS, "record_id": team_id}
            )
        return TeamRead(**row)

    async def create_team(self, data: TeamCreate) -> TeamRead:
        await self.get_company(data.company_id)
        row = await self.store.insert(TEAMS, data.model_dump())
        return TeamRead(**row)

    async def update_team(self, team_id: str, data: TeamUpdate) -> TeamRead:
        patch = data.model_dump(exclude_unset=True)
        if patch.get("company_id"):
            await self.get_company(patch["company_id"])
        patch["updated_at"] = datetime.utcnow()
        row = await self.store.update(TEAMS, team_id, patch)
        return TeamRead(**row)

    async def delete_team(self, team_id: str) -> None:
        await self.store.delete(TEAMS, team_id)
        logger.info(f"Deleted team {team_id}")

    async def count_users_per_team(self, team_ids: List[str]) -> Dict[str, int]:
        counts = {}
        for team_id in team_ids:
            counts[team_id] = await self.store.count(USERS, {"team_id": team_id})
        return counts

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(self) -> List[UserRead]:
        rows = await self.store.find(USERS, order_by=["-created_at"])
        return [UserRead(**row) for row in rows]

    async def get_user(self, user_id: str) -> UserRead:
        row = await self.store.get_one(USERS, {"id": user_id})
        if row is None:
            raise NotFoundError(
                f"User {user_id} not found",
                context={"collection": USERS, "record_id": user_id}
            )
        return UserRead(**row)

    async def create_user(self, data: UserCreate) -> UserRead:
        await self._check_membership(data.company_id, data.team_id)
        # Credentials live with the external auth provider
        row = await self.store.insert(USERS, {**data.model_dump(), "password_hash": ""})
        logger.info(f"Created user {row['id']} ({row['email']})")
        return UserRead(**row)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserRead:
        patch = data.model_dump(exclude_unset=True)
        current = await self.get_user(user_id)

        company_id = patch.get("company_id") or current.company_id
        team_id = patch["team_id"] if "team_id" in patch else current.team_id
        await self._check_membership(company_id, team_id)

        patch["updated_at"] = datetime.utcnow()
        row = await self.store.update(USERS, user_id, patch)
        return UserRead(**row)

    async def toggle_user_status(self, user_id: str) -> UserRead:
        user = await self.get_user(user_id)
        new_status = (
            UserStatus.BLOCKED if user.status == UserStatus.ACTIVE
            else UserStatus.ACTIVE
        )
        row = await self.store.update(USERS, user_id, {
            "status": new_status,
            "updated_at": datetime.utcnow(),
        })
        logger.info(f"User {user_id} is now {new_status.value}")
        return UserRead(**row)

    async def _check_checklist(self, checklist_id: Optional[str]) -> None:
        """A company can only select a checklist that exists"""
        if checklist_id is None:
            return
        if await self.store.get_one(CHECKLISTS, {"id": checklist_id}) is None:
            raise ValidationError(
                f"Checklist {checklist_id} does not exist",
                context={"active_checklist_id": checklist_id}
            )

    async def _check_membership(self, company_id: str, team_id: Optional[str]) -> None:
        """A user's team must belong to the user's company"""
        await self.get_company(company_id)
        if team_id is None:
            return
        team = await self.get_team(team_id)
        if team.company_id != company_id:
            raise ValidationError(
                f"Team {team_id} does not belong to company {company_id}",
                context={"team_id": team_id, "company_id": company_id}
            )
