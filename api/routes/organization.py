"""
Company, team and user endpoints.

List endpoints fetch each collection independently and join display
columns (names, user counts) locally before responding.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional
import uuid
import logging

from api.dependencies import get_checklist_repository, get_organization_repository
from repositories.checklists import ChecklistRepository
from repositories.organization import OrganizationRepository
from schemas.organization import (
    CompanyCreate,
    CompanyUpdate,
    CompanyRead,
    CompanyRow,
    TeamCreate,
    TeamUpdate,
    TeamRead,
    TeamRow,
    UserCreate,
    UserUpdate,
    UserRead,
    UserRow,
)
from services.views import build_company_rows, build_team_rows, build_user_rows, index_names

logger = logging.getLogger(__name__)
router = APIRouter()


# ============================================================================
# Companies
# ============================================================================

@router.get("/companies", response_model=List[CompanyRow], tags=["Companies"])
async def list_companies(
    request: Request,
    organization: OrganizationRepository = Depends(get_organization_repository),
    checklists: ChecklistRepository = Depends(get_checklist_repository)
):
    """Companies, newest first, with user counts and active checklist names"""
    request_id = getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")

    companies = await organization.list_companies()
    checklist_names = index_names(await checklists.list_checklists())
    users_per_company = await organization.count_users_per_company([c.id for c in companies])

    logger.info(f"[{request_id}] Returned {len(companies)} companies")
    return build_company_rows(companies, checklist_names, users_per_company)


@router.post(
    "/companies",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    tags=["Companies"]
)
async def create_company(
    data: CompanyCreate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.create_company(data)


@router.patch("/companies/{company_id}", response_model=CompanyRead, tags=["Companies"])
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.update_company(company_id, data)


@router.post("/companies/{company_id}/toggle-status", response_model=CompanyRead, tags=["Companies"])
async def toggle_company_status(
    company_id: str,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    """Switch a company between active and inactive"""
    return await organization.toggle_company_status(company_id)


# ============================================================================
# Teams
# ============================================================================

@router.get("/teams", response_model=List[TeamRow], tags=["Teams"])
async def list_teams(
    company_id: Optional[str] = Query(None, description="Only teams of this company"),
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    """Teams, newest first, with company names and user counts"""
    teams = await organization.list_teams(company_id=company_id)
    company_names = index_names(await organization.list_companies(order_by="name"))
    users_per_team = await organization.count_users_per_team([t.id for t in teams])

    return build_team_rows(teams, company_names, users_per_team)


@router.post("/teams", response_model=TeamRead, status_code=status.HTTP_201_CREATED, tags=["Teams"])
async def create_team(
    data: TeamCreate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.create_team(data)


@router.patch("/teams/{team_id}", response_model=TeamRead, tags=["Teams"])
async def update_team(
    team_id: str,
    data: TeamUpdate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.update_team(team_id, data)


@router.delete("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Teams"])
async def delete_team(
    team_id: str,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    await organization.delete_team(team_id)


# ============================================================================
# Users
# ============================================================================

@router.get("/users", response_model=List[UserRow], tags=["Users"])
async def list_users(organization: OrganizationRepository = Depends(get_organization_repository)):
    """Users, newest first, with company and team names"""
    users = await organization.list_users()
    company_names = index_names(await organization.list_companies(order_by="name"))
    team_names = index_names(await organization.list_teams(order_by="name"))

    return build_user_rows(users, company_names, team_names)


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED, tags=["Users"])
async def create_user(
    data: UserCreate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.create_user(data)


@router.patch("/users/{user_id}", response_model=UserRead, tags=["Users"])
async def update_user(
    user_id: str,
    data: UserUpdate,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    return await organization.update_user(user_id, data)


@router.post("/users/{user_id}/toggle-status", response_model=UserRead, tags=["Users"])
async def toggle_user_status(
    user_id: str,
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    """Block an active user or unblock a blocked one"""
    return await organization.toggle_user_status(user_id)
