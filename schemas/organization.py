"""
Pydantic schemas for companies, teams and users.

The *Row models are list-view rows: the base record plus the columns the
console joins in from other collections (names and user counts).
"""

from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime
from models.base import CompanyStatus, UserRole, UserStatus
from schemas.api import reject_null


def _blank_to_none(v):
    """Select boxes post "" for "none selected"; store that as NULL"""
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ============================================================================
# Companies
# ============================================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    active_checklist_id: Optional[str] = None
    status: CompanyStatus = CompanyStatus.ACTIVE

    @validator("active_checklist_id", pre=True)
    def empty_checklist(cls, v):
        return _blank_to_none(v)


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    active_checklist_id: Optional[str] = None
    status: Optional[CompanyStatus] = None

    @validator("name", "status", pre=True)
    def required_not_null(cls, v):
        return reject_null(v)

    @validator("active_checklist_id", pre=True)
    def empty_checklist(cls, v):
        return _blank_to_none(v)


class CompanyRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    active_checklist_id: Optional[str] = None
    status: CompanyStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True


class CompanyRow(CompanyRead):
    users_count: int = 0
    checklist_name: str = ""


# ============================================================================
# Teams
# ============================================================================

class TeamCreate(BaseModel):
    company_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)


class TeamUpdate(BaseModel):
    company_id: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @validator("company_id", "name", pre=True)
    def required_not_null(cls, v):
        return reject_null(v)


class TeamRead(BaseModel):
    id: str
    company_id: str
    name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeamRow(TeamRead):
    company_name: str = ""
    users_count: int = 0


# ============================================================================
# Users
# ============================================================================

class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    role: UserRole = UserRole.MANAGER
    company_id: str = Field(..., min_length=1)
    team_id: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE

    @validator("team_id", pre=True)
    def empty_team(cls, v):
        return _blank_to_none(v)

    @validator("email")
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    role: Optional[UserRole] = None
    company_id: Optional[str] = Field(None, min_length=1)
    team_id: Optional[str] = None
    status: Optional[UserStatus] = None

    @validator("full_name", "email", "role", "company_id", "status", pre=True)
    def required_not_null(cls, v):
        return reject_null(v)

    @validator("team_id", pre=True)
    def empty_team(cls, v):
        return _blank_to_none(v)

    @validator("email")
    def normalize_email(cls, v):
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class UserRead(BaseModel):
    """User as shown in the console; password_hash never leaves the store"""
    id: str
    company_id: str
    team_id: Optional[str] = None
    email: str
    full_name: str
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True


class UserRow(UserRead):
    company_name: str = ""
    team_name: str = ""
