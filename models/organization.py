from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Index
from datetime import datetime
from models.base import (
    Base, new_id, enum_column_type,
    CompanyStatus, UserRole, UserStatus
)


class Company(Base):
    """
    A tenant of the call-processing platform.

    active_checklist_id selects the checklist used to score the tenant's
    calls; it is cleared when that checklist is deleted.
    """
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=new_id)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    active_checklist_id = Column(
        String(36),
        ForeignKey("checklists.id", ondelete="SET NULL"),
        nullable=True
    )
    status = Column(
        enum_column_type(CompanyStatus, "company_status"),
        default=CompanyStatus.ACTIVE,
        nullable=False
    )

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class Team(Base):
    """A group of users inside one company"""
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=new_id)
    company_id = Column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class User(Base):
    """
    Platform user (manager, team lead or console admin).

    Credentials are provisioned by the external auth provider, so
    password_hash is kept empty for users created from the console.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    company_id = Column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    team_id = Column(
        String(36),
        ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    email = Column(String(320), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False, default="")
    full_name = Column(String(255), nullable=False)
    role = Column(enum_column_type(UserRole, "user_role"), default=UserRole.MANAGER, nullable=False)
    status = Column(enum_column_type(UserStatus, "user_status"), default=UserStatus.ACTIVE, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_user_company_team", "company_id", "team_id"),
    )
