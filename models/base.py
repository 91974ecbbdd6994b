from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base
import enum
import uuid

Base = declarative_base()


def new_id() -> str:
    """Opaque record identifier assigned on insert"""
    return str(uuid.uuid4())


def enum_column_type(enum_cls, name: str) -> Enum:
    """Enum column storing member values ("active") rather than names"""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


# ============================================================================
# ENUMS
# ============================================================================

class CompanyStatus(str, enum.Enum):
    """Tenant status"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class UserRole(str, enum.Enum):
    """Console and platform roles"""
    MANAGER = "manager"
    LEAD = "lead"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    """User account status"""
    ACTIVE = "active"
    BLOCKED = "blocked"


class PromptType(str, enum.Enum):
    """Which pipeline step an LLM prompt drives"""
    SUMMARY = "summary"
    RECOMMENDATIONS = "recommendations"
    CHECKLIST = "checklist"


class LogStatus(str, enum.Enum):
    """Outcome of a pipeline processing stage"""
    OK = "ok"
    ERROR = "error"


# Stages written by the call-processing pipeline, in pipeline order
PIPELINE_STAGES = (
    "audio_received",
    "sent_to_assembly",
    "transcript_ready",
    "summary_done",
    "checklist_done",
    "error",
)
