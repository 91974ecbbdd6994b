"""
Pydantic schemas for LLM prompts, integration settings and processing logs
"""

from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime
from models.base import PromptType, LogStatus
from schemas.api import reject_null


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Hide all but the last four characters of a credential"""
    if not value:
        return value
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * 8 + value[-4:]


# ============================================================================
# LLM Prompts
# ============================================================================

class PromptCreate(BaseModel):
    type: PromptType = PromptType.SUMMARY
    name: str = Field(..., min_length=1, max_length=255)
    model: str = Field(..., min_length=1, max_length=255)
    prompt_text: str = Field(..., min_length=1)
    is_active: bool = True


class PromptUpdate(BaseModel):
    type: Optional[PromptType] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    model: Optional[str] = Field(None, min_length=1, max_length=255)
    prompt_text: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None

    @validator("type", "name", "model", "prompt_text", "is_active", pre=True)
    def required_not_null(cls, v):
        return reject_null(v)


class PromptRead(BaseModel):
    id: str
    type: PromptType
    name: str
    model: str
    prompt_text: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True


# ============================================================================
# Integration Settings
# ============================================================================

SECRET_FIELDS = ("assemblyai_api_key", "assemblyai_webhook_secret", "llm_api_key")


class IntegrationSettingsUpdate(BaseModel):
    """
    Partial update of the provider credentials.

    Omitted fields are left untouched; an empty string clears a field.
    """
    assemblyai_api_key: Optional[str] = None
    assemblyai_webhook_secret: Optional[str] = None
    llm_provider: Optional[str] = Field(None, min_length=1, max_length=50)
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = Field(None, max_length=2048)
    llm_default_model: Optional[str] = Field(None, max_length=255)


class IntegrationSettingsRead(BaseModel):
    id: str
    assemblyai_api_key: Optional[str] = None
    assemblyai_webhook_secret: Optional[str] = None
    llm_provider: str
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_default_model: Optional[str] = None

    @classmethod
    def masked(cls, record: dict) -> "IntegrationSettingsRead":
        """Build the response with every secret masked"""
        data = dict(record)
        for field in SECRET_FIELDS:
            data[field] = mask_secret(data.get(field))
        return cls(**data)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "7e3f1a52-63a8-4f0b-b1f5-2f6a3c1d9e40",
                "assemblyai_api_key": "********a1b2",
                "assemblyai_webhook_secret": None,
                "llm_provider": "openai",
                "llm_api_key": "********9xyz",
                "llm_base_url": None,
                "llm_default_model": "gpt-4o-mini"
            }
        }


# ============================================================================
# Processing Logs
# ============================================================================

class ProcessingLogRead(BaseModel):
    id: str
    call_id: Optional[str] = None
    company_id: Optional[str] = None
    user_id: Optional[str] = None
    stage: str
    status: LogStatus
    message: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True


class ProcessingLogRow(ProcessingLogRead):
    company_name: str = ""
