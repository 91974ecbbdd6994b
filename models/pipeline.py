from sqlalchemy import Column, String, DateTime, Text, Boolean, Index
from datetime import datetime
from models.base import Base, new_id, enum_column_type, PromptType, LogStatus


class LLMPrompt(Base):
    """Prompt template used by one step of the analysis pipeline"""
    __tablename__ = "llm_prompts"

    id = Column(String(36), primary_key=True, default=new_id)

    type = Column(enum_column_type(PromptType, "prompt_type"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    prompt_text = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class IntegrationSettings(Base):
    """
    Credentials for the transcription and LLM providers.

    Singleton: the console reads and updates the first row only.
    """
    __tablename__ = "integration_settings"

    id = Column(String(36), primary_key=True, default=new_id)

    assemblyai_api_key = Column(String(255), nullable=True)
    assemblyai_webhook_secret = Column(String(255), nullable=True)

    llm_provider = Column(String(50), nullable=False, default="openai")
    llm_api_key = Column(String(255), nullable=True)
    llm_base_url = Column(String(2048), nullable=True)
    llm_default_model = Column(String(255), nullable=True)


class ProcessingLog(Base):
    """
    Audit trail written by the call-processing pipeline.

    Read-only from the console; the pipeline owns inserts.
    """
    __tablename__ = "processing_logs"

    id = Column(String(36), primary_key=True, default=new_id)

    call_id = Column(String(36), nullable=True, index=True)
    company_id = Column(String(36), nullable=True, index=True)
    user_id = Column(String(36), nullable=True)

    stage = Column(String(100), nullable=False, index=True)
    status = Column(enum_column_type(LogStatus, "log_status"), nullable=False)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_log_created", "created_at"),
        Index("idx_log_company_created", "company_id", "created_at"),
    )
