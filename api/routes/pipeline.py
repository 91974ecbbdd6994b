"""
Pipeline configuration and audit endpoints: LLM prompts, integration
settings and processing logs
"""

from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional
import uuid
import logging

from api.dependencies import get_organization_repository, get_pipeline_repository
from core.config import settings
from models.base import LogStatus, PIPELINE_STAGES
from repositories.organization import OrganizationRepository
from repositories.pipeline import PipelineRepository
from schemas.pipeline import (
    PromptCreate,
    PromptUpdate,
    PromptRead,
    IntegrationSettingsUpdate,
    IntegrationSettingsRead,
    ProcessingLogRow,
)
from services.views import build_log_rows, index_names

logger = logging.getLogger(__name__)
router = APIRouter()


# ============================================================================
# LLM Prompts
# ============================================================================

@router.get("/prompts", response_model=List[PromptRead], tags=["Prompts"])
async def list_prompts(pipeline: PipelineRepository = Depends(get_pipeline_repository)):
    return await pipeline.list_prompts()


@router.post("/prompts", response_model=PromptRead, status_code=status.HTTP_201_CREATED, tags=["Prompts"])
async def create_prompt(
    data: PromptCreate,
    pipeline: PipelineRepository = Depends(get_pipeline_repository)
):
    return await pipeline.create_prompt(data)


@router.patch("/prompts/{prompt_id}", response_model=PromptRead, tags=["Prompts"])
async def update_prompt(
    prompt_id: str,
    data: PromptUpdate,
    pipeline: PipelineRepository = Depends(get_pipeline_repository)
):
    return await pipeline.update_prompt(prompt_id, data)


# ============================================================================
# Integration Settings
# ============================================================================

@router.get("/integrations", response_model=IntegrationSettingsRead, tags=["Integrations"])
async def get_integrations(pipeline: PipelineRepository = Depends(get_pipeline_repository)):
    """Provider settings with credentials masked"""
    return IntegrationSettingsRead.masked(await pipeline.require_integration_settings())


@router.patch("/integrations", response_model=IntegrationSettingsRead, tags=["Integrations"])
async def update_integrations(
    data: IntegrationSettingsUpdate,
    request: Request,
    pipeline: PipelineRepository = Depends(get_pipeline_repository)
):
    """
    Update provider settings.

    Only fields present in the body are written; send "" to clear a field.
    """
    request_id = getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")
    logger.info(f"[{request_id}] PATCH /integrations")

    return IntegrationSettingsRead.masked(await pipeline.save_integration_settings(data))


# ============================================================================
# Processing Logs
# ============================================================================

@router.get("/logs", response_model=List[ProcessingLogRow], tags=["Logs"])
async def list_logs(
    request: Request,
    company_id: Optional[str] = Query(None, description="Filter by company"),
    call_id: Optional[str] = Query(None, description="Filter by call"),
    stage: Optional[str] = Query(None, description="Filter by pipeline stage"),
    log_status: Optional[LogStatus] = Query(None, alias="status", description="Filter by outcome"),
    limit: int = Query(
        settings.LOGS_DEFAULT_LIMIT,
        ge=1,
        le=settings.LOGS_MAX_LIMIT,
        description="Maximum number of entries"
    ),
    pipeline: PipelineRepository = Depends(get_pipeline_repository),
    organization: OrganizationRepository = Depends(get_organization_repository)
):
    """Newest processing log entries, optionally filtered"""
    request_id = getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")
    logger.info(
        f"[{request_id}] GET /logs - company_id={company_id}, call_id={call_id}, "
        f"stage={stage}, status={log_status}, limit={limit}"
    )

    logs = await pipeline.find_logs(
        company_id=company_id,
        call_id=call_id,
        stage=stage,
        status=log_status,
        limit=limit
    )
    company_names = index_names(await organization.list_companies(order_by="name"))

    return build_log_rows(logs, company_names)


@router.get("/logs/stages", response_model=List[str], tags=["Logs"])
async def list_stages():
    """Known pipeline stages, in pipeline order"""
    return list(PIPELINE_STAGES)
