"""
Typed access to the analysis pipeline's configuration and audit trail:
LLM prompts, integration credentials and processing logs.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
import logging

from core.config import settings
from core.exceptions import NotFoundError
from schemas.pipeline import (
    PromptCreate,
    PromptUpdate,
    PromptRead,
    IntegrationSettingsUpdate,
    ProcessingLogRead,
)
from store.base import Record, RecordStore

logger = logging.getLogger(__name__)

PROMPTS = "llm_prompts"
INTEGRATIONS = "integration_settings"
LOGS = "processing_logs"

DEFAULT_LLM_PROVIDER = "openai"


class PipelineRepository:
    """Prompts, integration settings and processing logs"""

    def __init__(self, store: RecordStore):
        self.store = store

    # ------------------------------------------------------------------
    # LLM Prompts
    # ------------------------------------------------------------------

    async def list_prompts(self) -> List[PromptRead]:
        """Grouped by type, newest first within a type"""
        rows = await self.store.find(PROMPTS, order_by=["type", "-created_at"])
        return [PromptRead(**row) for row in rows]

    async def create_prompt(self, data: PromptCreate) -> PromptRead:
        prompt = PromptRead(**await self.store.insert(PROMPTS, data.model_dump()))
        logger.info(f"Created {prompt.type} prompt {prompt.id}")
        return prompt

    async def update_prompt(self, prompt_id: str, data: PromptUpdate) -> PromptRead:
        patch = data.model_dump(exclude_unset=True)
        patch["updated_at"] = datetime.utcnow()
        row = await self.store.update(PROMPTS, prompt_id, patch)
        return PromptRead(**row)

    # ------------------------------------------------------------------
    # Integration Settings
    # ------------------------------------------------------------------

    async def get_integration_settings(self) -> Optional[Record]:
        """The singleton settings row, or None before it has been created"""
        rows = await self.store.find(INTEGRATIONS, limit=1)
        return rows[0] if rows else None

    async def require_integration_settings(self) -> Record:
        record = await self.get_integration_settings()
        if record is None:
            raise NotFoundError(
                "Integration settings have not been configured",
                context={"collection": INTEGRATIONS}
            )
        return record

    async def save_integration_settings(self, data: IntegrationSettingsUpdate) -> Record:
        """
        Apply a partial update to the singleton row, creating it if needed.

        Empty strings clear a field; a cleared provider falls back to the
        default provider.
        """
        patch: Dict[str, Any] = {
            field: (value if value != "" else None)
            for field, value in data.model_dump(exclude_unset=True).items()
        }
        if "llm_provider" in patch and not patch["llm_provider"]:
            patch["llm_provider"] = DEFAULT_LLM_PROVIDER

        current = await self.get_integration_settings()
        if current is None:
            patch.setdefault("llm_provider", DEFAULT_LLM_PROVIDER)
            logger.info("Creating integration settings")
            return await self.store.insert(INTEGRATIONS, patch)

        logger.info(f"Updating integration settings fields: {', '.join(sorted(patch)) or 'none'}")
        if not patch:
            return current
        return await self.store.update(INTEGRATIONS, current["id"], patch)

    # ------------------------------------------------------------------
    # Processing Logs
    # ------------------------------------------------------------------

    async def find_logs(
        self,
        company_id: Optional[str] = None,
        call_id: Optional[str] = None,
        stage: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[ProcessingLogRead]:
        """
        Newest log entries matching every given filter.

        Empty or missing filters are ignored; limit defaults to
        LOGS_DEFAULT_LIMIT and is capped at LOGS_MAX_LIMIT.
        """
        filters = {
            field: value
            for field, value in {
                "company_id": company_id,
                "call_id": call_id,
                "stage": stage,
                "status": status,
            }.items()
            if value
        }
        limit = min(limit or settings.LOGS_DEFAULT_LIMIT, settings.LOGS_MAX_LIMIT)

        rows = await self.store.find(LOGS, filters=filters, order_by=["-created_at"], limit=limit)
        return [ProcessingLogRead(**row) for row in rows]
