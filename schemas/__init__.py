"""
Pydantic schemas for request validation and response serialization.

Schemas:
    checklists: Checklist, category and item payloads and the tree view
    organization: Company, team and user payloads plus joined list rows
    pipeline: LLM prompts, integration settings and processing logs
    api: Health check and error responses

Conventions:
    *Create  - request body for inserts
    *Update  - partial request body; only fields that are sent get written
    *Read    - record as returned by the store
    *Row     - list-view record with joined display columns
"""

__all__ = [
    "ChecklistCreate",
    "ChecklistUpdate",
    "ChecklistRead",
    "ChecklistDetail",
    "CategoryRead",
    "ItemCreate",
    "ItemRead",
    "CompanyRow",
    "TeamRow",
    "UserRow",
    "PromptRead",
    "IntegrationSettingsRead",
    "ProcessingLogRow",
    "HealthCheckResponse",
    "ErrorResponse",
]
