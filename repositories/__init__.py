"""
Typed repositories over the record store.

Modules:
    checklists: ChecklistRepository (checklists, categories, items)
    organization: OrganizationRepository (companies, teams, users)
    pipeline: PipelineRepository (LLM prompts, integration settings, processing logs)

Each repository takes a RecordStore and speaks pydantic schemas, so routes
and services never handle raw store records.
"""
