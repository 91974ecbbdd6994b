"""
Client-side joins for the console's list views.

Every list page fetches its collections independently and then stitches
display columns (names, counts) onto the primary rows here. Missing
references render as an empty string rather than failing the page.
"""

from typing import Dict, Iterable, List, Optional, TypeVar
from collections import defaultdict

from schemas.checklists import ItemRead
from schemas.organization import (
    CompanyRead,
    CompanyRow,
    TeamRead,
    TeamRow,
    UserRead,
    UserRow,
)
from schemas.pipeline import ProcessingLogRead, ProcessingLogRow

T = TypeVar("T")


def index_names(records: Iterable[T]) -> Dict[str, str]:
    """Map id -> name for a reference collection"""
    return {record.id: record.name for record in records}


def _name(names: Dict[str, str], ref_id: Optional[str]) -> str:
    if not ref_id:
        return ""
    return names.get(ref_id, "")


def group_items_by_category(items: Iterable[ItemRead]) -> Dict[str, List[ItemRead]]:
    """Group items by category_id, keeping their incoming order"""
    grouped: Dict[str, List[ItemRead]] = defaultdict(list)
    for item in items:
        grouped[item.category_id].append(item)
    return dict(grouped)


def build_company_rows(
    companies: List[CompanyRead],
    checklist_names: Dict[str, str],
    users_per_company: Dict[str, int]
) -> List[CompanyRow]:
    return [
        CompanyRow(
            **company.model_dump(),
            users_count=users_per_company.get(company.id, 0),
            checklist_name=_name(checklist_names, company.active_checklist_id)
        )
        for company in companies
    ]


def build_team_rows(
    teams: List[TeamRead],
    company_names: Dict[str, str],
    users_per_team: Dict[str, int]
) -> List[TeamRow]:
    return [
        TeamRow(
            **team.model_dump(),
            company_name=_name(company_names, team.company_id),
            users_count=users_per_team.get(team.id, 0)
        )
        for team in teams
    ]


def build_user_rows(
    users: List[UserRead],
    company_names: Dict[str, str],
    team_names: Dict[str, str]
) -> List[UserRow]:
    return [
        UserRow(
            **user.model_dump(),
            company_name=_name(company_names, user.company_id),
            team_name=_name(team_names, user.team_id)
        )
        for user in users
    ]


def build_log_rows(
    logs: List[ProcessingLogRead],
    company_names: Dict[str, str]
) -> List[ProcessingLogRow]:
    return [
        ProcessingLogRow(
            **log.model_dump(),
            company_name=_name(company_names, log.company_id)
        )
        for log in logs
    ]
