from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_objectives_service
from src.schemas.objectives import (
    AgentObjectivesRow,
    GoalInput,
    ObjectivesPreviewRequest,
    ObjectivesReport,
    ObjectivesTeamFilters,
    TeamSummary,
)
from src.services.objectives_service import ObjectivesService
from src.shared.response import Meta, ResponseEnvelope, paginate_list

router = APIRouter(prefix="/objectives", tags=["objectives"])


def get_objectives_team_filters(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    organization_id: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=500),
) -> ObjectivesTeamFilters:
    # "all" is how the dashboard selector spells "no organization filter".
    if organization_id == "all":
        organization_id = None
    return ObjectivesTeamFilters(
        year=year or date.today().year,
        organization_id=organization_id,
        page=page,
        page_size=page_size,
    )


def _report_meta(report: ObjectivesReport, source: str) -> Meta:
    return Meta(
        as_of_date=date.today().isoformat(),
        source=source,
        year=report.year,
        currency=report.plan.currency,
    )


@router.post("/preview")
def preview_objectives(
    request: ObjectivesPreviewRequest,
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[ObjectivesReport]:
    data = service.preview(request)
    source = "request" if request.actuals is not None else "transactions,properties,activities"
    return ResponseEnvelope(data=data, meta=_report_meta(data, source))


@router.get("/agents")
def list_agents_objectives(
    filters: ObjectivesTeamFilters = Depends(get_objectives_team_filters),
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[List[AgentObjectivesRow]]:
    listing = service.list_agents_progress(filters.year, filters.organization_id)
    paged_rows, pagination = paginate_list(listing.agents, filters.page, filters.page_size)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="agent_objectives,profiles",
        year=filters.year,
        organization_id=filters.organization_id,
    )
    return ResponseEnvelope(data=paged_rows, pagination=pagination, meta=meta)


@router.get("/team-summary")
def team_objectives_summary(
    filters: ObjectivesTeamFilters = Depends(get_objectives_team_filters),
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[TeamSummary]:
    data = service.get_team_summary(filters.year, filters.organization_id)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="agent_objectives,profiles",
        year=filters.year,
        organization_id=filters.organization_id,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/agents/{agent_id}")
def agent_objectives(
    agent_id: str,
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[ObjectivesReport]:
    data = service.get_agent_objectives(agent_id, year or date.today().year)
    return ResponseEnvelope(data=data, meta=_report_meta(data, "agent_objectives"))


@router.put("/agents/{agent_id}")
def upsert_agent_objectives(
    agent_id: str,
    goal: GoalInput,
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[ObjectivesReport]:
    data = service.upsert_goal(agent_id, year or date.today().year, goal)
    return ResponseEnvelope(data=data, meta=_report_meta(data, "agent_objectives"))


@router.get("/agents/{agent_id}/defaults")
def agent_goal_defaults(
    agent_id: str,
    service: ObjectivesService = Depends(get_objectives_service),
) -> ResponseEnvelope[GoalInput]:
    data = service.get_goal_defaults(agent_id)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="profiles,view_financial_metrics",
    )
    return ResponseEnvelope(data=data, meta=meta)
