from __future__ import annotations

import os
from datetime import date
from typing import List, Optional

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from src.analytics.goal_plan import normalize_goal_plan
from src.analytics.goal_progress import compute_progress
from src.analytics.listings_funnel import project_funnel
from src.analytics.team_summary import aggregate_team
from src.api.dependencies import get_objectives_service
from src.core.errors import NotFoundError
from src.main import create_app
from src.schemas.objectives import (
    ActualsSnapshot,
    AgentIdentity,
    AgentObjectivesListResponse,
    AgentObjectivesRow,
    GoalInput,
    ObjectivesPreviewRequest,
    ObjectivesReport,
    TeamSummary,
)

SAMPLE_GOAL = GoalInput(
    annual_billing_goal=120000,
    average_ticket_target=200000,
    average_commission_target=3,
    conversion_rate=6,
    working_weeks=48,
    listings_goal_annual=20,
)
SAMPLE_ACTUALS = ActualsSnapshot(
    actual_gross_income=30000,
    actual_puntas_count=5,
    actual_active_listings_count=12,
    weekly_green_meetings_count=9,
    weekly_critical_activities_count=2,
    elapsed_fraction_of_year=0.5,
)


def _report(
    agent_id: Optional[str],
    year: Optional[int],
    goal: GoalInput,
    actuals: ActualsSnapshot = SAMPLE_ACTUALS,
) -> ObjectivesReport:
    plan = normalize_goal_plan(goal)
    return ObjectivesReport(
        agent_id=agent_id,
        year=year,
        plan=plan,
        actuals=actuals,
        progress=compute_progress(plan, actuals),
        funnel=project_funnel(plan, actuals),
    )


class FakeObjectivesService:
    def __init__(self) -> None:
        self.saved: List[tuple[str, int, GoalInput]] = []

    def preview(self, request: ObjectivesPreviewRequest, as_of: Optional[date] = None) -> ObjectivesReport:
        return _report(request.agent_id, request.year, request.goal, request.actuals or SAMPLE_ACTUALS)

    def get_agent_objectives(self, agent_id: str, year: int, as_of: Optional[date] = None) -> ObjectivesReport:
        if agent_id == "missing-agent":
            raise NotFoundError(f"No objectives set for agent {agent_id} in {year}")
        return _report(agent_id, year, SAMPLE_GOAL)

    def upsert_goal(
        self, agent_id: str, year: int, goal: GoalInput, as_of: Optional[date] = None
    ) -> ObjectivesReport:
        report = _report(agent_id, year, goal)
        self.saved.append((agent_id, year, goal))
        return report

    def list_agents_progress(
        self, year: int, organization_id: Optional[str] = None, as_of: Optional[date] = None
    ) -> AgentObjectivesListResponse:
        rows = []
        for index, name in enumerate(["Lucia", "Martin", "Sofia"], start=1):
            report = _report(f"agent-{index}", year, SAMPLE_GOAL)
            rows.append(
                AgentObjectivesRow(
                    agent=AgentIdentity(
                        agent_id=f"agent-{index}",
                        first_name=name,
                        last_name="Perez",
                        organization_id=organization_id or "org-1",
                    ),
                    progress=report.progress,
                    funnel=report.funnel,
                )
            )
        return AgentObjectivesListResponse(year=year, organization_id=organization_id, agents=rows)

    def get_team_summary(
        self, year: int, organization_id: Optional[str] = None, as_of: Optional[date] = None
    ) -> TeamSummary:
        listing = self.list_agents_progress(year, organization_id)
        return aggregate_team(row.progress for row in listing.agents)

    def get_goal_defaults(self, agent_id: str) -> GoalInput:
        if agent_id == "missing-agent":
            raise NotFoundError(f"Agent {agent_id} not found")
        return GoalInput(average_ticket_target=150000, average_commission_target=2.5, split_percentage=45)


@pytest.fixture()
def fake_service() -> FakeObjectivesService:
    return FakeObjectivesService()


@pytest.fixture()
def client(fake_service: FakeObjectivesService) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_objectives_service] = lambda: fake_service
    return TestClient(app)
