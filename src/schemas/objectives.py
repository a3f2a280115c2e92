from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema, FrozenSchema


class GoalInput(BaseSchema):
    """A goal as typed by the agent or supervisor; every field may be missing."""

    annual_billing_goal: Optional[float] = None
    monthly_living_expenses: Optional[float] = None
    average_ticket_target: Optional[float] = None
    average_commission_target: Optional[float] = None
    currency: Optional[str] = None
    split_percentage: Optional[float] = None
    conversion_rate: Optional[float] = None
    working_weeks: Optional[int] = None
    listings_goal_annual: Optional[int] = None
    pl_to_listing_conversion_target: Optional[float] = None
    listings_goal_start_date: Optional[date] = None
    listings_goal_end_date: Optional[date] = None


class GoalPlan(FrozenSchema):
    annual_billing_goal: float
    monthly_living_expenses: float
    average_ticket_target: float
    average_commission_target: float
    currency: str
    split_percentage: float
    conversion_rate: float
    working_weeks: int
    listings_goal_annual: int = 0
    pl_to_listing_conversion_target: float = 40.0
    listings_goal_start_date: Optional[date] = None
    listings_goal_end_date: Optional[date] = None

    @property
    def has_listings_window(self) -> bool:
        return self.listings_goal_start_date is not None and self.listings_goal_end_date is not None


class ActualsSnapshot(FrozenSchema):
    actual_gross_income: float = Field(default=0.0, ge=0, le=1e15, allow_inf_nan=False)
    actual_puntas_count: int = Field(default=0, ge=0, le=1_000_000)
    actual_active_listings_count: int = Field(default=0, ge=0, le=1_000_000)
    weekly_green_meetings_count: int = Field(default=0, ge=0, le=1_000_000)
    weekly_critical_activities_count: int = Field(default=0, ge=0, le=1_000_000)
    elapsed_fraction_of_year: float = Field(default=1.0, gt=0, le=1, allow_inf_nan=False)


class ProgressReport(BaseSchema):
    currency: str
    annual_billing_goal: float
    actual_gross_income: float
    actual_puntas_count: int
    conversion_rate: float
    commission_per_deal: float
    estimated_puntas_needed: int
    estimated_total_puntas_target: int
    required_prospecting_annual: float
    required_prospecting_weekly: float
    net_income_goal: float
    financial_viability_ratio: float
    progress_ratio: float
    progress_percentage: float
    gap_to_goal: float
    run_rate_projection: float
    is_on_track: bool


class FunnelReport(BaseSchema):
    listings_goal_annual: int
    pl_to_listing_conversion_target: float
    required_prelistings_annual: int
    required_prelistings_weekly: float
    weeks_in_window: float
    has_custom_window: bool
    listings_goal_start_date: Optional[date] = None
    listings_goal_end_date: Optional[date] = None
    minimum_listings_required: int
    minimum_listings_status: str


class TeamSummary(BaseSchema):
    agent_count: int = 0
    agents_with_goals: int = 0
    on_track_count: int = 0
    total_team_goal: float = 0.0
    total_team_income: float = 0.0
    avg_progress: float = 0.0
    total_prospecting_needed: float = 0.0
    total_puntas_needed: int = 0
    total_puntas_closed: int = 0


class HistoricalAverages(BaseSchema):
    avg_ticket: float
    avg_commission_percent: float
    closed_deals_count: int = 0


class ObjectivesReport(BaseSchema):
    agent_id: Optional[str] = None
    year: Optional[int] = None
    plan: GoalPlan
    actuals: ActualsSnapshot
    progress: ProgressReport
    funnel: Optional[FunnelReport] = None
    weekly_activity_attainment: Optional[float] = None
    weekly_activity_band: Optional[str] = None


class AgentIdentity(BaseSchema):
    agent_id: str
    first_name: str = ""
    last_name: str = ""
    organization_id: Optional[str] = None


class AgentObjectivesRow(BaseSchema):
    agent: AgentIdentity
    progress: ProgressReport
    funnel: Optional[FunnelReport] = None


class ObjectivesPreviewRequest(BaseSchema):
    goal: GoalInput
    actuals: Optional[ActualsSnapshot] = None
    agent_id: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=2000, le=2100)


class ObjectivesTeamFilters(BaseSchema):
    # Keep query parameter names in snake_case for API contract consistency.
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    year: int = Field(ge=2000, le=2100)
    organization_id: Optional[str] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class AgentObjectivesListResponse(BaseSchema):
    year: int
    organization_id: Optional[str] = None
    agents: List[AgentObjectivesRow]
