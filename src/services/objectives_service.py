from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from src.analytics.actuals import build_actuals_snapshot
from src.analytics.goal_plan import normalize_goal_plan
from src.analytics.goal_progress import compute_progress
from src.analytics.historical_averages import compute_historical_averages
from src.analytics.listings_funnel import attainment_band, project_funnel, weekly_activity_attainment
from src.analytics.team_summary import aggregate_team, merge_team_summaries
from src.core.errors import InvalidPlanError, NotFoundError
from src.models.objectives import ActivityRecord, AgentObjectiveRecord, ProfileRecord, TransactionRecord
from src.repositories.actuals_repository import ActualsRepository
from src.repositories.objectives_repository import ObjectivesRepository
from src.schemas.objectives import (
    ActualsSnapshot,
    AgentIdentity,
    AgentObjectivesListResponse,
    AgentObjectivesRow,
    GoalInput,
    GoalPlan,
    HistoricalAverages,
    ObjectivesPreviewRequest,
    ObjectivesReport,
    TeamSummary,
)
from src.shared.time import week_window, year_bounds

logger = logging.getLogger(__name__)

# Split applied when an agent profile carries none.
DEFAULT_AGENT_SPLIT_PERCENTAGE = 45.0


class ObjectivesService:
    def __init__(
        self,
        objectives_repository: ObjectivesRepository,
        actuals_repository: ActualsRepository,
        active_listing_statuses: List[str],
    ) -> None:
        self.objectives_repository = objectives_repository
        self.actuals_repository = actuals_repository
        self.active_listing_statuses = active_listing_statuses

    def preview(self, request: ObjectivesPreviewRequest, as_of: Optional[date] = None) -> ObjectivesReport:
        """Score a provisional goal without persisting it."""
        plan = normalize_goal_plan(request.goal)
        if request.actuals is not None:
            actuals = request.actuals
        elif request.agent_id and request.year:
            actuals = self.load_actuals(request.agent_id, request.year, as_of)
        else:
            actuals = ActualsSnapshot()
        return self._build_report(plan, actuals, request.agent_id, request.year)

    def get_agent_objectives(
        self, agent_id: str, year: int, as_of: Optional[date] = None
    ) -> ObjectivesReport:
        record = self.objectives_repository.get_objective(agent_id, year)
        if record is None:
            raise NotFoundError(f"No objectives set for agent {agent_id} in {year}")
        plan = normalize_goal_plan(self._goal_input_from_record(record))
        actuals = self.load_actuals(agent_id, year, as_of)
        return self._build_report(plan, actuals, agent_id, year)

    def upsert_goal(
        self, agent_id: str, year: int, goal: GoalInput, as_of: Optional[date] = None
    ) -> ObjectivesReport:
        plan = normalize_goal_plan(goal)
        payload = {"agent_id": agent_id, "year": year, **plan.model_dump(mode="json")}
        self.objectives_repository.upsert_objective(payload)
        logger.info("Saved objectives for agent %s year %s", agent_id, year)
        actuals = self.load_actuals(agent_id, year, as_of)
        return self._build_report(plan, actuals, agent_id, year)

    def list_agents_progress(
        self, year: int, organization_id: Optional[str] = None, as_of: Optional[date] = None
    ) -> AgentObjectivesListResponse:
        profiles = self.objectives_repository.list_profiles(organization_id)
        profiles_by_id = {profile.id: profile for profile in profiles}
        records = self.objectives_repository.list_objectives(year, list(profiles_by_id))

        plans: Dict[str, GoalPlan] = {}
        for record in records:
            try:
                plans[record.agent_id] = normalize_goal_plan(self._goal_input_from_record(record))
            except InvalidPlanError as exc:
                logger.warning(
                    "Skipping stored objectives for agent %s year %s: %s",
                    record.agent_id,
                    year,
                    exc.message,
                )

        actuals_by_agent = self.load_team_actuals(list(plans), year, as_of)
        rows: List[AgentObjectivesRow] = []
        for agent_id, plan in plans.items():
            actuals = actuals_by_agent[agent_id]
            rows.append(
                AgentObjectivesRow(
                    agent=self._identity(agent_id, profiles_by_id.get(agent_id)),
                    progress=compute_progress(plan, actuals),
                    funnel=project_funnel(plan, actuals),
                )
            )
        rows.sort(key=lambda row: (row.agent.last_name.casefold(), row.agent.first_name.casefold()))
        return AgentObjectivesListResponse(year=year, organization_id=organization_id, agents=rows)

    def get_team_summary(
        self, year: int, organization_id: Optional[str] = None, as_of: Optional[date] = None
    ) -> TeamSummary:
        listing = self.list_agents_progress(year, organization_id, as_of)
        if organization_id is not None:
            return aggregate_team(row.progress for row in listing.agents)

        # Brokerage-wide: summarize each organization, then fold them together.
        by_organization: Dict[Optional[str], list] = defaultdict(list)
        for row in listing.agents:
            by_organization[row.agent.organization_id].append(row.progress)
        return merge_team_summaries(aggregate_team(reports) for reports in by_organization.values())

    def get_historical_averages(self, agent_id: str) -> HistoricalAverages:
        return compute_historical_averages(self.actuals_repository.list_financial_metrics(agent_id))

    def get_goal_defaults(self, agent_id: str) -> GoalInput:
        """Seed a new goal from the agent's profile split and closing history."""
        profile = self.objectives_repository.get_profile(agent_id)
        if profile is None:
            raise NotFoundError(f"Agent {agent_id} not found")
        history = self.get_historical_averages(agent_id)
        split = profile.default_split_percentage
        return GoalInput(
            annual_billing_goal=0.0,
            monthly_living_expenses=0.0,
            average_ticket_target=float(round(history.avg_ticket)),
            average_commission_target=round(history.avg_commission_percent, 2),
            split_percentage=float(split) if split is not None else DEFAULT_AGENT_SPLIT_PERCENTAGE,
        )

    def load_actuals(self, agent_id: str, year: int, as_of: Optional[date] = None) -> ActualsSnapshot:
        return self.load_team_actuals([agent_id], year, as_of)[agent_id]

    def load_team_actuals(
        self, agent_ids: List[str], year: int, as_of: Optional[date] = None
    ) -> Dict[str, ActualsSnapshot]:
        """Build every agent's snapshot from one batched read of each ledger."""
        if not agent_ids:
            return {}
        as_of = as_of or date.today()
        year_start, year_end = year_bounds(year)
        week_start, week_end = week_window(as_of)

        transactions: Dict[str, List[TransactionRecord]] = defaultdict(list)
        for transaction in self.actuals_repository.list_transactions(agent_ids, year_start, year_end):
            transactions[transaction.agent_id or ""].append(transaction)
        activities: Dict[str, List[ActivityRecord]] = defaultdict(list)
        for activity in self.actuals_repository.list_activities(agent_ids, week_start, week_end):
            activities[activity.agent_id or ""].append(activity)
        status_ids = self.actuals_repository.list_property_status_ids(self.active_listing_statuses)
        active_listings = self.actuals_repository.count_active_listings(agent_ids, status_ids)

        return {
            agent_id: build_actuals_snapshot(
                year=year,
                as_of=as_of,
                transactions=transactions.get(agent_id, []),
                active_listings_count=active_listings.get(agent_id, 0),
                activities=activities.get(agent_id, []),
            )
            for agent_id in agent_ids
        }

    @staticmethod
    def _build_report(
        plan: GoalPlan,
        actuals: ActualsSnapshot,
        agent_id: Optional[str],
        year: Optional[int],
    ) -> ObjectivesReport:
        funnel = project_funnel(plan, actuals)
        attainment = weekly_activity_attainment(funnel, actuals) if funnel else None
        return ObjectivesReport(
            agent_id=agent_id,
            year=year,
            plan=plan,
            actuals=actuals,
            progress=compute_progress(plan, actuals),
            funnel=funnel,
            weekly_activity_attainment=attainment,
            weekly_activity_band=attainment_band(attainment) if attainment is not None else None,
        )

    @staticmethod
    def _identity(agent_id: str, profile: Optional[ProfileRecord]) -> AgentIdentity:
        if profile is None:
            return AgentIdentity(agent_id=agent_id)
        return AgentIdentity(
            agent_id=agent_id,
            first_name=profile.first_name or "",
            last_name=profile.last_name or "",
            organization_id=profile.organization_id,
        )

    @staticmethod
    def _goal_input_from_record(record: AgentObjectiveRecord) -> GoalInput:
        return GoalInput(
            annual_billing_goal=_to_float(record.annual_billing_goal),
            monthly_living_expenses=_to_float(record.monthly_living_expenses),
            average_ticket_target=_to_float(record.average_ticket_target),
            average_commission_target=_to_float(record.average_commission_target),
            currency=record.currency,
            split_percentage=_to_float(record.split_percentage),
            conversion_rate=_to_float(record.conversion_rate),
            working_weeks=record.working_weeks,
            listings_goal_annual=record.listings_goal_annual,
            pl_to_listing_conversion_target=_to_float(record.pl_to_listing_conversion_target),
            listings_goal_start_date=record.listings_goal_start_date,
            listings_goal_end_date=record.listings_goal_end_date,
        )


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None
