from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.supabase import SupabaseClient
from src.models.objectives import AgentObjectiveRecord, ProfileRecord

MAX_QUERY_ROWS = 5000
CHUNK_SIZE = 100

OBJECTIVE_COLUMNS = (
    "id,agent_id,year,annual_billing_goal,monthly_living_expenses,average_ticket_target,"
    "average_commission_target,currency,split_percentage,conversion_rate,working_weeks,"
    "listings_goal_annual,pl_to_listing_conversion_target,listings_goal_start_date,"
    "listings_goal_end_date"
)
PROFILE_COLUMNS = "id,first_name,last_name,organization_id,default_split_percentage"


class ObjectivesRepository:
    """Goal-plan store keyed by (agent_id, year) plus the profile lookups it needs."""

    def __init__(self) -> None:
        self.client = SupabaseClient()

    def get_objective(self, agent_id: str, year: int) -> Optional[AgentObjectiveRecord]:
        rows = self.client.select(
            table="agent_objectives",
            select=OBJECTIVE_COLUMNS,
            filters=[("agent_id", f"eq.{agent_id}"), ("year", f"eq.{year}")],
            limit=1,
        )
        return AgentObjectiveRecord.model_validate(rows[0]) if rows else None

    def list_objectives(self, year: int, agent_ids: List[str]) -> List[AgentObjectiveRecord]:
        normalized_ids = sorted({agent_id for agent_id in agent_ids if agent_id})
        records: List[AgentObjectiveRecord] = []
        for start in range(0, len(normalized_ids), CHUNK_SIZE):
            chunk = normalized_ids[start : start + CHUNK_SIZE]
            rows = self.client.select(
                table="agent_objectives",
                select=OBJECTIVE_COLUMNS,
                filters=[("year", f"eq.{year}"), ("agent_id", f"in.({','.join(chunk)})")],
                limit=MAX_QUERY_ROWS,
            )
            records.extend(AgentObjectiveRecord.model_validate(row) for row in rows)
        return records

    def upsert_objective(self, payload: Dict[str, Any]) -> AgentObjectiveRecord:
        rows = self.client.upsert(
            table="agent_objectives",
            payload=payload,
            on_conflict="agent_id,year",
        )
        return AgentObjectiveRecord.model_validate(rows[0] if rows else payload)

    def get_profile(self, agent_id: str) -> Optional[ProfileRecord]:
        rows = self.client.select(
            table="profiles",
            select=PROFILE_COLUMNS,
            filters=[("id", f"eq.{agent_id}")],
            limit=1,
        )
        return ProfileRecord.model_validate(rows[0]) if rows else None

    def list_profiles(self, organization_id: Optional[str] = None) -> List[ProfileRecord]:
        filters = []
        if organization_id:
            filters.append(("organization_id", f"eq.{organization_id}"))
        rows = self.client.select(
            table="profiles",
            select=PROFILE_COLUMNS,
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="last_name.asc",
        )
        return [ProfileRecord.model_validate(row) for row in rows]
