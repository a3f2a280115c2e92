from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Dict, Iterator, List

from src.core.supabase import SupabaseClient
from src.models.objectives import ActivityRecord, FinancialMetricRecord, TransactionRecord

MAX_QUERY_ROWS = 5000
CHUNK_SIZE = 100


def _chunks(agent_ids: List[str]) -> Iterator[List[str]]:
    normalized_ids = sorted({agent_id for agent_id in agent_ids if agent_id})
    for start in range(0, len(normalized_ids), CHUNK_SIZE):
        yield normalized_ids[start : start + CHUNK_SIZE]


class ActualsRepository:
    """Read-only access to the billing and CRM ledgers agents are scored against.

    Ledger reads take a list of agents and batch them into ``in.()`` filters,
    so scoring a whole team costs a fixed number of round trips per chunk.
    """

    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_transactions(
        self, agent_ids: List[str], start_date: date, end_date: date
    ) -> List[TransactionRecord]:
        records: List[TransactionRecord] = []
        for chunk in _chunks(agent_ids):
            rows = self.client.select(
                table="transactions",
                select="id,agent_id,transaction_date,gross_commission,sides",
                filters=[
                    ("agent_id", f"in.({','.join(chunk)})"),
                    ("transaction_date", f"gte.{start_date.isoformat()}"),
                    ("transaction_date", f"lte.{end_date.isoformat()}"),
                ],
                limit=MAX_QUERY_ROWS,
                order="transaction_date.asc",
            )
            records.extend(TransactionRecord.model_validate(row) for row in rows)
        return records

    def list_activities(self, agent_ids: List[str], start_date: date, end_date: date) -> List[ActivityRecord]:
        records: List[ActivityRecord] = []
        for chunk in _chunks(agent_ids):
            rows = self.client.select(
                table="activities",
                select="id,agent_id,date,type",
                filters=[
                    ("agent_id", f"in.({','.join(chunk)})"),
                    ("date", f"gte.{start_date.isoformat()}"),
                    ("date", f"lte.{end_date.isoformat()}"),
                ],
                limit=MAX_QUERY_ROWS,
            )
            records.extend(ActivityRecord.model_validate(row) for row in rows)
        return records

    def list_property_status_ids(self, status_names: List[str]) -> List[str]:
        if not status_names:
            return []
        rows = self.client.select(table="property_statuses", select="id,name", limit=MAX_QUERY_ROWS)
        wanted = {name.casefold() for name in status_names}
        return [str(row["id"]) for row in rows if str(row.get("name", "")).casefold() in wanted]

    def count_active_listings(self, agent_ids: List[str], status_ids: List[str]) -> Dict[str, int]:
        counts: Counter = Counter()
        if not status_ids:
            return dict(counts)
        for chunk in _chunks(agent_ids):
            rows = self.client.select(
                table="properties",
                select="agent_id",
                filters=[
                    ("agent_id", f"in.({','.join(chunk)})"),
                    ("status_id", f"in.({','.join(status_ids)})"),
                ],
                limit=MAX_QUERY_ROWS,
            )
            counts.update(str(row["agent_id"]) for row in rows if row.get("agent_id"))
        return dict(counts)

    def list_financial_metrics(self, agent_id: str) -> List[FinancialMetricRecord]:
        rows = self.client.select(
            table="view_financial_metrics",
            select="agent_id,total_sales_volume,total_gross_commission,closed_deals_count",
            filters=[("agent_id", f"eq.{agent_id}")],
            limit=MAX_QUERY_ROWS,
        )
        return [FinancialMetricRecord.model_validate(row) for row in rows]
