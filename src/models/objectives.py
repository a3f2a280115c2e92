from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AgentObjectiveRecord(BaseModel):
    id: Optional[str] = None
    agent_id: str
    year: int
    annual_billing_goal: Optional[Decimal] = None
    monthly_living_expenses: Optional[Decimal] = None
    average_ticket_target: Optional[Decimal] = None
    average_commission_target: Optional[Decimal] = None
    currency: Optional[str] = None
    split_percentage: Optional[Decimal] = None
    conversion_rate: Optional[Decimal] = None
    working_weeks: Optional[int] = None
    listings_goal_annual: Optional[int] = None
    pl_to_listing_conversion_target: Optional[Decimal] = None
    listings_goal_start_date: Optional[date] = None
    listings_goal_end_date: Optional[date] = None


class ProfileRecord(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    organization_id: Optional[str] = None
    default_split_percentage: Optional[Decimal] = None


class TransactionRecord(BaseModel):
    id: str
    agent_id: Optional[str] = None
    transaction_date: Optional[date] = None
    gross_commission: Optional[Decimal] = None
    sides: Optional[int] = None


class ActivityRecord(BaseModel):
    id: str
    agent_id: Optional[str] = None
    model_config = ConfigDict(populate_by_name=True)

    activity_date: Optional[date] = Field(default=None, alias="date")
    type: Optional[str] = None


class FinancialMetricRecord(BaseModel):
    agent_id: Optional[str] = None
    total_sales_volume: Optional[Decimal] = None
    total_gross_commission: Optional[Decimal] = None
    closed_deals_count: Optional[int] = None
