from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from src.models.objectives import ActivityRecord, TransactionRecord
from src.schemas.objectives import ActualsSnapshot
from src.shared.time import days_in_year, week_window

CRITICAL_ACTIVITY_TYPES = frozenset({"pre_listing", "pre_buying"})
# Referrals are logged but are not prospecting meetings.
NON_MEETING_ACTIVITY_TYPES = frozenset({"referido"})


def elapsed_fraction_of_year(year: int, as_of: date) -> float:
    total_days = days_in_year(year)
    if as_of.year > year:
        return 1.0
    if as_of.year < year:
        return 1 / total_days
    return as_of.timetuple().tm_yday / total_days


def build_actuals_snapshot(
    year: int,
    as_of: date,
    transactions: Iterable[TransactionRecord],
    active_listings_count: int,
    activities: Iterable[ActivityRecord],
) -> ActualsSnapshot:
    """Fold one agent-year of ledger rows into the figures the engine scores against.

    ``transactions`` are the agent's closings for ``year``; ``activities`` may
    span any range, only the week containing ``as_of`` is counted.
    """
    week_start, week_end = week_window(as_of)

    gross_income = Decimal("0")
    puntas = 0
    week_closings = 0
    for transaction in transactions:
        gross_income += transaction.gross_commission or Decimal("0")
        puntas += transaction.sides if transaction.sides is not None else 1
        closed_on = transaction.transaction_date
        if closed_on and week_start <= closed_on <= week_end:
            week_closings += 1

    green_meetings = week_closings
    critical_activities = 0
    for activity in activities:
        logged_on = activity.activity_date
        if logged_on is None or not week_start <= logged_on <= week_end:
            continue
        if activity.type not in NON_MEETING_ACTIVITY_TYPES:
            green_meetings += 1
        if activity.type in CRITICAL_ACTIVITY_TYPES:
            critical_activities += 1

    return ActualsSnapshot(
        actual_gross_income=float(max(gross_income, Decimal("0"))),
        actual_puntas_count=max(puntas, 0),
        actual_active_listings_count=max(active_listings_count, 0),
        weekly_green_meetings_count=green_meetings,
        weekly_critical_activities_count=critical_activities,
        elapsed_fraction_of_year=elapsed_fraction_of_year(year, as_of),
    )
