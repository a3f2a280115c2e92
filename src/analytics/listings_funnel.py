from __future__ import annotations

from typing import Optional

from src.schemas.objectives import ActualsSnapshot, FunnelReport, GoalPlan
from src.shared.numbers import ceil_or_zero, finite_or_zero, safe_ratio
from src.shared.time import days_between

# At minimum an agent should replace the inventory they already hold.
MINIMUM_LISTINGS_SAFETY_MARGIN = 1.0
DAYS_PER_WEEK = 7

ATTAINMENT_BANDS = (
    (1.0, "complete"),
    (0.67, "strong"),
    (0.34, "moderate"),
)


def project_funnel(plan: GoalPlan, actuals: ActualsSnapshot) -> Optional[FunnelReport]:
    """Work back from the listings goal to the prelistings the agent must book.

    Returns ``None`` when no listings goal is set, even if a window is.
    """
    if not plan.listings_goal_annual:
        return None

    required_prelistings_annual = ceil_or_zero(
        safe_ratio(plan.listings_goal_annual * 100, plan.pl_to_listing_conversion_target)
    )

    if plan.has_listings_window:
        window_days = days_between(plan.listings_goal_start_date, plan.listings_goal_end_date)
        weeks_in_window = max(window_days, 0) / DAYS_PER_WEEK
        has_custom_window = True
    else:
        weeks_in_window = float(plan.working_weeks)
        has_custom_window = False

    required_prelistings_weekly = safe_ratio(required_prelistings_annual, weeks_in_window)
    minimum_listings_required = ceil_or_zero(
        actuals.actual_active_listings_count * MINIMUM_LISTINGS_SAFETY_MARGIN
    )

    return FunnelReport(
        listings_goal_annual=plan.listings_goal_annual,
        pl_to_listing_conversion_target=plan.pl_to_listing_conversion_target,
        required_prelistings_annual=required_prelistings_annual,
        required_prelistings_weekly=required_prelistings_weekly,
        weeks_in_window=weeks_in_window,
        has_custom_window=has_custom_window,
        listings_goal_start_date=plan.listings_goal_start_date,
        listings_goal_end_date=plan.listings_goal_end_date,
        minimum_listings_required=minimum_listings_required,
        minimum_listings_status=minimum_listings_status(
            plan.listings_goal_annual, minimum_listings_required
        ),
    )


def minimum_listings_status(listings_goal: int, minimum_required: int) -> str:
    if listings_goal > minimum_required:
        return "above_minimum"
    if listings_goal == minimum_required:
        return "at_minimum"
    return "below_minimum"


def weekly_activity_attainment(funnel: FunnelReport, actuals: ActualsSnapshot) -> float:
    if funnel.required_prelistings_weekly <= 0:
        return 0.0
    return finite_or_zero(actuals.weekly_critical_activities_count / funnel.required_prelistings_weekly)


def attainment_band(ratio: float) -> str:
    for threshold, band in ATTAINMENT_BANDS:
        if ratio >= threshold:
            return band
    return "low"
