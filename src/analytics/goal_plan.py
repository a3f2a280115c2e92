from __future__ import annotations

import math
from typing import Optional

from src.core.errors import InvalidPlanError
from src.schemas.objectives import GoalInput, GoalPlan

DEFAULT_SPLIT_PERCENTAGE = 50.0
DEFAULT_CONVERSION_RATE = 6.0
DEFAULT_WORKING_WEEKS = 48
DEFAULT_COMMISSION_PERCENT = 3.0
DEFAULT_CURRENCY = "USD"
DEFAULT_PL_TO_LISTING_CONVERSION = 40.0

# ARS is the brokerage's local currency.
SUPPORTED_CURRENCIES = ("USD", "ARS")

MIN_WORKING_WEEKS = 1
MAX_WORKING_WEEKS = 52

# Bounds keep every derived figure finite.
MAX_MONEY_AMOUNT = 1e12
MIN_AVERAGE_TICKET = 1.0
MIN_COMMISSION_PERCENT = 0.01
MAX_CONVERSION_RATE = 1000.0
MAX_LISTINGS_GOAL = 100000
MIN_PL_TO_LISTING_CONVERSION = 0.1


def normalize_goal_plan(goal: GoalInput) -> GoalPlan:
    """Apply documented defaults to a raw goal and validate it into a ``GoalPlan``.

    Raises ``InvalidPlanError`` naming the first offending field. Zero-valued
    money inputs are accepted; the calculators resolve them to 0 instead of
    failing, so a half-typed goal still previews.
    """
    annual_billing_goal = _money(goal.annual_billing_goal, "annual_billing_goal")
    monthly_living_expenses = _money(goal.monthly_living_expenses, "monthly_living_expenses")
    average_ticket_target = _money(goal.average_ticket_target, "average_ticket_target")
    if 0 < average_ticket_target < MIN_AVERAGE_TICKET:
        raise InvalidPlanError(
            "average_ticket_target",
            f"average_ticket_target must be 0 or at least {MIN_AVERAGE_TICKET:g}",
        )

    average_commission_target = _percent(
        goal.average_commission_target, DEFAULT_COMMISSION_PERCENT, "average_commission_target"
    )
    if 0 < average_commission_target < MIN_COMMISSION_PERCENT:
        raise InvalidPlanError(
            "average_commission_target",
            f"average_commission_target must be 0 or at least {MIN_COMMISSION_PERCENT:g}",
        )
    split_percentage = _percent(goal.split_percentage, DEFAULT_SPLIT_PERCENTAGE, "split_percentage")

    conversion_rate = _finite(
        goal.conversion_rate if goal.conversion_rate is not None else DEFAULT_CONVERSION_RATE,
        "conversion_rate",
    )
    if not 0 <= conversion_rate <= MAX_CONVERSION_RATE:
        raise InvalidPlanError(
            "conversion_rate", f"conversion_rate must be between 0 and {MAX_CONVERSION_RATE:g}"
        )

    working_weeks = goal.working_weeks if goal.working_weeks is not None else DEFAULT_WORKING_WEEKS
    if not MIN_WORKING_WEEKS <= working_weeks <= MAX_WORKING_WEEKS:
        raise InvalidPlanError(
            "working_weeks",
            f"working_weeks must be between {MIN_WORKING_WEEKS} and {MAX_WORKING_WEEKS}",
        )

    currency = (goal.currency or DEFAULT_CURRENCY).strip().upper()
    if currency not in SUPPORTED_CURRENCIES:
        raise InvalidPlanError("currency", f"currency must be one of {', '.join(SUPPORTED_CURRENCIES)}")

    listings_goal_annual = goal.listings_goal_annual or 0
    if not 0 <= listings_goal_annual <= MAX_LISTINGS_GOAL:
        raise InvalidPlanError(
            "listings_goal_annual", f"listings_goal_annual must be between 0 and {MAX_LISTINGS_GOAL}"
        )

    pl_to_listing = _finite(
        goal.pl_to_listing_conversion_target
        if goal.pl_to_listing_conversion_target is not None
        else DEFAULT_PL_TO_LISTING_CONVERSION,
        "pl_to_listing_conversion_target",
    )
    if not MIN_PL_TO_LISTING_CONVERSION <= pl_to_listing <= 100:
        raise InvalidPlanError(
            "pl_to_listing_conversion_target",
            f"pl_to_listing_conversion_target must be between {MIN_PL_TO_LISTING_CONVERSION:g} and 100",
        )

    start_date = goal.listings_goal_start_date
    end_date = goal.listings_goal_end_date
    if (start_date is None) != (end_date is None):
        missing = "listings_goal_end_date" if end_date is None else "listings_goal_start_date"
        raise InvalidPlanError(missing, "listings goal window needs both a start and an end date")
    if start_date is not None and end_date is not None and end_date < start_date:
        raise InvalidPlanError(
            "listings_goal_end_date", "listings_goal_end_date cannot precede the start date"
        )

    return GoalPlan(
        annual_billing_goal=annual_billing_goal,
        monthly_living_expenses=monthly_living_expenses,
        average_ticket_target=average_ticket_target,
        average_commission_target=average_commission_target,
        currency=currency,
        split_percentage=split_percentage,
        conversion_rate=conversion_rate,
        working_weeks=working_weeks,
        listings_goal_annual=listings_goal_annual,
        pl_to_listing_conversion_target=pl_to_listing,
        listings_goal_start_date=start_date,
        listings_goal_end_date=end_date,
    )


def _finite(value: float, field: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise InvalidPlanError(field, f"{field} must be a finite number")
    return number


def _money(value: Optional[float], field: str) -> float:
    amount = _finite(value if value is not None else 0.0, field)
    if amount < 0:
        raise InvalidPlanError(field, f"{field} cannot be negative")
    if amount > MAX_MONEY_AMOUNT:
        raise InvalidPlanError(field, f"{field} cannot exceed {MAX_MONEY_AMOUNT:g}")
    return amount


def _percent(value: Optional[float], default: float, field: str) -> float:
    percent = _finite(value if value is not None else default, field)
    if not 0 <= percent <= 100:
        raise InvalidPlanError(field, f"{field} must be between 0 and 100")
    return percent
