from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from src.analytics.goal_plan import normalize_goal_plan
from src.core.errors import InvalidPlanError
from src.schemas.objectives import GoalInput


def test_defaults_fill_missing_fields():
    plan = normalize_goal_plan(GoalInput(annual_billing_goal=100000, average_ticket_target=150000))

    assert plan.split_percentage == 50
    assert plan.conversion_rate == 6
    assert plan.working_weeks == 48
    assert plan.average_commission_target == 3
    assert plan.currency == "USD"
    assert plan.pl_to_listing_conversion_target == 40
    assert plan.listings_goal_annual == 0
    assert plan.monthly_living_expenses == 0


def test_empty_goal_normalizes_to_zero_money():
    plan = normalize_goal_plan(GoalInput())

    assert plan.annual_billing_goal == 0
    assert plan.average_ticket_target == 0
    assert not plan.has_listings_window


def test_explicit_values_are_kept():
    plan = normalize_goal_plan(
        GoalInput(
            annual_billing_goal=80000,
            split_percentage=45,
            conversion_rate=0,
            working_weeks=52,
            currency="ars",
            average_commission_target=0,
        )
    )

    assert plan.split_percentage == 45
    assert plan.conversion_rate == 0
    assert plan.working_weeks == 52
    assert plan.currency == "ARS"
    assert plan.average_commission_target == 0


@pytest.mark.parametrize(
    ("goal", "field"),
    [
        (GoalInput(annual_billing_goal=-1), "annual_billing_goal"),
        (GoalInput(monthly_living_expenses=-50), "monthly_living_expenses"),
        (GoalInput(average_ticket_target=-10), "average_ticket_target"),
        (GoalInput(split_percentage=101), "split_percentage"),
        (GoalInput(split_percentage=-0.5), "split_percentage"),
        (GoalInput(average_commission_target=120), "average_commission_target"),
        (GoalInput(conversion_rate=-2), "conversion_rate"),
        (GoalInput(working_weeks=0), "working_weeks"),
        (GoalInput(working_weeks=53), "working_weeks"),
        (GoalInput(listings_goal_annual=-3), "listings_goal_annual"),
        (GoalInput(pl_to_listing_conversion_target=0), "pl_to_listing_conversion_target"),
        (GoalInput(pl_to_listing_conversion_target=140), "pl_to_listing_conversion_target"),
        (GoalInput(currency="EUR"), "currency"),
        (GoalInput(annual_billing_goal=float("inf")), "annual_billing_goal"),
        (GoalInput(annual_billing_goal=1e308, split_percentage=100), "annual_billing_goal"),
        (GoalInput(monthly_living_expenses=2e12), "monthly_living_expenses"),
        (GoalInput(annual_billing_goal=1e10, average_ticket_target=1e-300), "average_ticket_target"),
        (GoalInput(average_commission_target=1e-300), "average_commission_target"),
        (GoalInput(conversion_rate=1e300), "conversion_rate"),
        (GoalInput(listings_goal_annual=1_000_000), "listings_goal_annual"),
        (
            GoalInput(listings_goal_annual=20, pl_to_listing_conversion_target=1e-320),
            "pl_to_listing_conversion_target",
        ),
    ],
)
def test_invalid_fields_are_rejected(goal, field):
    with pytest.raises(InvalidPlanError) as exc_info:
        normalize_goal_plan(goal)

    assert exc_info.value.field == field
    assert exc_info.value.details == {"field": field}
    assert exc_info.value.status_code == 422


def test_window_requires_both_dates():
    with pytest.raises(InvalidPlanError) as exc_info:
        normalize_goal_plan(GoalInput(listings_goal_start_date=date(2026, 1, 1)))

    assert exc_info.value.field == "listings_goal_end_date"

    with pytest.raises(InvalidPlanError) as exc_info:
        normalize_goal_plan(GoalInput(listings_goal_end_date=date(2026, 3, 1)))

    assert exc_info.value.field == "listings_goal_start_date"


def test_window_end_cannot_precede_start():
    with pytest.raises(InvalidPlanError) as exc_info:
        normalize_goal_plan(
            GoalInput(
                listings_goal_start_date=date(2026, 6, 1),
                listings_goal_end_date=date(2026, 5, 31),
            )
        )

    assert exc_info.value.field == "listings_goal_end_date"


def test_window_with_both_dates_is_kept():
    plan = normalize_goal_plan(
        GoalInput(
            listings_goal_start_date=date(2026, 1, 1),
            listings_goal_end_date=date(2026, 4, 2),
        )
    )

    assert plan.has_listings_window
    assert plan.listings_goal_end_date == date(2026, 4, 2)


def test_plan_is_immutable():
    plan = normalize_goal_plan(GoalInput(annual_billing_goal=1000))

    with pytest.raises(ValidationError):
        plan.annual_billing_goal = 5
