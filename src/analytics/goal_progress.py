from __future__ import annotations

from src.schemas.objectives import ActualsSnapshot, GoalPlan, ProgressReport
from src.shared.numbers import ceil_or_zero, finite_or_zero, safe_ratio

MONTHS_PER_YEAR = 12


def compute_progress(plan: GoalPlan, actuals: ActualsSnapshot) -> ProgressReport:
    """Derive the deal and prospecting plan for one agent-year and score the actuals.

    Zero denominators resolve to 0 (or 1 for the viability ratio), never to
    an error, so the report is safe to render from a goal that is still being
    typed. Intermediates that overflow resolve to 0 as well.
    """
    commission_per_deal = finite_or_zero(
        plan.average_ticket_target * plan.average_commission_target / 100
    )
    estimated_puntas_needed = ceil_or_zero(safe_ratio(plan.annual_billing_goal, commission_per_deal))
    required_prospecting_annual = finite_or_zero(estimated_puntas_needed * plan.conversion_rate)
    required_prospecting_weekly = safe_ratio(required_prospecting_annual, plan.working_weeks)

    net_income_goal = finite_or_zero(plan.annual_billing_goal * plan.split_percentage / 100)
    annual_expenses = finite_or_zero(plan.monthly_living_expenses * MONTHS_PER_YEAR)
    financial_viability_ratio = safe_ratio(net_income_goal, annual_expenses, default=1.0)

    income = actuals.actual_gross_income
    progress_ratio = safe_ratio(income, plan.annual_billing_goal)
    progress_percentage = min(max(progress_ratio * 100, 0.0), 100.0)
    gap_to_goal = max(plan.annual_billing_goal - income, 0.0)

    run_rate_projection = safe_ratio(income, actuals.elapsed_fraction_of_year, default=income)

    return ProgressReport(
        currency=plan.currency,
        annual_billing_goal=plan.annual_billing_goal,
        actual_gross_income=income,
        actual_puntas_count=actuals.actual_puntas_count,
        conversion_rate=plan.conversion_rate,
        commission_per_deal=commission_per_deal,
        estimated_puntas_needed=estimated_puntas_needed,
        estimated_total_puntas_target=actuals.actual_puntas_count + estimated_puntas_needed,
        required_prospecting_annual=required_prospecting_annual,
        required_prospecting_weekly=required_prospecting_weekly,
        net_income_goal=net_income_goal,
        financial_viability_ratio=financial_viability_ratio,
        progress_ratio=progress_ratio,
        progress_percentage=progress_percentage,
        gap_to_goal=gap_to_goal,
        run_rate_projection=run_rate_projection,
        is_on_track=run_rate_projection >= plan.annual_billing_goal,
    )
