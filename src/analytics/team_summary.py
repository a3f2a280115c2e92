from __future__ import annotations

from typing import Iterable

from src.schemas.objectives import ProgressReport, TeamSummary


def aggregate_team(reports: Iterable[ProgressReport]) -> TeamSummary:
    """Fold agent reports into one supervisory summary.

    ``avg_progress`` is weighted by goal size: total income over total goal,
    not the mean of each agent's percentage.
    """
    summary = TeamSummary()
    for report in reports:
        consumed_prospecting = report.actual_puntas_count * report.conversion_rate
        summary.agent_count += 1
        summary.total_team_goal += report.annual_billing_goal
        summary.total_team_income += report.actual_gross_income
        summary.total_prospecting_needed += max(
            report.required_prospecting_annual - consumed_prospecting, 0.0
        )
        summary.total_puntas_needed += report.estimated_puntas_needed
        summary.total_puntas_closed += report.actual_puntas_count
        if report.annual_billing_goal > 0:
            summary.agents_with_goals += 1
            if report.is_on_track:
                summary.on_track_count += 1
    summary.avg_progress = _weighted_progress(summary.total_team_income, summary.total_team_goal)
    return summary


def merge_team_summaries(summaries: Iterable[TeamSummary]) -> TeamSummary:
    """Combine per-organization summaries, re-deriving the weighted progress."""
    merged = TeamSummary()
    for summary in summaries:
        merged.agent_count += summary.agent_count
        merged.agents_with_goals += summary.agents_with_goals
        merged.on_track_count += summary.on_track_count
        merged.total_team_goal += summary.total_team_goal
        merged.total_team_income += summary.total_team_income
        merged.total_prospecting_needed += summary.total_prospecting_needed
        merged.total_puntas_needed += summary.total_puntas_needed
        merged.total_puntas_closed += summary.total_puntas_closed
    merged.avg_progress = _weighted_progress(merged.total_team_income, merged.total_team_goal)
    return merged


def _weighted_progress(total_income: float, total_goal: float) -> float:
    return (total_income / total_goal) * 100 if total_goal > 0 else 0.0
