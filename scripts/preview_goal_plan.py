from __future__ import annotations

import argparse
import json
import sys

from src.analytics.goal_plan import normalize_goal_plan
from src.analytics.goal_progress import compute_progress
from src.analytics.listings_funnel import project_funnel
from src.core.errors import InvalidPlanError
from src.schemas.objectives import ActualsSnapshot, GoalInput


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Score a goal definition offline and print the progress and funnel reports."
    )
    parser.add_argument("goal_file", help="JSON file with the goal fields (camelCase or snake_case).")
    parser.add_argument(
        "--actuals-file",
        default=None,
        help="Optional JSON file with the actuals snapshot; defaults to zero actuals.",
    )
    return parser.parse_args()


def load_json(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def main() -> None:
    args = parse_args()
    goal = GoalInput.model_validate(load_json(args.goal_file))
    actuals = (
        ActualsSnapshot.model_validate(load_json(args.actuals_file))
        if args.actuals_file
        else ActualsSnapshot()
    )
    try:
        plan = normalize_goal_plan(goal)
    except InvalidPlanError as exc:
        print(f"Invalid goal ({exc.field}): {exc.message}", file=sys.stderr)
        raise SystemExit(2) from exc

    funnel = project_funnel(plan, actuals)
    result = {
        "plan": plan.model_dump(mode="json", by_alias=True),
        "progress": compute_progress(plan, actuals).model_dump(mode="json", by_alias=True),
        "funnel": funnel.model_dump(mode="json", by_alias=True) if funnel else None,
    }
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
