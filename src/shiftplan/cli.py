from __future__ import annotations

import argparse
import json

from shiftplan.errors import InvalidInputError
from shiftplan.io.json_loader import load_request, save_plan
from shiftplan.solver.optimizer import optimize_week
from shiftplan.solver.validation import validate_permanent_restrictions, validate_time_off
from shiftplan.utils.logging_setup import setup_logging
from shiftplan.utils.structured_logging import configure_structlog


def _log_level(verbose: int) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return "WARNING"


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Generate a store's weekly shift plan")
    p.add_argument("--input", required=True, help="Path to the JSON run request")
    p.add_argument("--seed", type=int, default=None, help="Random seed (default: request seed or fresh)")
    p.add_argument("--tries", type=int, default=1, help="Seeds to try, keeping the lowest shortfall")
    p.add_argument("--output", default=None, help="Write the plan as JSON to this path")
    p.add_argument("--grid", action="store_true", help="Print the employee x date grid")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output (summary + reports)")
    p.add_argument("--log-file", default=None, help="Also log to this file")
    p.add_argument("-v", "--verbose", action="count", default=0)
    args = p.parse_args(argv)

    # JSON mode keeps stdout clean for the payload
    setup_logging(
        level=_log_level(args.verbose),
        log_file=args.log_file,
        console_level="ERROR" if args.json_out else None,
    )
    configure_structlog(json_output=args.json_out)

    try:
        request = load_request(args.input)
        plan, seed, shortfall = optimize_week(request, tries=args.tries, seed=args.seed)
    except InvalidInputError as e:
        print(f"Invalid input: {e}")
        return 2

    warnings = validate_permanent_restrictions(plan, request.employees, early_morning_max_days=request.config.early_morning_max_days)
    warnings += validate_time_off(plan, request.time_off)
    if args.output:
        save_plan(plan, args.output)

    if args.json_out:
        print(json.dumps({
            "summary": plan.summary(),
            "reports": [r.to_dict() for r in plan.reports.values()],
            "warnings": warnings,
        }, ensure_ascii=False, indent=2))
    else:
        print("Summary:")
        for k, v in plan.summary().items():
            print(f" - {k}: {v}")
        print(f"Assignments: {len(plan.assignments)} rows")
        for w in warnings:
            print(f"WARNING: {w}")
        if args.grid:
            print(plan.to_matrix().to_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
