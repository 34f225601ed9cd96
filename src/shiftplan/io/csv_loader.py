"""CSV loading and saving for employee rosters."""
import json
import numbers
from pathlib import Path
from typing import List, Union

import pandas as pd

from shiftplan.models.employee import Employee, TempHoursAdjustment
from shiftplan.models.rules import rule_from_dict

ROSTER_COLUMNS = ["id", "name", "weekly_hours", "active", "rules", "temp_hours"]


def _safe_int(value, default: int = 0) -> int:
    """Safely convert value to int."""
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def _safe_bool(value, default: bool = False) -> bool:
    """Safely convert value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Number):
        return bool(value != 0)
    if isinstance(value, str):
        if not value.strip():
            return default
        return value.strip().lower() in ("1", "true", "yes", "si", "sí")
    return default


def _json_list(value) -> list:
    text = str(value).strip()
    if not text:
        return []
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list, got {text!r}")
    return data


def load_roster(source: Union[str, Path, pd.DataFrame]) -> List[Employee]:
    """
    Load employees from a CSV file or DataFrame.

    ``rules`` and ``temp_hours`` columns, when present, hold JSON lists.

    Args:
        source: Path to CSV file or pandas DataFrame

    Returns:
        List of Employee objects
    """
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        df = pd.read_csv(source, dtype={"id": str})

    df = df.fillna("")

    if "id" not in df.columns:
        raise ValueError("CSV must have an 'id' column")

    employees = []
    for _, row in df.iterrows():
        emp_id = str(row["id"]).strip()
        if not emp_id:
            continue
        employees.append(Employee(
            id=emp_id,
            name=str(row.get("name", "")).strip(),
            weekly_hours=_safe_int(row.get("weekly_hours"), 40),
            active=_safe_bool(row.get("active", True), default=True),
            rules=[rule_from_dict(r) for r in _json_list(row.get("rules", ""))],
            temp_hours=[TempHoursAdjustment.from_dict(t) for t in _json_list(row.get("temp_hours", ""))],
        ))
    return employees


def save_roster(employees: List[Employee], path: Union[str, Path]) -> None:
    """
    Save employees to a CSV file.

    Args:
        employees: List of Employee objects
        path: Output path
    """
    if not employees:
        df = pd.DataFrame(columns=ROSTER_COLUMNS)
    else:
        rows = []
        for e in employees:
            d = e.to_dict()
            d["active"] = int(d["active"])
            d["rules"] = json.dumps(d["rules"]) if d["rules"] else ""
            d["temp_hours"] = json.dumps(d["temp_hours"]) if d["temp_hours"] else ""
            rows.append(d)
        df = pd.DataFrame(rows, columns=ROSTER_COLUMNS)

    df.to_csv(path, index=False)
