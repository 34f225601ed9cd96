"""JSON run requests and plan output."""
import json
from pathlib import Path
from typing import Any, Dict, Union

from shiftplan.errors import InvalidInputError
from shiftplan.models.request import WeekRequest
from shiftplan.models.schedule import WeekPlan
from shiftplan.models.validated import RunRequestModel


def load_request(source: Union[str, Path, Dict[str, Any]]) -> WeekRequest:
    """
    Load and validate a run request from a JSON file or a dict.

    Args:
        source: Path to a JSON file or an already-decoded payload

    Returns:
        WeekRequest ready for solve_request

    Raises:
        InvalidInputError: if the file cannot be read, is not valid JSON or
            fails validation
    """
    if isinstance(source, dict):
        payload = source
    else:
        try:
            payload = json.loads(Path(source).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"{source}: not valid JSON ({e})") from e
        except OSError as e:
            raise InvalidInputError(f"{source}: cannot read request ({e.strerror or e})") from e
    if not isinstance(payload, dict):
        raise InvalidInputError("Run request must be a JSON object")
    return RunRequestModel.parse_request(payload).to_domain()


def save_plan(plan: WeekPlan, path: Union[str, Path]) -> None:
    """Write a plan (assignments and reports) as JSON."""
    Path(path).write_text(json.dumps(plan.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
