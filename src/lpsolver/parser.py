"""
Parser for JSON problem files.

Format:
    {
      "objective": [3, 2],
      "constraints": [{"body": [1, 1], "relation": "<=", "rhs": 4}],
      "lower_bounds": [0, 0],          (optional)
      "upper_bounds": [10, 10],        (optional)
      "integer": [false, true],        (optional)
      "scaling_mode": 4                (optional)
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Union

from .data_models import LPConstraint, LPProblem
from .errors import InvalidInputError

logger = logging.getLogger(__name__)


class ProblemFormatError(ValueError):
    pass


def _number_list(data: Mapping[str, Any], key: str, required: bool = False):
    if key not in data or data[key] is None:
        if required:
            raise ProblemFormatError(f"Missing '{key}'")
        return None
    values = data[key]
    if not isinstance(values, list):
        raise ProblemFormatError(f"'{key}' must be a list")
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError):
        raise ProblemFormatError(f"'{key}' must contain only numbers") from None


def _parse_constraint(index: int, entry: Any) -> LPConstraint:
    if not isinstance(entry, Mapping):
        raise ProblemFormatError(f"Constraint {index} must be an object")
    missing = [k for k in ("body", "relation", "rhs") if k not in entry]
    if missing:
        raise ProblemFormatError(f"Constraint {index} is missing {', '.join(missing)}")
    body = _number_list(entry, "body", required=True)
    try:
        return LPConstraint(body, entry["relation"], float(entry["rhs"]))
    except InvalidInputError as e:
        raise ProblemFormatError(f"Constraint {index}: {e}") from None
    except (TypeError, ValueError):
        raise ProblemFormatError(f"Constraint {index}: 'rhs' must be a number") from None


def parse_problem(data: Mapping[str, Any]) -> LPProblem:
    """Build an LPProblem from an already decoded JSON document."""
    if not isinstance(data, Mapping):
        raise ProblemFormatError("The problem must be a JSON object")

    objective = _number_list(data, "objective", required=True)
    if not objective:
        raise ProblemFormatError("'objective' must not be empty")

    raw_constraints = data.get("constraints")
    if raw_constraints is None:
        raw_constraints = []
    if not isinstance(raw_constraints, list):
        raise ProblemFormatError("'constraints' must be a list")
    constraints: List[LPConstraint] = [
        _parse_constraint(i, entry) for i, entry in enumerate(raw_constraints)
    ]

    integer = data.get("integer")
    if integer is not None:
        if not isinstance(integer, list) or not all(isinstance(v, bool) for v in integer):
            raise ProblemFormatError("'integer' must be a list of booleans")

    scaling_mode = data.get("scaling_mode")
    if scaling_mode is not None and (isinstance(scaling_mode, bool) or not isinstance(scaling_mode, int)):
        raise ProblemFormatError("'scaling_mode' must be an integer")

    return LPProblem(
        objective=objective,
        constraints=constraints,
        lower_bounds=_number_list(data, "lower_bounds"),
        upper_bounds=_number_list(data, "upper_bounds"),
        integer_variables=integer,
        scaling_mode=scaling_mode,
    )


def parse_problem_file(path: Union[str, Path]) -> LPProblem:
    """
    Parse a JSON problem file.

    Args:
        path: Path to the problem file

    Returns:
        LPProblem ready to be solved
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProblemFormatError(f"{path}: invalid JSON ({e})") from None

    problem = parse_problem(data)
    logger.debug(f"Parsed {path}: {problem}")
    return problem
