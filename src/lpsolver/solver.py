"""
LP formulation and solve.

``solve`` takes a maximization problem in caller form (0-based arrays),
formulates it against an lp_solve-style engine (1-based, padded arrays), runs
the engine, retries once with scaling disabled if the first status is not
usable, and copies the results into an ``LPResult``.
"""

import logging
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np

from .cbc_engine import CbcEngine
from .data_models import LPConstraint, LPResult, SolveStatus
from .engine import NEUTRAL, SCALE_NONE, SolverEngine
from .errors import InvalidInputError, SolveError, SolverError
from .highs_engine import HighsEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[int, int], SolverEngine]

ENGINE_REGISTRY: Dict[str, EngineFactory] = {
    "highs": HighsEngine,
    "cbc": CbcEngine,
}


def pad_one_zero_in_front(array: Sequence[float]) -> np.ndarray:
    """
    Prepend a 0.0 sentinel so that user data starts at index 1, as the engine
    expects.
    """
    values = np.asarray(array, dtype=float)
    padded = np.zeros(len(values) + 1)
    padded[1:] = values
    return padded


def is_solution_valid(status: int) -> bool:
    return SolveStatus.from_code(status).usable


def resolve_engine(engine: Union[str, EngineFactory]) -> EngineFactory:
    if callable(engine):
        return engine
    if engine not in ENGINE_REGISTRY:
        raise SolverError(f"Unknown solver engine: {engine}")
    return ENGINE_REGISTRY[engine]


def _matches(array: Optional[Sequence], n: int) -> bool:
    return array is not None and len(array) == n


def _validate(objective: Sequence[float], constraints: Sequence[LPConstraint]) -> int:
    n = len(objective)
    if n == 0:
        raise InvalidInputError("The objective must have at least one coefficient")
    for i, constraint in enumerate(constraints):
        if not isinstance(constraint, LPConstraint):
            raise InvalidInputError(
                f"Constraint {i} is a {type(constraint).__name__}, expected LPConstraint"
            )
        if len(constraint.body) != n:
            raise InvalidInputError(
                f"Constraint {i} has {len(constraint.body)} coefficients, expected {n}"
            )
    return n


def solve(
    objective: Sequence[float],
    constraints: Sequence[LPConstraint],
    lower_bounds: Optional[Sequence[float]] = None,
    upper_bounds: Optional[Sequence[float]] = None,
    integer_variables: Optional[Sequence[bool]] = None,
    scaling_mode: Optional[int] = None,
    engine: Union[str, EngineFactory] = "highs",
) -> LPResult:
    """
    Maximize ``objective · x`` subject to ``constraints``.

    Args:
        objective: One coefficient per decision variable
        constraints: Constraints in row order; row i gets dual index i + 1
        lower_bounds: Per-variable lower bounds, ignored unless exactly n long
        upper_bounds: Per-variable upper bounds, ignored unless exactly n long
        integer_variables: Integrality flags, ignored unless exactly n long
        scaling_mode: Engine scaling mode for the first attempt (None keeps the
            engine default)
        engine: Registered engine name or a ``(rows, columns)`` factory

    Returns:
        LPResult with objective value, primal values and the engine's dual array

    Raises:
        InvalidInputError: empty objective or a constraint body of the wrong length
        SolveError: both the first attempt and the unscaled retry were unusable
    """
    n = _validate(objective, constraints)
    m = len(constraints)
    factory = resolve_engine(engine)

    result = LPResult.empty(n, m)

    lp = factory(0, n)
    try:
        lp.set_verbose(NEUTRAL)
        lp.set_maxim()
        lp.set_obj_fn(pad_one_zero_in_front(objective))

        if scaling_mode is not None:
            lp.set_scaling(scaling_mode)

        for name, array in (("lower_bounds", lower_bounds),
                            ("upper_bounds", upper_bounds),
                            ("integer_variables", integer_variables)):
            if array is not None and not _matches(array, n):
                logger.debug(f"Ignoring {name}: {len(array)} entries for {n} variables")

        # column i + 1 on the engine side
        if _matches(lower_bounds, n):
            for i in range(n):
                lp.set_lowbo(i + 1, lower_bounds[i])
        if _matches(upper_bounds, n):
            for i in range(n):
                lp.set_upbo(i + 1, upper_bounds[i])
        if _matches(integer_variables, n):
            for i in range(n):
                lp.set_int(i + 1, bool(integer_variables[i]))

        for constraint in constraints:
            lp.add_constraint(pad_one_zero_in_front(constraint.body),
                              int(constraint.relation), constraint.rhs)

        logger.debug(f"Formulated LP: {n} variables, {m} constraints, scaling={lp.get_scaling()}")

        status = SolveStatus.from_code(lp.solve())
        if not status.usable:
            logger.warning(
                f"Solve failed with status {status.code} ({lp.get_statustext(status.code)}), "
                f"retrying without scaling"
            )
            lp.set_scaling(SCALE_NONE)
            status = SolveStatus.from_code(lp.solve())
            if not status.usable:
                status_text = lp.get_statustext(status.code)
                logger.error(f"Solve failed again with status {status.code} ({status_text})")
                raise SolveError(status.code, status_text)

        result.objective_value = float(lp.get_objective())
        result.variable_values[:] = lp.get_variables()
        result.dual_solution[:] = lp.get_dual_solution()
    finally:
        lp.delete_lp()

    logger.debug(f"Solved LP ({status.kind.value}): objective={result.objective_value}")
    return result
