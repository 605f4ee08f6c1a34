"""
HiGHS backend built on scipy.optimize.linprog.

linprog minimizes, so a maximization is solved as the minimization of the
negated objective. GE rows are negated into the ``A_ub`` block. Duals are
reported as the derivative of the engine objective with respect to each
right-hand side (constraints) and each active bound (reduced costs).
"""

import logging

import numpy as np
from scipy.optimize import linprog

from .engine import (
    EQ,
    GE,
    INFEASIBLE,
    LE,
    NORMAL,
    NUMFAILURE,
    OPTIMAL,
    PROCFAIL,
    SUBOPTIMAL,
    TIMEOUT,
    UNBOUNDED,
    EngineSolution,
    MatrixEngine,
)

logger = logging.getLogger(__name__)


def _bound(value: float):
    return None if not np.isfinite(value) else float(value)


def _marginals(res, name: str, size: int) -> np.ndarray:
    block = res.get(name)
    marginals = getattr(block, "marginals", None) if block is not None else None
    if marginals is None:
        return np.zeros(size)
    arr = np.asarray(marginals, dtype=float)
    if arr.shape != (size,):
        return np.zeros(size)
    return np.nan_to_num(arr)


class HighsEngine(MatrixEngine):
    """
    lp_solve-style engine running HiGHS through scipy.

    scipy does not expose the HiGHS scaling strategy, so a scaling mode whose
    base is SCALE_NONE turns HiGHS presolve off instead.
    """

    def _run(self) -> EngineSolution:
        n = self.columns
        sense = -1.0 if self.maximize else 1.0
        c = sense * self.objective_coefficients

        A, relations, rhs = self.constraint_matrix()
        le_rows = np.flatnonzero(relations == LE)
        ge_rows = np.flatnonzero(relations == GE)
        eq_rows = np.flatnonzero(relations == EQ)

        A_ub = np.vstack([A[le_rows], -A[ge_rows]])
        b_ub = np.concatenate([rhs[le_rows], -rhs[ge_rows]])
        A_eq = A[eq_rows]
        b_eq = rhs[eq_rows]

        bounds = [(_bound(lo), _bound(up)) for lo, up in zip(self.lower_bounds, self.upper_bounds)]
        is_mip = bool(self.integer_columns.any())
        integrality = self.integer_columns.astype(int) if is_mip else None

        options = {
            "disp": self.verbosity >= NORMAL,
            "presolve": not self.scaling_disabled,
        }

        logger.debug(
            f"HiGHS run: {n} columns, {len(le_rows)} LE / {len(ge_rows)} GE / {len(eq_rows)} EQ rows, "
            f"mip={is_mip}, presolve={options['presolve']}"
        )

        res = linprog(
            c,
            A_ub=A_ub if A_ub.shape[0] else None,
            b_ub=b_ub if A_ub.shape[0] else None,
            A_eq=A_eq if A_eq.shape[0] else None,
            b_eq=b_eq if A_eq.shape[0] else None,
            bounds=bounds,
            method="highs",
            integrality=integrality,
            options=options,
        )

        status = self._map_status(res)
        if status not in (OPTIMAL, SUBOPTIMAL):
            logger.debug(f"HiGHS finished with status {res.status}: {res.message}")
            return EngineSolution(status)

        x = np.asarray(res.x, dtype=float)
        objective = float(self.objective_coefficients @ x)

        duals = np.zeros(1 + self.rows + n)
        if not is_mip:
            # d(engine objective)/d(rhs); the minimized objective is sense * engine objective
            ub_marginals = _marginals(res, "ineqlin", A_ub.shape[0])
            eq_marginals = _marginals(res, "eqlin", A_eq.shape[0])
            duals[1 + le_rows] = sense * ub_marginals[: len(le_rows)]
            duals[1 + ge_rows] = -sense * ub_marginals[len(le_rows):]
            duals[1 + eq_rows] = sense * eq_marginals
            bound_marginals = _marginals(res, "lower", n) + _marginals(res, "upper", n)
            duals[1 + self.rows:] = sense * bound_marginals
            # sense flips turn zero marginals into -0.0
            duals += 0.0

        return EngineSolution(status, objective, x, duals)

    @staticmethod
    def _map_status(res) -> int:
        if res.status == 0:
            return OPTIMAL
        if res.status == 1:
            return SUBOPTIMAL if res.get("x") is not None else TIMEOUT
        if res.status == 2:
            return INFEASIBLE
        if res.status == 3:
            return UNBOUNDED
        if res.status == 4:
            return NUMFAILURE
        return PROCFAIL
