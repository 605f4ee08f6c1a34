"""
CBC backend built on PuLP.

The stored formulation is rebuilt as a ``pulp.LpProblem`` on every run and
handed to the CBC binary that ships with PuLP. The scaling mode is forwarded
to CBC's own ``scaling`` option.
"""

import logging
from typing import List, Optional

import numpy as np
import pulp

from .engine import (
    EQ,
    GE,
    INFEASIBLE,
    LE,
    NORMAL,
    NOTRUN,
    NUMFAILURE,
    OPTIMAL,
    SCALE_BASE_MASK,
    SCALE_CURTISREID,
    SCALE_DYNUPDATE,
    SCALE_GEOMETRIC,
    SCALE_NONE,
    SUBOPTIMAL,
    UNBOUNDED,
    EngineSolution,
    MatrixEngine,
)

logger = logging.getLogger(__name__)

_PULP_SENSE = {
    LE: pulp.LpConstraintLE,
    GE: pulp.LpConstraintGE,
    EQ: pulp.LpConstraintEQ,
}


def cbc_scaling_option(mode: int) -> Optional[str]:
    """
    Translate an lp_solve scaling mode into a CBC ``scaling`` keyword.

    Returns None when CBC should keep its own default.
    """
    base = mode & SCALE_BASE_MASK
    if base == SCALE_NONE:
        return "off"
    if mode & SCALE_DYNUPDATE:
        return "dynamic"
    if base == SCALE_GEOMETRIC:
        return "geometric"
    if base == SCALE_CURTISREID:
        return "automatic"
    if base < SCALE_GEOMETRIC:
        return "equilibrium"
    return None


class CbcEngine(MatrixEngine):
    """lp_solve-style engine running CBC through PuLP."""

    def _run(self) -> EngineSolution:
        n = self.columns
        prob = pulp.LpProblem("lpsolver", pulp.LpMaximize if self.maximize else pulp.LpMinimize)

        variables: List[pulp.LpVariable] = []
        for j in range(n):
            lower = self.lower_bounds[j]
            upper = self.upper_bounds[j]
            variables.append(pulp.LpVariable(
                f"C{j + 1}",
                lowBound=float(lower) if np.isfinite(lower) else None,
                upBound=float(upper) if np.isfinite(upper) else None,
                cat=pulp.LpInteger if self.integer_columns[j] else pulp.LpContinuous,
            ))

        # Zero coefficients are kept so that every column is part of the model
        prob += pulp.LpAffineExpression(
            [(variables[j], float(self.objective_coefficients[j])) for j in range(n)]
        )

        A, relations, rhs = self.constraint_matrix()
        constraints = []
        for i in range(self.rows):
            expr = pulp.LpAffineExpression([(variables[j], float(A[i, j])) for j in range(n)])
            constraint = pulp.LpConstraint(expr, sense=_PULP_SENSE[int(relations[i])],
                                           rhs=float(rhs[i]), name=f"R{i + 1}")
            prob += constraint
            constraints.append(constraint)

        options = []
        keyword = cbc_scaling_option(self.get_scaling())
        if keyword is not None:
            options.append(f"scaling {keyword}")

        logger.debug(f"CBC run: {n} columns, {self.rows} rows, options={options}")
        prob.solve(pulp.PULP_CBC_CMD(msg=self.verbosity >= NORMAL, options=options))

        status = self._map_status(prob.status, prob.sol_status)
        if status not in (OPTIMAL, SUBOPTIMAL):
            logger.debug(f"CBC finished with status {pulp.LpStatus[prob.status]}")
            return EngineSolution(status)

        x = np.array([self._value(v, j) for j, v in enumerate(variables)], dtype=float)
        objective = float(self.objective_coefficients @ x)

        duals = np.zeros(1 + self.rows + n)
        if not self.integer_columns.any():
            for i, constraint in enumerate(constraints):
                duals[1 + i] = constraint.pi if constraint.pi is not None else 0.0
            for j, v in enumerate(variables):
                duals[1 + self.rows + j] = v.dj if v.dj is not None else 0.0

        return EngineSolution(status, objective, x, duals)

    def _value(self, variable: pulp.LpVariable, j: int) -> float:
        if variable.varValue is not None:
            return float(variable.varValue)
        # CBC omits columns that appear nowhere with a non-zero coefficient
        lower = self.lower_bounds[j]
        return float(lower) if np.isfinite(lower) else 0.0

    @staticmethod
    def _map_status(status: int, sol_status: int) -> int:
        if status == pulp.LpStatusOptimal:
            if sol_status == pulp.LpSolutionIntegerFeasible:
                return SUBOPTIMAL
            return OPTIMAL
        if status == pulp.LpStatusInfeasible:
            return INFEASIBLE
        if status == pulp.LpStatusUnbounded:
            return UNBOUNDED
        if status == pulp.LpStatusNotSolved:
            return NOTRUN
        return NUMFAILURE
