import numpy as np
import pulp
import pytest

from lpsolver import CbcEngine, LPConstraint, Relation, SolveError, solve
from lpsolver.cbc_engine import cbc_scaling_option
from lpsolver.engine import (
    INFEASIBLE,
    NOTRUN,
    NUMFAILURE,
    OPTIMAL,
    SCALE_CURTISREID,
    SCALE_DEFAULT,
    SCALE_DYNUPDATE,
    SCALE_EXTREME,
    SCALE_GEOMETRIC,
    SCALE_MEAN,
    SCALE_NONE,
    SUBOPTIMAL,
    UNBOUNDED,
)

cbc_available = pytest.mark.skipif(
    not pulp.PULP_CBC_CMD(msg=False).available(),
    reason="CBC binary not available",
)


@pytest.mark.parametrize("mode,expected", [
    (SCALE_NONE, "off"),
    (SCALE_NONE + SCALE_DYNUPDATE, "off"),
    (SCALE_GEOMETRIC, "geometric"),
    (SCALE_DEFAULT, "geometric"),
    (SCALE_GEOMETRIC + SCALE_DYNUPDATE, "dynamic"),
    (SCALE_EXTREME, "equilibrium"),
    (SCALE_MEAN, "equilibrium"),
    (SCALE_CURTISREID, "automatic"),
])
def test_cbc_scaling_option(mode, expected):
    assert cbc_scaling_option(mode) == expected


@pytest.mark.parametrize("status,sol_status,expected", [
    (pulp.LpStatusOptimal, pulp.LpSolutionOptimal, OPTIMAL),
    (pulp.LpStatusOptimal, pulp.LpSolutionIntegerFeasible, SUBOPTIMAL),
    (pulp.LpStatusInfeasible, pulp.LpSolutionInfeasible, INFEASIBLE),
    (pulp.LpStatusUnbounded, pulp.LpSolutionUnbounded, UNBOUNDED),
    (pulp.LpStatusNotSolved, pulp.LpSolutionNoSolutionFound, NOTRUN),
    (pulp.LpStatusUndefined, pulp.LpSolutionNoSolutionFound, NUMFAILURE),
])
def test_status_mapping(status, sol_status, expected):
    assert CbcEngine._map_status(status, sol_status) == expected


@cbc_available
def test_maximize_simple_lp():
    result = solve([3, 2], [LPConstraint([1, 1], Relation.LE, 4)], engine="cbc")
    assert result.objective_value == pytest.approx(12.0)
    assert result.variable_values == pytest.approx([4.0, 0.0])
    assert len(result.dual_solution) == 4


@cbc_available
def test_constraint_duals_reported():
    result = solve([3, 2], [LPConstraint([1, 1], Relation.LE, 4)], engine="cbc")
    assert np.abs(result.constraint_duals) == pytest.approx([3.0])


@cbc_available
def test_integer_variable_honored():
    constraints = [
        LPConstraint([1, 1], Relation.LE, 4.5),
        LPConstraint([1, 0], Relation.LE, 3),
    ]
    result = solve([3, 2], constraints, integer_variables=[False, True], engine="cbc")
    assert result.variable_values == pytest.approx([2.5, 2.0])
    assert result.objective_value == pytest.approx(11.5)


@cbc_available
def test_scaling_off_still_solves():
    constraints = [LPConstraint([1, 1, 1], Relation.EQ, 10),
                   LPConstraint([1, 0, 0], Relation.GE, 2)]
    result = solve([-1, 2, 1], constraints, scaling_mode=SCALE_NONE, engine="cbc")
    assert result.variable_values == pytest.approx([2.0, 8.0, 0.0])
    assert result.objective_value == pytest.approx(14.0)


@cbc_available
def test_infeasible_raises():
    constraints = [
        LPConstraint([1, 1], Relation.LE, 1),
        LPConstraint([1, 1], Relation.GE, 2),
    ]
    with pytest.raises(SolveError):
        solve([1, 1], constraints, engine="cbc")


@cbc_available
def test_column_without_coefficients_takes_lower_bound():
    result = solve([1, 0], [LPConstraint([1, 0], Relation.LE, 2)],
                   lower_bounds=[0, 1.5], upper_bounds=[10, 4], engine="cbc")
    assert result.variable_values[0] == pytest.approx(2.0)
    assert 1.5 - 1e-9 <= result.variable_values[1] <= 4 + 1e-9
