"""
Solver engine interface.

Engines follow the lp_solve calling convention: columns are addressed 1-based,
every row handed to the engine (objective or constraint) carries a leading
sentinel element that is ignored, and results come back in the engine's native
layout. The numeric codes below (relations, statuses, scaling modes and
verbosity levels) are the lp_solve values and are part of the wire contract.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)


# Constraint relations
LE = 1
GE = 2
EQ = 3

RELATIONS = (LE, GE, EQ)

# Verbosity levels
NEUTRAL = 0
CRITICAL = 1
SEVERE = 2
IMPORTANT = 3
NORMAL = 4
DETAILED = 5
FULL = 6

# Scaling modes (base mode in the low bits, flags above)
SCALE_NONE = 0
SCALE_EXTREME = 1
SCALE_RANGE = 2
SCALE_MEAN = 3
SCALE_GEOMETRIC = 4
SCALE_CURTISREID = 7
SCALE_QUADRATIC = 8
SCALE_LOGARITHMIC = 16
SCALE_POWER2 = 32
SCALE_EQUILIBRATE = 64
SCALE_INTEGERS = 128
SCALE_DYNUPDATE = 256

SCALE_BASE_MASK = 7
SCALE_DEFAULT = SCALE_GEOMETRIC + SCALE_EQUILIBRATE + SCALE_INTEGERS

# Solve status codes
NOMEMORY = -2
NOTRUN = -1
OPTIMAL = 0
SUBOPTIMAL = 1
INFEASIBLE = 2
UNBOUNDED = 3
DEGENERATE = 4
NUMFAILURE = 5
USERABORT = 6
TIMEOUT = 7
PRESOLVED = 9
PROCFAIL = 10
PROCBREAK = 11
FEASFOUND = 12
NOFEASFOUND = 13

USABLE_STATUSES = frozenset({OPTIMAL, SUBOPTIMAL, PROCBREAK, FEASFOUND})

STATUS_TEXT = {
    NOMEMORY: "Out of memory",
    NOTRUN: "Model has not been optimized",
    OPTIMAL: "OPTIMAL solution",
    SUBOPTIMAL: "SUBOPTIMAL solution",
    INFEASIBLE: "This problem is infeasible",
    UNBOUNDED: "This problem is unbounded",
    DEGENERATE: "DEGENERATE situation",
    NUMFAILURE: "NUMERICAL FAILURE encountered",
    USERABORT: "User aborted",
    TIMEOUT: "Timeout",
    PRESOLVED: "The model could be solved by presolve",
    PROCFAIL: "The B&B routine failed",
    PROCBREAK: "The B&B was stopped because of a break-at-first or break-at-value",
    FEASFOUND: "A feasible B&B solution was found",
    NOFEASFOUND: "No feasible B&B solution found",
}

# Bounds at or beyond this magnitude are treated as infinite
INFINITY = 1e30


class EngineSolution(NamedTuple):
    """Outcome of one engine run; the arrays are None unless the status is usable."""
    status: int
    objective: Optional[float] = None
    variables: Optional[np.ndarray] = None
    duals: Optional[np.ndarray] = None


class SolverEngine(ABC):
    """
    One problem instance of an LP/MIP engine.

    An instance is created with an initial number of rows and columns, is
    formulated and solved by a single caller, and must be released with
    ``delete_lp`` once the caller is done with it.
    """

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of constraint rows."""

    @property
    @abstractmethod
    def columns(self) -> int:
        """Number of columns (decision variables)."""

    @abstractmethod
    def set_verbose(self, level: int) -> None:
        ...

    @abstractmethod
    def set_maxim(self) -> None:
        ...

    @abstractmethod
    def set_minim(self) -> None:
        ...

    @abstractmethod
    def set_obj_fn(self, row: Sequence[float]) -> None:
        """Set the objective from a padded row of length ``columns + 1``."""

    @abstractmethod
    def set_lowbo(self, column: int, value: float) -> None:
        ...

    @abstractmethod
    def set_upbo(self, column: int, value: float) -> None:
        ...

    @abstractmethod
    def set_int(self, column: int, must_be_int: bool) -> None:
        ...

    @abstractmethod
    def add_constraint(self, row: Sequence[float], relation: int, rhs: float) -> None:
        """Append a constraint row given as a padded row of length ``columns + 1``."""

    @abstractmethod
    def set_scaling(self, mode: int) -> None:
        ...

    @abstractmethod
    def get_scaling(self) -> int:
        ...

    @abstractmethod
    def solve(self) -> int:
        """Run the engine and return its status code."""

    @abstractmethod
    def get_statustext(self, status: int) -> str:
        ...

    @abstractmethod
    def get_objective(self) -> float:
        ...

    @abstractmethod
    def get_variables(self) -> np.ndarray:
        """Primal values, one per column (0-based)."""

    @abstractmethod
    def get_dual_solution(self) -> np.ndarray:
        """Dual values of length ``1 + rows + columns``; element 0 is padding."""

    @abstractmethod
    def delete_lp(self) -> None:
        """Release the problem instance."""


class MatrixEngine(SolverEngine):
    """
    Engine base class that keeps the formulation in dense numpy arrays.

    Subclasses translate the stored formulation for a concrete backend in
    ``_run``. Bookkeeping of the lp_solve conventions (padded rows, 1-based
    columns, scaling mode, verbosity, result layout) lives here.
    """

    def __init__(self, rows: int, columns: int) -> None:
        if rows < 0 or columns < 0:
            raise ValueError(f"rows and columns must be non-negative, got {rows}x{columns}")
        self._columns = columns
        self._maximize = False
        self._verbosity = NEUTRAL
        self._scaling = SCALE_DEFAULT
        self._objective = np.zeros(columns)
        self._lower = np.zeros(columns)
        self._upper = np.full(columns, np.inf)
        self._integer = np.zeros(columns, dtype=bool)
        # make_lp(rows, columns) starts with empty rows: 0 <= 0
        self._rows: List[np.ndarray] = [np.zeros(columns) for _ in range(rows)]
        self._relations: List[int] = [LE] * rows
        self._rhs: List[float] = [0.0] * rows
        self._solution: Optional[EngineSolution] = None
        self._deleted = False

    # ---------- formulation ----------

    @property
    def rows(self) -> int:
        return len(self._rows)

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def maximize(self) -> bool:
        return self._maximize

    @property
    def verbosity(self) -> int:
        return self._verbosity

    @property
    def deleted(self) -> bool:
        return self._deleted

    def set_verbose(self, level: int) -> None:
        self._check_alive()
        if not NEUTRAL <= level <= FULL:
            raise ValueError(f"Unknown verbosity level: {level}")
        self._verbosity = level

    def set_maxim(self) -> None:
        self._check_alive()
        self._maximize = True

    def set_minim(self) -> None:
        self._check_alive()
        self._maximize = False

    def set_obj_fn(self, row: Sequence[float]) -> None:
        self._check_alive()
        self._objective = self._unpad(row)

    def set_lowbo(self, column: int, value: float) -> None:
        self._check_alive()
        self._lower[self._column_index(column)] = -np.inf if value <= -INFINITY else float(value)

    def set_upbo(self, column: int, value: float) -> None:
        self._check_alive()
        self._upper[self._column_index(column)] = np.inf if value >= INFINITY else float(value)

    def set_int(self, column: int, must_be_int: bool) -> None:
        self._check_alive()
        self._integer[self._column_index(column)] = bool(must_be_int)

    def add_constraint(self, row: Sequence[float], relation: int, rhs: float) -> None:
        self._check_alive()
        if relation not in RELATIONS:
            raise ValueError(f"Unknown constraint relation: {relation}")
        self._rows.append(self._unpad(row))
        self._relations.append(int(relation))
        self._rhs.append(float(rhs))

    def set_scaling(self, mode: int) -> None:
        self._check_alive()
        self._scaling = int(mode)

    def get_scaling(self) -> int:
        return self._scaling

    @property
    def scaling_disabled(self) -> bool:
        return (self._scaling & SCALE_BASE_MASK) == SCALE_NONE

    # ---------- solve ----------

    def solve(self) -> int:
        self._check_alive()
        self._solution = None
        solution = self._run()
        if solution.status in USABLE_STATUSES:
            self._solution = solution
        if self._verbosity >= NORMAL:
            logger.info(f"{type(self).__name__}: {self.get_statustext(solution.status)}")
        return solution.status

    @abstractmethod
    def _run(self) -> EngineSolution:
        """Solve the stored formulation."""

    def get_statustext(self, status: int) -> str:
        return STATUS_TEXT.get(status, f"Undefined internal error ({status})")

    def get_objective(self) -> float:
        return float(self._require_solution().objective)

    def get_variables(self) -> np.ndarray:
        return np.array(self._require_solution().variables, dtype=float)

    def get_dual_solution(self) -> np.ndarray:
        solution = self._require_solution()
        if solution.duals is None:
            return np.zeros(1 + self.rows + self.columns)
        return np.array(solution.duals, dtype=float)

    def delete_lp(self) -> None:
        self._deleted = True
        self._solution = None
        self._rows = []
        self._relations = []
        self._rhs = []

    # ---------- helpers for subclasses ----------

    def constraint_matrix(self):
        """Return ``(A, relations, rhs)`` for the stored rows."""
        if self._rows:
            A = np.vstack(self._rows)
        else:
            A = np.zeros((0, self._columns))
        return A, np.array(self._relations, dtype=int), np.array(self._rhs, dtype=float)

    @property
    def objective_coefficients(self) -> np.ndarray:
        return self._objective

    @property
    def lower_bounds(self) -> np.ndarray:
        return self._lower

    @property
    def upper_bounds(self) -> np.ndarray:
        return self._upper

    @property
    def integer_columns(self) -> np.ndarray:
        return self._integer

    def _unpad(self, row: Sequence[float]) -> np.ndarray:
        arr = np.asarray(row, dtype=float)
        if arr.shape != (self._columns + 1,):
            raise ValueError(
                f"Expected a padded row of length {self._columns + 1}, got shape {arr.shape}"
            )
        return arr[1:].copy()

    def _column_index(self, column: int) -> int:
        if not 1 <= column <= self._columns:
            raise IndexError(f"Column {column} out of range 1..{self._columns}")
        return column - 1

    def _check_alive(self) -> None:
        if self._deleted:
            raise RuntimeError("The problem instance has been deleted")

    def _require_solution(self) -> EngineSolution:
        self._check_alive()
        if self._solution is None:
            raise RuntimeError("No solution available; solve() did not succeed")
        return self._solution
