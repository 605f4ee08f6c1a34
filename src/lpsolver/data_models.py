"""
Data models for LP formulation and results.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .engine import FEASFOUND, OPTIMAL, PROCBREAK, SUBOPTIMAL
from .errors import InvalidInputError


class Relation(IntEnum):
    """Constraint relation; the values are the engine's wire codes."""
    LE = 1
    GE = 2
    EQ = 3

    @classmethod
    def parse(cls, value: Union["Relation", int, str]) -> "Relation":
        """Accept a Relation, its integer code, its name or an operator such as ``<=``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in _RELATION_ALIASES:
                return _RELATION_ALIASES[key]
            raise InvalidInputError(f"Unknown constraint relation: {value!r}")
        if isinstance(value, bool):
            raise InvalidInputError(f"Unknown constraint relation: {value!r}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidInputError(f"Unknown constraint relation: {value!r}") from None

    @property
    def symbol(self) -> str:
        return {Relation.LE: "<=", Relation.GE: ">=", Relation.EQ: "="}[self]


_RELATION_ALIASES = {
    "<=": Relation.LE,
    "=<": Relation.LE,
    "LE": Relation.LE,
    ">=": Relation.GE,
    "=>": Relation.GE,
    "GE": Relation.GE,
    "=": Relation.EQ,
    "==": Relation.EQ,
    "EQ": Relation.EQ,
}


@dataclass(frozen=True)
class LPConstraint:
    """
    A linear constraint ``body · x  relation  rhs``.

    The body holds one coefficient per decision variable, 0-based.
    """
    body: Tuple[float, ...]
    relation: Relation
    rhs: float

    def __post_init__(self):
        object.__setattr__(self, 'body', tuple(float(v) for v in self.body))
        object.__setattr__(self, 'relation', Relation.parse(self.relation))
        object.__setattr__(self, 'rhs', float(self.rhs))

    def get_body(self) -> Tuple[float, ...]:
        return self.body

    def get_relation(self) -> Relation:
        return self.relation

    def get_rhs(self) -> float:
        return self.rhs

    def __repr__(self) -> str:
        terms = " + ".join(f"{c:g}*x{j}" for j, c in enumerate(self.body))
        return f"LPConstraint({terms} {self.relation.symbol} {self.rhs:g})"


@dataclass
class LPResult:
    """
    Result of a solve.

    ``dual_solution`` keeps the engine layout: element 0 is padding, elements
    1..m are the constraint duals in row order and the last n elements are the
    reduced costs of the variables.
    """
    variable_values: np.ndarray
    dual_solution: np.ndarray
    objective_value: Optional[float] = None

    @classmethod
    def empty(cls, number_of_variables: int, number_of_constraints: int) -> "LPResult":
        return cls(
            variable_values=np.zeros(number_of_variables),
            dual_solution=np.zeros(number_of_variables + number_of_constraints + 1),
        )

    @property
    def number_of_variables(self) -> int:
        return len(self.variable_values)

    @property
    def number_of_constraints(self) -> int:
        return len(self.dual_solution) - len(self.variable_values) - 1

    @property
    def constraint_duals(self) -> np.ndarray:
        """Shadow prices, one per constraint in row order."""
        return self.dual_solution[1:1 + self.number_of_constraints]

    @property
    def reduced_costs(self) -> np.ndarray:
        return self.dual_solution[1 + self.number_of_constraints:]

    def __repr__(self) -> str:
        obj = "unset" if self.objective_value is None else f"{self.objective_value:.6g}"
        return (f"LPResult(obj={obj}, variables={self.number_of_variables}, "
                f"constraints={self.number_of_constraints})")


class StatusKind(Enum):
    OPTIMAL = "optimal"
    SUBOPTIMAL = "suboptimal"
    PROCBREAK = "procbreak"
    FEASFOUND = "feasfound"
    FAILURE = "failure"


_USABLE_KINDS = {
    OPTIMAL: StatusKind.OPTIMAL,
    SUBOPTIMAL: StatusKind.SUBOPTIMAL,
    PROCBREAK: StatusKind.PROCBREAK,
    FEASFOUND: StatusKind.FEASFOUND,
}


@dataclass(frozen=True)
class SolveStatus:
    """An engine status code tagged with what it means for the caller."""
    code: int
    kind: StatusKind

    @classmethod
    def from_code(cls, code: int) -> "SolveStatus":
        return cls(code=int(code), kind=_USABLE_KINDS.get(int(code), StatusKind.FAILURE))

    @property
    def usable(self) -> bool:
        return self.kind is not StatusKind.FAILURE


@dataclass
class LPProblem:
    """
    A maximization problem together with its optional bounds, integrality
    flags and scaling mode.
    """
    objective: Sequence[float]
    constraints: Sequence[LPConstraint] = field(default_factory=list)
    lower_bounds: Optional[Sequence[float]] = None
    upper_bounds: Optional[Sequence[float]] = None
    integer_variables: Optional[Sequence[bool]] = None
    scaling_mode: Optional[int] = None

    @property
    def number_of_variables(self) -> int:
        return len(self.objective)

    @property
    def number_of_constraints(self) -> int:
        return len(self.constraints)

    def solve(self, engine="highs") -> LPResult:
        from .solver import solve
        return solve(
            self.objective,
            self.constraints,
            lower_bounds=self.lower_bounds,
            upper_bounds=self.upper_bounds,
            integer_variables=self.integer_variables,
            scaling_mode=self.scaling_mode,
            engine=engine,
        )

    def __repr__(self) -> str:
        return (f"LPProblem(variables={self.number_of_variables}, "
                f"constraints={self.number_of_constraints}, scaling={self.scaling_mode})")
