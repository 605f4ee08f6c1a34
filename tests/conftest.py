"""Shared fixtures: a scripted engine double that replays a list of statuses."""

from typing import List, Optional, Sequence

import numpy as np
import pytest

from lpsolver.engine import USABLE_STATUSES, EngineSolution, MatrixEngine


class ScriptedEngine(MatrixEngine):
    """
    Engine double. Each ``solve`` pops the next scripted status and records the
    scaling mode in effect. Usable statuses return ``variables`` and ``duals``
    (or deterministic defaults derived from the formulation).
    """

    def __init__(self, rows, columns, statuses, objective, variables, duals):
        super().__init__(rows, columns)
        self.statuses = list(statuses)
        self.scripted_objective = objective
        self.scripted_variables = variables
        self.scripted_duals = duals
        self.solve_scalings: List[int] = []
        self.padded_objective: Optional[np.ndarray] = None
        self.padded_rows: List[np.ndarray] = []
        self.added_relations: List[int] = []
        self.added_rhs: List[float] = []

    def set_obj_fn(self, row):
        self.padded_objective = np.array(row, dtype=float)
        super().set_obj_fn(row)

    def add_constraint(self, row, relation, rhs):
        self.padded_rows.append(np.array(row, dtype=float))
        self.added_relations.append(int(relation))
        self.added_rhs.append(float(rhs))
        super().add_constraint(row, relation, rhs)

    def _run(self) -> EngineSolution:
        self.solve_scalings.append(self.get_scaling())
        status = self.statuses.pop(0)
        if status not in USABLE_STATUSES:
            return EngineSolution(status)
        n = self.columns
        variables = (np.arange(1.0, n + 1) if self.scripted_variables is None
                     else np.asarray(self.scripted_variables, dtype=float))
        duals = (np.arange(0.0, 1 + self.rows + n) if self.scripted_duals is None
                 else np.asarray(self.scripted_duals, dtype=float))
        objective = (float(self.objective_coefficients @ variables)
                     if self.scripted_objective is None else self.scripted_objective)
        return EngineSolution(status, objective, variables, duals)


class ScriptedEngineFactory:
    """Callable ``(rows, columns) -> ScriptedEngine`` that keeps every engine it built."""

    def __init__(self, statuses: Sequence[int], objective=None, variables=None, duals=None):
        self.statuses = statuses
        self.objective = objective
        self.variables = variables
        self.duals = duals
        self.engines: List[ScriptedEngine] = []

    def __call__(self, rows, columns):
        engine = ScriptedEngine(rows, columns, self.statuses, self.objective,
                                self.variables, self.duals)
        self.engines.append(engine)
        return engine

    @property
    def engine(self) -> ScriptedEngine:
        assert len(self.engines) == 1
        return self.engines[0]


@pytest.fixture
def scripted_engine():
    """Return the factory class so each test scripts its own statuses."""
    return ScriptedEngineFactory
