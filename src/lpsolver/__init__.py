"""
LP formulation and solve package.

This package provides a small interface for maximizing a linear objective
subject to linear constraints, variable bounds and integrality flags:
- solve: formulate, solve (with one unscaled retry) and extract results
- HighsEngine / CbcEngine: engine backends (scipy HiGHS, PuLP CBC)
- TrainableKnowledgeBase: persisted model/training parameter lifecycle
"""

from .cbc_engine import CbcEngine
from .config import SolverSettings
from .data_models import LPConstraint, LPProblem, LPResult, Relation, SolveStatus, StatusKind
from .engine import EngineSolution, MatrixEngine, SolverEngine
from .errors import InvalidInputError, SolveError, SolverError
from .highs_engine import HighsEngine
from .knowledge_base import (
    InMemoryStorage,
    KnowledgeBaseError,
    PickleFileStorage,
    StorageBackend,
    TrainableKnowledgeBase,
)
from .parser import ProblemFormatError, parse_problem, parse_problem_file
from .solver import ENGINE_REGISTRY, is_solution_valid, pad_one_zero_in_front, solve

__version__ = "1.0.0"

__all__ = [
    "solve",
    "pad_one_zero_in_front",
    "is_solution_valid",
    "ENGINE_REGISTRY",
    "LPConstraint",
    "LPProblem",
    "LPResult",
    "Relation",
    "SolveStatus",
    "StatusKind",
    "SolverEngine",
    "MatrixEngine",
    "EngineSolution",
    "HighsEngine",
    "CbcEngine",
    "SolverError",
    "SolveError",
    "InvalidInputError",
    "SolverSettings",
    "ProblemFormatError",
    "parse_problem",
    "parse_problem_file",
    "TrainableKnowledgeBase",
    "StorageBackend",
    "InMemoryStorage",
    "PickleFileStorage",
    "KnowledgeBaseError",
]
