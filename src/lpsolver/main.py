"""
Entry point for the LP solver.

This script provides a command-line interface for solving a maximization
problem stored as a JSON problem file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import SolverSettings
from .data_models import LPProblem, LPResult
from .errors import SolveError, SolverError
from .parser import ProblemFormatError, parse_problem_file
from .solver import ENGINE_REGISTRY

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set logging level to DEBUG
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Solve a linear (or mixed-integer) maximization problem',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        'problem',
        type=str,
        help='JSON problem file with objective, constraints and optional bounds'
    )

    parser.add_argument(
        '--engine',
        choices=sorted(ENGINE_REGISTRY),
        default=None,
        help='Solver engine (default: LPSOLVER_ENGINE or highs)'
    )

    parser.add_argument(
        '--scaling',
        type=int,
        default=None,
        help='Scaling mode for the first attempt (overrides the problem file)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    return parser.parse_args(argv)


def result_to_dict(result: LPResult) -> dict:
    return {
        'objective_value': result.objective_value,
        'variable_values': result.variable_values.tolist(),
        'dual_solution': result.dual_solution.tolist(),
    }


def print_result(problem: LPProblem, result: LPResult, engine: str) -> None:
    print("=" * 60)
    print(f"LP Solver ({engine})")
    print("=" * 60)
    print(f"Variables: {problem.number_of_variables}, constraints: {problem.number_of_constraints}")
    print(f"Objective value: {result.objective_value:.6f}")
    print()
    print("Variables:")
    for j, (value, reduced_cost) in enumerate(zip(result.variable_values, result.reduced_costs)):
        print(f"  x{j} = {value:.6f}  (reduced cost {reduced_cost:.6f})")
    if problem.number_of_constraints:
        print()
        print("Constraint duals:")
        for i, dual in enumerate(result.constraint_duals):
            print(f"  R{i + 1}: {dual:.6f}")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    try:
        settings = SolverSettings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.engine is not None:
        settings.engine = args.engine
    if args.scaling is not None:
        settings.scaling_mode = args.scaling
    settings.verbose = settings.verbose or args.verbose

    setup_logging(settings.verbose)

    problem_path = Path(args.problem)
    if not problem_path.exists():
        print(f"Error: Problem file not found: {args.problem}", file=sys.stderr)
        return 1

    try:
        problem = parse_problem_file(problem_path)
    except ProblemFormatError as e:
        print(f"Error parsing file: {e}", file=sys.stderr)
        return 1

    if settings.scaling_mode is not None:
        problem.scaling_mode = settings.scaling_mode

    logger.info(f"Solving {problem_path.name}: {problem}")
    try:
        result = problem.solve(engine=settings.engine)
    except SolveError as e:
        print(f"No solution: {e.status_text} (status {e.status})", file=sys.stderr)
        return 1
    except SolverError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print_result(problem, result, settings.engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
