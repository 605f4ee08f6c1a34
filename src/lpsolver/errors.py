"""
Exceptions raised by the lpsolver package.
"""


class SolverError(Exception):
    pass


class SolveError(SolverError):
    """The engine reported an unusable status on both solve attempts."""

    def __init__(self, status: int, status_text: str) -> None:
        super().__init__(f"LPSolver: {status_text} (status {status})")
        self.status = status
        self.status_text = status_text


class InvalidInputError(SolverError, ValueError):
    """Caller-supplied arrays violate the shape preconditions of a solve."""
