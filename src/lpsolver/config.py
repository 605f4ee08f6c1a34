"""
Solver settings.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

ENV_ENGINE = "LPSOLVER_ENGINE"
ENV_SCALING = "LPSOLVER_SCALING"


@dataclass
class SolverSettings:
    """
    Settings shared by the CLI and library callers.

    Attributes:
        engine: Registered engine name ("highs" or "cbc")
        scaling_mode: Scaling mode for the first solve attempt; None keeps the
            engine default
        verbose: Enable debug logging
    """
    engine: str = "highs"
    scaling_mode: Optional[int] = None
    verbose: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SolverSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown solver settings: {', '.join(sorted(unknown))}")
        settings = cls(**values)
        if settings.scaling_mode is not None:
            settings.scaling_mode = int(settings.scaling_mode)
        return settings

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SolverSettings":
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get(ENV_ENGINE):
            values["engine"] = environ[ENV_ENGINE].strip().lower()
        if environ.get(ENV_SCALING):
            try:
                values["scaling_mode"] = int(environ[ENV_SCALING])
            except ValueError:
                raise ValueError(
                    f"{ENV_SCALING} must be an integer scaling mode, got {environ[ENV_SCALING]!r}"
                ) from None
        return cls.from_mapping(values)
