"""Fatal errors raised while building a child environment.

Every exception carries the process exit status the CLI should terminate with.
Load failures that are downgraded by ``ignore_missing`` never become
exceptions; they are logged and recorded on the LoadedEnvironment instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resolution_result import ResolutionOutcome


class EnvLoaderError(Exception):
    """Base exception for errors that abort the launch."""

    exit_code = 1


class UnresolvedVariableError(EnvLoaderError):
    """
    A variable could not be resolved and ``ignore_missing`` is off.

    The partial environment is discarded and the child command is not run.

    Attributes:
        name: Variable name in the inherited environment
        output_name: Name the value would have been exported under
        outcome: The failed resolution outcome
    """

    exit_code = 1

    def __init__(self, name: str, output_name: str, outcome: ResolutionOutcome):
        self.name = name
        self.output_name = output_name
        self.outcome = outcome
        super().__init__(f"Failed to resolve variable '{name}': {outcome.error}")

    def __repr__(self) -> str:
        return (
            f"UnresolvedVariableError(name={self.name!r}, "
            f"kind={self.outcome.failure_kind!r})"
        )


class InvalidVariableNameError(EnvLoaderError):
    """
    Stripping the prefix from a variable name left nothing.

    Raised when a variable is named exactly like the configured prefix. An
    empty name cannot be exported, so this aborts the run even when
    ``ignore_missing`` is set.
    """

    exit_code = 1

    def __init__(self, name: str, prefix: str):
        self.name = name
        self.prefix = prefix
        super().__init__(
            f"Variable '{name}' is identical to the env prefix '{prefix}' "
            f"and would be exported with an empty name. "
            f"Rename the variable or choose a different prefix."
        )


class ConfigFileError(EnvLoaderError):
    """The configuration file could not be loaded or validated."""

    exit_code = 2

    def __init__(self, path: str | Path, details: str):
        self.path = Path(path)
        self.details = details
        super().__init__(f"Invalid config file '{self.path}': {details}")
