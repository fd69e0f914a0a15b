"""Variable resolution engine for env-loader.

Turns a snapshot of the inherited environment into the environment of the
child process: classify each variable, strip the prefix from its name, load
its value (literal, AWS Secrets Manager, or verbatim) and apply the
ignore-missing policy.
"""

from .classifier import Decision, DecisionKind, classify, strip_prefix
from .config import (
    LoaderConfig,
    LoaderFileConfig,
    build_config,
    load_config_file,
    snapshot_environment,
)
from .exceptions import (
    ConfigFileError,
    EnvLoaderError,
    InvalidVariableNameError,
    UnresolvedVariableError,
)
from .loader import DroppedVariable, EnvironmentLoader, LoadedEnvironment
from .resolution_result import FailureKind, ResolutionOutcome, ResolutionStatus
from .resolver import LoadMethod, LoadMethodMatch, parse_load_method, resolve

__all__ = [
    # Configuration
    "LoaderConfig",
    "LoaderFileConfig",
    "build_config",
    "load_config_file",
    "snapshot_environment",
    # Classification
    "Decision",
    "DecisionKind",
    "classify",
    "strip_prefix",
    # Resolution
    "LoadMethod",
    "LoadMethodMatch",
    "parse_load_method",
    "resolve",
    "ResolutionOutcome",
    "ResolutionStatus",
    "FailureKind",
    # Assembly
    "EnvironmentLoader",
    "LoadedEnvironment",
    "DroppedVariable",
    # Exceptions
    "EnvLoaderError",
    "UnresolvedVariableError",
    "InvalidVariableNameError",
    "ConfigFileError",
]
