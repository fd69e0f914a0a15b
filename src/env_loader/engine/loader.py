"""Environment assembly for the child process.

EnvironmentLoader runs the classifier over an environment snapshot, resolves
every variable that needs it, and applies the ignore-missing policy:

- ignore_missing=False: the first failed variable raises UnresolvedVariableError
  and the partially built environment is discarded
- ignore_missing=True: a failed variable is logged, left out of the output
  (not set to an empty string) and processing continues

Variables are processed in sorted-name order so output order, overwrite
resolution and the reported failure are the same on every run.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .classifier import Decision, classify
from .config import LoaderConfig
from .exceptions import InvalidVariableNameError, UnresolvedVariableError
from .resolution_result import ResolutionOutcome
from .resolver import LoadMethod, parse_load_method, resolve
from .secrets import SecretProvider, SecretRedactor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DroppedVariable:
    """A variable left out of the output because it failed under ignore_missing."""

    name: str
    output_name: str
    outcome: ResolutionOutcome


@dataclass
class LoadedEnvironment:
    """Output of EnvironmentLoader.load.

    Attributes:
        environment: Final name -> value map, in processing order
        dropped: Variables omitted under ignore_missing
        secret_values: Output name -> value for entries loaded from a secret store
        passed: Number of pass-through and out-of-scope entries
        resolved: Number of entries produced by the resolver
    """

    environment: dict[str, str] = field(default_factory=dict)
    dropped: list[DroppedVariable] = field(default_factory=list)
    secret_values: dict[str, str] = field(default_factory=dict)
    passed: int = 0
    resolved: int = 0

    def redactor(self) -> SecretRedactor:
        """Build a redactor that masks every value loaded from a secret store."""
        return SecretRedactor(self.secret_values)


class EnvironmentLoader:
    """
    Builds the child environment from a snapshot of the parent's.

    The snapshot is never modified and ``os.environ`` is never touched, so the
    same loader can be run repeatedly against the same input.

    Example:
        loader = EnvironmentLoader(config, AWSSecretsProvider())
        loaded = await loader.load(snapshot_environment())
        os.execvpe(cmd[0], cmd, loaded.environment)
    """

    def __init__(self, config: LoaderConfig, provider: SecretProvider) -> None:
        self.config = config
        self.provider = provider

    async def load(self, snapshot: Mapping[str, str]) -> LoadedEnvironment:
        """
        Classify and resolve every variable in ``snapshot``.

        Args:
            snapshot: Inherited environment, name -> raw value

        Returns:
            LoadedEnvironment with the assembled environment

        Raises:
            InvalidVariableNameError: A variable name equals the env prefix
            UnresolvedVariableError: A variable failed and ignore_missing is off
        """
        self._warn_missing_pass_names(snapshot)

        result = LoadedEnvironment()
        protected = self.config.pass_list & snapshot.keys()

        for name in sorted(snapshot):
            decision = classify(name, snapshot[name], self.config)

            if not decision.needs_resolution:
                logger.debug(f"Variable '{name}': {decision.kind.value}")
                self._export(result, decision, decision.raw_value)
                result.passed += 1
                continue

            # Pass-through values are final, whatever sorts first
            if decision.output_name in protected:
                logger.warning(
                    f"Variable '{name}' not loaded: '{decision.output_name}' is passed through"
                )
                continue

            await self._resolve_variable(result, decision)

        logger.info(
            f"Environment loaded: {result.passed} passed through, "
            f"{result.resolved} resolved, {len(result.dropped)} dropped"
        )
        return result

    async def _resolve_variable(self, result: LoadedEnvironment, decision: Decision) -> None:
        if not decision.output_name:
            raise InvalidVariableNameError(decision.name, self.config.env_prefix or "")

        method = parse_load_method(decision.raw_value).method
        logger.debug(
            f"Variable '{decision.name}' -> '{decision.output_name}': load method {method.value}"
        )

        outcome = await resolve(decision.raw_value, self.provider)

        if outcome.is_failure:
            logger.warning(f"{outcome.error} for variable {decision.name}")
            if not self.config.ignore_missing:
                raise UnresolvedVariableError(decision.name, decision.output_name, outcome)
            result.dropped.append(DroppedVariable(decision.name, decision.output_name, outcome))
            return

        value = outcome.unwrap()
        self._export(result, decision, value)
        if method == LoadMethod.SECRET_STORE:
            result.secret_values[decision.output_name] = value
        result.resolved += 1

    def _export(self, result: LoadedEnvironment, decision: Decision, value: str) -> None:
        if decision.output_name in result.environment:
            logger.warning(
                f"Variable '{decision.name}' overwrites earlier value of "
                f"'{decision.output_name}'"
            )
            # The caller re-registers the name if the new value is a secret too
            result.secret_values.pop(decision.output_name, None)
        result.environment[decision.output_name] = value

    def _warn_missing_pass_names(self, snapshot: Mapping[str, str]) -> None:
        for name in sorted(self.config.pass_list):
            if name not in snapshot:
                logger.warning(f"Variable {name} not found in environment - cannot pass through")
