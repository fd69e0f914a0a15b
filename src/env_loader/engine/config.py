"""Loader configuration models and config file loading.

Configuration reaches the engine as a single frozen LoaderConfig built by the
CLI from two sources:

1. Command-line flags (always win for scalar settings)
2. An optional YAML file, located by priority:
   a. Explicit path passed to ``load_config_file`` (``--config``)
   b. ENV_LOADER_CONFIG environment variable
   c. No file

Example config file:
```yaml
pass:
  - PATH
  - HOME
ignore_missing: false
env_prefix: MYAPP_
aws_region: eu-west-1
```
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigFileError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ENV_LOADER_CONFIG"


class LoaderConfig(BaseModel):
    """Resolved engine configuration, immutable for the lifetime of a run."""

    model_config = ConfigDict(frozen=True)

    pass_list: frozenset[str] = Field(
        default_factory=frozenset,
        description="Variable names copied to the child unchanged, never resolved",
    )
    ignore_missing: bool = Field(
        default=False,
        description="Drop variables that fail to load instead of aborting the run",
    )
    env_prefix: str | None = Field(
        default=None,
        description="When set, only variables starting with this prefix are resolved",
    )
    command: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Child command and its arguments (opaque to the engine)",
    )
    aws_region: str | None = Field(
        default=None,
        description="Region for the Secrets Manager client (default: boto3 chain)",
    )

    @field_validator("env_prefix")
    @classmethod
    def normalize_env_prefix(cls, v: str | None) -> str | None:
        """Treat an empty prefix as no prefix; it would match every name and strip nothing."""
        if v == "":
            return None
        return v


class LoaderFileConfig(BaseModel):
    """Schema of the optional YAML config file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    pass_list: list[str] = Field(
        default_factory=list,
        alias="pass",
        description="Pass-through variable names",
    )
    ignore_missing: bool = Field(default=False, description="Drop-and-warn on load failures")
    env_prefix: str | None = Field(default=None, description="Resolution prefix filter")
    aws_region: str | None = Field(default=None, description="Secrets Manager region")


def find_config_file(explicit_path: str | Path | None = None) -> Path | None:
    """Return the config file to load, or None when no file is configured."""
    if explicit_path:
        return Path(explicit_path).expanduser()

    env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()

    return None


def load_config_file(explicit_path: str | Path | None = None) -> LoaderFileConfig:
    """Load and validate the YAML config file.

    Args:
        explicit_path: Path from ``--config`` (takes priority over the
            ENV_LOADER_CONFIG environment variable)

    Returns:
        Parsed file configuration, or an empty one when no file is configured

    Raises:
        ConfigFileError: If the file is missing, unreadable, not a YAML
            mapping, or fails schema validation
    """
    path = find_config_file(explicit_path)
    if path is None:
        return LoaderFileConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, "top level must be a mapping")

    try:
        file_config = LoaderFileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigFileError(path, str(e)) from e

    logger.debug(f"Loaded config file: {path}")
    return file_config


def build_config(
    file_config: LoaderFileConfig,
    pass_list: Iterable[str] | None = None,
    ignore_missing: bool = False,
    env_prefix: str | None = None,
    aws_region: str | None = None,
    command: Sequence[str] | None = None,
) -> LoaderConfig:
    """Merge command-line settings over the file configuration.

    Pass lists are unioned, ``ignore_missing`` is enabled by either source, and
    ``env_prefix``/``aws_region`` from the command line replace the file's.
    """
    return LoaderConfig(
        pass_list=frozenset(file_config.pass_list) | frozenset(pass_list or ()),
        ignore_missing=file_config.ignore_missing or ignore_missing,
        env_prefix=env_prefix if env_prefix is not None else file_config.env_prefix,
        aws_region=aws_region if aws_region is not None else file_config.aws_region,
        command=tuple(command or ()),
    )


def snapshot_environment(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Copy the process environment (or ``environ``) into a plain dict."""
    return dict(os.environ if environ is None else environ)
