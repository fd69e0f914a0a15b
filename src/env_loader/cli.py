"""Command-line entry point for env-loader.

Usage:
    env-loader [-p NAME]... [-i] [-e PREFIX] [-c FILE] [--dry-run] CMD [ARGS...]

Example:
    MYAPP_DB_PASSWORD=aws_sm::prod/db/password MYAPP_DEBUG=value::true \\
        env-loader -e MYAPP_ -p PATH -p HOME -- ./server --port 3000

The child sees DB_PASSWORD (loaded from AWS Secrets Manager), DEBUG=true,
PATH, HOME and every variable that does not start with MYAPP_.
"""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping

from .engine import (
    EnvironmentLoader,
    EnvLoaderError,
    LoaderConfig,
    build_config,
    load_config_file,
    snapshot_environment,
)
from .engine.secrets import AWSSecretsProvider, SecretProvider
from .launcher import launch

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "ENV_LOADER_LOG_LEVEL"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the env-loader CLI."""
    parser = argparse.ArgumentParser(
        prog="env-loader",
        description=(
            "Load environment variables from literal values and AWS Secrets Manager, "
            "then execute a command with the resulting environment."
        ),
    )
    parser.add_argument(
        "-p",
        "--pass",
        dest="pass_list",
        action="append",
        default=[],
        metavar="NAME",
        help=(
            "Variable passed through unchanged, never loaded "
            "(can be specified multiple times)"
        ),
    )
    parser.add_argument(
        "-i",
        "--ignore-missing",
        action="store_true",
        help="Drop variables that fail to load instead of exiting",
    )
    parser.add_argument(
        "-e",
        "--env-prefix",
        metavar="PREFIX",
        help=(
            "Only load variables starting with PREFIX (the prefix is stripped); "
            "all other variables are forwarded untouched"
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="YAML config file (default: $ENV_LOADER_CONFIG)",
    )
    parser.add_argument(
        "--aws-region",
        metavar="REGION",
        help="AWS region for Secrets Manager (default: from the AWS configuration)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resulting environment with secrets redacted instead of executing",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        help=f"Set log level (default: ${LOG_LEVEL_ENV_VAR} or INFO)",
    )
    parser.add_argument(
        "cmd",
        nargs=argparse.REMAINDER,
        help="Command to run with the loaded environment",
    )
    return parser


def configure_logging(level_name: str | None = None) -> None:
    """Configure root logging to stderr; stdout belongs to the child."""
    log_level_str = (level_name or os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).upper()

    if log_level_str not in VALID_LOG_LEVELS:
        print(
            f"Warning: Invalid {LOG_LEVEL_ENV_VAR} '{log_level_str}'. "
            f"Valid levels: {', '.join(VALID_LOG_LEVELS)}. "
            "Using INFO.",
            file=sys.stderr,
        )
        log_level_str = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level_str),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def print_environment(environment: Mapping[str, str]) -> None:
    for name in sorted(environment):
        print(f"{name}={environment[name]}")


def run(
    config: LoaderConfig,
    snapshot: Mapping[str, str],
    provider: SecretProvider,
    dry_run: bool = False,
) -> int:
    """Build the child environment and execute the command.

    Args:
        config: Resolved loader configuration
        snapshot: Inherited environment
        provider: Secret lookup capability
        dry_run: Print the environment instead of executing

    Returns:
        Exit status (only returned when the command was not executed)
    """
    loader = EnvironmentLoader(config, provider)

    try:
        loaded = asyncio.run(loader.load(snapshot))
    except EnvLoaderError as e:
        logger.error(str(e))
        return e.exit_code

    for dropped in loaded.dropped:
        logger.info(f"Variable {dropped.output_name} not set: {dropped.outcome.error}")

    if dry_run:
        print_environment(loaded.redactor().redact_environment(loaded.environment))
        return 0

    return launch(config.command, loaded.environment)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    command = list(parsed_args.cmd)
    if command and command[0] == "--":
        command = command[1:]
    if not command and not parsed_args.dry_run:
        parser.error("the following arguments are required: cmd")

    configure_logging(parsed_args.log_level)

    try:
        file_config = load_config_file(parsed_args.config)
    except EnvLoaderError as e:
        logger.error(str(e))
        return e.exit_code

    config = build_config(
        file_config,
        pass_list=parsed_args.pass_list,
        ignore_missing=parsed_args.ignore_missing,
        env_prefix=parsed_args.env_prefix,
        aws_region=parsed_args.aws_region,
        command=command,
    )
    provider = AWSSecretsProvider(region_name=config.aws_region)

    return run(config, snapshot_environment(), provider, dry_run=parsed_args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
