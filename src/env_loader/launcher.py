"""Replace the current process with the child command."""

import logging
import os
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


def launch(command: Sequence[str], environment: Mapping[str, str]) -> int:
    """Execute ``command`` with exactly ``environment`` as its environment.

    The command is looked up on the PATH of the *new* environment, stdio is
    inherited and the child takes over the process id. On success this never
    returns.

    Args:
        command: Program followed by its arguments
        environment: Complete environment for the child

    Returns:
        Exit status to terminate with when the exec itself failed:
        127 (not found), 126 (not executable) or 1 (any other OS error)
    """
    if not command:
        raise ValueError("No command to execute")
    args = list(command)

    logger.debug(f"Executing {command[0]} with {len(environment)} environment variables")

    # exec discards buffered output, so flush log handlers first
    for handler in logging.getLogger().handlers:
        handler.flush()

    try:
        os.execvpe(args[0], args, dict(environment))
    except FileNotFoundError:
        logger.error(f"Command not found: {command[0]}")
        return EXIT_NOT_FOUND
    except PermissionError:
        logger.error(f"Command not executable: {command[0]}")
        return EXIT_NOT_EXECUTABLE
    except OSError as e:
        logger.error(f"Failed to execute {command[0]}: {e}")
        return 1

    return 0
