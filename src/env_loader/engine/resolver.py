"""
Value resolution: load-method dispatch and secret lookup.

A raw value selects its load method through a marker before the first ``::``:

    value::<rest>    LITERAL       rest, verbatim
    aws_sm::<id>     SECRET_STORE  secret <id> from the injected provider
    <no "::">        REGULAR       the raw value, verbatim
    <other>::<rest>  UNKNOWN       failure

Markers are matched case-sensitively and only at the start of the value.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .resolution_result import FailureKind, ResolutionOutcome
from .secrets import SecretError, SecretProvider

logger = logging.getLogger(__name__)

MARKER_SEPARATOR = "::"


class LoadMethod(Enum):
    """Strategy used to produce a variable's final value."""

    LITERAL = "value"
    SECRET_STORE = "aws_sm"
    REGULAR = "regular"
    UNKNOWN = "unknown"


# Checked in order; the first match wins
MARKERS: tuple[tuple[str, LoadMethod], ...] = (
    (LoadMethod.LITERAL.value + MARKER_SEPARATOR, LoadMethod.LITERAL),
    (LoadMethod.SECRET_STORE.value + MARKER_SEPARATOR, LoadMethod.SECRET_STORE),
)


@dataclass(frozen=True)
class LoadMethodMatch:
    """Result of matching a raw value against the known markers.

    Attributes:
        method: Selected load method
        marker: Marker token before ``::`` (empty for REGULAR)
        payload: Text after the marker; the whole value for REGULAR
    """

    method: LoadMethod
    marker: str
    payload: str


def parse_load_method(raw_value: str) -> LoadMethodMatch:
    """Select the load method for ``raw_value``.

    Args:
        raw_value: Value exactly as found in the environment

    Returns:
        LoadMethodMatch for the first matching marker, REGULAR when the value
        has no ``::`` at all, UNKNOWN otherwise
    """
    for prefix, method in MARKERS:
        if raw_value.startswith(prefix):
            return LoadMethodMatch(method, method.value, raw_value[len(prefix) :])

    if MARKER_SEPARATOR not in raw_value:
        return LoadMethodMatch(LoadMethod.REGULAR, "", raw_value)

    marker, _, remainder = raw_value.partition(MARKER_SEPARATOR)
    return LoadMethodMatch(LoadMethod.UNKNOWN, marker, remainder)


async def resolve(raw_value: str, provider: SecretProvider) -> ResolutionOutcome:
    """
    Resolve a raw value to the string the child process should see.

    Performs at most one provider lookup. Never raises for lookup failures;
    any exception from the provider is returned as a LOAD_ERROR outcome.

    Args:
        raw_value: Value exactly as found in the environment
        provider: Lookup capability for SECRET_STORE values

    Returns:
        ResolutionOutcome with the final value or a classified failure
    """
    match = parse_load_method(raw_value)

    if match.method == LoadMethod.LITERAL:
        return ResolutionOutcome.resolved(match.payload)

    if match.method == LoadMethod.REGULAR:
        return ResolutionOutcome.resolved(match.payload)

    if match.method == LoadMethod.SECRET_STORE:
        logger.debug(f"Looking up secret '{match.payload}' via {provider.__class__.__name__}")
        try:
            secret = await provider.get_secret(match.payload)
        except SecretError as e:
            return ResolutionOutcome.failed(
                FailureKind.LOAD_ERROR,
                f"Failed to load secret '{match.payload}': {e}",
            )
        except Exception as e:
            logger.debug(f"Unexpected error looking up secret '{match.payload}'", exc_info=True)
            return ResolutionOutcome.failed(
                FailureKind.LOAD_ERROR,
                f"Failed to load secret '{match.payload}': {type(e).__name__}: {e}",
            )
        return ResolutionOutcome.resolved(secret)

    return ResolutionOutcome.failed(
        FailureKind.UNKNOWN_METHOD,
        f"Unknown load method '{match.marker}'",
    )
