"""
Variable classification and name rewriting.

Every inherited variable gets exactly one Decision before any value is
loaded:

    PASS_THROUGH: Name is in the pass list; copied unchanged
    OUT_OF_SCOPE: A prefix is configured and the name lacks it; copied unchanged
    NEEDS_RESOLUTION: Value goes to the resolver, exported under output_name

The pass list is checked first, so a pass-through variable is never resolved
even if it carries the prefix or a load marker.
"""

from dataclasses import dataclass
from enum import Enum

from .config import LoaderConfig


class DecisionKind(Enum):
    """What the loader does with a variable."""

    PASS_THROUGH = "pass_through"
    OUT_OF_SCOPE = "out_of_scope"
    NEEDS_RESOLUTION = "needs_resolution"


@dataclass(frozen=True)
class Decision:
    """
    Classification of one inherited variable.

    For NEEDS_RESOLUTION, ``output_name`` is the name with the prefix stripped
    (or the name itself when no prefix is set) and the pair
    (output_name, raw_value) is the resolution request. For the other kinds
    ``output_name`` equals ``name``.
    """

    kind: DecisionKind
    name: str
    output_name: str
    raw_value: str

    @property
    def needs_resolution(self) -> bool:
        return self.kind == DecisionKind.NEEDS_RESOLUTION


def strip_prefix(name: str, prefix: str | None) -> str:
    """Remove exactly ``len(prefix)`` leading characters when ``name`` has the prefix.

    Matching is a case-sensitive literal prefix test with no separator check:
    ``MYAPPX`` has prefix ``MYAPP`` and becomes ``X``.
    """
    if prefix and name.startswith(prefix):
        return name[len(prefix) :]
    return name


def classify(name: str, value: str, config: LoaderConfig) -> Decision:
    """
    Classify a single variable.

    Args:
        name: Variable name from the environment snapshot
        value: Raw variable value (not inspected here)
        config: Loader configuration

    Returns:
        Decision for the variable
    """
    if name in config.pass_list:
        return Decision(DecisionKind.PASS_THROUGH, name, name, value)

    prefix = config.env_prefix
    if prefix and not name.startswith(prefix):
        return Decision(DecisionKind.OUT_OF_SCOPE, name, name, value)

    return Decision(DecisionKind.NEEDS_RESOLUTION, name, strip_prefix(name, prefix), value)
