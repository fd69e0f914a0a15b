"""Secret redaction for printed environments.

Values fetched from a secret store must never reach stdout or the logs. The
SecretRedactor is built from the output variables that were loaded from a
secret store. It masks those values entirely, and also masks any occurrence of
a secret value inside other values (for instance a password embedded in a URL
that was passed through verbatim).

Example:
    >>> redactor = SecretRedactor({"DB_PASSWORD": "my_secure_password"})
    >>> redactor.redact_environment({"DB_PASSWORD": "my_secure_password", "USER": "app"})
    {'DB_PASSWORD': '***REDACTED***', 'USER': 'app'}
"""

import re
from collections.abc import Mapping


class SecretRedactor:
    """Redacts secret values from an environment before it is printed.

    Attributes:
        secrets: Mapping of variable name to the secret value it received
        redaction_patterns: Compiled patterns, longest secret first
        MIN_SECRET_LENGTH: Shorter values are only masked where they are the
            whole value of a secret variable, never as substrings (8)
        REDACTION_MARKER: Replacement text ("***REDACTED***")
    """

    MIN_SECRET_LENGTH = 8

    REDACTION_MARKER = "***REDACTED***"

    def __init__(self, secrets: Mapping[str, str] | None = None) -> None:
        self.secrets: dict[str, str] = dict(secrets or {})
        self.redaction_patterns: list[re.Pattern[str]] = []
        self._compile_redaction_patterns()

    def _compile_redaction_patterns(self) -> None:
        # Longest first so a secret containing another secret is masked whole
        candidates = {
            value for value in self.secrets.values() if len(value) >= self.MIN_SECRET_LENGTH
        }
        self.redaction_patterns = [
            re.compile(re.escape(value)) for value in sorted(candidates, key=len, reverse=True)
        ]

    def redact_environment(self, environment: Mapping[str, str]) -> dict[str, str]:
        """Return a copy of ``environment`` that is safe to print.

        Variables the redactor was built with are masked entirely, whatever
        their length; every other value has secret substrings masked.
        """
        return {
            name: self.REDACTION_MARKER if name in self.secrets else self._redact_string(value)
            for name, value in environment.items()
        }

    def _redact_string(self, text: str) -> str:
        redacted_text = text
        for pattern in self.redaction_patterns:
            redacted_text = pattern.sub(self.REDACTION_MARKER, redacted_text)
        return redacted_text
