"""Exceptions raised by secret providers.

Exception Hierarchy:
    SecretError (base)
    ├── SecretNotFoundError (secret identifier does not exist)
    ├── SecretAccessDeniedError (caller is not allowed to read it)
    └── SecretProviderError (transport, configuration or payload failure)

The value resolver treats every SecretError the same way: the variable that
referenced the secret fails with a load error. The subclasses exist so the
diagnostic tells an operator which of the three situations occurred.

Example:
    >>> try:
    ...     value = await provider.get_secret("prod/db/password")
    ... except SecretNotFoundError as e:
    ...     print(f"Secret {e.key} not found. {e.provider_hint}")
"""


class SecretError(Exception):
    """Base exception for all secret lookup errors."""

    pass


class SecretNotFoundError(SecretError):
    """Raised when a secret identifier does not exist in the provider.

    Attributes:
        key: The secret identifier that was requested
        provider_hint: Optional hint about where the secret was looked up
    """

    def __init__(self, key: str, provider_hint: str | None = None) -> None:
        self.key = key
        self.provider_hint = provider_hint

        message = f"Secret '{key}' not found"
        if provider_hint:
            message += f". {provider_hint}"

        super().__init__(message)


class SecretAccessDeniedError(SecretError):
    """Raised when the provider refuses access to an existing secret.

    Attributes:
        key: The secret identifier access was denied for
        reason: Reason reported by the provider
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason

        super().__init__(f"Access denied for secret '{key}': {reason}")


class SecretProviderError(SecretError):
    """Raised when a provider fails for reasons other than not-found or denial.

    Covers connection failures, missing credentials or region, throttling and
    secrets whose payload cannot be exported as a string.

    Attributes:
        provider_name: Name of the provider that failed
        details: Provider error detail
        key: Secret identifier being looked up, if known
    """

    def __init__(self, provider_name: str, details: str, key: str | None = None) -> None:
        self.provider_name = provider_name
        self.details = details
        self.key = key

        if key:
            message = f"Secret provider '{provider_name}' error for '{key}': {details}"
        else:
            message = f"Secret provider '{provider_name}' error: {details}"
        super().__init__(message)
