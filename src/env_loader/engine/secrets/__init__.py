"""Secret lookup for env-loader.

This package provides the lookup capability the value resolver calls for
``aws_sm::`` references, plus redaction of the values it returns.

Core Components:
    - SecretProvider: Abstract base class for secret sources
    - AWSSecretsProvider: AWS Secrets Manager (boto3)
    - StaticSecretProvider: In-memory mapping, for tests and offline runs
    - SecretRedactor: Masks secret values in printed output
    - Custom exceptions: Structured lookup failures

Example:
    >>> from env_loader.engine.secrets import AWSSecretsProvider, SecretNotFoundError
    >>> provider = AWSSecretsProvider()
    >>> try:
    ...     password = await provider.get_secret("prod/db/password")
    ... except SecretNotFoundError as e:
    ...     print(e)
"""

from .exceptions import (
    SecretAccessDeniedError,
    SecretError,
    SecretNotFoundError,
    SecretProviderError,
)
from .provider import (
    AWSSecretsProvider,
    SecretProvider,
    StaticSecretProvider,
)
from .redactor import SecretRedactor

__all__ = [
    # Exceptions
    "SecretError",
    "SecretNotFoundError",
    "SecretAccessDeniedError",
    "SecretProviderError",
    # Providers
    "SecretProvider",
    "AWSSecretsProvider",
    "StaticSecretProvider",
    # Redaction
    "SecretRedactor",
]
