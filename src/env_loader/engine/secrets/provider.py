"""Secret provider abstraction and implementations.

The value resolver never talks to a secret backend directly. It receives a
SecretProvider and calls ``get_secret`` once for every ``aws_sm::`` reference
it meets, so tests and offline runs can substitute a deterministic provider.

Providers:
    - SecretProvider: Abstract base class defining the lookup interface
    - AWSSecretsProvider: AWS Secrets Manager via boto3
    - StaticSecretProvider: Mapping-backed provider (tests, dry runs)

Example:
    >>> provider = AWSSecretsProvider(region_name="eu-west-1")
    >>> password = await provider.get_secret("prod/db/password")
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import SecretAccessDeniedError, SecretNotFoundError, SecretProviderError

logger = logging.getLogger(__name__)


class SecretProvider(ABC):
    """Abstract base class for secret providers.

    Implementations own authentication, connection management and the mapping
    of backend errors onto the SecretError hierarchy. Lookups are async so a
    blocking client can be moved off the event loop.

    Example:
        >>> class MyProvider(SecretProvider):
        ...     async def get_secret(self, key: str) -> str:
        ...         return await fetch_from_source(key)
    """

    @abstractmethod
    async def get_secret(self, key: str) -> str:
        """Retrieve a secret value by identifier.

        Args:
            key: The secret identifier (e.g., "prod/db/password")

        Returns:
            The secret value as a string

        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretAccessDeniedError: If the caller may not read the secret
            SecretProviderError: If the provider encounters any other error
        """
        pass


class StaticSecretProvider(SecretProvider):
    """Secret provider backed by an in-memory mapping.

    Records every identifier it is asked for in ``lookups`` (in call order,
    duplicates included), which makes lookup behaviour observable in tests.

    Example:
        >>> provider = StaticSecretProvider({"prod/db/password": "hunter22"})
        >>> await provider.get_secret("prod/db/password")
        'hunter22'
    """

    def __init__(self, secrets: Mapping[str, str] | None = None) -> None:
        self.secrets: dict[str, str] = dict(secrets or {})
        self.lookups: list[str] = []

    async def get_secret(self, key: str) -> str:
        self.lookups.append(key)
        try:
            return self.secrets[key]
        except KeyError:
            raise SecretNotFoundError(
                key=key, provider_hint="No such key in static secrets"
            ) from None


class AWSSecretsProvider(SecretProvider):
    """Secret provider for AWS Secrets Manager.

    The boto3 client is created on the first lookup and reused afterwards, so
    a run that references no secrets never touches AWS configuration.
    Credentials and region come from boto3's default chain unless
    ``region_name`` is given.

    Only ``SecretString`` payloads are supported; a binary secret cannot be
    placed in an environment variable and fails with SecretProviderError.

    Error mapping:
        ResourceNotFoundException -> SecretNotFoundError
        AccessDeniedException     -> SecretAccessDeniedError
        any other ClientError     -> SecretProviderError
        BotoCoreError             -> SecretProviderError (credentials, network, region)

    Attributes:
        region_name: AWS region override, or None for the default chain
    """

    NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})
    ACCESS_DENIED_CODES = frozenset({"AccessDeniedException", "AccessDenied"})

    def __init__(self, region_name: str | None = None, client: Any = None) -> None:
        """Initialize the AWS Secrets Manager provider.

        Args:
            region_name: AWS region (default: resolved by boto3)
            client: Pre-built secretsmanager client (default: created lazily)
        """
        self.region_name = region_name
        self._client = client

    @property
    def client(self) -> Any:
        """The secretsmanager client, created on first access."""
        if self._client is None:
            region = self.region_name or "default"
            logger.debug(f"Creating Secrets Manager client (region: {region})")
            self._client = boto3.client("secretsmanager", region_name=self.region_name)
        return self._client

    async def get_secret(self, key: str) -> str:
        """Retrieve a secret string from AWS Secrets Manager.

        Args:
            key: Secret name or ARN

        Returns:
            The SecretString of the current secret version

        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretAccessDeniedError: If IAM denies GetSecretValue
            SecretProviderError: For every other failure
        """

        def _fetch() -> dict[str, Any]:
            return self.client.get_secret_value(SecretId=key)

        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(None, _fetch)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            message = error.get("Message") or str(e)
            if code in self.NOT_FOUND_CODES:
                raise SecretNotFoundError(key=key, provider_hint=f"AWS Secrets Manager: {message}")
            if code in self.ACCESS_DENIED_CODES:
                raise SecretAccessDeniedError(key=key, reason=message)
            raise SecretProviderError(self.__class__.__name__, f"{code}: {message}", key=key)
        except BotoCoreError as e:
            raise SecretProviderError(self.__class__.__name__, str(e), key=key)

        secret_string = response.get("SecretString")
        if secret_string is None:
            raise SecretProviderError(
                self.__class__.__name__,
                "secret has no SecretString (binary secrets are not supported)",
                key=key,
            )
        return secret_string
