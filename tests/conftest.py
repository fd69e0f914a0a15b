"""Shared test configuration for env-loader tests.

Provides:
- A deterministic secret provider seeded from TEST_SECRETS
- A recorder that replaces os.execvpe so no test ever replaces the pytest process
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from test_secrets import TEST_SECRETS

from env_loader.engine.secrets import StaticSecretProvider


@pytest.fixture
def static_provider() -> StaticSecretProvider:
    """Secret provider backed by TEST_SECRETS; records every lookup."""
    return StaticSecretProvider(TEST_SECRETS)


@dataclass
class ExecCall:
    """Arguments of the most recent os.execvpe call."""

    calls: list[tuple[str, list[str], dict[str, str]]] = field(default_factory=list)

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def environment(self) -> dict[str, str]:
        return self.calls[-1][2]

    @property
    def args(self) -> list[str]:
        return self.calls[-1][1]


@pytest.fixture
def exec_recorder(monkeypatch: pytest.MonkeyPatch) -> Iterator[ExecCall]:
    """Replace os.execvpe with a recorder that returns instead of exec'ing."""
    recorder = ExecCall()

    def fake_execvpe(file: str, args: list[str], env: dict[str, str]) -> None:
        recorder.calls.append((file, args, dict(env)))

    monkeypatch.setattr("os.execvpe", fake_execvpe)
    yield recorder
