"""
peer_sdk test configuration.

All tests run with the Kubernetes connection disabled by default, no
cluster required. Tests that need a client build a KubernetesConnection
with a fake API factory.
"""
from __future__ import annotations

import os
from typing import Any

import pytest

# ── Safe defaults ──────────────────────────────────────────────────────────
# These must be set before any peer_sdk modules are imported.

os.environ.setdefault("KUBERNETES_ENABLED", "false")
os.environ.setdefault("KUBERNETES_NAMESPACE", "test-ns")
os.environ.setdefault("PLATFORM_LOG_LEVEL", "DEBUG")
os.environ.setdefault("PLATFORM_LOG_FORMAT", "console")


# ── Fakes ──────────────────────────────────────────────────────────────────

class FakeApiClient:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeCoreV1Api:
    """Stands in for CoreV1Api: returns a canned object or raises."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.api_client = FakeApiClient()

    def read_namespaced_endpoints(self, name: str, namespace: str, **kwargs: Any) -> Any:
        self.calls.append({"name": name, "namespace": namespace, **kwargs})
        if self.error is not None:
            raise self.error
        return self.result


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_module_singletons():
    """
    Reset cached config and the process-wide resolver between tests.
    This ensures each test gets a fresh resolver with no state bleed.
    """
    from peer_sdk.tier0_core.config import _reset_config
    from peer_sdk.tier3_platform.discovery import _reset_resolver

    yield

    _reset_resolver()
    _reset_config()


@pytest.fixture
def fake_api():
    """Return a FakeCoreV1Api with no Endpoints object configured."""
    return FakeCoreV1Api()


@pytest.fixture
def connected(fake_api):
    """Return an initialized KubernetesConnection backed by fake_api."""
    from peer_sdk.tier3_platform.connection import KubernetesConnection

    conn = KubernetesConnection(
        kubernetes_url="http://localhost:8001",
        namespace="test-ns",
        api_factory=lambda configuration: fake_api,
    )
    conn.initialize()
    yield conn
    conn.shutdown()
