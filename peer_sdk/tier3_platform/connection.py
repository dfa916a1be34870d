"""
peer_sdk.tier3_platform.connection
────────────────────────────────────
Owns the one Kubernetes API client of the process.

Three modes, picked from configuration at initialize():
  - disabled               → no client, every lookup resolves to []
  - KUBERNETES_URL set     → client pinned to that URL (kubectl proxy, dev)
  - KUBERNETES_URL unset   → in-cluster config (service-account token, CA
                             bundle and API address from the pod)

Usage:
    with KubernetesConnection(namespace="ledger") as conn:
        api = conn.handle   # None when disabled

Minimal stack: kubernetes (official Python client)
"""
from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from kubernetes import client
from kubernetes import config as kube_config
from kubernetes.config.config_exception import ConfigException

from peer_sdk.tier0_core.config import PeerConfig
from peer_sdk.tier0_core.errors import ConfigurationError
from peer_sdk.tier0_core.logging import get_logger

log = get_logger(__name__)

SERVICE_ACCOUNT_NAMESPACE = Path(
    "/var/run/secrets/kubernetes.io/serviceaccount/namespace"
)
DEFAULT_NAMESPACE = "default"


@runtime_checkable
class EndpointsApi(Protocol):
    """The single control-plane read this package needs. CoreV1Api fits."""

    def read_namespaced_endpoints(self, name: str, namespace: str, **kwargs: Any) -> Any: ...


def _core_v1_api(configuration: client.Configuration) -> EndpointsApi:
    return client.CoreV1Api(client.ApiClient(configuration))


class KubernetesConnection:
    """
    Lifecycle owner of the Kubernetes API client. Built from plain arguments
    or from PeerConfig; the client only exists between initialize() and
    shutdown().
    """

    def __init__(
        self,
        kubernetes_url: str | None = None,
        namespace: str | None = None,
        enabled: bool = True,
        request_timeout: float | None = None,
        api_factory: Callable[[client.Configuration], EndpointsApi] | None = None,
    ) -> None:
        self._url = kubernetes_url or None
        self._namespace = namespace
        self._enabled = enabled
        self.request_timeout = request_timeout
        self._api_factory = api_factory or _core_v1_api
        self._api: EndpointsApi | None = None
        self._initialized = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: PeerConfig, **kwargs: Any) -> KubernetesConnection:
        return cls(
            kubernetes_url=cfg.kubernetes_url,
            namespace=cfg.namespace,
            enabled=cfg.kubernetes_enabled,
            request_timeout=cfg.request_timeout,
            **kwargs,
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """
        Build the API client. Runs once; later calls are no-ops.

        Raises:
            ConfigurationError: the client could not be configured (e.g. not
                running in a cluster and no KUBERNETES_URL given).
        """
        with self._lock:
            if self._initialized:
                log.debug("kubernetes.already_initialized")
                return

            if not self._enabled:
                log.warning("kubernetes.disabled", kubernetes_enabled=self._enabled)
                self._initialized = True
                return

            configuration = client.Configuration()
            if self._url:
                log.info("kubernetes.connecting", url=self._url)
                configuration.host = self._url
            else:
                log.info("kubernetes.connecting", mode="in_cluster")
                try:
                    kube_config.load_incluster_config(client_configuration=configuration)
                except ConfigException as exc:
                    raise ConfigurationError(
                        f"Could not load in-cluster Kubernetes config: {exc}"
                    ) from exc

            self._api = self._api_factory(configuration)
            self._initialized = True

    def shutdown(self) -> None:
        """Release the client. Safe to call when disabled or twice."""
        with self._lock:
            api, self._api = self._api, None
        if api is None:
            return
        api_client = getattr(api, "api_client", None)
        if api_client is not None:
            api_client.close()
        log.info("kubernetes.closed")

    def __enter__(self) -> KubernetesConnection:
        self.initialize()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    # ── Accessors ─────────────────────────────────────────────────────────────

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def handle(self) -> EndpointsApi | None:
        """The live API, or None before initialize(), when disabled, or after shutdown()."""
        return self._api

    @property
    def namespace(self) -> str:
        if self._namespace:
            return self._namespace
        if SERVICE_ACCOUNT_NAMESPACE.is_file():
            self._namespace = SERVICE_ACCOUNT_NAMESPACE.read_text().strip()
        return self._namespace or DEFAULT_NAMESPACE


__all__ = ["EndpointsApi", "KubernetesConnection"]
