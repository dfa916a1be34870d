"""
peer_sdk.tier3_platform.discovery
───────────────────────────────────
Peer endpoint resolution. Translates a deployment name into the addresses
of every pod backing it by reading the Kubernetes Endpoints object of the
same name. Clustering layers (e.g. an in-memory data grid) use the result
as their member list.

Usage:
    initialize()
    peers = find_endpoints()            # own deployment, from $HOSTNAME
    peers = find_endpoints("ledger")    # explicit service

Result ordering: ready addresses of every subset (in subset order), then the
not-ready ones. Duplicates are kept.

A disabled, uninitialized or shut down connection and a missing Endpoints
object all resolve to []. An unreachable or failing API raises UpstreamError
so callers can tell "no peers yet" from "discovery is broken". Nothing here
retries.
"""
from __future__ import annotations

import atexit
import os
import threading
from collections.abc import Mapping
from typing import Any

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from peer_sdk.tier0_core.config import get_config
from peer_sdk.tier0_core.errors import UpstreamError
from peer_sdk.tier0_core.logging import get_logger
from peer_sdk.tier1_runtime import hostname
from peer_sdk.tier3_platform.connection import KubernetesConnection
from peer_sdk.tier3_platform.endpoints import EndpointsSnapshot

log = get_logger(__name__)


class EndpointResolver:
    """
    Resolve peer addresses through a KubernetesConnection. Reads nothing
    while the connection has no live handle.
    """

    def __init__(
        self,
        connection: KubernetesConnection,
        hostname_env: str = "HOSTNAME",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._connection = connection
        self._hostname_env = hostname_env
        self._environ = environ

    @property
    def connection(self) -> KubernetesConnection:
        return self._connection

    def is_enabled(self) -> bool:
        return self._connection.is_enabled()

    def find_deployment_name(self) -> str:
        """Deployment name of this pod, derived from its hostname."""
        env = os.environ if self._environ is None else self._environ
        return hostname.find_deployment_name(env, self._hostname_env)

    def find_endpoints(self, service_name: str | None = None) -> list[str]:
        """Addresses for *service_name*, or for this pod's own deployment."""
        if service_name is None:
            service_name = self.find_deployment_name()
            log.info("endpoints.resolve_own", service=service_name)
        return self.resolve_endpoints(service_name)

    def resolve_endpoints(self, service_name: str) -> list[str]:
        """
        Read the Endpoints object named *service_name* and flatten it.

        Raises:
            UpstreamError: the API could not be reached or returned an error
                other than 404.
        """
        api = self._connection.handle
        if api is None:
            return []

        snapshot = EndpointsSnapshot.from_endpoints(
            self._read_endpoints(api, service_name)
        )
        ready = snapshot.ready_addresses()
        not_ready = snapshot.not_ready_addresses()
        log.info(
            "endpoints.counted",
            service=service_name,
            ready=len(ready),
            not_ready=len(not_ready),
        )

        result = ready + not_ready
        log.info("endpoints.resolved", service=service_name, endpoints=result)
        return result

    def _read_endpoints(self, api: Any, service_name: str) -> Any | None:
        namespace = self._connection.namespace
        kwargs: dict[str, Any] = {}
        if self._connection.request_timeout is not None:
            kwargs["_request_timeout"] = self._connection.request_timeout

        try:
            return api.read_namespaced_endpoints(
                name=service_name, namespace=namespace, **kwargs
            )
        except ApiException as exc:
            if exc.status == 404:
                log.info("endpoints.not_found", service=service_name, namespace=namespace)
                return None
            raise UpstreamError(
                f"Reading endpoints {namespace}/{service_name} failed: {exc.reason}",
                status=exc.status,
                service=service_name,
                namespace=namespace,
            ) from exc
        except HTTPError as exc:
            raise UpstreamError(
                f"Kubernetes API unreachable while reading {namespace}/{service_name}: {exc}",
                service=service_name,
                namespace=namespace,
            ) from exc
        except ValueError as exc:
            # Raised by the client when the response does not deserialize.
            raise UpstreamError(
                f"Malformed endpoints response for {namespace}/{service_name}: {exc}",
                service=service_name,
                namespace=namespace,
            ) from exc


# ── Process-wide resolver ─────────────────────────────────────────────────────

_resolver: EndpointResolver | None = None
_resolver_lock = threading.Lock()


def get_resolver() -> EndpointResolver:
    """
    Return the process-wide resolver, building it from get_config() on first
    use.

    Raises:
        ConfigurationError: the environment holds an invalid setting.
    """
    global _resolver
    with _resolver_lock:
        if _resolver is None:
            cfg = get_config()
            connection = KubernetesConnection.from_config(cfg)
            _resolver = EndpointResolver(connection, hostname_env=cfg.hostname_env)
        return _resolver


def initialize() -> None:
    """Connect the process-wide resolver. Call once at startup."""
    get_resolver().connection.initialize()


def shutdown() -> None:
    get_resolver().connection.shutdown()


def is_enabled() -> bool:
    return get_resolver().is_enabled()


def find_endpoints(service_name: str | None = None) -> list[str]:
    """Ready then not-ready addresses for the service (default: own deployment)."""
    return get_resolver().find_endpoints(service_name)


def find_deployment_name() -> str:
    return get_resolver().find_deployment_name()


def _shutdown_at_exit() -> None:
    if _resolver is not None:
        _resolver.connection.shutdown()


atexit.register(_shutdown_at_exit)


def _reset_resolver() -> None:
    """For tests: drop the process-wide resolver."""
    global _resolver
    with _resolver_lock:
        if _resolver is not None:
            _resolver.connection.shutdown()
        _resolver = None


__all__ = [
    "EndpointResolver",
    "get_resolver",
    "initialize",
    "shutdown",
    "is_enabled",
    "find_endpoints",
    "find_deployment_name",
]
