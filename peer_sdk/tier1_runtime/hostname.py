"""
peer_sdk.tier1_runtime.hostname
─────────────────────────────────
Derive the deployment name from the pod's own hostname.

Kubernetes names pods `<deployment>-<suffix>`, where the suffix may itself
contain dashes (`ledger-7f8b9c-x2z`). The deployment name is everything
before the first dash.

Known limitation: a deployment whose name contains a dash is truncated
(`order-service-5d9f-abcde` → `order`).
"""
from __future__ import annotations

import os
from collections.abc import Mapping

DEFAULT_HOSTNAME = "localhost"


def deployment_name_from_hostname(hostname: str) -> str:
    """Return the part of *hostname* before the first dash, or all of it."""
    name, _, _ = hostname.partition("-")
    return name


def find_deployment_name(
    environ: Mapping[str, str] | None = None,
    env_var: str = "HOSTNAME",
) -> str:
    """
    Read the hostname from the environment (at call time, never cached) and
    derive the deployment name. Falls back to "localhost" when unset.
    """
    env = os.environ if environ is None else environ
    hostname = env.get(env_var)
    if hostname is None:
        hostname = DEFAULT_HOSTNAME
    return deployment_name_from_hostname(hostname)


__all__ = ["DEFAULT_HOSTNAME", "deployment_name_from_hostname", "find_deployment_name"]
