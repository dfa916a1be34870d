"""
peer_sdk
────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from peer_sdk.tier0_core.logging import get_logger
from peer_sdk.tier0_core.errors import PeerError, ConfigurationError, UpstreamError
from peer_sdk.tier0_core.config import get_config, PeerConfig

from peer_sdk.tier1_runtime.hostname import deployment_name_from_hostname

from peer_sdk.tier3_platform.connection import EndpointsApi, KubernetesConnection
from peer_sdk.tier3_platform.endpoints import EndpointsSnapshot, SubsetAddresses
from peer_sdk.tier3_platform.discovery import (
    EndpointResolver,
    get_resolver,
    initialize,
    shutdown,
    is_enabled,
    find_endpoints,
    find_deployment_name,
)

__version__ = "0.1.0"
__all__ = [
    # logging
    "get_logger",
    # errors
    "PeerError", "ConfigurationError", "UpstreamError",
    # config
    "get_config", "PeerConfig",
    # hostname
    "deployment_name_from_hostname",
    # connection
    "EndpointsApi", "KubernetesConnection",
    # endpoints
    "EndpointsSnapshot", "SubsetAddresses",
    # discovery
    "EndpointResolver", "get_resolver", "initialize", "shutdown",
    "is_enabled", "find_endpoints", "find_deployment_name",
]
