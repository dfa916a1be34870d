"""
peer_sdk.tier0_core.errors
────────────────────────────
Error taxonomy for peer discovery. Only real failures are errors: a
disabled connection or a service without endpoints resolves to an empty
list instead.
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class PeerError(Exception):
    """
    Base class for all peer_sdk errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - detail: human readable context
    - metadata: structured fields suitable for log binding
    """

    code: str = "peer_error"

    def __init__(
        self,
        detail: str = "An unexpected error occurred.",
        code: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.detail = detail
        self.metadata = metadata
        super().__init__(detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                **self.metadata,
            }
        }


# ── Typed error classes ───────────────────────────────────────────────────────

class ConfigurationError(PeerError):
    """The Kubernetes client could not be built at startup."""
    code = "configuration_error"


class UpstreamError(PeerError):
    """The Kubernetes API was unreachable or answered with an error."""
    code = "upstream_error"

    def __init__(
        self,
        detail: str = "Kubernetes API request failed.",
        code: str | None = None,
        status: int | None = None,
        **metadata: Any,
    ) -> None:
        self.status = status
        if status is not None:
            metadata["status"] = status
        super().__init__(detail, code, **metadata)


__all__ = ["PeerError", "ConfigurationError", "UpstreamError"]
