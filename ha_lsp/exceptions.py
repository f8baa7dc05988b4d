"""ha-lsp exception hierarchy.

Base exceptions for the language server layers with correlation ID support.

Usage:
    from ha_lsp.exceptions import HAClientError

    try:
        states = await client.fetch_states()
    except HAClientError as e:
        logger.warning("State fetch failed [%s]: %s", e.correlation_id, e)
"""

import uuid
from typing import Any


class HALSPError(Exception):
    """Base exception for all ha-lsp errors.

    Carries a correlation_id for tracing errors across layers.
    """

    def __init__(self, message: str, *, correlation_id: str | None = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(message)


class HAClientError(HALSPError):
    """A Home Assistant REST call failed.

    ``tool`` names the client method, ``status_code`` is set when HA
    answered with a non-success status.
    """

    def __init__(
        self,
        message: str,
        tool: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
    ):
        self.tool = tool
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message, correlation_id=correlation_id)


class NotConnectedError(HAClientError):
    """Live data was requested but no HA credential is configured."""

    pass


class ConfigurationError(HALSPError):
    """Settings that cannot produce a working client."""

    pass
