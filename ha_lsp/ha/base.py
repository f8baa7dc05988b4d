"""Base HA client with HTTP request handling and connection management.

Provides the core HTTP client functionality: a shared, lazily created
``httpx.AsyncClient``, bearer authentication, and error normalisation
into ``HAClientError``.
"""

import logging
import time
from typing import Any

from pydantic import BaseModel, Field

from ha_lsp.exceptions import ConfigurationError, HAClientError
from ha_lsp.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class HAClientConfig(BaseModel):
    """Configuration for HA client."""

    api_url: str = Field(..., description="Base URL of the HA REST API (ends in /api)")
    token: str = Field(..., description="Home Assistant bearer token")
    timeout: int = Field(default=30, description="Request timeout in seconds")

    @classmethod
    def from_settings(cls, settings: Settings) -> "HAClientConfig":
        api_url = settings.ha_api_url.rstrip("/")
        if not api_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"HA API URL must be http(s): {settings.ha_api_url!r}")
        return cls(
            api_url=api_url,
            token=settings.ha_token.get_secret_value(),
            timeout=settings.request_timeout,
        )


class BaseHAClient:
    """Authenticated transport to the Home Assistant REST API.

    Owns the pooled connection and turns transport or status failures
    into ``HAClientError``. Queries live in mixins.
    """

    connected = True

    def __init__(self, config: HAClientConfig | None = None):
        """Bind the client to one HA instance.

        Args:
            config: Connection settings; read from ``get_settings()`` when omitted
        """
        if config is None:
            config = HAClientConfig.from_settings(get_settings())
        self.config = config
        self._http_client: Any | None = None

    def _get_http_client(self) -> Any:
        """Return the pooled httpx.AsyncClient, creating it on first use.

        One client lives for the whole session so hover and completion
        requests reuse open connections to HA.
        """
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=10,
                    max_connections=20,
                ),
            )
        return self._http_client

    async def close(self) -> None:
        """Release pooled connections; the next request opens a fresh client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make a request to HA.

        Args:
            method: HTTP method
            path: API path relative to the API base (e.g. "/states")
            json: JSON body
            params: Query parameters

        Returns:
            Decoded JSON for JSON responses, the body text otherwise,
            or None for a 404.

        Raises:
            HAClientError: On transport failure or a non-success status.
        """
        import httpx

        start_time = time.perf_counter()
        client = self._get_http_client()
        url = f"{self.config.api_url}{path}"

        try:
            response = await client.request(
                method,
                url,
                headers={"Authorization": f"Bearer {self.config.token}"},
                json=json,
                params=params,
            )
        except httpx.ConnectError as e:
            raise HAClientError(f"{url}: Connection failed", "request") from e
        except httpx.TimeoutException as e:
            raise HAClientError(f"{url}: Timeout", "request") from e
        except httpx.HTTPError as e:
            raise HAClientError(f"{url}: {type(e).__name__}", "request") from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("%s %s -> %s (%.1f ms)", method, path, response.status_code, duration_ms)

        if response.status_code == 404:
            return None
        if response.status_code not in (200, 201):
            raise HAClientError(
                f"HA API error ({response.status_code}): {response.text}",
                "request",
                status_code=response.status_code,
            )

        if "application/json" in response.headers.get("content-type", ""):
            return response.json() if response.content else {}
        return response.text
