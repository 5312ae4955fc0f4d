# ============================================================================
# MODULE CONTEXT - ISERVER HTTP TRANSPORT
# ============================================================================
# STATUS: Common Layer - HTTP transport for every iServer REST call
# PURPOSE: Proxy/credential handling, timeouts and JSON decoding over httpx
# EXPORTS: FetchRequest, FetchResponse, shared_cookie_jar
# DEPENDENCIES: httpx (sync)
# ============================================================================
"""
iServer HTTP transport (SYNC VERSION).

All network traffic of the common service layer goes through
``FetchRequest``. It never raises for HTTP or network failures; every
outcome is described by a ``FetchResponse``:

- 2xx with JSON body  -> success=True, data=<decoded JSON>
- 4xx/5xx             -> success=False, data=<decoded JSON or None>
- timeout             -> success=False, status_code=504
- connection error    -> success=False, status_code=500

Retries and timeouts are the transport's concern only; the services above
it never retry.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union
from urllib.parse import quote

import httpx

from iclient.config import get_client_settings
from iclient.util_logger import ComponentType, LoggerFactory

from .enums import ServerType

logger = LoggerFactory.create_logger(ComponentType.TRANSPORT, "FetchRequest")

# Cookie jar shared by every request made with with_credentials=True
shared_cookie_jar = httpx.Cookies()

ProxyType = Union[str, Callable[[str], str], None]


@dataclass
class FetchResponse:
    """Response wrapper for iServer calls."""
    success: bool
    status_code: int
    data: Optional[Any] = None
    content_type: Optional[str] = None
    error: Optional[str] = None


class FetchRequest:
    """
    Sync HTTP client for iServer REST resources.

    Usage:
        request = FetchRequest(proxy=None, with_credentials=False)
        response = request.get("http://host/iserver/services/map/rest/maps/World/layers.json")
        request.close()

    Args:
        proxy: URL prefix the quoted target URL is appended to, or a
            callable mapping a target URL to the URL actually requested.
        with_credentials: Share ``shared_cookie_jar`` across requests.
        server_type: Decides whether ``token`` or ``key`` is appended.
        timeout: Seconds; defaults to ``ClientSettings.timeout``.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        proxy: ProxyType = None,
        with_credentials: Optional[bool] = None,
        server_type: Optional[ServerType] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        settings = get_client_settings()
        self.proxy = proxy if proxy is not None else settings.proxy
        self.with_credentials = settings.with_credentials if with_credentials is None else with_credentials
        self.server_type = ServerType(server_type) if server_type else settings.server_type
        self.timeout = timeout or settings.timeout
        self.retries = settings.retries
        self.token = settings.token
        self.key = settings.key
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "FetchRequest":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None or self._client.is_closed:
            transport = self._transport or httpx.HTTPTransport(retries=self.retries)
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=transport,
                cookies=shared_cookie_jar if self.with_credentials else None
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            if self.with_credentials:
                shared_cookie_jar.update(self._client.cookies)
            self._client.close()

    def _credential_params(self) -> Dict[str, str]:
        if self.server_type == ServerType.ISERVER and self.token:
            return {"token": self.token}
        if self.server_type in (ServerType.IPORTAL, ServerType.ONLINE) and self.key:
            return {"key": self.key}
        return {}

    def _apply_proxy(self, url: str) -> str:
        if not self.proxy:
            return url
        if callable(self.proxy):
            return self.proxy(url)
        return f"{self.proxy}{quote(url, safe='')}"

    def _build_url(self, url: str, params: Optional[Dict[str, Any]]) -> str:
        """Merge query parameters into the URL before the proxy wraps it."""
        query = {**_encode_params(params or {}), **self._credential_params()}
        if query:
            url = str(httpx.URL(url).copy_merge_params(query))
        return self._apply_proxy(url)

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> FetchResponse:
        return self.request("GET", url, params=params)

    def post(self, url: str, data: Any = None, params: Optional[Dict[str, Any]] = None) -> FetchResponse:
        return self.request("POST", url, params=params, data=data)

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None
    ) -> FetchResponse:
        """
        Make an HTTP request to iServer.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Resource URL
            params: Query parameters, lists are comma-joined
            data: JSON body for POST/PUT, serialized as-is when already a string

        Returns:
            FetchResponse with decoded JSON or error
        """
        target = self._build_url(url, params)
        client = self._get_client()

        content = None
        if data is not None:
            content = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)

        logger.debug(f"{method} {target}")

        try:
            response = client.request(
                method,
                target,
                content=content.encode("utf-8") if content is not None else None,
                headers={"Content-Type": "application/json;charset=UTF-8"} if content is not None else None
            )
        except httpx.TimeoutException:
            return FetchResponse(
                success=False,
                status_code=504,
                error=f"iServer request timeout after {self.timeout}s"
            )
        except httpx.RequestError as e:
            return FetchResponse(
                success=False,
                status_code=500,
                error=f"iServer request error: {str(e)}"
            )

        content_type = response.headers.get("content-type", "")
        body = _decode_json(response)

        if response.status_code >= 400:
            error_text = response.text[:500] if response.text else "Unknown error"
            logger.info(f"{method} {url} returned HTTP {response.status_code}")
            return FetchResponse(
                success=False,
                status_code=response.status_code,
                data=body,
                content_type=content_type,
                error=f"iServer error: {error_text}"
            )

        if body is None:
            return FetchResponse(
                success=False,
                status_code=response.status_code,
                content_type=content_type,
                error=f"iServer returned a non-JSON body ({content_type or 'no content type'})"
            )

        return FetchResponse(
            success=True,
            status_code=response.status_code,
            data=body,
            content_type=content_type
        )


def _encode_params(params: Dict[str, Any]) -> Dict[str, str]:
    """Drop None values and flatten lists/booleans the way iServer reads them."""
    encoded = {}
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, (list, tuple)):
            encoded[name] = ",".join(str(v.value if isinstance(v, Enum) else v) for v in value)
        elif isinstance(value, bool):
            encoded[name] = str(value).lower()
        else:
            encoded[name] = str(value)
    return encoded


def _decode_json(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
