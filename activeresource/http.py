"""
ActiveResource HTTP client — synchronous transport via httpx.

Features:
- One ``httpx.Client`` per API root (connection pooling, base URL, default headers)
- Every HTTP status, 4xx and 5xx included, comes back as a ``Response``
- Transport failures (connect, timeout, DNS, protocol) raise
  ``ServerUnreachableFault`` and are never retried

Usage::

    client = HttpClient("https://api.example.com/v1/", headers={"Accept": "application/json"})
    response = client.request("get", "users", query={"limit": 5})
    response.status_code, response.header("X-Pagination-Total-Count"), response.text
    client.close()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .faults import ServerUnreachableFault

__all__ = ["HttpClient", "Response"]

logger = logging.getLogger("activeresource.http")


class Response:
    """Read-only view of an HTTP response."""

    __slots__ = ("_response",)

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def content_type(self) -> str:
        return self.header("Content-Type")

    def header(self, name: str) -> str:
        """Case-insensitive header lookup; repeated values are comma-joined, ``""`` if absent."""
        return self._response.headers.get(name, "")

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"


class HttpClient:
    """
    Verb-based HTTP client bound to one API root.

    Relative URLs passed to ``request()`` resolve against ``base_url``,
    which should end with a slash.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = 30.0,
        **client_kwargs: Any,
    ):
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers or {},
            timeout=timeout,
            **client_kwargs,
        )
        logger.info(f"HTTP client created for {base_url} (timeout={timeout})")

    def request(
        self,
        method: str,
        url: str,
        *,
        query: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Response:
        """
        Perform one request.

        Args:
            method: HTTP verb (get, head, post, put, delete)
            url: URL relative to ``base_url``
            query: Query string parameters
            json: JSON request body

        Raises:
            ServerUnreachableFault: The server could not be reached
        """
        verb = method.upper()
        logger.debug(f"{verb} {self.base_url}{url} params={query or {}}")

        try:
            response = self._client.request(verb, url, params=query or None, json=json)
        except httpx.RequestError as exc:
            logger.warning(f"{verb} {self.base_url}{url} failed: {type(exc).__name__}: {exc}")
            raise ServerUnreachableFault(self.base_url, exc) from exc

        logger.debug(f"{verb} {self.base_url}{url} -> {response.status_code}")
        return Response(response)

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.request("get", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        return self.request("head", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Response:
        return self.request("post", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Response:
        return self.request("put", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        return self.request("delete", url, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<HttpClient {self.base_url}>"
