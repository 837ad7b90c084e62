"""
Shared test fixtures and helpers for the ActiveResource test suite.

HTTP traffic goes through ``httpx.MockTransport`` backed by ``FakeApi``,
a scripted server that records every request it receives.
"""

import json
from typing import Any, Dict, List, Optional, Type

import httpx
import pytest

from activeresource.http import HttpClient
from activeresource.models import Model, Query


API_ROOT = "https://api.test/v1/"


# ============================================================================
# Models
# ============================================================================


class User(Model):
    """Bare-array resource, pagination through headers only."""

    class Meta:
        api_url = "https://api.test/v1"
        resource_name = "users"
        attributes = ("id", "email", "status")


class Post(Model):
    """Enveloped resource (Yii-style ``items`` + ``_meta``)."""

    class Meta:
        api_url = "https://api.test/v1/"
        resource_name = "posts/"
        collection_envelope = "items"
        pagination_envelope = "_meta"
        pagination_envelope_keys = {
            "totalCount": "totalCount",
            "pageCount": "pageCount",
            "currPage": "currentPage",
            "perPageCount": "perPage",
        }
        limit_key = "per-page"
        offset_key = "page"


# ============================================================================
# Fake API
# ============================================================================


class FakeApi:
    """Scripted API: queued responses are served in order, requests recorded."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: List[httpx.Response] = []
        self._failure: Optional[tuple] = None

    def queue(
        self,
        data: Any = None,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
        content_type: str = "application/json",
    ) -> "FakeApi":
        all_headers = {"content-type": content_type}
        if headers:
            all_headers.update(headers)
        if text is not None:
            content = text.encode()
        elif data is not None:
            content = json.dumps(data).encode()
        else:
            content = b""
        self._responses.append(
            httpx.Response(status_code=status_code, content=content, headers=all_headers)
        )
        return self

    def fail_with(self, exc_cls: Type[httpx.RequestError], message: str) -> None:
        self._failure = (exc_cls, message)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._failure is not None:
            exc_cls, message = self._failure
            raise exc_cls(message, request=request)
        if not self._responses:
            return httpx.Response(599, json={"message": "no scripted response"})
        return self._responses.pop(0)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def params(self, index: int = -1) -> Dict[str, str]:
        return dict(self.requests[index].url.params)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def client(api):
    http = HttpClient(
        API_ROOT,
        headers={"Accept": "application/json"},
        transport=httpx.MockTransport(api.handler),
    )
    yield http
    http.close()


@pytest.fixture
def user_query(client):
    return Query(User, http_client=client)


@pytest.fixture
def post_query(client):
    return Query(Post, http_client=client)


@pytest.fixture
def bound_models(client):
    """Route ``User.objects`` / ``Post.objects`` through the fake API."""
    User.use_client(client)
    Post.use_client(client)
    yield User, Post
    User.use_client(None)
    Post.use_client(None)
