"""
Tests for URL building (utils/urls.py and Query URL helpers).
"""

import pytest

from activeresource.models import Model, Query
from activeresource.utils import resource_path, trailing_slash


# ============================================================================
# trailing_slash / resource_path
# ============================================================================

class TestTrailingSlash:

    def test_add(self):
        assert trailing_slash("https://api.test/v1") == "https://api.test/v1/"

    def test_add_keeps_existing(self):
        assert trailing_slash("https://api.test/v1/") == "https://api.test/v1/"

    def test_strip(self):
        assert trailing_slash("users/", add=False) == "users"

    def test_strip_without_slash(self):
        assert trailing_slash("users", add=False) == "users"

    @pytest.mark.parametrize("value", ["users", "users/", "users//", "https://x.test/api", ""])
    def test_idempotent(self, value):
        once = trailing_slash(value)
        assert trailing_slash(once) == once
        stripped = trailing_slash(value, add=False)
        assert trailing_slash(stripped, add=False) == stripped

    def test_non_string_value(self):
        assert trailing_slash(42, add=False) == "42"


class TestResourcePath:

    def test_collection(self):
        assert resource_path("users/") == "users"

    def test_element(self):
        assert resource_path("users", 42) == "users/42"

    def test_element_strips_id_slash(self):
        assert resource_path("users/", "7/") == "users/7"


# ============================================================================
# Query URL helpers
# ============================================================================

class Widget(Model):
    class Meta:
        api_url = "https://api.test/v2"
        resource_name = "widgets/"


class TestQueryUrls:

    def test_api_base_url_has_one_trailing_slash(self, client):
        query = Query(Widget, http_client=client)
        assert query.api_base_url() == "https://api.test/v2/"

    def test_collection_url_has_no_trailing_slash(self, client):
        query = Query(Widget, http_client=client)
        assert query.collection_url() == "widgets"

    def test_element_url(self, client):
        query = Query(Widget, http_client=client)
        assert query.element_url(5) == "widgets/5"
        assert not query.element_url("5/").endswith("/")

    def test_element_url_without_id_is_collection(self, client):
        query = Query(Widget, http_client=client)
        assert query.element_url() == query.collection_url()

    def test_default_client_uses_api_base_url(self):
        with Query(Widget) as query:
            assert query.http_client.base_url == "https://api.test/v2/"
