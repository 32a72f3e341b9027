"""Tests for request/response applicability and request filters."""
import httpx
import pytest

from cache_blob_snapshot import (
    AllowAllRequestFilter,
    BlobSnapshotConfig,
    HostRequestFilter,
    PredicateRequestFilter,
    RequestFilter,
    is_request_cacheable,
    is_response_cacheable,
)


@pytest.fixture
def config():
    return BlobSnapshotConfig(container_name="test")


def response(status_code: int = 200, cache_control: str = None) -> httpx.Response:
    headers = {"content-type": "application/json"}
    if cache_control is not None:
        headers["cache-control"] = cache_control
    return httpx.Response(status_code, headers=headers, content=b"{}")


class TestIsRequestCacheable:
    def test_plain_get(self, config):
        assert is_request_cacheable(httpx.Request("GET", "https://example.com/a"), config) is True

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"])
    def test_other_methods(self, config, method):
        assert is_request_cacheable(httpx.Request(method, "https://example.com/a"), config) is False

    def test_range_header_excluded(self, config):
        request = httpx.Request("GET", "https://example.com/a", headers={"Range": "bytes=0-10"})
        assert is_request_cacheable(request, config) is False

    def test_range_header_any_case(self, config):
        request = httpx.Request("GET", "https://example.com/a", headers={"RANGE": "bytes=5-"})
        assert is_request_cacheable(request, config) is False

    def test_request_cache_control_is_ignored(self, config):
        request = httpx.Request("GET", "https://example.com/a", headers={"Cache-Control": "no-cache"})
        assert is_request_cacheable(request, config) is True

    def test_filter_rejects(self):
        config = BlobSnapshotConfig(request_filter=PredicateRequestFilter(lambda r: False))
        assert is_request_cacheable(httpx.Request("GET", "https://example.com/a"), config) is False


class TestIsResponseCacheable:
    def test_ok_without_cache_control(self):
        assert is_response_cacheable(response(200)) is True

    @pytest.mark.parametrize("status_code", [201, 203, 204, 206, 301, 302, 304, 400, 404, 500])
    def test_non_ok_statuses(self, status_code):
        assert is_response_cacheable(response(status_code)) is False

    @pytest.mark.parametrize(
        "cache_control",
        ["no-cache", "No-Cache", "private, no-cache", 'no-cache="Set-Cookie"', "max-age=0, no-cache"],
    )
    def test_no_cache_directive(self, cache_control):
        assert is_response_cacheable(response(200, cache_control)) is False

    @pytest.mark.parametrize("cache_control", ["no-store", "private", "max-age=0", "public, max-age=60", ""])
    def test_other_directives_are_not_inspected(self, cache_control):
        assert is_response_cacheable(response(200, cache_control)) is True


class TestRequestFilters:
    def test_allow_all(self):
        f = AllowAllRequestFilter()
        assert f.matches(httpx.Request("GET", "https://anything.test/")) is True

    def test_host_filter_is_case_insensitive(self):
        f = HostRequestFilter(["API.example.com"])
        assert f.matches(httpx.Request("GET", "https://api.example.com/x")) is True
        assert f.matches(httpx.Request("GET", "https://other.example.com/x")) is False

    def test_predicate_filter(self):
        f = PredicateRequestFilter(lambda r: r.url.path.startswith("/public"))
        assert f.matches(httpx.Request("GET", "https://example.com/public/a")) is True
        assert f.matches(httpx.Request("GET", "https://example.com/private/a")) is False

    def test_filters_satisfy_protocol(self):
        assert isinstance(AllowAllRequestFilter(), RequestFilter)
        assert isinstance(HostRequestFilter([]), RequestFilter)
        assert isinstance(PredicateRequestFilter(bool), RequestFilter)
