"""Unit tests for the HTTP schema fetcher."""

import asyncio

import httpx
import pytest

from crdforge.interfaces.fetcher import FetchError
from crdforge.strategies.fetchers.http import HTTPSchemaFetcher, normalize_source_url


CRD_BODY = b"apiVersion: apiextensions.k8s.io/v1\nkind: CustomResourceDefinition\n"


def _fetcher(handler, **kwargs):
    return HTTPSchemaFetcher(transport=httpx.MockTransport(handler), **kwargs)


# =============================================================================
# URL Normalization Tests
# =============================================================================


class TestNormalizeSourceURL:
    """Test suite for normalize_source_url."""

    def test_github_blob_is_rewritten(self):
        url = "https://github.com/acme/operator/blob/main/config/crd/widgets.yaml"

        assert normalize_source_url(url) == (
            "https://raw.githubusercontent.com/acme/operator/main/config/crd/widgets.yaml"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://raw.githubusercontent.com/acme/operator/main/crd.yaml",
            "https://github.com/acme/operator/tree/main/config",
            "https://github.com/acme/operator",
            "https://example.com/acme/operator/blob/main/crd.yaml",
        ],
    )
    def test_other_urls_are_unchanged(self, url):
        assert normalize_source_url(url) == url


# =============================================================================
# Fetch Tests
# =============================================================================


class TestHTTPSchemaFetcher:
    """Test suite for HTTPSchemaFetcher."""

    def test_fetch_returns_trimmed_body(self):
        """Test a successful fetch against a stubbed transport."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["agent"] = request.headers["user-agent"]
            return httpx.Response(200, content=b"\n\n" + CRD_BODY + b"\n")

        fetcher = _fetcher(handler)

        async def run_test():
            return await fetcher.fetch("  https://github.com/acme/op/blob/v1/crd.yaml  ")

        fetched = asyncio.run(run_test())

        assert fetched.source_url == "https://raw.githubusercontent.com/acme/op/v1/crd.yaml"
        assert fetched.raw == CRD_BODY.decode().strip()
        assert seen["url"] == "https://raw.githubusercontent.com/acme/op/v1/crd.yaml"
        assert seen["agent"] == "crdforge-crd-import/1.0"

    def test_fetch_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old.yaml":
                return httpx.Response(302, headers={"Location": "https://example.com/new.yaml"})
            return httpx.Response(200, content=CRD_BODY)

        fetched = asyncio.run(_fetcher(handler).fetch("https://example.com/old.yaml"))

        assert fetched.raw.startswith("apiVersion:")

    @pytest.mark.parametrize(
        "url,message",
        [
            ("", "url is required"),
            ("   ", "url is required"),
            ("ftp://example.com/crd.yaml", "only http and https urls are supported"),
            ("file:///etc/passwd", "only http and https urls are supported"),
            ("http://", "url hostname is required"),
        ],
    )
    def test_invalid_urls(self, url, message):
        """Test that bad URLs are rejected before any request is made."""

        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(FetchError, match=message):
            asyncio.run(_fetcher(handler).fetch(url))

    def test_non_success_status(self):
        fetcher = _fetcher(lambda request: httpx.Response(404, content=b"not found"))

        with pytest.raises(FetchError, match="fetch failed with status 404"):
            asyncio.run(fetcher.fetch("https://example.com/crd.yaml"))

    def test_oversized_body(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=b"x" * 64), max_bytes=32)

        with pytest.raises(FetchError, match="document is too large"):
            asyncio.run(fetcher.fetch("https://example.com/crd.yaml"))

    def test_empty_body(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=b"  \n\t"))

        with pytest.raises(FetchError, match="document is empty"):
            asyncio.run(fetcher.fetch("https://example.com/crd.yaml"))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError, match="fetch url: connection refused"):
            asyncio.run(_fetcher(handler).fetch("https://example.com/crd.yaml"))
