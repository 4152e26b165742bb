"""Concrete schema fetcher implementations."""

from crdforge.strategies.fetchers.http import HTTPSchemaFetcher, normalize_source_url

__all__ = [
    "HTTPSchemaFetcher",
    "normalize_source_url",
]
