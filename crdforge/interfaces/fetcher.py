"""Abstract base class for remote schema fetching strategies."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedSchema:
    """Raw schema text retrieved from a remote source.

    Attributes:
        source_url: The URL that was actually requested (after normalization).
        raw: The trimmed document body.
    """

    source_url: str
    raw: str


class BaseSchemaFetcher(ABC):
    """Abstract base class for remote schema sources."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedSchema:
        """Fetch schema text from a URL.

        Args:
            url: The user-supplied document URL.

        Returns:
            The normalized source URL and the document body.

        Raises:
            FetchError: If the URL is invalid or the download fails.
        """
        ...


class FetchError(Exception):
    """Exception raised when a remote schema cannot be retrieved."""

    pass
