"""Error taxonomy for feed fetching, parsing and remote item resolution.

Every error carries a ``reason`` string used to group failures in batch
summaries, and a ``retryable`` flag consulted by the retry policy.
"""


class FeedCatalogError(Exception):
    """Base exception for feedcatalog.

    Attributes:
        reason: Short machine-readable failure kind.
        retryable: Whether retrying the same operation may succeed.
    """

    reason: str = "error"
    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# Fetch errors


class FetchError(FeedCatalogError):
    """An HTTP fetch did not produce a usable response."""

    reason = "fetch_error"

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class FetchTimeoutError(FetchError):
    """The request exceeded its timeout budget."""

    reason = "timeout"
    retryable = True


class RateLimitedError(FetchError):
    """The server answered 429 Too Many Requests."""

    reason = "rate_limited"
    retryable = True


class ServerError(FetchError):
    """The server answered with a 5xx status."""

    reason = "server_error"
    retryable = True


class ClientError(FetchError):
    """The server answered with a 4xx status other than 429."""

    reason = "client_error"


class NetworkError(FetchError):
    """Connection-level failure (DNS, refused, reset)."""

    reason = "network_error"
    retryable = True


# Parse errors


class ParseError(FeedCatalogError):
    """A document could not be turned into the expected structure."""

    reason = "parse_error"


class InvalidFormatError(ParseError):
    """Empty body, non-XML content, malformed XML or undecodable JSON.

    Never retried: the same bytes will fail the same way.
    """

    reason = "invalid_format"

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class NoChannelError(InvalidFormatError):
    """The XML document has no <channel> element."""

    reason = "no_channel"


# Resolution errors


class ResolutionError(FeedCatalogError):
    """A remote item reference could not be resolved."""

    reason = "resolution_error"


class NotFoundInDirectoryError(ResolutionError):
    """The directory has no record for the requested identifier."""

    reason = "not_found"


class NoFeedUrlError(ResolutionError):
    """The directory found the feed but returned no URL for it."""

    reason = "no_feed_url"


class ItemNotFoundError(ResolutionError):
    """The resolved feed has no item with the requested guid."""

    reason = "item_not_found"


class DirectoryApiError(ResolutionError):
    """The directory API reported a failure or is not configured."""

    reason = "api_error"
