"""CoinCompare exception hierarchy.

This module defines the base exception class and specialized exceptions
for different error categories across the application.
"""


class CoinCompareError(Exception):
    """Base exception for all CoinCompare errors.

    All custom exceptions in CoinCompare should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class ConfigurationError(CoinCompareError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Unknown cache backend: redis")
    """

    pass


class ExternalServiceError(CoinCompareError):
    """Raised when an external service call fails.

    Use this for CoinMarketCap and Twitter API errors, including
    responses that arrive but cannot be parsed.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="coinmarketcap", message="Rate limited", status_code=429)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class CircuitBreakerOpenError(CoinCompareError):
    """Raised when circuit breaker is open.

    Use this when an API client's circuit breaker has tripped due to
    consecutive failures and requests are being blocked.
    """

    pass


class ScrapeError(CoinCompareError):
    """Raised when the browser follower scrape cannot complete.

    Attributes:
        handle: The social handle being scraped.
    """

    def __init__(self, message: str, handle: str | None = None) -> None:
        super().__init__(message)
        self.handle = handle
