"""HTTP client utilities and helpers."""

from asyncio import sleep
from functools import wraps

from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

import httpx

from src.helpers.constants import (
    DEFAULT_TIMEOUT,
    MAX_RETRIES,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from src.helpers.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def retry_with_backoff(
    max_retries: int = MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    *,
    log_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator to retry async functions with exponential backoff.

    Only httpx errors are retried. Anything else (bad payloads, API-level
    error codes) is raised on the first attempt.

    Args:
        max_retries: Maximum number of attempts (default: 5)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay between retries (default: 60.0)
        log_errors: Whether to log retry attempts (default: True)

    Returns:
        Decorated function that retries on httpx.HTTPError

    Example:
        ```python
        from src.helpers.http import retry_with_backoff

        @retry_with_backoff(max_retries=3, base_delay=2.0)
        async def fetch_data(client: httpx.AsyncClient, url: str) -> dict:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

        # Will retry up to 3 times with delays of 2s, 4s
        ```
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except httpx.TimeoutException as e:
                    last_exception = e
                    if log_errors and attempt < max_retries - 1:
                        logger.warning(
                            "%s timeout (attempt %d/%d)",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                        )
                except httpx.HTTPError as e:
                    last_exception = e
                    if log_errors and attempt < max_retries - 1:
                        logger.warning(
                            "%s HTTP error (attempt %d/%d): %s",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            e,
                        )

                # Don't sleep after the last attempt
                if attempt < max_retries - 1:
                    delay = min(base_delay * (2**attempt), max_delay)
                    await sleep(delay)

            if last_exception:
                if log_errors:
                    logger.error(
                        "%s failed after %d attempts", func.__name__, max_retries
                    )
                raise last_exception

            # Only reachable with max_retries < 1
            msg = f"{func.__name__} failed without exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from src.helpers.http import create_http_client

        async with create_http_client(timeout=60.0) as client:
            response = await client.get("https://example.com")
        ```
    """
    return httpx.AsyncClient(timeout=timeout, **kwargs)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Any:
    """GET a URL and return the decoded JSON body.

    Args:
        client: HTTP client instance
        url: URL to fetch
        params: Optional query parameters
        headers: Optional extra request headers
        timeout: Optional timeout override

    Returns:
        Parsed JSON data

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
        httpx.HTTPError: On transport failures
        ValueError: If the body is not valid JSON
    """
    kwargs: dict[str, Any] = {"params": params, "headers": headers}
    if timeout is not None:
        kwargs["timeout"] = timeout
    response = await client.get(url, **kwargs)
    response.raise_for_status()
    return response.json()


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    data: dict[str, Any],
    *,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Any:
    """POST JSON data to a URL and return the decoded JSON response.

    Args:
        client: HTTP client instance
        url: URL to post to
        data: JSON data to post
        headers: Optional extra request headers
        timeout: Optional timeout override

    Returns:
        Parsed JSON response

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
        httpx.HTTPError: On transport failures
        ValueError: If the body is not valid JSON
    """
    kwargs: dict[str, Any] = {"json": data, "headers": headers}
    if timeout is not None:
        kwargs["timeout"] = timeout
    response = await client.post(url, **kwargs)
    response.raise_for_status()
    return response.json()


__all__ = [
    "create_http_client",
    "get_json",
    "post_json",
    "retry_with_backoff",
]
