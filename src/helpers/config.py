"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_api_url(key: str, default: str) -> str:
    """Get an API base URL, letting the environment override the default.

    Args:
        key: Environment variable name (e.g. "SUBSCAN_URL")
        default: URL used when the variable is unset or empty

    Returns:
        Base URL without a trailing slash

    Example:
        ```python
        from src.helpers.config import get_api_url

        base_url = get_api_url("COINGECKO_URL", "https://api.coingecko.com/api/v3")
        ```
    """
    value = get_optional_env(key) or default
    return value.rstrip("/")


def get_subscan_api_key(api_key: str | None = None) -> str | None:
    """Get the Subscan API key from parameter or environment.

    Subscan accepts anonymous requests at a lower rate limit, so a missing
    key is not an error.

    Args:
        api_key: Optional API key to use directly

    Returns:
        API key, or None when neither is set
    """
    if api_key:
        return api_key
    return get_optional_env("SUBSCAN_API_KEY") or None


def get_coingecko_api_key(api_key: str | None = None) -> str | None:
    """Get the CoinGecko demo API key from parameter or environment.

    Args:
        api_key: Optional API key to use directly

    Returns:
        API key, or None when neither is set
    """
    if api_key:
        return api_key
    return get_optional_env("COINGECKO_API_KEY") or None


__all__ = [
    "get_api_url",
    "get_coingecko_api_key",
    "get_optional_env",
    "get_subscan_api_key",
]
