"""Validation utilities for submitted URLs."""

from typing import Tuple
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.netloc:
        return False, "URL must have a valid domain"

    return True, ""
