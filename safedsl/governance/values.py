"""
safedsl Value Sanitizers

Argument values that end up inside CSS class names or URL attributes are
checked here before the reference context writes them into a node.

Key functions:
- safe_css_token: Validate a value used as (part of) a CSS class
- validate_url: Validate href/src values; dangerous schemes are refused
- sanitize_data_key: Normalise a data-* attribute key
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from safedsl.errors import ExecutionError
from safedsl.syntax.ast import Symbol

logger = logging.getLogger(__name__)

CSS_TOKEN_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_/.:[]#%"
)

ALLOWED_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

# Schemes that are refused even when embedded after whitespace or case tricks.
DANGEROUS_SCHEMES = (
    "javascript:",
    "vbscript:",
    "file:",
    "about:",
    "chrome:",
    "chrome-extension:",
)

SAFE_DATA_IMAGE_PREFIXES = (
    "data:image/png",
    "data:image/jpg",
    "data:image/jpeg",
    "data:image/gif",
    "data:image/webp",
)

MAX_CSS_TOKEN_LENGTH = 64
MAX_URL_LENGTH = 2048

TEXT_VALUE_TYPES = (str, int, float, Symbol)


def stringify(value: Any, name: Optional[str] = None) -> str:
    """
    Render a DSL value the way it appears in text, classes and attributes.

    Raises:
        ExecutionError: For values that are not text, numbers, booleans,
            symbols or nil (e.g. an element passed where text is expected)
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, TEXT_VALUE_TYPES):
        return str(value)
    raise ExecutionError(f"{name or 'value'} must be text, got {type(value).__name__}")


def safe_css_token(value: Any, method_name: Optional[str] = None) -> str:
    """
    Return the value as a CSS class fragment.

    Raises:
        ExecutionError: If the value contains characters outside the
            class-name alphabet or is empty.
    """
    token = stringify(value, method_name)
    if not token or len(token) > MAX_CSS_TOKEN_LENGTH:
        raise ExecutionError(f"invalid style value {token!r}", method_name=method_name)
    if any(ch not in CSS_TOKEN_CHARS for ch in token):
        raise ExecutionError(f"invalid style value {token!r}", method_name=method_name)
    return token


def _normalise(url: str) -> str:
    # Browsers ignore control characters and whitespace inside schemes.
    return "".join(ch for ch in url if ch > " ").lower()


def contains_dangerous_pattern(url: str) -> bool:
    compact = _normalise(url)
    if compact.startswith(DANGEROUS_SCHEMES):
        return True
    if compact.startswith("data:"):
        return not compact.startswith(SAFE_DATA_IMAGE_PREFIXES)
    return False


def validate_url(url: Any,
                 allow_relative: bool = True,
                 fallback: Optional[str] = None) -> Optional[str]:
    """
    Validate a URL for use in href/src attributes.

    Args:
        url: Candidate URL
        allow_relative: Accept URLs without a scheme
        fallback: Value returned when the URL is refused

    Returns:
        The URL unchanged when accepted, otherwise ``fallback``.
    """
    if not isinstance(url, str) or not url.strip():
        return fallback

    if len(url) > MAX_URL_LENGTH:
        logger.warning("Blocked oversized URL (%d characters)", len(url))
        return fallback

    if contains_dangerous_pattern(url):
        logger.warning("Blocked dangerous URL pattern: %r", url)
        return fallback

    try:
        parts = urlsplit(url.strip())
    except ValueError:
        logger.warning("Invalid URL format: %r", url)
        return fallback

    if not parts.scheme:
        if allow_relative:
            return url
        logger.warning("Relative URLs not allowed: %r", url)
        return fallback

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        logger.warning("Disallowed URL scheme %r in %r", parts.scheme, url)
        return fallback

    return url


def validate_link_href(href: Any) -> str:
    return validate_url(href, allow_relative=True, fallback="#")


def validate_image_src(src: Any) -> str:
    return validate_url(src, allow_relative=True, fallback="/images/placeholder.png")


def sanitize_data_key(key: str) -> str:
    """Turn a named-argument key into a data-* attribute suffix."""
    cleaned = "".join(ch if ch.isalnum() else "-" for ch in key.lower()).strip("-")
    if not cleaned:
        raise ExecutionError(f"invalid data attribute key {key!r}", method_name="data")
    return cleaned
