"""Input validation and sanitization utilities."""

import re
from urllib.parse import urlparse

from chain_sdk_testkit.exceptions import ConfigError, EncodingError

_DECIMAL_LITERAL = re.compile(r"^[+-]?[0-9]+$")
_HEX_LITERAL = re.compile(r"^(0x)?[0-9a-fA-F]+$")


def validate_base_url(url: str) -> str:
    """Validate an API base URL.

    Args:
        url: Base URL of a REST gateway.

    Returns:
        URL with any trailing slash removed.

    Raises:
        ConfigError: If URL is not an absolute http(s) URL.
    """
    parsed = urlparse(url) if isinstance(url, str) else None
    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"Invalid base URL: {mask_url(url) if isinstance(url, str) else url!r}",
            ConfigError.ERR_INVALID_URL,
            hint="URL must start with http:// or https:// and include a host",
        )
    return url.rstrip("/")


def validate_network(network: int, supported: set[int]) -> int:
    """Validate a network identifier.

    Args:
        network: Network type identifier.
        supported: Identifiers accepted by the client.

    Returns:
        Validated network identifier.

    Raises:
        ConfigError: If network is not supported.
    """
    if network not in supported:
        raise ConfigError(
            f"Unsupported network type: {network}",
            ConfigError.ERR_INVALID_NETWORK,
            hint=f"Network must be one of {sorted(supported)}",
        )
    return network


def parse_decimal_literal(literal: str) -> int:
    """Parse a base-10 integer literal of arbitrary size.

    Args:
        literal: Decimal digits with an optional sign.

    Returns:
        Parsed integer.

    Raises:
        EncodingError: If literal is not a base-10 integer.
    """
    if not isinstance(literal, str) or not _DECIMAL_LITERAL.match(literal.strip()):
        raise EncodingError(
            f"Invalid integer literal: {literal!r}",
            EncodingError.ERR_INVALID_LITERAL,
            hint="Literal must contain only decimal digits and an optional sign",
        )
    return int(literal.strip(), 10)


def parse_hex_literal(literal: str) -> int:
    """Parse a hex string, with or without ``0x`` prefix."""
    if not isinstance(literal, str) or not _HEX_LITERAL.match(literal.strip()):
        raise EncodingError(
            f"Invalid hex literal: {literal!r}",
            EncodingError.ERR_INVALID_HEX,
            hint="Hex must contain only 0-9, a-f digits",
        )
    return int(literal.strip(), 16)


def mask_url(url: str) -> str:
    """Mask URL for display in errors.

    Args:
        url: URL to mask.

    Returns:
        Masked URL.
    """
    try:
        parsed = urlparse(url)
        netloc = parsed.netloc
        if len(netloc) > 10:
            netloc = f"{netloc[:4]}...{netloc[-4:]}"
        return f"{parsed.scheme}://{netloc}{parsed.path}"
    except ValueError:
        return "***"
