"""
Shop name to myshopify.com domain resolution.

Accepts the forms merchants and Shopify hand us ("acme", "acme.myshopify.com",
"https://acme.myshopify.com/") and normalizes them to one canonical domain.
"""

import re

from shopify_oauth.integrations.shopify.exceptions import InvalidShopDomainError

SHOPIFY_DOMAIN_SUFFIX = ".myshopify.com"

# Shopify shop domain validation regex
SHOP_DOMAIN_REGEX = re.compile(r"^[a-z0-9][a-z0-9\-]*\.myshopify\.com$")

_PROTOCOL_REGEX = re.compile(r"^https?://", re.IGNORECASE)


def shop_clean_name(name: str) -> str:
    """Strip whitespace, protocol and trailing slashes from a shop name."""
    if not name:
        return ""
    name = _PROTOCOL_REGEX.sub("", name.strip())
    return name.rstrip("/")


def shop_full_name(name: str) -> str:
    """
    Return the full myshopify.com domain for a shop name.

    Args:
        name: Shop name or domain (e.g., "acme" or "acme.myshopify.com")

    Returns:
        Lowercase domain (e.g., "acme.myshopify.com")
    """
    name = shop_clean_name(name).strip(".").lower()
    if not name:
        return ""
    if name.endswith(SHOPIFY_DOMAIN_SUFFIX):
        return name
    return name + SHOPIFY_DOMAIN_SUFFIX


def shop_short_name(name: str) -> str:
    """Return the shop handle without the platform suffix."""
    full_name = shop_full_name(name)
    return full_name[: -len(SHOPIFY_DOMAIN_SUFFIX)] if full_name else ""


def validate_shop_domain(name: str) -> bool:
    """
    Validate that a shop name resolves to a well-formed Shopify domain.

    Args:
        name: Shop name or domain

    Returns:
        True if valid, False otherwise
    """
    return bool(SHOP_DOMAIN_REGEX.match(shop_full_name(name)))


def shop_base_url(name: str) -> str:
    """
    Resolve a shop name to its base URL.

    Raises:
        InvalidShopDomainError: If the shop name is not a valid shop handle
    """
    if not validate_shop_domain(name):
        raise InvalidShopDomainError(name)
    return f"https://{shop_full_name(name)}"
