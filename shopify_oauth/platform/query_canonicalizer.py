"""
Query parameter canonicalization for Shopify signed requests.

Shopify signs query strings in two different ways:

Callback mode (OAuth redirect, embedded app load):
    Drop `hmac` and `signature`, form-encode the rest in key order, then
    percent-decode the whole string once. The result is `k1=v1&k2=v2` with
    raw values.

Proxy mode (app proxy requests):
    Drop `signature`, join repeated values with ",", format each key as
    `key=value`, sort those strings and concatenate with no separator.

Both forms depend only on the multiset of parameters, never on the order
they arrived in.
"""

import re
from collections.abc import Mapping
from typing import Any, Iterable, List, Tuple
from urllib.parse import parse_qsl, unquote_plus, urlencode, urlsplit

CALLBACK_EXCLUDED_KEYS = frozenset({"hmac", "signature"})
PROXY_EXCLUDED_KEYS = frozenset({"signature"})

# Absolute URLs, scheme-relative URLs and absolute paths; anything else is a bare query.
_URL_PREFIX_REGEX = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:)?//|^/")

Pairs = List[Tuple[str, str]]


def _parse_query_string(value: str) -> Pairs:
    if value.startswith("?"):
        value = value[1:]
    elif _URL_PREFIX_REGEX.match(value):
        value = urlsplit(value).query
    return parse_qsl(value, keep_blank_values=True)


def to_pairs(params: Any) -> Pairs:
    """
    Flatten any supported query parameter container into (key, value) pairs.

    Supported inputs:
    - URL or raw query string
    - Objects exposing multi_items() (Starlette/httpx QueryParams)
    - Mappings of str -> str or str -> list of str
    - Iterables of (key, value) pairs

    Value order for repeated keys is preserved.
    """
    if params is None:
        return []
    if isinstance(params, bytes):
        params = params.decode("utf-8")
    if isinstance(params, str):
        return _parse_query_string(params)
    if hasattr(params, "multi_items"):
        return [(str(k), str(v)) for k, v in params.multi_items()]
    if not isinstance(params, Mapping) and hasattr(params, "query"):
        # URL objects (httpx.URL, starlette URL, urllib SplitResult)
        query = params.query
        if isinstance(query, bytes):
            query = query.decode("utf-8")
        return parse_qsl(query, keep_blank_values=True)
    if isinstance(params, Mapping):
        pairs: Pairs = []
        for key, value in params.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((str(key), str(v)) for v in value)
            else:
                pairs.append((str(key), "" if value is None else str(value)))
        return pairs
    return [(str(k), str(v)) for k, v in params]


def first_value(params: Any, key: str) -> str:
    """Return the first value for key, or "" when absent."""
    for k, v in to_pairs(params):
        if k == key:
            return v
    return ""


def _without(pairs: Iterable[Tuple[str, str]], excluded: frozenset) -> Pairs:
    return [(k, v) for k, v in pairs if k not in excluded]


def callback_message(params: Any) -> str:
    """
    Build the signing input for OAuth callback verification.

    Args:
        params: Callback query parameters (any form accepted by to_pairs)

    Returns:
        Canonical message, e.g. "code=abc&shop=acme.myshopify.com&timestamp=1"
    """
    pairs = _without(to_pairs(params), CALLBACK_EXCLUDED_KEYS)
    # Stable sort keeps repeated keys in their received order.
    pairs.sort(key=lambda kv: kv[0])
    return unquote_plus(urlencode(pairs))


def proxy_message(params: Any) -> str:
    """
    Build the signing input for app proxy signature verification.

    Args:
        params: Proxy query parameters (any form accepted by to_pairs)

    Returns:
        Canonical message, e.g. "extra=1,2path_prefix=/apps/xshop=acme.myshopify.com"
    """
    grouped: dict = {}
    for key, value in _without(to_pairs(params), PROXY_EXCLUDED_KEYS):
        grouped.setdefault(key, []).append(value)

    parts = sorted(f"{key}={','.join(values)}" for key, values in grouped.items())
    return "".join(parts)
