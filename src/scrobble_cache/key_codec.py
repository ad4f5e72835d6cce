"""Cache key derivation.

Keys are built from the request origin, its path and its query parameters.
Query parameters are written sorted by name, so two logically identical
parameter sets produce the same key whatever order they arrived in.
"""

from collections.abc import Mapping, Sequence

import httpx

from scrobble_cache.entities import CacheKey

ParamValue = str | Sequence[str] | None


def _join_value(value: ParamValue) -> str:
    """Collapse a parameter value into a single query-string value."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return ",".join(str(v) for v in value)
    return str(value)


def build_key(base_url: str, path: str, params: Mapping[str, ParamValue]) -> CacheKey:
    """Build the canonical cache key for a request.

    Args:
        base_url: Origin (scheme + host, optionally a path that gets replaced)
        path: Path component written over the base URL's path
        params: Query parameters; sequence values are joined with ``,``

    Returns:
        CacheKey whose ``url`` is the fully serialized URL

    Example:
        ```python
        key = build_key("https://api.example.com", "/test", {"foo": "bar", "baz": ["qux", "quux"]})
        str(key)  # 'https://api.example.com/test?baz=qux%2Cquux&foo=bar'
        ```
    """
    if not path.startswith("/"):
        path = "/" + path

    items = sorted((str(name), _join_value(value)) for name, value in params.items())
    url = httpx.URL(base_url).copy_with(path=path, params=items, fragment=None)
    return CacheKey(url=str(url))


def key_for_url(url: str) -> CacheKey:
    """Build the cache key for a full request URL.

    Repeated query parameters are grouped and joined like sequence values.
    """
    parsed = httpx.URL(url)
    params: dict[str, list[str]] = {}
    for name, value in parsed.params.multi_items():
        params.setdefault(name, []).append(value)
    origin = f"{parsed.scheme}://{parsed.netloc.decode('ascii')}"
    return build_key(origin, parsed.path, params)
