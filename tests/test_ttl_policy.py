"""
Tests for the per-category TTL table.
"""

import pytest

from scrobble_cache.entities import CacheCategory
from scrobble_cache.ttl_policy import TTL_TABLE, cache_control_for, ttl_for


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (CacheCategory.USER_TRACKS, 10),
        (CacheCategory.TRACK_INFO, 86400),
        (CacheCategory.MUSICBRAINZ, 604800),
        (CacheCategory.COVER_ART, 2592000),
    ],
)
def test_ttl_for(category, expected):
    """Every category maps to its fixed TTL."""
    assert ttl_for(category) == expected


def test_every_category_has_positive_ttl():
    """The table is total over the enum."""
    assert set(TTL_TABLE) == set(CacheCategory)
    assert all(ttl > 0 for ttl in TTL_TABLE.values())


def test_ttls_ordered_by_volatility():
    """Fast-changing data expires first."""
    ttls = [ttl_for(c) for c in (
        CacheCategory.USER_TRACKS,
        CacheCategory.TRACK_INFO,
        CacheCategory.MUSICBRAINZ,
        CacheCategory.COVER_ART,
    )]
    assert ttls == sorted(ttls)


def test_unknown_category_raises():
    with pytest.raises(KeyError):
        ttl_for("NOT_A_CATEGORY")  # type: ignore[arg-type]


def test_table_is_read_only():
    with pytest.raises(TypeError):
        TTL_TABLE[CacheCategory.USER_TRACKS] = 60  # type: ignore[index]


def test_cache_control_for():
    assert cache_control_for(CacheCategory.USER_TRACKS) == "public, max-age=10"
    assert cache_control_for(CacheCategory.COVER_ART) == "public, max-age=2592000"
