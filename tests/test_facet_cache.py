"""FacetCache with a mocked Redis client."""

import json
from unittest.mock import MagicMock, Mock

import pytest
import redis

from storefront.domain.schemas import ProductScope
from storefront.services.facet_cache import FacetCache

FACETS = {"brands": ["Acme"], "priceRange": {"minPrice": 1, "maxPrice": 2}}


@pytest.fixture
def mock_redis() -> Mock:
    mock = Mock(spec=redis.Redis)
    mock.get.return_value = None
    mock.set.return_value = True
    return mock


def test_disabled_cache_always_computes():
    compute = MagicMock(return_value=FACETS)
    cache = FacetCache(client=None)

    assert cache.enabled is False
    assert cache.get_or_compute(ProductScope(), compute) == FACETS
    compute.assert_called_once()


def test_miss_computes_and_stores(mock_redis):
    compute = MagicMock(return_value=FACETS)
    cache = FacetCache(client=mock_redis, ttl=60)
    scope = ProductScope(cat_id="phones")

    assert cache.get_or_compute(scope, compute) == FACETS

    mock_redis.set.assert_called_once_with(
        name=FacetCache.key_for(scope), value=json.dumps(FACETS), ex=60
    )


def test_hit_skips_compute(mock_redis):
    mock_redis.get.return_value = json.dumps(FACETS)
    compute = MagicMock()
    cache = FacetCache(client=mock_redis)

    assert cache.get_or_compute(ProductScope(), compute) == FACETS
    compute.assert_not_called()


def test_key_depends_on_scope():
    assert FacetCache.key_for(ProductScope(cat_id="a")) != FacetCache.key_for(ProductScope(cat_id="b"))
    assert FacetCache.key_for(ProductScope(cat_id="a")) == FacetCache.key_for(ProductScope(cat_id="a"))
    assert FacetCache.key_for(ProductScope()).startswith("facets:")


def test_read_failure_falls_back_after_retries(mock_redis):
    mock_redis.get.side_effect = redis.ConnectionError("down")
    compute = MagicMock(return_value=FACETS)
    cache = FacetCache(client=mock_redis)

    assert cache.get_or_compute(ProductScope(), compute) == FACETS
    assert mock_redis.get.call_count == 3
    mock_redis.set.assert_not_called()


def test_write_failure_still_returns_facets(mock_redis):
    mock_redis.set.side_effect = redis.TimeoutError("slow")
    cache = FacetCache(client=mock_redis)

    assert cache.get_or_compute(ProductScope(), lambda: FACETS) == FACETS
