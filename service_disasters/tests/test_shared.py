"""
Tests for shared configuration, errors and metrics.
"""

import pytest
from prometheus_client import generate_latest
from pydantic import ValidationError as PydanticValidationError

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.config import ServiceConfig, get_config
from shared.errors import ExternalServiceError, NotFoundError, PersistenceError
from shared.metrics import get_metrics_collector


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("MOCK_USER_ID", raising=False)
    monkeypatch.delenv("PORT", raising=False)

    config = ServiceConfig(_env_file=None)

    assert config.port == 5001
    assert config.mock_user_id == "mock-user-id"
    assert config.cache_backend == "mongo"
    assert config.social_media_cache_ttl == 600
    assert config.official_updates_cache_ttl == 3600


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("MOCK_USER_ID", "netrunnerX")
    monkeypatch.setenv("CACHE_BACKEND", "redis")

    config = get_config()

    assert config.service_name == "disasters"
    assert config.mock_user_id == "netrunnerX"
    assert config.cache_backend == "redis"


def test_config_is_frozen():
    config = ServiceConfig(_env_file=None)

    with pytest.raises(PydanticValidationError):
        config.port = 8080


def test_config_rejects_unknown_backend():
    with pytest.raises(PydanticValidationError):
        ServiceConfig(_env_file=None, cache_backend="memcached")


def test_error_responses():
    assert NotFoundError("Nothing here").status_code == 404
    assert PersistenceError("insert failed").to_response().code == "PERSISTENCE_ERROR"

    error = ExternalServiceError("geocoding", "timeout")
    assert error.status_code == 502
    assert error.service == "geocoding"
    assert error.to_response().message == "geocoding: timeout"


def test_metrics_collectors_are_independent():
    first = get_metrics_collector("disasters")
    second = get_metrics_collector("disasters")

    first.increment_counter("cache_hits_total", cache_type="social_media")

    assert b'cache_hits_total{cache_type="social_media"} 1.0' in generate_latest(first.registry)
    assert b'cache_type="social_media"' not in generate_latest(second.registry)
