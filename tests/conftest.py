"""
Shared fixtures for the cookie consent tests.
"""
from importlib import import_module

import pytest
from django.conf import settings as django_settings
from django.core.cache import cache
from rest_framework.test import APIClient

from app.platform.cookie_consent.conf import deep_merge, get_config


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def consent_settings(settings):
    """
    Merge overrides into settings.COOKIE_CONSENT for one test.

        consent_settings(geo_targeting={"enabled": True})
    """
    def update(**overrides):
        settings.COOKIE_CONSENT = deep_merge(settings.COOKIE_CONSENT, overrides)
        return get_config()
    return update


@pytest.fixture
def config():
    return get_config()


@pytest.fixture
def session_request(rf):
    """RequestFactory request with a real (db-backed) session attached."""
    def build(path="/", **extra):
        request = rf.get(path, **extra)
        engine = import_module(django_settings.SESSION_ENGINE)
        request.session = engine.SessionStore()
        return request
    return build
