"""
Settings for the pytest suite.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("USE_REDIS", "False")
os.environ.pop("DB_NAME", None)

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "cookie-consent-tests",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": [],
}

COOKIE_CONSENT = {
    **COOKIE_CONSENT,  # noqa: F405
    "enabled": True,
    "secure": False,
    "geo_targeting": {"enabled": False, "regions": ["EU", "US-CA"]},
    "logging": {"enabled": True, "driver": "database"},
    "google": {
        "enable_consent_mode": True,
        "enable_gtm": True,
        "gtm_id": "GTM-TEST123",
        "enable_ga4": True,
        "ga4_id": "G-TEST456",
    },
}
