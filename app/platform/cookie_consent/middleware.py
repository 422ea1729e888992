"""
Cookie Consent Middleware

Computes the visitor's consent/region state once per request, strips
non-essential cookies until consent is given, and prepares the list of
consented scripts for the template tags.

Add after SessionMiddleware:

    MIDDLEWARE = [
        ...
        'django.contrib.sessions.middleware.SessionMiddleware',
        'app.platform.cookie_consent.middleware.CookieConsentMiddleware',
        ...
    ]
"""

import logging

from .blocker import CookieBlocker, cookies_in_category
from .conf import get_categories, get_config, get_setting, optional_categories, required_categories
from .geo import detect_region
from .integrations import GA4LoaderIntegration, GTMLoaderIntegration, GoogleConsentModeIntegration
from .service import CookieConsentService

logger = logging.getLogger(__name__)


def is_consent_given(consent, config):
    required = required_categories(config)
    if required:
        return all(consent.get(key) is True for key in required)
    return any(key in consent for key in get_categories(config))


def get_consent_state(request, config):
    """Region and consent state for one request."""
    geo_enabled = get_setting(config, "geo_targeting.enabled", False)
    region = detect_region(request, config) if geo_enabled else None
    regions = get_setting(config, "geo_targeting.regions", []) or []
    in_target_region = not geo_enabled or region in regions

    service = CookieConsentService(request, config)
    # No cookie yet: fall back to what the session recorded
    consent = service.read_cookie() or service.get_consent()

    return {
        "region": region,
        "in_target_region": in_target_region,
        "consent_given": is_consent_given(consent, config),
        "consent": consent,
    }


def build_scripts(consent, config):
    """Consent-mode defaults first, then the tags the visitor consented to."""
    google = get_setting(config, "google", {}) or {}
    blocker = CookieBlocker(consent, required=required_categories(config))
    scripts = [
        GoogleConsentModeIntegration(config).render(consent),
        GTMLoaderIntegration(google).render(blocker),
        GA4LoaderIntegration(google).render(blocker),
    ]
    return [script for script in scripts if script]


def block_non_essential_cookies(request, config):
    """Drop optional-category cookies from the request. Returns their names."""
    blocked = []
    for key in optional_categories(config):
        for name in cookies_in_category(list(request.COOKIES), key, config):
            if request.COOKIES.get(name) and name not in blocked:
                blocked.append(name)
    if blocked:
        logger.debug(f"Blocking cookies without consent: {', '.join(blocked)}")
        # request.COOKIES is cached on the request; replace it wholesale
        request.COOKIES = {
            name: value for name, value in request.COOKIES.items() if name not in blocked
        }
    return blocked


class CookieConsentMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        config = get_config()
        if not config.get("enabled"):
            return self.get_response(request)

        state = get_consent_state(request, config)
        request.cookie_consent = state
        request.cookie_consent_scripts = build_scripts(state["consent"], config)

        blocked = []
        if state["in_target_region"] and not state["consent_given"]:
            blocked = block_non_essential_cookies(request, config)

        response = self.get_response(request)

        for name in blocked:
            response.delete_cookie(
                name,
                path=config.get("path") or "/",
                domain=config.get("domain") or None,
                samesite=config.get("samesite") or None,
            )
        return response
