"""
Tests for cookie_consent/middleware.py and the context processor
"""

from unittest import mock

import pytest
from django.http import HttpResponse

from app.platform.cookie_consent.context_processors import cookie_consent
from app.platform.cookie_consent.middleware import (
    CookieConsentMiddleware,
    block_non_essential_cookies,
    build_scripts,
    get_consent_state,
    is_consent_given,
)
from app.platform.cookie_consent.service import encode_consent


def _ok(request):
    return HttpResponse("ok")


class TestConsentGiven:

    def test_required_categories_decide(self, config):
        assert not is_consent_given({}, config)
        assert not is_consent_given({"marketing": True}, config)
        assert is_consent_given({"essential": True, "marketing": False}, config)

    def test_without_required_categories_any_decision_counts(self, consent_settings):
        config = consent_settings(categories={"ads": {"label": "Ads", "cookies": ["_fbp"]}})

        assert not is_consent_given({}, config)
        assert is_consent_given({"ads": False}, config)


class TestConsentState:

    def test_geo_disabled_targets_everyone(self, rf, config):
        request = rf.get("/")
        request.COOKIES["cookie_consent"] = encode_consent({"essential": True})

        state = get_consent_state(request, config)

        assert state == {
            "region": None,
            "in_target_region": True,
            "consent_given": True,
            "consent": {"essential": True},
        }

    @mock.patch("app.platform.cookie_consent.middleware.detect_region", return_value="OTHER")
    def test_outside_target_region(self, mock_detect, rf, consent_settings):
        config = consent_settings(geo_targeting={"enabled": True})
        state = get_consent_state(rf.get("/"), config)

        assert state["region"] == "OTHER"
        assert state["in_target_region"] is False


class TestCookieBlocking:

    def test_block_non_essential_cookies(self, rf, config):
        request = rf.get("/")
        request.COOKIES.update({"sessionid": "s", "_ga": "GA1", "_fbp": "fb", "other": "1"})

        blocked = block_non_essential_cookies(request, config)

        assert sorted(blocked) == ["_fbp", "_ga"]
        assert request.COOKIES == {"sessionid": "s", "other": "1"}

    def test_middleware_strips_and_deletes_cookies(self, rf):
        request = rf.get("/")
        request.COOKIES.update({"_ga": "GA1", "sessionid": "s"})

        response = CookieConsentMiddleware(_ok)(request)

        assert "_ga" not in request.COOKIES
        assert request.cookie_consent["consent_given"] is False
        assert response.cookies["_ga"]["max-age"] == 0
        assert "sessionid" not in response.cookies

    def test_middleware_keeps_cookies_after_consent(self, rf):
        request = rf.get("/")
        request.COOKIES.update({
            "_ga": "GA1",
            "cookie_consent": encode_consent({"essential": True, "statistics": False}),
        })

        response = CookieConsentMiddleware(_ok)(request)

        assert request.COOKIES["_ga"] == "GA1"
        assert "_ga" not in response.cookies

    def test_middleware_disabled(self, rf, consent_settings):
        consent_settings(enabled=False)
        request = rf.get("/")
        request.COOKIES["_ga"] = "GA1"

        CookieConsentMiddleware(_ok)(request)

        assert request.COOKIES["_ga"] == "GA1"
        assert not hasattr(request, "cookie_consent")


class TestScripts:

    def test_scripts_follow_consent(self, config):
        # test settings enable both GTM and GA4
        scripts = build_scripts({"essential": True}, config)
        assert len(scripts) == 1
        assert "gtag('consent', 'default'" in scripts[0]

        scripts = build_scripts({"essential": True, "statistics": True, "marketing": True}, config)
        assert len(scripts) == 3
        assert "googletagmanager.com/gtm.js" in scripts[1]
        assert "G-TEST456" in scripts[2]

    def test_middleware_sets_scripts_on_request(self, rf):
        request = rf.get("/")
        request.COOKIES["cookie_consent"] = encode_consent({"essential": True, "marketing": True})

        CookieConsentMiddleware(_ok)(request)

        assert any("gtm.js" in script for script in request.cookie_consent_scripts)


class TestContextProcessor:

    def test_exposes_request_state(self, rf):
        request = rf.get("/")
        request.cookie_consent = {"consent_given": True, "consent": {"essential": True}}

        context = cookie_consent(request)

        assert context["cookie_consent_enabled"] is True
        assert context["cookie_consent_given"] is True
        assert context["cookie_consent_categories"] == {"essential": True}
        assert context["cookie_consent_cookie_name"] == "cookie_consent"

    def test_without_middleware(self, rf):
        context = cookie_consent(rf.get("/"))
        assert context["cookie_consent_given"] is False
        assert context["cookie_consent_state"] == {}
