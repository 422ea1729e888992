"""
Tests for the cookie_consent template tags
"""

import json
import re

from django.template import Context, Template
from django.utils import translation

from app.platform.cookie_consent.conf import get_config
from app.platform.cookie_consent.templatetags.cookie_consent import (
    banner_context,
    banner_language,
)


def _render(source, request):
    return Template("{% load cookie_consent %}" + source).render(Context({"request": request}))


class TestBanner:

    def test_rendered_before_consent(self, rf):
        html = _render("{% cookie_consent_banner %}", rf.get("/"))

        assert 'id="cookie-consent-banner"' in html
        assert 'id="cookie-consent-modal"' in html
        assert "cookie_consent/cookie-consent.js" in html
        # only optional categories get a checkbox
        assert 'name="marketing"' in html
        assert 'name="essential"' not in html

    def test_client_config_json(self, rf):
        html = _render("{% cookie_consent_banner %}", rf.get("/"))

        match = re.search(
            r'<script id="cookie-consent-config" type="application/json">(.*?)</script>', html
        )
        client_config = json.loads(match.group(1))
        assert client_config["cookieName"] == "cookie_consent"
        assert client_config["encodingType"] == "raw"
        assert client_config["urls"]["accept"] == "/cookie-consent/accept/"
        assert client_config["requiredCategories"] == ["essential"]
        assert client_config["consentMode"] is True

    def test_client_config_carries_base64_encoding(self, rf, consent_settings):
        consent_settings(encoding_type="base64")

        client_config = banner_context(get_config())["client_config"]

        assert client_config["encodingType"] == "base64"

    def test_hidden_once_consent_given(self, rf):
        request = rf.get("/")
        request.cookie_consent = {"in_target_region": True, "consent_given": True, "consent": {}}

        assert _render("{% cookie_consent_banner %}", request).strip() == ""

    def test_hidden_outside_target_region(self, rf):
        request = rf.get("/")
        request.cookie_consent = {"in_target_region": False, "consent_given": False, "consent": {}}

        assert _render("{% cookie_consent_banner %}", request).strip() == ""

    def test_not_customizable(self, rf, consent_settings):
        consent_settings(banner={"customizable": False})
        html = _render("{% cookie_consent_banner %}", rf.get("/"))

        assert 'id="cookie-consent-modal"' not in html
        assert "cookie-consent-customize" not in html


class TestBannerLanguage:

    def test_supported_language(self, config):
        with translation.override("fr"):
            assert banner_language(config) == "fr"

    def test_regional_variant_of_supported_language(self, config):
        with translation.override("de-at"):
            assert banner_language(config) == "de-at"

    def test_unsupported_language_uses_fallback(self, config):
        with translation.override("ja"):
            assert banner_language(config) == "en-us"

    def test_banner_context_texts_are_plain_strings(self, config):
        context = banner_context(config)

        assert context["accept_text"] == "Accept All"
        assert context["modal"]["save_button_text"] == "Save Preferences"
        assert [c["key"] for c in context["optional_categories"]] == [
            "preferences", "statistics", "marketing",
        ]


class TestScriptsAndFilter:

    def test_scripts(self, rf):
        request = rf.get("/")
        request.cookie_consent_scripts = ["/static/app.js", "<script>init()</script>"]

        html = _render("{% cookie_consent_scripts %}", request)

        assert '<script src="/static/app.js"></script>' in html
        assert "<script>init()</script>" in html

    def test_no_scripts(self, rf):
        assert _render("{% cookie_consent_scripts %}", rf.get("/")) == ""

    def test_consent_allows_filter(self, rf):
        request = rf.get("/")
        request.cookie_consent = {"consent": {"marketing": True, "statistics": False}}

        html = _render(
            '{% if request|consent_allows:"marketing" %}M{% endif %}'
            '{% if request|consent_allows:"statistics" %}S{% endif %}',
            request,
        )

        assert html == "M"
