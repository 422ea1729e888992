"""
Third-party script loaders.

Each loader returns the HTML to inject into the page, or an empty string
when the integration is disabled, has no id, or lacks consent.
"""

import json

from django.utils.html import escapejs, format_html
from django.utils.safestring import mark_safe

from .conf import get_setting
from .constants import CONSENT_MODE_FLAGS, DENIED, GRANTED


GTM_SNIPPET = """<!-- Google Tag Manager -->
<script>
    (function(w,d,s,l,i){{w[l]=w[l]||[];w[l].push({{'gtm.start':
    new Date().getTime(),event:'gtm.js'}});var f=d.getElementsByTagName(s)[0],
    j=d.createElement(s),dl=l!='dataLayer'?'&l='+l:'';j.async=true;j.src=
    'https://www.googletagmanager.com/gtm.js?id='+i+dl;f.parentNode.insertBefore(j,f);
    }})(window,document,'script','dataLayer','{}');
</script>
<!-- End Google Tag Manager -->"""

GA4_SNIPPET = """<!-- Google Analytics -->
<script async src="https://www.googletagmanager.com/gtag/js?id={}"></script>
<script>
    window.dataLayer = window.dataLayer || [];
    function gtag(){{dataLayer.push(arguments);}}
    gtag('js', new Date());
    gtag('config', '{}', {{ 'anonymize_ip': true }});
</script>
<!-- End Google Analytics -->"""

CONSENT_MODE_SNIPPET = """<!-- Google Consent Mode -->
<script>
    window.dataLayer = window.dataLayer || [];
    function gtag(){{dataLayer.push(arguments);}}
    gtag('consent', 'default', {});
</script>
<!-- End Google Consent Mode -->"""


class GTMLoaderIntegration:
    """Google Tag Manager, gated on the marketing category."""

    category = "marketing"

    def __init__(self, config=None):
        self.config = config or {}
        self.gtm_id = self.config.get("gtm_id") or ""

    def render(self, blocker):
        if not self.gtm_id or not self.config.get("enable_gtm"):
            return ""
        if not blocker.allow(self.category):
            return ""
        return format_html(GTM_SNIPPET, escapejs(self.gtm_id))


class GA4LoaderIntegration:
    """Google Analytics 4, gated on the statistics category."""

    category = "statistics"

    def __init__(self, config=None):
        self.config = config or {}
        self.ga4_id = self.config.get("ga4_id") or ""

    def render(self, blocker):
        if not self.ga4_id or not self.config.get("enable_ga4"):
            return ""
        if not blocker.allow(self.category):
            return ""
        return format_html(GA4_SNIPPET, self.ga4_id, escapejs(self.ga4_id))


class GoogleConsentModeIntegration:
    """
    Declares the Consent Mode defaults before any Google tag loads.
    Storage types follow the enabled consent flags and the visitor's choices.
    """

    def __init__(self, config):
        self.config = config

    @property
    def enabled(self):
        return bool(
            get_setting(self.config, "google.enable_consent_mode")
            and get_setting(self.config, "compliance.google_cmp")
        )

    def consent_state(self, consent):
        flags = get_setting(self.config, "consent_flags", {}) or {}
        state = {}
        for flag, storage, category in CONSENT_MODE_FLAGS:
            if not flags.get(flag):
                continue
            granted = category is None or consent.get(category) is True
            # an always-granted flag is never downgraded by an optional one
            if state.get(storage) == GRANTED:
                continue
            state[storage] = GRANTED if granted else DENIED
        return state

    def render(self, consent):
        if not self.enabled:
            return ""
        state = self.consent_state(consent or {})
        if not state:
            return ""
        # keys and values come from CONSENT_MODE_FLAGS, never from the request
        return format_html(CONSENT_MODE_SNIPPET, mark_safe(json.dumps(state, sort_keys=True)))
