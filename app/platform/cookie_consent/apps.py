"""
Cookie Consent App Config
"""

import logging

from django.apps import AppConfig

log = logging.getLogger(__name__)

BANNER_POSITIONS = ("top", "bottom")


class CookieConsentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'app.platform.cookie_consent'
    label = 'cookie_consent'
    verbose_name = 'Cookie Consent'

    def ready(self):
        """Warn early about configuration that would silently do nothing."""
        from .conf import get_config, get_setting, required_categories

        config = get_config()
        if not config.get("enabled"):
            log.info("Cookie consent plugin is disabled")
            return

        if not config.get("categories"):
            log.warning("Cookie consent is enabled but no categories are configured")
        elif not required_categories(config):
            log.warning("No required cookie category configured; consent is recorded on any decision")

        position = get_setting(config, "banner.position")
        if position not in BANNER_POSITIONS:
            log.warning(f"Unknown banner position '{position}', expected one of {BANNER_POSITIONS}")

        google = get_setting(config, "google", {}) or {}
        if google.get("enable_gtm") and not google.get("gtm_id"):
            log.warning("Google Tag Manager is enabled without a gtm_id; it will not be injected")
        if google.get("enable_ga4") and not google.get("ga4_id"):
            log.warning("GA4 is enabled without a ga4_id; it will not be injected")
