"""
Cookie Consent Configuration

Projects configure the plugin through the ``COOKIE_CONSENT`` setting. The
value is merged over ``DEFAULTS``; when the setting is missing entirely and
``fallback.use_default`` is on, the conservative ``FALLBACK`` tree is used
instead so the plugin stays out of the way.
"""

import copy
import logging

from django.conf import settings
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger(__name__)

SETTING_NAME = "COOKIE_CONSENT"

# Keys whose project value replaces the default instead of being merged into it
REPLACED_KEYS = ("categories",)

DEFAULTS = {
    "enabled": True,
    # Cookie expiration time in seconds
    "expiration": 60 * 60 * 24 * 365,
    "path": "/",
    "secure": True,
    "samesite": "Lax",
    # The banner script reads the cookie to pre-fill the modal
    "http_only": False,
    "cookie_name": "cookie_consent",
    "website": "example",
    "domain": None,
    "encoding_type": "raw",
    "consent_flags": {
        "functional_storage_required": True,
        "functional_storage_optional": True,
        "analytics_storage": True,
        "marketing_storage": True,
        "personalization_storage": True,
        "security_storage": True,
        "marketing_user_data_storage": True,
        "marketing_personalization": True,
    },
    # Name of a global JS function called with the new consent map
    "callback_function": None,
    "banner": {
        "modal_main_text_more_link": None,
        "bar_timeout": 1000,
        "position": "bottom",
        "style": {
            "bar_color": "bg-white text-dark",
            "accept_button": "btn btn-light",
            "reject_button": "btn btn-light",
            "customize_button": "btn btn-light",
            "save_customize_button": "btn btn-success",
            "cancel_customize_button": "btn btn-light",
        },
        "customizable": True,
        "title": _("This site uses cookies"),
        "message": _(
            "We use cookies to personalise content and ads, to provide social media features "
            "and to analyse our traffic. We also share information about your use of our site "
            "with our social media, advertising and analytics partners who may combine it with "
            "other information that you've provided to them or that they've collected from your "
            "use of their services."
        ),
        "accept_text": _("Accept All"),
        "reject_text": _("Reject All"),
        "customize_text": _("Customize"),
        "modal": {
            "title": _("Customize Cookie Preferences"),
            "message": _(
                "Cookies are small pieces of data sent from a website and stored on your computer "
                "by your web browser while you are browsing. Choose which kinds of cookies you "
                "allow this site to use."
            ),
            "save_button_text": _("Save Preferences"),
            "cancel_button_text": _("Cancel"),
        },
        "cookie_policy_link": "/cookies-policy/",
    },
    "compliance": {
        "gdpr": True,
        "cpra": True,
        "google_cmp": True,
    },
    "geo_targeting": {
        "enabled": False,
        "regions": ["EU", "US-CA"],
        # {ip} and {field} are substituted; field is "country" or "region_code"
        "lookup_url": "https://ipapi.co/{ip}/{field}/",
        "timeout": 2,
        "cache_timeout": 60 * 60 * 24,
        # failed lookups are remembered as OTHER for this long
        "failure_cache_timeout": 300,
    },
    "logging": {
        "enabled": True,
        "driver": "database",
        # Only used by the file driver; defaults to BASE_DIR/logs/cookie_consent.log
        "path": None,
    },
    "multilingual": {
        "enabled": True,
        "fallback_locale": "en_US",
        "supported_langs": ["en", "fr", "de"],
    },
    "cookie_policy": {
        "generator": True,
    },
    "fallback": {
        "use_default": True,
    },
    "categories": {
        "essential": {
            "label": _("Essential"),
            "description": _("Required for basic site functionality and cannot be disabled."),
            "required": True,
            "cookies": ["sessionid", "csrftoken", "cookie_consent"],
            "services": ["Django Session", "CSRF Protection", "Authentication"],
        },
        "preferences": {
            "label": _("Preferences"),
            "description": _("Remembers your preferences and settings."),
            "required": False,
            "cookies": ["django_language"],
            "services": [],
        },
        "statistics": {
            "label": _("Statistics"),
            "description": _(
                "Helps us understand how visitors interact with the website by collecting "
                "and reporting information anonymously."
            ),
            "required": False,
            "cookies": ["_ga", "_ga_*", "_gid", "_gat", "_pk_id*", "_pk_ses*"],
            "services": ["Google Analytics", "Matomo"],
        },
        "marketing": {
            "label": _("Marketing & Analytics"),
            "description": _(
                "Used to track visitors across websites to display relevant ads and measure "
                "the effectiveness of marketing campaigns."
            ),
            "required": False,
            "cookies": ["_gtm", "_dc_gtm_", "_fbp"],
            "services": ["Google Tag Manager", "Facebook Pixel"],
        },
    },
    "google": {
        "enable_consent_mode": True,
        "enable_gtm": False,
        "gtm_id": "",
        "enable_ga4": False,
        "ga4_id": "",
    },
    # Endpoint paths the banner script posts to
    "urls": {
        "accept": "/cookie-consent/accept/",
        "reject": "/cookie-consent/reject/",
        "customize": "/cookie-consent/customize/",
    },
}

FALLBACK = {
    "enabled": False,
    "banner": {
        "position": "bottom",
        "customizable": False,
    },
    "compliance": {
        "gdpr": False,
        "cpra": False,
        "google_cmp": False,
    },
    "geo_targeting": {
        "enabled": False,
        "regions": [],
    },
    "logging": {
        "enabled": False,
        "driver": "file",
    },
    "multilingual": {
        "enabled": False,
        "fallback_locale": "en_US",
    },
    "cookie_policy": {
        "generator": False,
    },
    "fallback": {
        "use_default": True,
    },
}


def deep_merge(base, override, replaced_keys=()):
    """Return a copy of ``base`` with ``override`` merged in recursively."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if key in replaced_keys:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_config():
    """Resolve the effective plugin configuration for the current settings."""
    project_config = getattr(settings, SETTING_NAME, None)
    if project_config is None:
        if DEFAULTS["fallback"]["use_default"]:
            logger.debug(f"{SETTING_NAME} not set, using fallback configuration")
            return deep_merge(DEFAULTS, FALLBACK)
        return deep_merge(DEFAULTS, {})
    return deep_merge(DEFAULTS, project_config, replaced_keys=REPLACED_KEYS)


def get_setting(config, path, default=None):
    """
    Dotted-path lookup into a config tree.

    get_setting(config, "geo_targeting.regions", []) -> ["EU", "US-CA"]
    """
    node = config
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def get_categories(config):
    return get_setting(config, "categories", {}) or {}


def required_categories(config):
    return [key for key, cat in get_categories(config).items() if cat.get("required")]


def optional_categories(config):
    return [key for key, cat in get_categories(config).items() if not cat.get("required")]
