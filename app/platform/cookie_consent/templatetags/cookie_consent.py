"""
Template tags for the consent banner and consented scripts.

    {% load cookie_consent %}
    <head>
        {% cookie_consent_scripts %}
    </head>
    <body>
        ...
        {% if request|consent_allows:"marketing" %}...{% endif %}
        {% cookie_consent_banner %}
    </body>
"""

from django import template
from django.template.loader import render_to_string
from django.utils import translation
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from app.platform.cookie_consent.blocker import CookieBlocker
from app.platform.cookie_consent.conf import get_categories, get_config, get_setting
from app.platform.cookie_consent.integrations import GoogleConsentModeIntegration
from app.platform.cookie_consent.middleware import get_consent_state

register = template.Library()


def banner_language(config):
    """Active language when supported, otherwise the configured fallback locale."""
    current = translation.get_language()
    if not get_setting(config, "multilingual.enabled"):
        return current

    supported = [lang.lower() for lang in get_setting(config, "multilingual.supported_langs", []) or []]
    if current:
        current = current.lower()
        if current in supported or current.split("-")[0] in supported:
            return current
    return translation.to_language(get_setting(config, "multilingual.fallback_locale", "en_US"))


def banner_context(config):
    """Plain (already translated) values for the banner template."""
    banner = get_setting(config, "banner", {}) or {}
    modal = banner.get("modal") or {}

    categories = [
        {
            "key": key,
            "label": str(category.get("label") or key.title()),
            "description": str(category.get("description") or ""),
            "required": bool(category.get("required")),
        }
        for key, category in get_categories(config).items()
    ]

    return {
        "title": str(banner.get("title") or ""),
        "message": str(banner.get("message") or ""),
        "accept_text": str(banner.get("accept_text") or ""),
        "reject_text": str(banner.get("reject_text") or ""),
        "customize_text": str(banner.get("customize_text") or ""),
        "position": banner.get("position") or "bottom",
        "style": banner.get("style") or {},
        "customizable": bool(banner.get("customizable")),
        "cookie_policy_link": banner.get("cookie_policy_link"),
        "modal": {
            "title": str(modal.get("title") or ""),
            "message": str(modal.get("message") or ""),
            "more_link": banner.get("modal_main_text_more_link"),
            "save_button_text": str(modal.get("save_button_text") or ""),
            "cancel_button_text": str(modal.get("cancel_button_text") or ""),
        },
        "categories": categories,
        "optional_categories": [category for category in categories if not category["required"]],
        "client_config": {
            "cookieName": config.get("cookie_name"),
            "encodingType": config.get("encoding_type") or "raw",
            "barTimeout": banner.get("bar_timeout", 1000),
            "urls": get_setting(config, "urls", {}) or {},
            "callbackFunction": config.get("callback_function"),
            "consentMode": GoogleConsentModeIntegration(config).enabled,
            "requiredCategories": [c["key"] for c in categories if c["required"]],
        },
    }


@register.simple_tag(takes_context=True)
def cookie_consent_banner(context):
    """Render the banner unless the visitor is outside the target region or already decided."""
    request = context.get("request")
    config = get_config()
    if request is None or not config.get("enabled"):
        return ""

    state = getattr(request, "cookie_consent", None) or get_consent_state(request, config)
    if not state["in_target_region"] or state["consent_given"]:
        return ""

    with translation.override(banner_language(config)):
        return render_to_string(
            "cookie_consent/banner.html",
            banner_context(config),
            request=request,
        )


@register.simple_tag(takes_context=True)
def cookie_consent_scripts(context):
    """
    Emit the consented scripts prepared by the middleware.
    URLs become <script src> tags, anything else is trusted inline HTML.
    """
    request = context.get("request")
    scripts = getattr(request, "cookie_consent_scripts", None) or []
    output = []
    for script in scripts:
        if isinstance(script, str) and script.startswith(("http", "/")):
            output.append(format_html('<script src="{}"></script>', script))
        else:
            output.append(mark_safe(script))
    return mark_safe("\n".join(output))


@register.filter
def consent_allows(request, category):
    if request is None:
        return False
    return CookieBlocker.from_request(request, get_config()).allow(category)
