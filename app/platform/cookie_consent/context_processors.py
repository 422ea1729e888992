"""
Injects the per-request consent state into all templates.
"""

from .conf import get_config


def cookie_consent(request):
    state = getattr(request, "cookie_consent", None) or {}
    config = get_config()
    return {
        "cookie_consent_enabled": bool(config.get("enabled")),
        "cookie_consent_state": state,
        "cookie_consent_given": bool(state.get("consent_given")),
        "cookie_consent_categories": dict(state.get("consent") or {}),
        "cookie_consent_cookie_name": config.get("cookie_name"),
    }
