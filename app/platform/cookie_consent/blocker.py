"""
CookieBlocker
Decides whether a cookie category is allowed for the current visitor.

    blocker = CookieBlocker.from_request(request, config)
    if blocker.allow("marketing"):
        ...  # inject marketing scripts
"""

from .conf import get_categories, required_categories


def cookie_matches(name, pattern):
    """
    Match a cookie name against a configured pattern.

    "_ga" matches only "_ga", "_ga_*" matches "_ga_ABC123", and a pattern
    ending in "_" ("_dc_gtm_") matches any name that starts with it.
    """
    if not pattern:
        return False
    if pattern.endswith("*"):
        return name.startswith(pattern[:-1])
    if pattern.endswith("_") and len(pattern) > 1:
        return name.startswith(pattern)
    return name == pattern


def category_for_cookie(name, config):
    """Return the key of the category a cookie belongs to, or None."""
    categories = get_categories(config)
    for key, category in categories.items():
        if name == key:
            return key
        for pattern in category.get("cookies") or []:
            if cookie_matches(name, pattern):
                return key
    return None


def cookies_in_category(cookie_names, category_key, config):
    category = get_categories(config).get(category_key) or {}
    patterns = category.get("cookies") or []
    return [
        name for name in cookie_names
        if name == category_key or any(cookie_matches(name, pattern) for pattern in patterns)
    ]


class CookieBlocker:

    def __init__(self, consent, required=()):
        self.consent = dict(consent or {})
        self.required = set(required)

    @classmethod
    def from_request(cls, request, config):
        # Prefer the state computed by the middleware for this request
        state = getattr(request, "cookie_consent", None)
        if state is not None:
            consent = state.get("consent") or {}
        else:
            from .service import CookieConsentService
            consent = CookieConsentService(request, config).get_consent()
        return cls(consent, required=required_categories(config))

    def allow(self, category):
        """Only an explicit True counts as consent."""
        return self.consent.get(category) is True

    def should_block(self, category):
        return category not in self.required
