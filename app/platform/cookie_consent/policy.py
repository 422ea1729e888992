"""Cookie policy generator built from the configured categories."""

from .conf import get_categories, get_setting


def generate_cookie_policy(config):
    categories = []
    for key, category in get_categories(config).items():
        categories.append({
            "key": key,
            "label": str(category.get("label") or key.replace("_", " ").title()),
            "description": str(category.get("description") or ""),
            "required": bool(category.get("required")),
            "cookies": list(category.get("cookies") or []),
            "services": [str(service) for service in category.get("services") or []],
        })

    return {
        "website": get_setting(config, "website", ""),
        "consent_cookie": {
            "name": get_setting(config, "cookie_name"),
            "expiration_seconds": get_setting(config, "expiration"),
            "domain": get_setting(config, "domain"),
            "path": get_setting(config, "path", "/"),
        },
        "categories": categories,
        "regulations": sorted(
            name for name, enabled in (get_setting(config, "compliance", {}) or {}).items() if enabled
        ),
    }


def is_policy_enabled(config):
    return bool(config.get("enabled") and get_setting(config, "cookie_policy.generator"))
