"""
Tests for cookie_consent/conf.py

Tests cover:
- Merging project settings over the defaults
- Fallback configuration when the setting is missing
- Dotted-path lookups and category helpers
"""

from app.platform.cookie_consent.conf import (
    DEFAULTS,
    deep_merge,
    get_config,
    get_setting,
    optional_categories,
    required_categories,
)


class TestDeepMerge:

    def test_nested_values_are_merged(self):
        merged = deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}

    def test_base_is_not_mutated(self):
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}

    def test_replaced_keys_are_not_merged(self):
        merged = deep_merge(
            {"categories": {"essential": {}, "marketing": {}}},
            {"categories": {"essential": {"required": True}}},
            replaced_keys=("categories",),
        )
        assert list(merged["categories"]) == ["essential"]


class TestGetConfig:

    def test_project_values_override_defaults(self, settings):
        settings.COOKIE_CONSENT = {"cookie_name": "consent", "banner": {"position": "top"}}
        config = get_config()

        assert config["cookie_name"] == "consent"
        assert config["banner"]["position"] == "top"
        # untouched defaults survive the merge
        assert config["banner"]["customizable"] is True
        assert config["expiration"] == DEFAULTS["expiration"]

    def test_missing_setting_uses_fallback(self, settings):
        del settings.COOKIE_CONSENT
        config = get_config()

        assert config["enabled"] is False
        assert config["logging"]["enabled"] is False
        assert config["compliance"] == {"gdpr": False, "cpra": False, "google_cmp": False}

    def test_project_categories_replace_defaults(self, settings):
        settings.COOKIE_CONSENT = {
            "categories": {
                "necessary": {"label": "Necessary", "required": True, "cookies": ["sessionid"]},
                "ads": {"label": "Ads", "required": False, "cookies": ["_fbp"]},
            }
        }
        config = get_config()

        assert list(config["categories"]) == ["necessary", "ads"]
        assert required_categories(config) == ["necessary"]
        assert optional_categories(config) == ["ads"]


class TestGetSetting:

    def test_dotted_path(self, config):
        assert get_setting(config, "geo_targeting.regions") == ["EU", "US-CA"]

    def test_missing_path_returns_default(self, config):
        assert get_setting(config, "banner.nope.deeper", "x") == "x"

    def test_non_dict_node_returns_default(self, config):
        assert get_setting(config, "cookie_name.length") is None
