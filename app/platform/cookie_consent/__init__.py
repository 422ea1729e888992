"""
Cookie Consent Management
Consent banner, per-category consent storage, consent-gated script
injection, compliance checks and an audit log
"""

# Lazy imports to avoid app-registry errors during Django app loading.
# Import from the submodules when needed:
#   from app.platform.cookie_consent.service import CookieConsentService
#   from app.platform.cookie_consent.blocker import CookieBlocker
#   from app.platform.cookie_consent.conf import get_config
