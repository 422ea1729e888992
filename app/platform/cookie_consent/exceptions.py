"""
Cookie Consent Exceptions
"""


class CookieConsentError(Exception):
    """Base class for consent errors surfaced to API clients as 400s."""

    error_code = "CONSENT_ERROR"


class UnknownCategoryError(CookieConsentError):
    error_code = "UNKNOWN_CATEGORY"

    def __init__(self, category):
        self.category = category
        super().__init__(f"Unknown cookie category '{category}'.")


class RequiredCategoryError(CookieConsentError):
    error_code = "CATEGORY_REQUIRED"

    def __init__(self, category):
        self.category = category
        super().__init__(f"Category '{category}' is required and cannot be rejected.")
