"""
CookieConsentService

Reads and writes the per-category consent map for one request.

The map lives in the session under ``cookie_name`` and is mirrored into a
cookie of the same name so the middleware and the browser script can read
it on later requests:

    service = CookieConsentService(request)
    service.set_consent("marketing", True)
    service.has_consent("marketing")   # True
    service.get_consent()              # {"marketing": True}
"""

import base64
import json
import logging
from urllib.parse import quote, unquote

from django.utils import timezone

from .audit import log_consent
from .blocker import category_for_cookie
from .conf import get_categories, get_config, get_setting, required_categories
from .constants import DO_NOT_SELL, EncodingTypes, Regulations
from .exceptions import RequiredCategoryError, UnknownCategoryError
from .geo import get_client_ip
from .models import ConsentAction

logger = logging.getLogger(__name__)


def encode_consent(consents, encoding=EncodingTypes.RAW.value):
    """Serialize a consent map into a cookie-safe string."""
    payload = json.dumps(consents, separators=(",", ":"), sort_keys=True)
    if encoding == EncodingTypes.BASE64.value:
        # '=' would force Django to quote the cookie value
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")
    return quote(payload, safe="")


def decode_consent(value, encoding=EncodingTypes.RAW.value):
    """Parse a consent cookie value. Anything unreadable yields {}."""
    if not value:
        return {}
    try:
        if encoding == EncodingTypes.BASE64.value:
            padded = value + "=" * (-len(value) % 4)
            decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        else:
            decoded = unquote(value)
        data = json.loads(decoded)
    except (ValueError, RecursionError):
        # deeply nested arrays exhaust the decoder stack
        logger.debug("Ignoring malformed consent cookie")
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(key): val for key, val in data.items() if isinstance(val, bool)}


class CookieConsentService:

    def __init__(self, request, config=None):
        self.request = request
        self.config = config or get_config()
        self.cookie_name = self.config["cookie_name"]
        # decisions made during this request, for requests without a session
        self._written = {}

    @property
    def categories(self):
        return get_categories(self.config)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    def _session(self):
        return getattr(self.request, "session", None)

    def _session_consents(self):
        session = self._session()
        if session is None:
            return None
        value = session.get(self.cookie_name)
        return dict(value) if isinstance(value, dict) else None

    def read_cookie(self):
        raw = self.request.COOKIES.get(self.cookie_name)
        return decode_consent(raw, self.config.get("encoding_type", EncodingTypes.RAW.value))

    def has_consent(self, category):
        """Check if the visitor has given consent for a category."""
        consents = self._session_consents() or {}
        return bool(consents.get(category))

    def get_consent(self):
        """Session state first (just written by an endpoint), then the cookie."""
        consents = self._session_consents()
        if consents:
            return consents
        consents = self.read_cookie()
        consents.update(self._written)
        return consents

    def set_consent(self, category, value, action=ConsentAction.SET):
        """Store consent for a category and append it to the audit log."""
        value = bool(value)
        self._written[category] = value
        session = self._session()
        if session is not None:
            consents = self._session_consents() or {}
            consents[category] = value
            # reassign so the session backend notices the change
            session[self.cookie_name] = consents
        else:
            logger.warning(f"No session on request, consent for {category} is not persisted server-side")

        log_consent({
            "category": category,
            "value": value,
            "timestamp": int(timezone.now().timestamp()),
            "ip": get_client_ip(self.request),
            "action": str(action),
            "user_agent": self.request.META.get("HTTP_USER_AGENT", ""),
            "session_key": self._session_key(),
        }, config=self.config)

    def _session_key(self):
        session = self._session()
        if session is None:
            return ""
        if not session.session_key:
            session.save()
        return session.session_key or ""

    def snapshot(self):
        """
        Current stored state, for restore() after a failed write.

        Also gives the session its key up front, so set_consent() never
        saves the session in the middle of a write.
        """
        self._session_key()
        return self._session_consents(), dict(self._written)

    def restore(self, snapshot):
        session_consents, written = snapshot
        self._written = dict(written)
        session = self._session()
        if session is None:
            return
        if session_consents is None:
            session.pop(self.cookie_name, None)
        else:
            session[self.cookie_name] = session_consents

    def write_cookie(self, response, consents):
        """Mirror the consent map into the configured cookie."""
        response.set_cookie(
            self.cookie_name,
            encode_consent(consents, self.config.get("encoding_type", EncodingTypes.RAW.value)),
            max_age=self.config.get("expiration"),
            path=self.config.get("path") or "/",
            domain=self.config.get("domain") or None,
            secure=bool(self.config.get("secure")),
            httponly=bool(self.config.get("http_only")),
            samesite=self.config.get("samesite") or None,
        )
        return response

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------
    def _check_known(self, category):
        if category not in self.categories:
            raise UnknownCategoryError(category)

    def _ensure_required(self, action):
        current = self.get_consent()
        for key in required_categories(self.config):
            if current.get(key) is not True:
                self.set_consent(key, True, action=action)

    def accept_all(self):
        for key in self.categories:
            self.set_consent(key, True, action=ConsentAction.ACCEPT)
        return self.get_consent()

    def reject(self, category=None):
        """
        Reject one category, or every optional category when none is given.
        Required categories cannot be rejected.
        """
        if category is None:
            for key, cat in self.categories.items():
                self.set_consent(key, bool(cat.get("required")), action=ConsentAction.REJECT)
            return self.get_consent()

        self._check_known(category)
        if self.categories[category].get("required"):
            raise RequiredCategoryError(category)
        self.set_consent(category, False, action=ConsentAction.REJECT)
        self._ensure_required(ConsentAction.REJECT)
        return self.get_consent()

    def customize(self, choices):
        # validate everything before writing anything
        for category in choices:
            self._check_known(category)

        for category, value in choices.items():
            if self.categories[category].get("required"):
                value = True
            self.set_consent(category, value, action=ConsentAction.CUSTOMIZE)
        self._ensure_required(ConsentAction.CUSTOMIZE)
        return self.get_consent()

    # ------------------------------------------------------------------
    # Inspection & compliance
    # ------------------------------------------------------------------
    def scan_cookies(self):
        """List cookies sent with the request together with their category."""
        cookies = {}
        for name, value in self.request.COOKIES.items():
            key = category_for_cookie(name, self.config)
            category = self.categories.get(key) or {}
            cookies[name] = {
                "value": value,
                "category": str(category.get("label", key)) if key else None,
                "category_key": key,
                "required": bool(category.get("required")) if key else False,
            }
        return cookies

    def compliance_violations(self, regulation):
        """Cookies present in breach of the given regulation."""
        regulation = (regulation or "").lower()
        if regulation not in (Regulations.GDPR.value, Regulations.CPRA.value):
            return []

        consents = self.get_consent()
        violations = []

        if regulation == Regulations.CPRA.value and DO_NOT_SELL in self.categories:
            if self.request.COOKIES.get(DO_NOT_SELL) and consents.get(DO_NOT_SELL) is not True:
                violations.append(DO_NOT_SELL)

        # Non-essential cookies require consent for their category
        for name, value in self.request.COOKIES.items():
            if not value or name in violations:
                continue
            key = category_for_cookie(name, self.config)
            if key is None or self.categories[key].get("required"):
                continue
            if consents.get(key) is not True:
                violations.append(name)
        return violations

    def is_compliant(self, regulation):
        return not self.compliance_violations(regulation)

    def compliance_report(self):
        """Result per enabled regulation. google_cmp is a tag setting, not a check."""
        checked = (Regulations.GDPR.value, Regulations.CPRA.value)
        report = {}
        for regulation, enabled in (get_setting(self.config, "compliance", {}) or {}).items():
            if not enabled or regulation not in checked:
                continue
            violations = self.compliance_violations(regulation)
            report[regulation] = {
                "compliant": not violations,
                "violations": violations,
            }
        return report
