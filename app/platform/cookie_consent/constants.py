"""
Cookie Consent Constants
Regions, regulations and Google Consent Mode mappings
"""

from enum import Enum


class Regions(str, Enum):
    """Region codes produced by geo detection"""
    EU = "EU"
    US = "US"
    US_CA = "US-CA"
    OTHER = "OTHER"


class Regulations(str, Enum):
    """Regulations the compliance checker knows about"""
    GDPR = "gdpr"
    CPRA = "cpra"
    GOOGLE_CMP = "google_cmp"


class EncodingTypes(str, Enum):
    RAW = "raw"
    BASE64 = "base64"


class LogDrivers(str, Enum):
    DATABASE = "database"
    FILE = "file"


# EEA/EFTA countries treated as the "EU" region
EU_COUNTRIES = frozenset([
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR", "DE", "GR",
    "HU", "IE", "IT", "LV", "LT", "LU", "MT", "NL", "PL", "PT", "RO", "SK",
    "SI", "ES", "SE", "IS", "LI", "NO", "CH",
])

LOOPBACK_ADDRESSES = frozenset(["127.0.0.1", "::1"])

# CPRA "Do Not Sell or Share" opt-out category / cookie key
DO_NOT_SELL = "do_not_sell"

# consent_flags key -> (Google Consent Mode storage type, governing category).
# A category of None means the storage type is always granted.
CONSENT_MODE_FLAGS = (
    ("functional_storage_required", "functionality_storage", None),
    ("security_storage", "security_storage", None),
    ("functional_storage_optional", "functionality_storage", "preferences"),
    ("personalization_storage", "personalization_storage", "preferences"),
    ("analytics_storage", "analytics_storage", "statistics"),
    ("marketing_storage", "ad_storage", "marketing"),
    ("marketing_user_data_storage", "ad_user_data", "marketing"),
    ("marketing_personalization", "ad_personalization", "marketing"),
)

GRANTED = "granted"
DENIED = "denied"
