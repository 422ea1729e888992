"""
Geo-targeting helpers.
Map the client ip to a coarse region code (EU, US-CA, US, OTHER).
"""
import logging

import requests
from django.core.cache import cache

from .conf import get_setting
from .constants import EU_COUNTRIES, LOOPBACK_ADDRESSES, Regions

logger = logging.getLogger(__name__)

CACHE_KEY = "cookie_consent:region:{ip}"


def get_client_ip(request):
    """Get client IP address"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def _lookup(ip, field, config):
    url = get_setting(config, "geo_targeting.lookup_url").format(ip=ip, field=field)
    timeout = get_setting(config, "geo_targeting.timeout", 2)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text.strip().upper()


def lookup_region(ip, config):
    """Resolve an ip through the lookup service. Returns None when the lookup fails."""
    try:
        country_code = _lookup(ip, "country", config)
        if country_code in EU_COUNTRIES:
            return Regions.EU.value
        if country_code == "US":
            # State-level check only matters for California (CPRA)
            if _lookup(ip, "region_code", config) == "CA":
                return Regions.US_CA.value
            return Regions.US.value
    except requests.RequestException as exc:
        logger.warning(f"Geo lookup failed for {ip}: {exc}")
        return None
    return Regions.OTHER.value


def detect_region(request, config):
    """
    Detect the visitor's region.

    Loopback and missing addresses are treated as EU so local development
    always sees the banner.
    """
    ip = get_client_ip(request)
    if not ip or ip in LOOPBACK_ADDRESSES:
        return Regions.EU.value

    key = CACHE_KEY.format(ip=ip)
    region = cache.get(key)
    if region is None:
        region = lookup_region(ip, config)
        if region is None:
            # failures are cached briefly as OTHER
            cache.set(
                key,
                Regions.OTHER.value,
                get_setting(config, "geo_targeting.failure_cache_timeout", 300),
            )
            return Regions.OTHER.value
        cache.set(key, region, get_setting(config, "geo_targeting.cache_timeout", 86400))
    return region
