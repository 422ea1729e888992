"""
Cookie Consent URLs

    /cookie-consent/accept/       POST
    /cookie-consent/reject/       POST
    /cookie-consent/customize/    POST
    /cookie-consent/status/       GET
    /cookie-consent/scan/         GET
    /cookie-consent/compliance/   GET
    /cookie-consent/log/          GET (staff)
    /cookie-consent/policy/       GET
    /cookies-policy/              GET (HTML)
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import CookieConsentViewSet, cookie_policy_page

# SimpleRouter: no API root view competing with the site's own "/"
router = SimpleRouter()
router.register(r"cookie-consent", CookieConsentViewSet, basename="cookie-consent")

urlpatterns = [
    path("", include(router.urls)),
    path("cookies-policy/", cookie_policy_page, name="cookie-policy"),
]
