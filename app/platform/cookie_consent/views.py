"""
Cookie Consent API
Endpoints posted to by the consent banner, plus read-only audit helpers
"""

import logging

from django.db import transaction
from django.http import Http404
from django.shortcuts import render
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.exceptions import APIException
from drf_spectacular.utils import extend_schema, OpenApiParameter

from app.utils.response import api_response
from app.utils.exception_handler import format_validation_error
from app.platform.cookie_consent.audit import get_consent_log
from app.platform.cookie_consent.conf import get_config
from app.platform.cookie_consent.exceptions import CookieConsentError
from app.platform.cookie_consent.middleware import get_consent_state
from app.platform.cookie_consent.policy import generate_cookie_policy, is_policy_enabled
from app.platform.cookie_consent.serializers import (
    RejectSerializer,
    CustomizeSerializer,
    ComplianceQuerySerializer,
    ConsentLogQuerySerializer,
)
from app.platform.cookie_consent.service import CookieConsentService

logger = logging.getLogger(__name__)


@extend_schema(tags=["Cookie Consent"])
class CookieConsentViewSet(viewsets.ViewSet):
    """
    Consent banner endpoints.
    Anonymous visitors must be able to record consent, so access is open.
    """
    permission_classes = [permissions.AllowAny]

    def _consent_write(self, request, label, write, extra=None):
        """Run a consent write and answer with the updated consent map."""
        config = get_config()
        service = CookieConsentService(request, config)
        snapshot = service.snapshot()
        try:
            # audit rows and the session map change together or not at all
            with transaction.atomic():
                consents = write(service)
        except (APIException, CookieConsentError):
            service.restore(snapshot)
            raise
        except Exception as exc:
            service.restore(snapshot)
            logger.exception(f"Error recording consent ({label}): {exc}")
            return api_response(
                500, "failure", {},
                "SERVER_ERROR",
                "An error occurred while saving cookie preferences"
            )

        logger.info(f"Cookie consent {label}: {consents}")
        data = {"success": True}
        data.update(extra or {})
        data["categories"] = consents
        response = api_response(200, "success", data)
        return service.write_cookie(response, consents)

    @extend_schema(
        summary="Accept all categories",
        description="Grants consent for every configured cookie category",
        request=None,
    )
    @action(detail=False, methods=["post"], url_path="accept")
    def accept(self, request):
        return self._consent_write(request, "accepted", lambda service: service.accept_all())

    @extend_schema(
        summary="Reject a category",
        description=(
            "Withdraws consent for one category. Without a category every "
            "optional category is rejected."
        ),
        request=RejectSerializer,
    )
    @action(detail=False, methods=["post"], url_path="reject")
    def reject(self, request):
        serializer = RejectSerializer(data=request.data)
        if not serializer.is_valid():
            return api_response(
                400, "failure", {},
                "VALIDATION_ERROR",
                format_validation_error(serializer.errors)
            )

        category = serializer.validated_data.get("category")
        extra = {"category": category} if category else {}
        return self._consent_write(
            request, "rejected", lambda service: service.reject(category), extra=extra
        )

    @extend_schema(
        summary="Customize categories",
        description="Sets consent per category from a {category: bool} map",
        request=CustomizeSerializer,
    )
    @action(detail=False, methods=["post"], url_path="customize")
    def customize(self, request):
        serializer = CustomizeSerializer(data=request.data)
        if not serializer.is_valid():
            return api_response(
                400, "failure", {},
                "VALIDATION_ERROR",
                format_validation_error(serializer.errors)
            )

        choices = serializer.validated_data["categories"]
        return self._consent_write(
            request, "customized", lambda service: service.customize(choices)
        )

    @extend_schema(
        summary="Get consent status",
        description="Region, consent map and whether the banner should be shown",
    )
    @action(detail=False, methods=["get"], url_path="status")
    def get_status(self, request):
        config = get_config()
        state = getattr(request, "cookie_consent", None) or get_consent_state(request, config)
        data = {
            "region": state["region"],
            "in_target_region": state["in_target_region"],
            "consent_given": state["consent_given"],
            "consent": state["consent"],
            "show_banner": bool(
                config.get("enabled") and state["in_target_region"] and not state["consent_given"]
            ),
        }
        return api_response(200, "success", data)

    @extend_schema(
        summary="Scan request cookies",
        description="Lists the cookies sent with this request and their category",
    )
    @action(detail=False, methods=["get"], url_path="scan")
    def scan(self, request):
        service = CookieConsentService(request)
        return api_response(200, "success", {"cookies": service.scan_cookies()})

    @extend_schema(
        summary="Check compliance",
        description="GDPR/CPRA check of the cookies sent with this request",
        parameters=[OpenApiParameter("regulation", str, required=False)],
    )
    @action(detail=False, methods=["get"], url_path="compliance")
    def compliance(self, request):
        query = ComplianceQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        service = CookieConsentService(request)
        regulation = query.validated_data.get("regulation")
        if regulation:
            violations = service.compliance_violations(regulation)
            data = {
                "regulation": regulation.lower(),
                "compliant": not violations,
                "violations": violations,
            }
        else:
            data = {"regulations": service.compliance_report()}
        return api_response(200, "success", data)

    @extend_schema(
        summary="Consent audit log",
        description="Recorded consent decisions, oldest first (staff only)",
        parameters=[
            OpenApiParameter("category", str, required=False),
            OpenApiParameter("limit", int, required=False),
        ],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="log",
        permission_classes=[permissions.IsAdminUser],
    )
    def log(self, request):
        query = ConsentLogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        entries = get_consent_log(
            limit=query.validated_data.get("limit"),
            category=query.validated_data.get("category"),
        )
        return api_response(200, "success", {"entries": entries, "count": len(entries)})

    @extend_schema(
        summary="Cookie policy",
        description="Cookie policy generated from the configured categories",
    )
    @action(detail=False, methods=["get"], url_path="policy")
    def policy(self, request):
        config = get_config()
        if not is_policy_enabled(config):
            return api_response(
                status.HTTP_404_NOT_FOUND, "failure", {},
                "POLICY_DISABLED",
                "The cookie policy generator is disabled"
            )
        return api_response(200, "success", generate_cookie_policy(config))


def cookie_policy_page(request):
    """Human-readable cookie policy page."""
    config = get_config()
    if not is_policy_enabled(config):
        raise Http404("Cookie policy generator is disabled")
    return render(request, "cookie_consent/policy.html", {"policy": generate_cookie_policy(config)})
