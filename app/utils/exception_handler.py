import logging
from rest_framework.views import exception_handler
from rest_framework.exceptions import (
    APIException,
    ValidationError,
    NotAuthenticated,
    AuthenticationFailed,
    PermissionDenied,
    MethodNotAllowed,
    ParseError,
    NotFound,
)
from rest_framework import status
from django.http import Http404

from app.platform.cookie_consent.exceptions import CookieConsentError
from app.utils.response import api_response

logger = logging.getLogger(__name__)


def format_validation_error(error_detail):
    """
    Convert DRF ValidationError detail into a readable error message.

    Handles:
    - Dict format: {'category': [ErrorDetail(...)]} -> "Category: This field is required."
    - List format: [ErrorDetail(...)] -> "This field is required."
    - String format: "error message" -> "error message"
    """
    if isinstance(error_detail, dict):
        messages = []
        for field, errors in error_detail.items():
            if not isinstance(errors, (list, tuple)):
                errors = [errors]
            error_strings = [format_validation_error(error) for error in errors]

            # non_field_errors carry no useful field name
            if field == "non_field_errors":
                messages.append(", ".join(error_strings))
                continue
            field_name = str(field).replace('_', ' ').title()
            messages.append(f"{field_name}: {', '.join(error_strings)}")

        return ". ".join(messages)

    elif isinstance(error_detail, list):
        return ". ".join(format_validation_error(error) for error in error_detail)

    elif isinstance(error_detail, str):
        return str(error_detail)

    else:
        return str(error_detail)


def custom_exception_handler(exc, context):
    """
    Global exception handler for the consent API.
    Ensures ALL API errors use the api_response() format.
    """
    response = exception_handler(exc, context)

    view = context.get('view', None)
    view_name = view.__class__.__name__ if view else 'UnknownView'
    logger.warning(f"[{view_name}] Exception: {exc}")

    # --- Domain errors raised by the consent service ---
    if isinstance(exc, CookieConsentError):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={},
            error_code=exc.error_code,
            error_message=str(exc),
        )

    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return api_response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            status="failure",
            data={},
            error_code="AUTH_ERROR",
            error_message="Authentication credentials were not provided or invalid."
        )

    if isinstance(exc, PermissionDenied):
        return api_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={},
            error_code="PERMISSION_DENIED",
            error_message="You do not have permission to perform this action."
        )

    # --- Wrong HTTP method ---
    if isinstance(exc, MethodNotAllowed):
        return api_response(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            status="failure",
            data={},
            error_code="METHOD_NOT_ALLOWED",
            error_message=format_validation_error(exc.detail),
        )

    # --- Malformed JSON body ---
    if isinstance(exc, ParseError):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={},
            error_code="MALFORMED_REQUEST",
            error_message=format_validation_error(exc.detail),
        )

    if isinstance(exc, ValidationError):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={},
            error_code="VALIDATION_ERROR",
            error_message=format_validation_error(exc.detail)
        )

    if isinstance(exc, (NotFound, Http404)):
        return api_response(
            status_code=status.HTTP_404_NOT_FOUND,
            status="failure",
            data={},
            error_code="NOT_FOUND",
            error_message="The requested resource was not found."
        )

    if isinstance(exc, APIException):
        return api_response(
            status_code=exc.status_code,
            status="failure",
            data={},
            error_code="API_EXCEPTION",
            error_message=format_validation_error(exc.detail)
        )

    logger.exception("Unhandled Exception", exc_info=exc)
    return api_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        status="failure",
        data={},
        error_code="INTERNAL_SERVER_ERROR",
        error_message="An unexpected error occurred. Please try again later."
    )
