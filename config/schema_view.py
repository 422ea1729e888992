"""
Custom schema view with error handling for drf-spectacular
"""
import logging
from drf_spectacular.views import SpectacularAPIView
from rest_framework import status, permissions
from app.utils.response import api_response

logger = logging.getLogger(__name__)


class CustomSpectacularAPIView(SpectacularAPIView):
    """
    Schema endpoint, public like the consent endpoints it documents.
    Generation errors come back in the api_response envelope.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        try:
            return super().get(request, *args, **kwargs)
        except Exception as e:
            logger.exception(f"Error generating OpenAPI schema: {e}")
            return api_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                status="failure",
                data={},
                error_code="SCHEMA_GENERATION_ERROR",
                error_message="Failed to generate API schema. Check server logs for details."
            )
