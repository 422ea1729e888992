# utils.py
from rest_framework.response import Response


def api_response(status_code=200, status="success", data=None, error_code=None, error_message=None, headers=None):
    """
    Standardized API response.

    The envelope's statusCode is also used as the HTTP status so that
    browsers and fetch() callers see 4xx/5xx for failures.
    """
    return Response(
        {
            "statusCode": status_code,
            "status": status,
            "data": data or {},
            "errorCode": error_code,
            "errorMessage": error_message,
        },
        status=status_code,
        headers=headers,
    )
