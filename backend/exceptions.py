import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"


class ExternalServiceError(exceptions.APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "An external service failed to process the request."
    default_code = "external_service_error"


def error_response(error, status_code, details=None):
    body = {"success": False, "error": error}
    if details:
        body["details"] = details
    return Response(body, status=status_code)


def _validation_error_body(data):
    if isinstance(data, list):
        if len(data) == 1:
            return str(data[0]), None
        return "Validation failed", data
    if isinstance(data, dict):
        if set(data) == {"detail"}:
            return str(data["detail"]), None
        if "non_field_errors" in data and len(data) == 1:
            errors = data["non_field_errors"]
            return str(errors[0]), errors
    return "Validation failed", data


def api_exception_handler(exc, context):
    """Render every error as ``{success: false, error, details?}``."""
    if isinstance(exc, IntegrityError):
        logger.warning(f"[API] Integrity error: {exc}")
        return error_response("Resource already exists.", status.HTTP_409_CONFLICT)

    if isinstance(exc, ProtectedError):
        return error_response(
            "Resource is referenced by other records and cannot be deleted.",
            status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            f"[API] Unhandled error in {view.__class__.__name__ if view else 'view'}",
            exc_info=exc,
        )
        return error_response(
            "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, exceptions.ValidationError):
        error, details = _validation_error_body(response.data)
    elif isinstance(exc, exceptions.NotAuthenticated):
        error, details = "Access token required", {"code": "token_missing"}
    elif isinstance(exc, exceptions.AuthenticationFailed):
        if isinstance(exc.detail, dict):
            # simplejwt InvalidToken carries {"detail", "code", "messages"}
            error = str(exc.detail.get("detail", "Invalid token"))
            details = {"code": "token_invalid"}
        else:
            error, details = str(exc.detail), {"code": exc.get_codes()}
    elif isinstance(exc, exceptions.PermissionDenied):
        error, details = "Insufficient permissions", None
        if str(exc.detail) != exceptions.PermissionDenied.default_detail:
            error = str(exc.detail)
    elif isinstance(response.data, dict) and "detail" in response.data:
        error, details = str(response.data["detail"]), None
    else:
        error, details = "Request failed", response.data

    body = {"success": False, "error": error}
    if details:
        body["details"] = details
    response.data = body
    return response
