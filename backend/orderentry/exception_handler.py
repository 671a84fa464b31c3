"""
Unified exception handler.

Registered as DRF's EXCEPTION_HANDLER. Every failed response has the same shape,
so clients only need one rule:
  response.type present  → something went wrong
  no type field          → success

Error body:
{
    "type":    "invalid_state" | "invalid_argument" | "unimplemented" | "storage_error" | "validation_error",
    "code":    "ORDER_ALREADY_SIGNED",
    "message": "Order is already signed.",
    "detail":  { ... }  // optional
}
"""

import logging

from django.http import JsonResponse
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler as drf_default_handler

from .exceptions import BaseAppException

logger = logging.getLogger(__name__)


def unified_exception_handler(exc, context):
    """
    DRF exception handler entry point.

    Order of precedence:
    1. BaseAppException and subclasses → unified body
    2. DRF's own ValidationError → unified body
    3. anything else → DRF default handling
    """

    # --- 1. our own hierarchy ---
    if isinstance(exc, BaseAppException):
        if exc.http_status >= 500:
            logger.error("[api] %s %s: %s", exc.type, exc.code, exc.message)
        body = {
            'type': exc.type,
            'code': exc.code,
            'message': exc.message,
        }
        if exc.detail is not None:
            body['detail'] = exc.detail
        return JsonResponse(body, status=exc.http_status)

    # --- 2. DRF ValidationError ---
    if isinstance(exc, DRFValidationError):
        body = {
            'type': 'validation_error',
            'code': 'VALIDATION_ERROR',
            'message': 'Request validation failed',
            'detail': exc.detail,
        }
        return JsonResponse(body, status=400)

    # --- 3. everything else ---
    return drf_default_handler(exc, context)
