"""
Error taxonomy for the order and payment engine.

Services raise these; the REST layer maps them to HTTP responses through
engine_exception_handler.
"""
import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """Base exception for order/payment engine errors."""

    status_code = 400
    default_code = "error"

    def __init__(self, message, code=None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class NotFound(EngineError):
    """Raised when an order, item or payment id does not resolve in the current venue."""

    status_code = 404
    default_code = "not_found"

    def __init__(self, entity, entity_id=None, message=None):
        self.entity = entity
        self.entity_id = entity_id
        if message is None:
            message = f"{entity} not found"
        super().__init__(message)


class InvalidOperation(EngineError):
    """Raised when a request is well-formed but breaks a business rule."""

    status_code = 409
    default_code = "invalid_operation"


class ValidationError(EngineError):
    """Raised for malformed input: non-positive amounts, quantities or prices."""

    status_code = 400
    default_code = "validation_error"

    def __init__(self, message, field=None, code=None):
        self.field = field
        super().__init__(message, code=code)


class PaymentDeclined(InvalidOperation):
    """Raised when the card processor refuses a charge or refund."""

    status_code = 402
    default_code = "payment_declined"


def engine_exception_handler(exc, context):
    """
    DRF exception handler that renders engine errors as
    {"error": ..., "code": ...} with their mapped status.
    """
    if isinstance(exc, EngineError):
        view = context.get("view")
        logger.warning(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc.message}"
        )
        data = {"error": exc.message, "code": exc.code}
        field = getattr(exc, "field", None)
        if field:
            data["field"] = field
        return Response(data, status=exc.status_code)

    return exception_handler(exc, context)
