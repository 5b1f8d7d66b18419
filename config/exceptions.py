"""
Project-wide DRF exception handler.

Every API error leaves the service as a JSON body with a ``message`` key:

- Domain errors (``PaymentServiceError``, ``AccountsServiceError``) use their
  own ``status_code`` and merge their ``extra`` state fields into the body.
- Serializer validation errors become ``{"message": "Validation failed",
  "errors": {field: message}}`` with every violated field listed.
- Anything unexpected is logged with its traceback and rendered as a
  generic 500.
"""
import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.accounts.services.exceptions import AccountsServiceError
from apps.payments.exceptions import PaymentServiceError

logger = logging.getLogger(__name__)


def _flatten_errors(detail):
    """Collapse DRF's ``{field: [ErrorDetail, ...]}`` into ``{field: message}``."""
    if isinstance(detail, dict):
        return {field: _flatten_errors(value) for field, value in detail.items()}
    if isinstance(detail, list):
        if len(detail) == 1:
            return _flatten_errors(detail[0])
        return [_flatten_errors(item) for item in detail]
    return str(detail)


def api_exception_handler(exc, context):
    """Render domain, validation and unexpected errors as JSON."""
    if isinstance(exc, (PaymentServiceError, AccountsServiceError)):
        body = {'message': exc.message}
        body.update(exc.extra)
        return Response(body, status=exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        errors = _flatten_errors(exc.detail)
        if not isinstance(errors, dict):
            errors = {'non_field_errors': errors}
        return Response(
            {'message': 'Validation failed', 'errors': errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, (Http404, exceptions.NotFound)):
            response.data = {'message': 'Not found'}
        elif isinstance(response.data, dict) and 'detail' in response.data:
            response.data = {'message': str(response.data['detail'])}
        return response

    view = context.get('view')
    logger.exception(
        "Unhandled error in %s", view.__class__.__name__ if view else 'unknown view'
    )
    return Response(
        {'message': 'Internal server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
