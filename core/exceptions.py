import logging

from rest_framework.views import exception_handler

from .responses import first_error

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The payment provider rejected a request or could not be reached."""


def envelope_exception_handler(exc, context):
    """Wrap DRF's error responses in the {success, message} envelope."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and 'detail' in data and len(data) == 1:
        message = str(data['detail'])
        errors = None
    else:
        message = first_error(data)
        errors = data

    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    response.data = body
    if response.status_code >= 500:
        logger.error(f"Unhandled API error in {context.get('view').__class__.__name__}: {message}")
    return response
