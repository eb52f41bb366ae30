"""
API exception handling.

Every DRF error response uses the same ``{success, message}`` envelope as the
contact endpoint.
"""
import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _first_message(detail['detail'])
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """Wrap DRF's default error response in the site's JSON envelope."""
    response = exception_handler(exc, context)
    if response is None:
        # Not an API error; Django's 500 handler takes over
        return None

    logger.info(f"API error {response.status_code}: {exc}")
    response.data = {
        'success': False,
        'message': _first_message(response.data),
    }
    return response
