import logging

from rest_framework.views import exception_handler

log = logging.getLogger('exchange.api')


def exchange_exception_handler(exc, context):
    """
    DRF exception handler that logs every handled API error.

    The response body is left exactly as DRF renders it; domain exceptions
    carry their own status code, detail and code.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    request = context.get('request')
    log.warning(
        'api_error',
        extra={
            'extra': {
                'event': 'api_error',
                'status_code': response.status_code,
                'error_type': type(exc).__name__,
                'code': getattr(exc, 'default_code', None),
                'detail': str(getattr(exc, 'detail', exc)),
                'path': getattr(request, 'path', ''),
                'method': getattr(request, 'method', ''),
            }
        },
    )
    return response
