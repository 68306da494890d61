# middleware/request_logging.py
import logging
import time
import uuid

logger = logging.getLogger(__name__)


def client_ip(request):
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class RequestLoggingMiddleware:
    """Tags every request with an id and logs method, path, status and duration."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = uuid.uuid4()
        started = time.monotonic()

        response = self.get_response(request)

        elapsed_ms = (time.monotonic() - started) * 1000
        message = (
            f"{request.method} {request.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms) ip={client_ip(request)} request_id={request.request_id}"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        response['X-Request-ID'] = str(request.request_id)
        return response
