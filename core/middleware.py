"""
EXIM Desk HTTP Middleware
=========================

Provides:
1. Security Headers on every response
2. Request audit logging for failed API calls and slow analytics queries
"""

import time
import logging
from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger('exim.audit')


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Add security headers to all responses.

    The dashboard only reads JSON from this service, so API responses
    are never framed or sniffed.
    """

    def process_response(self, request, response):
        response['X-Content-Type-Options'] = 'nosniff'

        # Django admin uses iframes for its popups
        if not request.path.startswith('/admin/'):
            response['X-Frame-Options'] = 'DENY'

        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        if 'Server' in response:
            del response['Server']

        if not settings.DEBUG:
            response['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response


class RequestAuditMiddleware(MiddlewareMixin):
    """
    Audit logging for API requests.

    Logs:
    - Client errors (4xx) and server errors (5xx) on /api/
    - Requests slower than SLOW_REQUEST_MS (aggregation hot spots)
    """

    SLOW_REQUEST_MS = 2000

    def process_request(self, request):
        request._audit_started = time.monotonic()

    def _client_ip(self, request):
        forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
        if forwarded:
            return forwarded.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '?')

    def process_response(self, request, response):
        if not request.path.startswith('/api/'):
            return response

        started = getattr(request, '_audit_started', None)
        elapsed_ms = round((time.monotonic() - started) * 1000, 1) if started else None

        log_data = {
            'method': request.method,
            'path': request.path,
            'query': request.META.get('QUERY_STRING', ''),
            'status': response.status_code,
            'ip': self._client_ip(request),
            'elapsed_ms': elapsed_ms,
        }

        if response.status_code >= 500:
            logger.error(f"AUDIT [ERROR] {log_data}")
        elif response.status_code >= 400:
            logger.warning(f"AUDIT [WARN] {log_data}")
        elif elapsed_ms is not None and elapsed_ms > self.SLOW_REQUEST_MS:
            logger.warning(f"AUDIT [SLOW] {log_data}")

        return response
