import logging

from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def healthz(request):
    checks = {'db': False, 'cache': False}
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        checks['db'] = bool(row and row[0] == 1)
    except DatabaseError as e:
        logger.error('health check: database unavailable: %s', e)
    try:
        cache.set('healthz', 1, 5)
        checks['cache'] = cache.get('healthz') == 1
    except Exception as e:  # backend specific connection errors
        logger.error('health check: cache unavailable: %s', e)
    ok = all(checks.values())
    return JsonResponse({'ok': ok, **checks}, status=200 if ok else 503)
