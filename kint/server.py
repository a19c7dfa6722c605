"""Process entry point.

``build_application`` never raises: when the Flask app cannot be created the
traceback goes to ``server-debug.log`` and a small WSGI app answers every
request with a self-refreshing "service unavailable" page, so the hosting
panel sees a live process instead of a crash loop.
"""

import logging
import os
import traceback
from datetime import datetime, timezone

from werkzeug.serving import run_simple
from werkzeug.wrappers import Response

logger = logging.getLogger(__name__)

DEBUG_LOG = os.environ.get(
    'SERVER_DEBUG_LOG',
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'server-debug.log'),
)

UNAVAILABLE_PAGE = """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><meta http-equiv="refresh" content="5"><title>Service unavailable</title></head>
  <body>
    <h1>Service temporarily unavailable</h1>
    <p>The application failed to start. This page reloads automatically.</p>
    <p>Current time: %s</p>
  </body>
</html>
"""


def debug_log(message):
    timestamp = datetime.now(timezone.utc).isoformat()
    logger.error(message)
    try:
        with open(DEBUG_LOG, 'a', encoding='utf-8') as handle:
            handle.write('[%s] %s\n' % (timestamp, message))
    except OSError:
        logger.warning("Cannot write to %s", DEBUG_LOG)


def unavailable_app(environ, start_response):
    body = UNAVAILABLE_PAGE % datetime.now(timezone.utc).isoformat()
    response = Response(body, status=503, mimetype='text/html')
    response.headers['Retry-After'] = '5'
    return response(environ, start_response)


def build_application(factory=None):
    """Return the Flask app, or :func:`unavailable_app` if startup failed."""
    if factory is None:
        from kint import create_app as factory
    try:
        return factory()
    except Exception:  # any startup failure is served as 503
        debug_log("Application startup failed:\n%s" % traceback.format_exc())
        return unavailable_app


def main():
    logging.basicConfig(level=logging.INFO)
    application = build_application()
    port = int(os.environ.get('PORT', 3000))
    host = os.environ.get('HOST', '0.0.0.0')
    logger.info("Listening on %s:%d", host, port)
    run_simple(host, port, application, threaded=True)


if __name__ == '__main__':
    main()
