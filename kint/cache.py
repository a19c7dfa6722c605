"""In-process read-through cache with tag based invalidation.

Read accessors are wrapped with :func:`cached`; every mutation calls
:func:`revalidate` with the tags (and page paths) of the content type it
touched so the next read in this process goes back to the database.

Entries only leave the store on expiry or invalidation; there is no
capacity bound.
"""

import logging
import threading
import time
from functools import wraps

from flask import current_app, make_response, request, session
from flask_login import current_user

from kint.i18n import current_language

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'kint_cache'


class CacheEntry:
    __slots__ = ('value', 'expires_at', 'tags')

    def __init__(self, value, expires_at, tags):
        self.value = value
        self.expires_at = expires_at
        self.tags = frozenset(tags)


class TaggedCache:

    def __init__(self, default_ttl=300, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def init_app(self, app):
        self.default_ttl = app.config.get('CACHE_DEFAULT_TTL', self.default_ttl)
        app.extensions[EXTENSION_KEY] = self

    def get(self, key):
        """Return ``(hit, value)`` for *key*, dropping the entry if expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return False, None
            return True, entry.value

    def set(self, key, value, ttl=None, tags=()):
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value, self._clock() + ttl, tags)

    def invalidate_tag(self, *tags):
        wanted = set(tags)
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.tags & wanted]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cache entries for tags %s", len(stale), sorted(wanted))
        return len(stale)

    def invalidate_path(self, *paths):
        return self.invalidate_tag(*(path_tag(path) for path in paths))

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return self.get(key)[0]


def path_tag(path):
    path = '/' + path.strip('/')
    return 'path:' + (path if path == '/' else path + '/')


def get_cache():
    return current_app.extensions[EXTENSION_KEY]


def revalidate(tags=(), paths=()):
    """Invalidate *tags* and *paths* after a successful write."""
    store = get_cache()
    if tags:
        store.invalidate_tag(*tags)
    if paths:
        store.invalidate_path(*paths)


def cached(key, tags, ttl=None):
    """Memoise a read accessor under *key*; arguments extend the key."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            parts = [str(a) for a in args] + ['%s=%s' % item for item in sorted(kwargs.items())]
            cache_key = ':'.join([key] + parts)
            store = get_cache()
            hit, value = store.get(cache_key)
            if hit:
                logger.debug("Cache hit %s", cache_key)
                return value
            logger.debug("Cache miss %s", cache_key)
            value = func(*args, **kwargs)
            store.set(cache_key, value, ttl, tags)
            return value

        wrapper.cache_key = key
        wrapper.uncached = func
        return wrapper

    return decorator


def _page_cacheable():
    if not current_app.config.get('PAGE_CACHE_ENABLED', True):
        return False
    if request.method != 'GET' or current_user.is_authenticated:
        return False
    # Rendering would consume pending flashes; never store them for other visitors.
    return not session.get('_flashes')


def cache_page(ttl=None, tags=()):
    """Cache a rendered public page per path and language."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not _page_cacheable():
                return view(*args, **kwargs)
            lang = current_language()
            cache_key = 'page:%s?lang=%s' % (request.path, lang)
            store = get_cache()
            hit, payload = store.get(cache_key)
            if hit:
                body, status, mimetype = payload
                response = make_response(body, status)
                response.mimetype = mimetype
                return response

            response = make_response(view(*args, **kwargs))
            if response.status_code == 200 and not response.direct_passthrough:
                page_ttl = ttl if ttl is not None else current_app.config.get('PAGE_CACHE_TTL', 300)
                store.set(
                    cache_key,
                    (response.get_data(), response.status_code, response.mimetype),
                    page_ttl,
                    tuple(tags) + (path_tag(request.path),),
                )
            return response

        return wrapper

    return decorator
