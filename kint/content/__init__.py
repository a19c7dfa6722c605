"""Read accessors and mutation handlers, one module per content type.

Every mutation follows the same shape: decode the payload through its
schema, run at most one business check, write and commit, then revalidate
the cache tags and page paths of the content type.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from kint import db
from kint.errors import ConflictError, ContentError, NotFoundError
from kint.uploads import delete_upload

logger = logging.getLogger(__name__)


def load(schema_cls, data, partial=False):
    """Validate *data*; raises ``marshmallow.ValidationError`` on bad input."""
    return schema_cls().load(data or {}, partial=partial)


def get_or_404(model, record_id, label=None):
    try:
        record = db.session.get(model, int(record_id))
    except (TypeError, ValueError):
        record = None
    if record is None:
        raise NotFoundError('%s not found.' % (label or model.__name__))
    return record


def assign(record, data, skip=()):
    for key, value in data.items():
        if key not in skip:
            setattr(record, key, value)
    return record


def commit():
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ConflictError('A record with the same unique value already exists.') from exc
    except SQLAlchemyError:
        db.session.rollback()
        raise


def commit_with_uploads(*urls):
    """Commit; files stored for this write are removed again if it fails."""
    try:
        commit()
    except (ContentError, SQLAlchemyError):
        for url in urls:
            delete_upload(url)
        raise


def delete(record):
    db.session.delete(record)
    commit()
