"""Local file storage for uploaded media, CVs and documents.

Files land in ``UPLOAD_FOLDER/<folder>/`` under a timestamp-prefixed name and
are served back from ``/uploads/<folder>/<name>``.
"""

import logging
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from kint.errors import NotFoundError, UploadError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = '/uploads'


def _upload_root():
    return os.path.abspath(current_app.config['UPLOAD_FOLDER'])


def allowed_file(filename):
    if '.' not in filename:
        return False
    extension = filename.rsplit('.', 1)[1].lower()
    return extension in current_app.config.get('ALLOWED_UPLOAD_EXTENSIONS', ())


def save_upload(file_storage, folder='uploads'):
    """Persist a werkzeug ``FileStorage`` and return its public URL."""
    if file_storage is None or not file_storage.filename:
        raise UploadError('No file uploaded')

    original = secure_filename(file_storage.filename) or 'file'
    if not allowed_file(original):
        raise UploadError('File type is not allowed')

    folder = secure_filename(folder) or 'uploads'
    target_dir = os.path.join(_upload_root(), folder)
    os.makedirs(target_dir, exist_ok=True)

    filename = '%d-%s' % (int(time.time() * 1000), original)
    try:
        file_storage.save(os.path.join(target_dir, filename))
    except OSError as exc:
        logger.exception("Failed to store upload %s", original)
        raise UploadError('Failed to upload file') from exc

    logger.info("Stored upload %s/%s", folder, filename)
    return '%s/%s/%s' % (PUBLIC_PREFIX, folder, filename)


def resolve_upload(relative_path):
    """Map a path below ``/uploads`` to an absolute file path.

    Any ``..`` segment is rejected outright, and the resolved path must stay
    inside the upload root.
    """
    if not relative_path or relative_path.startswith(('/', '\\')):
        raise UploadError('Invalid path')
    if '..' in relative_path.replace('\\', '/').split('/'):
        raise UploadError('Invalid path')

    root = _upload_root()
    full_path = os.path.abspath(os.path.join(root, relative_path))
    if os.path.commonpath([root, full_path]) != root:
        raise UploadError('Invalid path')
    if not os.path.isfile(full_path):
        raise NotFoundError('File not found')
    return full_path


def delete_upload(public_url):
    """Remove a previously stored local file; missing files are ignored."""
    if not public_url or not public_url.startswith(PUBLIC_PREFIX + '/'):
        return False
    try:
        full_path = resolve_upload(public_url[len(PUBLIC_PREFIX) + 1:])
    except (UploadError, NotFoundError):
        return False
    os.remove(full_path)
    return True
