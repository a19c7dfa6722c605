"""Downloadable documents (certificates of analysis, safety sheets, ...).

Documents are stored locally under ``UPLOAD_FOLDER/documents`` and served
through ``/api/document/download`` which counts every download.
"""

import logging

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, commit_with_uploads, get_or_404, load
from kint.errors import ConflictError, NotFoundError, UploadError
from kint.models import Document
from kint.schemas import DocumentInput, DocumentSchema
from kint.slugs import slug_exists, slugify, unique_slug
from kint.uploads import delete_upload, save_upload

logger = logging.getLogger(__name__)

TAGS = ('documents',)
PATHS = ('/admin/documents',)


@cached('documents:list', tags=TAGS, ttl=60)
def get_documents(category=None, active_only=False):
    query = db.session.query(Document)
    if category:
        query = query.filter(Document.category == category)
    if active_only:
        query = query.filter(Document.is_active.is_(True))
    rows = query.order_by(Document.created_at.desc(), Document.id.desc()).all()
    return DocumentSchema(many=True).dump(rows)


@cached('documents:by-id', tags=TAGS, ttl=60)
def get_document_by_id(document_id):
    document = db.session.get(Document, document_id)
    return DocumentSchema().dump(document) if document else None


def get_document_for_download(document_id):
    """Return the active document behind a download link or raise 404."""
    document = get_or_404(Document, document_id, 'Document')
    if not document.is_active:
        raise NotFoundError('Document not found.')
    return document


def record_download(document_id):
    """Increment the download counter in a single UPDATE statement."""
    updated = (
        db.session.query(Document)
        .filter(Document.id == document_id)
        .update({Document.downloads: Document.downloads + 1}, synchronize_session=False)
    )
    if not updated:
        db.session.rollback()
        raise NotFoundError('Document not found.')
    commit()
    revalidate(tags=TAGS)


def _resolve_slug(data, exclude_id=None):
    if data.get('slug'):
        if slug_exists(Document, data['slug'], exclude_id=exclude_id):
            raise ConflictError('Slug is already in use.', field='slug')
    elif exclude_id is None:
        data['slug'] = unique_slug(Document, slugify(data['title']))


def create_document(payload, upload=None):
    data = load(DocumentInput, payload)
    has_upload = upload is not None and bool(upload.filename)
    if not has_upload and not data.get('file_path'):
        raise UploadError('No file uploaded')
    _resolve_slug(data)

    stored = None
    if has_upload:
        stored = data['file_path'] = save_upload(upload, 'documents')
    document = assign(Document(), data)
    db.session.add(document)
    commit_with_uploads(stored)
    logger.info("Created document %s (%s)", document.id, document.slug)
    revalidate(tags=TAGS, paths=PATHS)
    return document


def update_document(document_id, payload, upload=None):
    document = get_or_404(Document, document_id, 'Document')
    data = load(DocumentInput, payload, partial=True)
    _resolve_slug(data, exclude_id=document.id)

    replaced = stored = None
    if upload is not None and upload.filename:
        replaced = document.file_path
        stored = data['file_path'] = save_upload(upload, 'documents')
    assign(document, data)
    commit_with_uploads(stored)
    if replaced and replaced != document.file_path:
        delete_upload(replaced)
    revalidate(tags=TAGS, paths=PATHS)
    return document


def delete_document(document_id):
    document = get_or_404(Document, document_id, 'Document')
    file_path = document.file_path
    db.session.delete(document)
    commit()
    delete_upload(file_path)
    logger.info("Deleted document %s", document_id)
    revalidate(tags=TAGS, paths=PATHS)
