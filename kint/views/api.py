import logging

from flask import Blueprint, redirect, request
from flask_login import login_required

from kint.content import blog, careers, categories, company, documents, gallery, load, pages, products
from kint.errors import ContentError
from kint.models import BlogPost, Category, Document, Page, Product
from kint.responses import json_error, json_success
from kint.schemas import (
    AwardSchema,
    CertificateSchema,
    HeadquarterSchema,
    JobApplicationSchema,
    TranslateInput,
)
from kint.slugs import slug_exists
from kint.translation import TranslationFailed, translate
from kint.uploads import save_upload
from kint.views import request_payload

logger = logging.getLogger(__name__)

bp = Blueprint('api', __name__, url_prefix='/api')

SLUG_MODELS = {
    'blog': BlogPost,
    'product': Product,
    'category': Category,
    'page': Page,
    'document': Document,
}


def _record_id(payload=None):
    raw = request.args.get('id')
    if raw is None and payload is not None:
        raw = payload.get('id')
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ContentError('A numeric id is required.') from None


@bp.route('/awards', methods=['GET'])
def awards_list():
    return json_success(None, data=gallery.get_awards())


@bp.route('/awards', methods=['POST'])
@login_required
def awards_create():
    award = gallery.create_award(request_payload())
    return json_success('Award created successfully.', status=201, data=AwardSchema().dump(award))


@bp.route('/awards', methods=['PUT'])
@bp.route('/awards/<int:award_id>', methods=['PUT'])
@login_required
def awards_update(award_id=None):
    payload = request_payload()
    award = gallery.update_award(award_id or _record_id(payload), payload)
    return json_success('Award updated successfully.', data=AwardSchema().dump(award))


@bp.route('/awards', methods=['DELETE'])
@bp.route('/awards/<int:award_id>', methods=['DELETE'])
@login_required
def awards_delete(award_id=None):
    gallery.delete_award(award_id or _record_id())
    return json_success('Award deleted successfully.')


#################################################


@bp.route('/certificates', methods=['GET'])
def certificates_list():
    return json_success(None, data=gallery.get_certificates())


@bp.route('/certificates/count', methods=['GET'])
def certificates_count():
    return json_success(
        None,
        count=gallery.count_active_certificates(),
        limit=gallery.MAX_ACTIVE_CERTIFICATES,
    )


@bp.route('/certificates', methods=['POST'])
@login_required
def certificates_create():
    certificate = gallery.create_certificate(request_payload())
    return json_success(
        'Certificate created successfully.', status=201, data=CertificateSchema().dump(certificate),
    )


@bp.route('/certificates', methods=['PUT'])
@bp.route('/certificates/<int:certificate_id>', methods=['PUT'])
@login_required
def certificates_update(certificate_id=None):
    payload = request_payload()
    certificate = gallery.update_certificate(certificate_id or _record_id(payload), payload)
    return json_success('Certificate updated successfully.', data=CertificateSchema().dump(certificate))


@bp.route('/certificates', methods=['DELETE'])
@bp.route('/certificates/<int:certificate_id>', methods=['DELETE'])
@login_required
def certificates_delete(certificate_id=None):
    gallery.delete_certificate(certificate_id or _record_id())
    return json_success('Certificate deleted successfully.')


#################################################


@bp.route('/headquarter', methods=['GET'])
def headquarter_get():
    return json_success(None, data=company.get_headquarter() or {})


@bp.route('/headquarter', methods=['POST'])
@login_required
def headquarter_save():
    headquarter = company.save_headquarter(request_payload())
    return json_success('Headquarter saved successfully.', data=HeadquarterSchema().dump(headquarter))


@bp.route('/document/download', methods=['GET'])
def document_download():
    document = documents.get_document_for_download(_record_id())
    file_path = document.file_path
    documents.record_download(document.id)
    return redirect(file_path)


@bp.route('/document/download', methods=['POST'])
def document_download_count():
    document_id = _record_id(request_payload())
    documents.record_download(document_id)
    return json_success('Download recorded.')


@bp.route('/slug/check', methods=['GET'])
@login_required
def slug_check():
    slug = (request.args.get('slug') or '').strip()
    model = SLUG_MODELS.get(request.args.get('type', ''))
    if not slug or model is None:
        return json_error('Both slug and a valid type are required.', status=400)
    try:
        exclude_id = int(request.args['exclude_id'])
    except (KeyError, ValueError):
        exclude_id = None
    return json_success(None, exists=slug_exists(model, slug, exclude_id=exclude_id))


@bp.route('/upload', methods=['POST'])
@login_required
def upload():
    url = save_upload(request.files.get('file'), request.form.get('folder') or 'uploads')
    return json_success('File uploaded successfully.', url=url)


#################################################


@bp.route('/job-offers', methods=['GET'])
def job_offers():
    return json_success(None, data=careers.get_job_offers())


@bp.route('/job-applications', methods=['POST'])
def job_application_create():
    application = careers.create_job_application(request_payload(), request.files.get('cv_file'))
    return json_success(
        'Application submitted successfully.', status=201, data=JobApplicationSchema().dump(application),
    )


@bp.route('/job-applications', methods=['GET'])
@login_required
def job_application_list():
    return json_success(None, data=careers.get_job_applications())


@bp.route('/translate', methods=['POST'])
@login_required
def translate_text():
    data = load(TranslateInput, request.get_json(silent=True) or {})
    try:
        if isinstance(data['q'], list):
            translated = [translate(str(item), data['source'], data['target']) for item in data['q']]
        else:
            translated = translate(str(data['q']), data['source'], data['target'])
    except TranslationFailed as exc:
        logger.warning("Translation request failed: %s", exc)
        return json_error('Translation failed.', status=500)
    return json_success(None, translated_text=translated)


#################################################


@bp.route('/products', methods=['GET'])
def product_list():
    return json_success(None, data=products.get_products())


@bp.route('/categories', methods=['GET'])
def category_tree():
    return json_success(None, data=categories.get_product_categories())


@bp.route('/blog', methods=['GET'])
def blog_list():
    return json_success(None, data=blog.get_published_posts())


@bp.route('/pages/<slug>', methods=['GET'])
def page_by_slug(slug):
    page = pages.get_page_by_slug(slug)
    if page is None or not page['is_active']:
        return json_error('Page not found.', status=404)
    return json_success(None, data=page)
