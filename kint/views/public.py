import logging

from flask import Blueprint, abort, flash, redirect, render_template, request, send_file, url_for
from marshmallow import ValidationError

from kint.cache import cache_page
from kint.content import blog, careers, catalogs, categories, company, gallery, inquiries, pages, products
from kint.i18n import current_language, get_translation
from kint.responses import json_success, wants_json
from kint.uploads import resolve_upload
from kint.views import request_payload

logger = logging.getLogger(__name__)

bp = Blueprint('public', __name__)

UPLOAD_MAX_AGE = 60 * 60 * 24 * 365


def _t(key):
    return get_translation(key, current_language())


@bp.route('/')
@bp.route('/home')
@bp.route('/en/')
@bp.route('/ar/')
@cache_page(tags=('products', 'categories', 'blog-posts'))
def home():
    return render_template(
        'home.html',
        featured=products.get_featured_products(),
        categories=categories.get_product_categories(),
        posts=blog.get_published_posts()[:3],
    )


@bp.route('/products/')
@cache_page(tags=('products', 'categories'))
def products_page():
    return render_template(
        'products.html',
        categories=categories.get_product_categories(),
        products=products.get_products(),
    )


@bp.route('/product-category/<slug>/')
@cache_page(tags=('products', 'categories'))
def product_category(slug):
    category = categories.get_category_by_slug(slug)
    if category is None:
        abort(404)
    subcategories = [child for child in category['children'] if child['is_active']]
    return render_template('product_category.html', category=category, subcategories=subcategories)


@bp.route('/product/<slug>/')
@cache_page(tags=('products', 'product-sections', 'categories'))
def product_detail(slug):
    product = products.get_product_by_slug(slug)
    if product is None:
        abort(404)
    return render_template('product.html', product=product)


@bp.route('/search/')
def search():
    term = (request.args.get('q') or '').strip()
    found_products, found_posts = [], []
    if term:
        found_products = products.search_products(term)
        found_posts = blog.search_posts(term)
    return render_template('search.html', term=term, products=found_products, posts=found_posts)


@bp.route('/blog/')
@cache_page(tags=('blog-posts',))
def blog_index():
    return render_template('blog.html', posts=blog.get_published_posts())


@bp.route('/blog/<slug>/')
@cache_page(tags=('blog-posts',))
def blog_detail(slug):
    post = blog.get_blog_post_by_slug(slug)
    if post is None or not post['is_published']:
        abort(404)
    return render_template('blog_post.html', post=post)


@bp.route('/page/<slug>/')
@cache_page(tags=('pages',))
def page_detail(slug):
    page = pages.get_page_by_slug(slug)
    if page is None or not page['is_active']:
        abort(404)
    return render_template('page.html', page=page)


@bp.route('/about/certificates/')
@cache_page(tags=('certificates',))
def certificates_page():
    return render_template('certificates.html', certificates=gallery.get_certificates())


@bp.route('/about/awards/')
@cache_page(tags=('awards',))
def awards_page():
    return render_template('awards.html', awards=gallery.get_active_awards())


@bp.route('/about/company-data/')
@cache_page(tags=('company-data',))
def company_data_page():
    return render_template('company_data.html', company=company.get_company_data())


@bp.route('/about/career/')
@cache_page(tags=('job-offers',))
def career_page():
    return render_template('career.html', offers=careers.get_job_offers())


@bp.route('/about/career/<int:offer_id>/apply/', methods=['POST'])
def career_apply(offer_id):
    payload = request_payload()
    payload['job_offer_id'] = offer_id
    application = careers.create_job_application(payload, request.files.get('cv_file'))
    if wants_json():
        return json_success(_t('career.success'), status=201, id=application.id)
    flash(_t('career.success'), 'success')
    return redirect(url_for('public.career_page'))


@bp.route('/catalogs/')
@cache_page(tags=('catalogs',))
def catalogs_page():
    return render_template('catalogs.html', catalogs=catalogs.get_catalogs(is_active=True))


@bp.route('/contact/', methods=['GET', 'POST'])
def contact():
    if request.method == 'GET':
        return render_template('contact.html', form_data={})

    payload = request_payload()
    try:
        submission = inquiries.submit_inquiry(payload)
    except ValidationError as exc:
        if wants_json():
            raise
        logger.info("Rejected contact submission: %s", exc.messages)
        flash(_t('contact.error'), 'danger')
        return render_template('contact.html', form_data=payload, errors=exc.messages), 400

    if wants_json():
        return json_success(_t('contact.success'), id=submission.id)
    flash(_t('contact.success'), 'success')
    return redirect(url_for('public.contact'))


@bp.route('/contact/headquarter/')
@cache_page(tags=('headquarter',))
def headquarter_page():
    return render_template('headquarter.html', headquarter=company.get_headquarter() or {})


@bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    response = send_file(resolve_upload(filename), max_age=UPLOAD_MAX_AGE)
    response.headers['Cache-Control'] = 'public, max-age=%d, immutable' % UPLOAD_MAX_AGE
    return response
