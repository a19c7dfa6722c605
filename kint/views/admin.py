"""Admin panel: dashboard plus list / add / edit / delete for each content type.

JSON callers (the dashboard scripts) get ``{"success": ..., "message": ...}``
responses; plain form posts are answered with a flash message and a redirect
back to the listing.
"""

import logging

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from kint import db
from kint.errors import ContentError
from kint.content import (
    blog,
    careers,
    catalogs,
    categories,
    company,
    documents,
    gallery,
    inquiries,
    pages,
    products,
)
from kint.models import (
    Award,
    BlogPost,
    Catalog,
    Category,
    Certificate,
    ContactSubmission,
    Document,
    JobApplication,
    JobOffer,
    Page,
    Product,
)
from kint.responses import json_success, wants_json
from kint.schemas import APPLICATION_STATUSES, CategorySchema
from kint.uploads import delete_upload, save_upload
from kint.views import request_payload

logger = logging.getLogger(__name__)

bp = Blueprint('admin', __name__, url_prefix='/admin')

DASHBOARD_ENDPOINT = 'admin.dashboard'


@bp.before_request
@login_required
def _require_admin():
    pass


def _get_admin_pagination(default_show=10):
    """Return validated ``page`` and ``show`` query parameters.

    Non-numeric or out-of-range input falls back to page ``1`` and
    *default_show* rows.
    """
    try:
        page = max(int(request.args.get('page', 1)), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        show = max(int(request.args.get('show', default_show)), 1)
    except (TypeError, ValueError):
        show = default_show
    return page, show


def _paginate(items, default_show=10):
    page, show = _get_admin_pagination(default_show)
    total_pages = max((len(items) + show - 1) // show, 1)
    page = min(page, total_pages)
    start = (page - 1) * show
    return {
        'items': items[start:start + show],
        'page': page,
        'show': show,
        'total': len(items),
        'total_pages': total_pages,
    }


def _done(message, endpoint, status=200, **extra):
    if wants_json():
        return json_success(message, status=status, **extra)
    flash(message, 'success')
    return redirect(url_for(endpoint))


def _category_choices():
    return [(c['id'], c['name']) for c in categories.get_categories()]


def _dump_category(item_id):
    category = db.session.get(Category, item_id)
    return CategorySchema().dump(category) if category else None


class Resource:
    """One admin-managed content type and the handlers behind its routes."""

    def __init__(self, name, label, model, list_items, create, update, delete,
                 fields, columns, fetch=None, uploads=None):
        self.name = name
        self.label = label
        self.model = model
        self.list_items = list_items
        self.create = create
        self.update = update
        self.delete = delete
        self.fields = fields
        self.columns = columns
        self.fetch = fetch
        self.uploads = uploads or {}

    @property
    def checkboxes(self):
        return [name for name, kind, *_ in self.fields if kind == 'checkbox']

    def payload(self):
        data = request_payload()
        if not request.is_json:
            for name in self.checkboxes:
                data[name] = name in request.form
        return data

    def submit(self, handler, *args):
        """Run *handler* on the submission, storing its files first.

        Files stored for a submission that is then rejected are removed again.
        """
        data = self.payload()
        stored = []
        try:
            for field, folder in self.uploads.items():
                upload = request.files.get(field)
                if upload is not None and upload.filename:
                    data[field] = save_upload(upload, folder)
                    stored.append(data[field])
            return handler(*args, data)
        except (ValidationError, ContentError, SQLAlchemyError):
            for url in stored:
                delete_upload(url)
            raise

    def record(self, item_id):
        if self.fetch is not None:
            item = self.fetch(item_id)
        else:
            item = db.session.get(self.model, item_id)
        if item is None:
            abort(404)
        return item

    def list_view(self):
        return render_template(
            'admin/list.html',
            resource=self,
            pagination=_paginate(self.list_items()),
        )

    def add_view(self):
        if request.method == 'GET':
            return render_template('admin/form.html', resource=self, item={})
        item = self.submit(self.create)
        logger.info("%s added %s %s", current_user.email, self.name, item.id)
        return _done('%s created successfully.' % self.label, self.endpoint('list'), status=201, id=item.id)

    def edit_view(self, item_id):
        if request.method == 'GET':
            return render_template('admin/form.html', resource=self, item=self.record(item_id))
        self.submit(self.update, item_id)
        return _done('%s updated successfully.' % self.label, self.endpoint('list'))

    def delete_view(self, item_id):
        self.delete(item_id)
        logger.info("%s deleted %s %s", current_user.email, self.name, item_id)
        return _done('%s deleted successfully.' % self.label, self.endpoint('list'))

    def endpoint(self, action):
        return 'admin.%s_%s' % (self.name, action)

    def register(self, blueprint):
        base = '/%s' % self.name
        blueprint.add_url_rule(base + '/', '%s_list' % self.name, self.list_view)
        blueprint.add_url_rule(base + '/add/', '%s_add' % self.name, self.add_view, methods=['GET', 'POST'])
        blueprint.add_url_rule(
            base + '/edit/<int:item_id>/', '%s_edit' % self.name, self.edit_view, methods=['GET', 'POST'],
        )
        blueprint.add_url_rule(
            base + '/del/<int:item_id>/', '%s_del' % self.name, self.delete_view, methods=['POST', 'DELETE'],
        )


GALLERY_FIELDS = [
    ('title', 'text'), ('title_ar', 'text'),
    ('description', 'textarea'), ('description_ar', 'textarea'),
    ('image_url', 'file'), ('order', 'number'), ('is_active', 'checkbox'),
]
GALLERY_COLUMNS = [('title', 'Title'), ('order', 'Order'), ('is_active', 'Active')]

RESOURCES = [
    Resource(
        'categories', 'Category', Category,
        categories.get_categories,
        categories.create_category, categories.update_category, categories.delete_category,
        fields=[
            ('name', 'text'), ('name_ar', 'text'), ('slug', 'text'),
            ('parent_id', 'select', _category_choices),
            ('description', 'textarea'), ('description_ar', 'textarea'),
            ('image', 'file'), ('order', 'number'), ('is_active', 'checkbox'),
        ],
        columns=[('name', 'Name'), ('name_ar', 'Arabic name'), ('slug', 'Slug'),
                 ('product_count', 'Products'), ('is_active', 'Active')],
        fetch=_dump_category,
        uploads={'image': 'categories'},
    ),
    Resource(
        'products', 'Product', Product,
        products.get_products,
        products.create_product, products.update_product, products.delete_product,
        fields=[
            ('name', 'text'), ('name_ar', 'text'), ('slug', 'text'), ('sku', 'text'),
            ('category_id', 'select', _category_choices),
            ('short_desc', 'textarea'), ('short_desc_ar', 'textarea'),
            ('description', 'textarea'), ('description_ar', 'textarea'),
            ('benefits', 'textarea'), ('benefits_ar', 'textarea'),
            ('usage', 'textarea'), ('usage_ar', 'textarea'),
            ('usage_table', 'json'), ('usage_table_ar', 'json'),
            ('comp_table', 'json'), ('comp_table_ar', 'json'),
            ('tabs', 'json'), ('tabs_ar', 'json'), ('downloads', 'json'),
            ('image', 'file'), ('color_theme', 'text'), ('order', 'number'),
            ('meta_title', 'text'), ('meta_title_ar', 'text'),
            ('meta_desc', 'text'), ('meta_desc_ar', 'text'),
            ('is_featured', 'checkbox'), ('is_organic', 'checkbox'),
        ],
        columns=[('name', 'Name'), ('sku', 'SKU'), ('slug', 'Slug'), ('is_featured', 'Featured')],
        fetch=products.get_product_by_id,
        uploads={'image': 'products'},
    ),
    Resource(
        'blog', 'Blog post', BlogPost,
        blog.get_blog_posts,
        blog.create_blog_post, blog.update_blog_post, blog.delete_blog_post,
        fields=[
            ('title', 'text'), ('title_ar', 'text'), ('slug', 'text'), ('author', 'text'),
            ('excerpt', 'textarea'), ('excerpt_ar', 'textarea'),
            ('content', 'textarea'), ('content_ar', 'textarea'),
            ('tags', 'tags'), ('image', 'file'),
            ('meta_title', 'text'), ('meta_desc', 'text'), ('is_published', 'checkbox'),
        ],
        columns=[('title', 'Title'), ('slug', 'Slug'), ('is_published', 'Published'),
                 ('published_at', 'Published at')],
        fetch=blog.get_blog_post_by_id,
        uploads={'image': 'blog'},
    ),
    Resource(
        'pages', 'Page', Page,
        pages.get_pages,
        pages.create_page, pages.update_page, pages.delete_page,
        fields=[
            ('title', 'text'), ('title_ar', 'text'), ('slug', 'text'), ('template', 'text'),
            ('content', 'textarea'), ('content_ar', 'textarea'), ('is_active', 'checkbox'),
        ],
        columns=[('title', 'Title'), ('slug', 'Slug'), ('is_active', 'Active')],
        fetch=pages.get_page_by_id,
    ),
    Resource(
        'career', 'Job offer', JobOffer,
        careers.get_all_job_offers,
        careers.create_job_offer, careers.update_job_offer, careers.delete_job_offer,
        fields=[
            ('title', 'text'), ('title_ar', 'text'),
            ('location', 'text'), ('location_ar', 'text'),
            ('work_type', 'text'), ('work_type_ar', 'text'),
            ('contract_type', 'text'), ('contract_type_ar', 'text'),
            ('employment_type', 'text'), ('employment_type_ar', 'text'),
            ('company_intro', 'textarea'), ('company_intro_ar', 'textarea'),
            ('responsibilities', 'textarea'), ('responsibilities_ar', 'textarea'),
            ('benefits', 'textarea'), ('benefits_ar', 'textarea'),
            ('qualifications', 'textarea'), ('qualifications_ar', 'textarea'),
            ('expires_at', 'date'), ('is_active', 'checkbox'),
        ],
        columns=[('title', 'Title'), ('location', 'Location'), ('application_count', 'Applications'),
                 ('expires_at', 'Expires'), ('is_active', 'Active')],
        fetch=careers.get_job_offer_by_id,
    ),
    Resource(
        'catalogs', 'Catalog', Catalog,
        catalogs.get_catalogs,
        catalogs.create_catalog, catalogs.update_catalog, catalogs.delete_catalog,
        fields=[
            ('title', 'text'), ('title_ar', 'text'),
            ('description', 'textarea'), ('description_ar', 'textarea'),
            ('file_url', 'file'), ('category', 'text'),
            ('locale', 'select', lambda: [('en', 'English'), ('ar', 'العربية')]),
            ('order', 'number'), ('is_active', 'checkbox'),
        ],
        columns=[('title', 'Title'), ('category', 'Category'), ('locale', 'Locale'), ('is_active', 'Active')],
        fetch=catalogs.get_catalog_by_id,
        uploads={'file_url': 'catalogs'},
    ),
    Resource(
        'documents', 'Document', Document,
        documents.get_documents,
        lambda payload: documents.create_document(payload, request.files.get('file_path')),
        lambda item_id, payload: documents.update_document(item_id, payload, request.files.get('file_path')),
        documents.delete_document,
        fields=[
            ('title', 'text'), ('title_ar', 'text'), ('slug', 'text'), ('category', 'text'),
            ('description', 'textarea'), ('description_ar', 'textarea'),
            ('file_path', 'file'), ('is_active', 'checkbox'),
        ],
        columns=[('title', 'Title'), ('category', 'Category'), ('downloads', 'Downloads'),
                 ('is_active', 'Active')],
        fetch=documents.get_document_by_id,
    ),
    Resource(
        'certificates', 'Certificate', Certificate,
        gallery.get_all_certificates,
        gallery.create_certificate, gallery.update_certificate, gallery.delete_certificate,
        fields=GALLERY_FIELDS, columns=GALLERY_COLUMNS,
        uploads={'image_url': 'certificates'},
    ),
    Resource(
        'awards', 'Award', Award,
        gallery.get_awards,
        gallery.create_award, gallery.update_award, gallery.delete_award,
        fields=GALLERY_FIELDS, columns=GALLERY_COLUMNS,
        uploads={'image_url': 'awards'},
    ),
]


for _resource in RESOURCES:
    _resource.register(bp)


@bp.route('/')
def dashboard():
    counts = {
        'categories': db.session.query(Category).count(),
        'products': db.session.query(Product).count(),
        'blog': db.session.query(BlogPost).count(),
        'pages': db.session.query(Page).count(),
        'career': db.session.query(JobOffer).count(),
        'applications': db.session.query(JobApplication).count(),
        'inquiries': db.session.query(ContactSubmission).count(),
        'catalogs': db.session.query(Catalog).count(),
        'documents': db.session.query(Document).count(),
        'certificates': db.session.query(Certificate).count(),
        'awards': db.session.query(Award).count(),
    }
    return render_template(
        'admin/dashboard.html',
        counts=counts,
        unread_inquiries=inquiries.count_unread(),
        resources=RESOURCES,
    )


#################################################


@bp.route('/products/<int:product_id>/sections/')
def product_sections(product_id):
    product = products.get_product_by_id(product_id)
    if product is None:
        abort(404)
    return render_template(
        'admin/sections.html',
        product=product,
        sections=products.get_product_sections(product_id),
    )


def _sections_done(message, product_id, status=200, **extra):
    if wants_json():
        return json_success(message, status=status, **extra)
    flash(message, 'success')
    return redirect(url_for('admin.product_sections', product_id=product_id))


@bp.route('/products/<int:product_id>/sections/add/', methods=['POST'])
def product_section_add(product_id):
    section = products.create_product_section(product_id, request_payload())
    return _sections_done('Section created successfully.', product_id, status=201, id=section.id)


@bp.route('/products/<int:product_id>/sections/edit/<int:section_id>/', methods=['POST'])
def product_section_edit(product_id, section_id):
    products.update_product_section(section_id, request_payload())
    return _sections_done('Section updated successfully.', product_id)


@bp.route('/products/<int:product_id>/sections/del/<int:section_id>/', methods=['POST', 'DELETE'])
def product_section_del(product_id, section_id):
    products.delete_product_section(section_id)
    return _sections_done('Section deleted successfully.', product_id)


#################################################


@bp.route('/applications/')
def applications():
    return render_template(
        'admin/applications.html',
        pagination=_paginate(careers.get_job_applications()),
        statuses=APPLICATION_STATUSES,
    )


@bp.route('/applications/status/<int:application_id>/', methods=['POST'])
def application_status(application_id):
    careers.update_job_application_status(application_id, request_payload())
    return _done('Application updated successfully.', 'admin.applications')


@bp.route('/applications/del/<int:application_id>/', methods=['POST', 'DELETE'])
def application_del(application_id):
    careers.delete_job_application(application_id)
    return _done('Application deleted successfully.', 'admin.applications')


@bp.route('/inquiries/')
def inquiry_list():
    return render_template('admin/inquiries.html', pagination=_paginate(inquiries.get_inquiries()))


@bp.route('/inquiries/read/<int:inquiry_id>/', methods=['POST'])
def inquiry_read(inquiry_id):
    inquiries.mark_as_read(inquiry_id)
    return _done('Inquiry marked as read.', 'admin.inquiry_list')


@bp.route('/inquiries/del/<int:inquiry_id>/', methods=['POST', 'DELETE'])
def inquiry_del(inquiry_id):
    inquiries.delete_inquiry(inquiry_id)
    return _done('Inquiry deleted successfully.', 'admin.inquiry_list')


#################################################


COMPANY_FIELDS = [
    ('company_name', 'text'), ('company_name_ar', 'text'),
    ('address', 'textarea'), ('address_ar', 'textarea'),
    ('court_info', 'textarea'), ('court_info_ar', 'textarea'),
    ('ncr_number', 'text'), ('vat_number', 'text'),
    ('capital', 'text'), ('capital_ar', 'text'),
]

HEADQUARTER_FIELDS = [
    ('title', 'text'), ('title_ar', 'text'),
    ('content', 'textarea'), ('content_ar', 'textarea'),
    ('address', 'textarea'), ('address_ar', 'textarea'),
    ('latitude', 'number'), ('longitude', 'number'),
]


@bp.route('/company-data/', methods=['GET', 'POST'])
def company_data():
    if request.method == 'POST':
        company.update_company_data(request_payload())
        return _done('Company data saved successfully.', 'admin.company_data')
    return render_template(
        'admin/singleton.html',
        title='Company Data',
        fields=COMPANY_FIELDS,
        item=company.get_company_data(),
        action=url_for('admin.company_data'),
    )


@bp.route('/headquarter/', methods=['GET', 'POST'])
def headquarter():
    if request.method == 'POST':
        company.save_headquarter(request_payload())
        return _done('Headquarter saved successfully.', 'admin.headquarter')
    return render_template(
        'admin/singleton.html',
        title='Headquarter',
        fields=HEADQUARTER_FIELDS,
        item=company.get_headquarter() or {},
        action=url_for('admin.headquarter'),
    )
