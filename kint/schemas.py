"""Marshmallow schemas.

``*Input`` schemas decode a submitted form or JSON body once per request:
strings are stripped, blank / ``"undefined"`` values count as absent (a
blank clears the field on update), integers fall back to their default,
booleans accept the usual form spellings and JSON blobs may arrive either as
text or already decoded.

``*Schema`` classes (marshmallow-sqlalchemy auto schemas) dump rows into the
plain dicts that the cached accessors, templates and JSON API share.
"""

import json
from collections.abc import Mapping
from datetime import datetime, timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, missing, pre_load, validate

from kint import ma
from kint.models import (
    Admin,
    Award,
    BlogPost,
    Catalog,
    Category,
    Certificate,
    CompanyData,
    ContactSubmission,
    Document,
    Headquarter,
    JobApplication,
    JobOffer,
    Page,
    Product,
    ProductDownload,
    ProductSection,
)

APPLICATION_STATUSES = ('pending', 'reviewed', 'shortlisted', 'rejected', 'hired')
BLANK_VALUES = ('', 'undefined', 'null')


class LenientInteger(fields.Integer):
    """Integer that falls back to its default instead of rejecting junk."""

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return super()._deserialize(value, attr, data, **kwargs)
        except ValidationError:
            return 0 if self.load_default is missing else self.load_default


class JSONBlob(fields.Field):
    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, (dict, list)):
            return value
        try:
            return json.loads(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError('Invalid JSON payload.') from exc


class TagList(fields.Field):
    """Comma separated text or a list, normalised to a list of strings."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            value = value.split(',')
        if not isinstance(value, (list, tuple)):
            raise ValidationError('Tags must be a list or comma separated text.')
        return [str(tag).strip() for tag in value if str(tag).strip()]


class LooseDateTime(fields.Field):
    """ISO dates or datetimes, stored as naive UTC."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
            except ValueError as exc:
                raise ValidationError('Not a valid date.') from exc
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed


class InputSchema(Schema):
    """Base for submitted forms and JSON bodies.

    On create a blank string counts as absent. On a partial (update) load a
    blank string clears the field instead: it becomes the field's default,
    or ``None``. Fields named in ``keep_when_blank`` keep their stored value.
    The ``"undefined"`` / ``"null"`` sentinels always count as absent.
    """

    keep_when_blank = ('slug',)

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def clean_blank_values(self, data, partial=False, **kwargs):
        if not isinstance(data, Mapping):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if value in BLANK_VALUES:
                    if value or not partial or key in self.keep_when_blank:
                        continue
                    value = self._cleared_value(key)
            cleaned[key] = value
        return cleaned

    def _cleared_value(self, key):
        field = self.fields.get(key)
        default = missing if field is None else field.load_default
        if default is missing:
            return None
        return default() if callable(default) else default


def validate_local_path(value):
    if not value.startswith('/') or '://' in value:
        raise ValidationError('File path must be a local absolute path.')


def _text(required=False, **kwargs):
    kwargs.setdefault('allow_none', not required)
    return fields.String(required=required, **kwargs)


class CategoryInput(InputSchema):
    name = _text()
    name_ar = _text(required=True)
    slug = _text(validate=validate.Length(max=200))
    description = _text()
    description_ar = _text()
    image = _text()
    parent_id = fields.Integer(allow_none=True)
    order = LenientInteger(load_default=0)
    is_active = fields.Boolean(load_default=True)


class DownloadInput(InputSchema):
    title = _text(required=True)
    type = _text(load_default='pdf')
    file_url = _text(required=True)


class ProductInput(InputSchema):
    name = _text(required=True)
    name_ar = _text()
    slug = _text(validate=validate.Length(max=200))
    sku = _text()
    description = _text()
    description_ar = _text()
    short_desc = _text()
    short_desc_ar = _text()
    category_id = fields.Integer(required=True)
    is_featured = fields.Boolean(load_default=False)
    is_organic = fields.Boolean(load_default=False)
    order = LenientInteger(load_default=0)
    color_theme = _text(load_default='blue')
    image = _text()
    benefits = _text()
    benefits_ar = _text()
    usage = _text()
    usage_ar = _text()
    usage_table = JSONBlob(allow_none=True)
    usage_table_ar = JSONBlob(allow_none=True)
    comp_table = JSONBlob(allow_none=True)
    comp_table_ar = JSONBlob(allow_none=True)
    tabs = JSONBlob(allow_none=True)
    tabs_ar = JSONBlob(allow_none=True)
    meta_title = _text()
    meta_title_ar = _text()
    meta_desc = _text()
    meta_desc_ar = _text()
    downloads = fields.Method(deserialize='load_downloads', allow_none=True)

    def load_downloads(self, value):
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as exc:
                raise ValidationError('Invalid downloads payload.') from exc
        return DownloadInput(many=True).load(value or [])


class ProductSectionInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    content = _text()
    content_ar = _text()
    order = LenientInteger(load_default=0)
    color_theme = _text(load_default='blue')


class BlogPostInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    slug = _text(validate=validate.Length(max=250))
    excerpt = _text()
    excerpt_ar = _text()
    content = _text()
    content_ar = _text()
    author = _text()
    image = _text()
    tags = TagList(load_default=list)
    meta_title = _text()
    meta_desc = _text()
    is_published = fields.Boolean(load_default=False)


class PageInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    slug = _text(validate=validate.Length(max=250))
    content = _text()
    content_ar = _text()
    template = _text(load_default='default')
    is_active = fields.Boolean(load_default=True)


class JobOfferInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    location = _text()
    location_ar = _text()
    work_type = _text()
    work_type_ar = _text()
    contract_type = _text()
    contract_type_ar = _text()
    employment_type = _text()
    employment_type_ar = _text()
    company_intro = _text()
    company_intro_ar = _text()
    responsibilities = _text()
    responsibilities_ar = _text()
    benefits = _text()
    benefits_ar = _text()
    qualifications = _text()
    qualifications_ar = _text()
    is_active = fields.Boolean(load_default=True)
    expires_at = LooseDateTime(allow_none=True)


class JobApplicationInput(InputSchema):
    job_offer_id = fields.Integer(required=True)
    first_name = _text(required=True)
    last_name = _text(required=True)
    email = fields.Email(required=True)
    phone = _text()
    address = _text()
    linked_in = _text()
    cover_letter = _text()


class ApplicationStatusInput(InputSchema):
    status = _text(required=True, validate=validate.OneOf(APPLICATION_STATUSES))
    notes = _text()


class ContactInput(InputSchema):
    name = _text(required=True)
    email = fields.Email(required=True)
    phone = _text()
    department = _text()
    subject = _text()
    message = _text(required=True)


class GalleryItemInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    description = _text()
    description_ar = _text()
    image_url = _text(required=True)
    order = LenientInteger(load_default=0)
    is_active = fields.Boolean(load_default=True)


class CatalogInput(InputSchema):
    title = _text(required=True)
    title_ar = _text()
    description = _text()
    description_ar = _text()
    file_url = _text(required=True)
    category = _text()
    locale = _text(validate=validate.OneOf(('en', 'ar')))
    order = LenientInteger(load_default=0)
    is_active = fields.Boolean(load_default=True)


class DocumentInput(InputSchema):
    keep_when_blank = ('slug', 'file_path')

    title = _text(required=True)
    title_ar = _text()
    slug = _text(validate=validate.Length(max=250))
    file_path = _text(validate=validate_local_path)
    description = _text()
    description_ar = _text()
    category = _text(required=True)
    is_active = fields.Boolean(load_default=True)


class CompanyDataInput(InputSchema):
    company_name = _text(required=True)
    company_name_ar = _text()
    address = _text()
    address_ar = _text()
    court_info = _text()
    court_info_ar = _text()
    ncr_number = _text()
    vat_number = _text()
    capital = _text()
    capital_ar = _text()


class HeadquarterInput(InputSchema):
    title = _text(load_default='Company Headquarter')
    title_ar = _text()
    content = _text()
    content_ar = _text()
    address = _text()
    address_ar = _text()
    latitude = fields.Float(allow_none=True, allow_nan=False)
    longitude = fields.Float(allow_none=True, allow_nan=False)


class TranslateInput(InputSchema):
    q = fields.Raw(required=True)
    source = _text(load_default='ar')
    target = _text(load_default='en')


#################################################


class AdminSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Admin
        load_instance = False
        fields = ('id', 'email', 'name', 'role', 'is_active', 'created_at')


class CategoryLinkSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Category
        load_instance = False
        fields = ('id', 'name', 'name_ar', 'slug', 'image', 'order', 'is_active')


class CategorySchema(ma.SQLAlchemyAutoSchema):
    parent = fields.Nested(CategoryLinkSchema, allow_none=True)
    children = fields.Nested(CategoryLinkSchema, many=True)
    product_count = fields.Method('count_products')

    class Meta:
        model = Category
        load_instance = False
        include_fk = True

    def count_products(self, category):
        return len(category.products)


class ProductSectionSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = ProductSection
        load_instance = False
        include_fk = True


class ProductDownloadSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = ProductDownload
        load_instance = False
        fields = ('id', 'title', 'type', 'file_url')


class ProductSchema(ma.SQLAlchemyAutoSchema):
    category = fields.Nested(CategoryLinkSchema, allow_none=True)
    sections = fields.Nested(ProductSectionSchema, many=True)
    downloads = fields.Nested(ProductDownloadSchema, many=True)

    class Meta:
        model = Product
        load_instance = False
        include_fk = True


class BlogPostSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = BlogPost
        load_instance = False


class PageSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Page
        load_instance = False


class JobOfferSchema(ma.SQLAlchemyAutoSchema):
    application_count = fields.Method('count_applications')

    class Meta:
        model = JobOffer
        load_instance = False

    def count_applications(self, offer):
        return len(offer.applications)


class JobOfferLinkSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = JobOffer
        load_instance = False
        fields = ('id', 'title', 'title_ar', 'location')


class JobApplicationSchema(ma.SQLAlchemyAutoSchema):
    job_offer = fields.Nested(JobOfferLinkSchema)

    class Meta:
        model = JobApplication
        load_instance = False
        include_fk = True


class ContactSubmissionSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = ContactSubmission
        load_instance = False


class CertificateSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Certificate
        load_instance = False


class AwardSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Award
        load_instance = False


class CatalogSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Catalog
        load_instance = False


class DocumentSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Document
        load_instance = False


class CompanyDataSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = CompanyData
        load_instance = False


class HeadquarterSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Headquarter
        load_instance = False
