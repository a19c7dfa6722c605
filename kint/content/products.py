import logging

from marshmallow import missing
from sqlalchemy import or_

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.errors import ConflictError, NotFoundError
from kint.models import Category, Product, ProductDownload, ProductSection
from kint.schemas import ProductInput, ProductSchema, ProductSectionInput, ProductSectionSchema
from kint.slugs import slug_exists, slugify, unique_slug

logger = logging.getLogger(__name__)

TAGS = ('products',)
SECTION_TAGS = ('product-sections',)
READ_TAGS = TAGS + SECTION_TAGS + ('categories',)
PATHS = ('/admin/products', '/products', '/')

LIST_FIELDS = (
    'id', 'name', 'name_ar', 'slug', 'sku', 'short_desc', 'short_desc_ar', 'image',
    'is_featured', 'is_organic', 'order', 'color_theme', 'category_id', 'category',
    'created_at', 'updated_at',
)


def _revalidate(*slugs):
    revalidate(tags=READ_TAGS, paths=PATHS + tuple('/product/%s' % s for s in slugs))


@cached('products:list', tags=READ_TAGS, ttl=10)
def get_products():
    rows = db.session.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
    return ProductSchema(many=True, only=LIST_FIELDS).dump(rows)


@cached('products:featured', tags=READ_TAGS, ttl=60)
def get_featured_products(limit=8):
    rows = (
        db.session.query(Product)
        .filter(Product.is_featured.is_(True))
        .order_by(Product.order.asc(), Product.id.desc())
        .limit(limit)
        .all()
    )
    return ProductSchema(many=True, only=LIST_FIELDS).dump(rows)


@cached('products:by-slug', tags=READ_TAGS, ttl=10)
def get_product_by_slug(slug):
    product = db.session.query(Product).filter(Product.slug == slug).first()
    return ProductSchema().dump(product) if product else None


@cached('products:by-id', tags=READ_TAGS, ttl=10)
def get_product_by_id(product_id):
    product = db.session.get(Product, product_id)
    return ProductSchema().dump(product) if product else None


def search_products(term, limit=20):
    pattern = '%%%s%%' % term
    rows = (
        db.session.query(Product)
        .filter(or_(
            Product.name.ilike(pattern),
            Product.name_ar.ilike(pattern),
            Product.sku.ilike(pattern),
            Product.short_desc.ilike(pattern),
        ))
        .order_by(Product.name.asc())
        .limit(limit)
        .all()
    )
    return ProductSchema(many=True, only=LIST_FIELDS).dump(rows)


def _check_category(category_id):
    if db.session.get(Category, category_id) is None:
        raise NotFoundError('Category not found.')


def _replace_downloads(product, downloads):
    product.downloads = [ProductDownload(**item) for item in downloads]


def create_product(payload):
    data = load(ProductInput, payload)
    _check_category(data['category_id'])

    if data.get('slug'):
        if slug_exists(Product, data['slug']):
            raise ConflictError('Slug is already in use.', field='slug')
    else:
        data['slug'] = unique_slug(Product, slugify(data['name']))

    downloads = data.pop('downloads', None) or []
    product = assign(Product(), data)
    _replace_downloads(product, downloads)
    db.session.add(product)
    commit()
    logger.info("Created product %s (%s)", product.id, product.slug)
    _revalidate(product.slug)
    return product


def update_product(product_id, payload):
    product = get_or_404(Product, product_id, 'Product')
    data = load(ProductInput, payload, partial=True)
    if 'category_id' in data:
        _check_category(data['category_id'])
    if data.get('slug') and slug_exists(Product, data['slug'], exclude_id=product.id):
        raise ConflictError('Slug is already in use.', field='slug')

    old_slug = product.slug
    downloads = data.pop('downloads', missing)
    assign(product, data)
    if downloads is not missing:
        _replace_downloads(product, downloads or [])
    commit()
    _revalidate(old_slug, product.slug)
    return product


def delete_product(product_id):
    product = get_or_404(Product, product_id, 'Product')
    slug = product.slug
    db.session.delete(product)
    commit()
    logger.info("Deleted product %s (%s)", product_id, slug)
    _revalidate(slug)


#################################################


def get_product_sections(product_id):
    rows = (
        db.session.query(ProductSection)
        .filter(ProductSection.product_id == product_id)
        .order_by(ProductSection.order.asc())
        .all()
    )
    return ProductSectionSchema(many=True).dump(rows)


def _revalidate_sections(product):
    revalidate(tags=SECTION_TAGS, paths=('/product/%s' % product.slug,))


def create_product_section(product_id, payload):
    product = get_or_404(Product, product_id, 'Product')
    data = load(ProductSectionInput, payload)
    section = assign(ProductSection(product_id=product.id), data)
    db.session.add(section)
    commit()
    _revalidate_sections(product)
    return section


def update_product_section(section_id, payload):
    section = get_or_404(ProductSection, section_id, 'Product section')
    data = load(ProductSectionInput, payload, partial=True)
    assign(section, data)
    commit()
    _revalidate_sections(section.product)
    return section


def delete_product_section(section_id):
    section = get_or_404(ProductSection, section_id, 'Product section')
    product = section.product
    db.session.delete(section)
    commit()
    _revalidate_sections(product)
