import logging

from sqlalchemy.orm import selectinload

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.errors import ConflictError, NotFoundError
from kint.models import Category, Product
from kint.schemas import CategoryInput, CategoryLinkSchema, CategorySchema, ProductSchema
from kint.slugs import slug_exists, slugify, unique_slug
from kint.translation import translate_text

logger = logging.getLogger(__name__)

TAGS = ('categories',)
PATHS = ('/admin/categories', '/products')


def _revalidate(*extra_paths):
    revalidate(tags=TAGS, paths=PATHS + extra_paths)


@cached('product-categories-header', tags=TAGS, ttl=300)
def get_product_categories():
    """Active top level categories with their active children, for navigation."""
    rows = (
        db.session.query(Category)
        .options(selectinload(Category.children))
        .filter(Category.is_active.is_(True), Category.parent_id.is_(None))
        .order_by(Category.order.asc(), Category.name.asc())
        .all()
    )
    link_schema = CategoryLinkSchema()
    tree = []
    for row in rows:
        item = link_schema.dump(row)
        item['description'] = row.description
        item['description_ar'] = row.description_ar
        item['children'] = link_schema.dump(
            sorted(
                (child for child in row.children if child.is_active),
                key=lambda child: (child.order, child.name),
            ),
            many=True,
        )
        tree.append(item)
    return tree


@cached('categories:list', tags=TAGS, ttl=10)
def get_categories():
    rows = db.session.query(Category).order_by(Category.order.asc(), Category.name.asc()).all()
    return CategorySchema(many=True).dump(rows)


@cached('categories:by-slug', tags=TAGS + ('products',), ttl=60)
def get_category_by_slug(slug):
    category = (
        db.session.query(Category)
        .filter(Category.slug == slug, Category.is_active.is_(True))
        .first()
    )
    if category is None:
        return None
    data = CategorySchema().dump(category)
    products = (
        db.session.query(Product)
        .filter(Product.category_id == category.id)
        .order_by(Product.order.asc(), Product.name.asc())
        .all()
    )
    data['products'] = ProductSchema(many=True, only=(
        'id', 'name', 'name_ar', 'slug', 'short_desc', 'short_desc_ar', 'image', 'color_theme',
    )).dump(products)
    return data


def _check_parent(parent_id, category_id=None):
    if parent_id is None:
        return
    if category_id is not None and parent_id == category_id:
        raise ConflictError('A category cannot be its own parent.')
    parent = db.session.get(Category, parent_id)
    if parent is None:
        raise NotFoundError('Parent category not found.')
    while category_id is not None and parent is not None:
        if parent.id == category_id:
            raise ConflictError('A category cannot be moved below its own subcategory.')
        parent = parent.parent


def _fill_missing_name(data):
    # Arabic name is mandatory; the default-language one can be machine translated.
    if not data.get('name') and data.get('name_ar'):
        data['name'] = translate_text(data['name_ar'], source='ar', target='en') or data['name_ar']


def create_category(payload):
    data = load(CategoryInput, payload)
    _fill_missing_name(data)
    _check_parent(data.get('parent_id'))

    if data.get('slug'):
        if slug_exists(Category, data['slug']):
            raise ConflictError('Slug is already in use.', field='slug')
    else:
        data['slug'] = unique_slug(Category, slugify(data['name']))

    category = assign(Category(), data)
    db.session.add(category)
    commit()
    logger.info("Created category %s (%s)", category.id, category.slug)
    _revalidate()
    return category


def update_category(category_id, payload):
    category = get_or_404(Category, category_id, 'Category')
    data = load(CategoryInput, payload, partial=True)
    if 'name' in data and not data['name']:
        data['name_ar'] = data.get('name_ar') or category.name_ar
        _fill_missing_name(data)
    if 'parent_id' in data:
        _check_parent(data['parent_id'], category.id)
    if data.get('slug') and slug_exists(Category, data['slug'], exclude_id=category.id):
        raise ConflictError('Slug is already in use.', field='slug')

    old_slug = category.slug
    assign(category, data)
    commit()
    _revalidate('/product-category/%s' % old_slug, '/product-category/%s' % category.slug)
    return category


def delete_category(category_id):
    """Delete a category that has no subcategories and no products."""
    category = get_or_404(Category, category_id, 'Category')
    if category.children:
        raise ConflictError('Category has subcategories; move or delete them first.')
    if category.products:
        raise ConflictError('Category still has products; move or delete them first.')

    slug = category.slug
    db.session.delete(category)
    commit()
    logger.info("Deleted category %s (%s)", category_id, slug)
    _revalidate('/product-category/%s' % slug)
