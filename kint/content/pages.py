from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.errors import ConflictError
from kint.models import Page
from kint.schemas import PageInput, PageSchema
from kint.slugs import slug_exists, slugify, unique_slug

TAGS = ('pages',)


def _revalidate(*slugs):
    paths = ('/admin/pages',) + tuple('/page/%s' % s for s in slugs)
    revalidate(tags=TAGS, paths=paths)


@cached('pages:list', tags=TAGS, ttl=10)
def get_pages():
    rows = db.session.query(Page).order_by(Page.updated_at.desc(), Page.id.desc()).all()
    return PageSchema(many=True).dump(rows)


@cached('pages:by-slug', tags=TAGS, ttl=10)
def get_page_by_slug(slug):
    page = db.session.query(Page).filter(Page.slug == slug).first()
    return PageSchema().dump(page) if page else None


@cached('pages:by-id', tags=TAGS, ttl=10)
def get_page_by_id(page_id):
    page = db.session.get(Page, page_id)
    return PageSchema().dump(page) if page else None


def create_page(payload):
    data = load(PageInput, payload)
    if data.get('slug'):
        if slug_exists(Page, data['slug']):
            raise ConflictError('Slug is already in use.', field='slug')
    else:
        data['slug'] = unique_slug(Page, slugify(data['title']))

    page = assign(Page(), data)
    db.session.add(page)
    commit()
    _revalidate(page.slug)
    return page


def update_page(page_id, payload):
    page = get_or_404(Page, page_id, 'Page')
    data = load(PageInput, payload, partial=True)
    if data.get('slug') and slug_exists(Page, data['slug'], exclude_id=page.id):
        raise ConflictError('Slug is already in use.', field='slug')

    old_slug = page.slug
    assign(page, data)
    commit()
    _revalidate(old_slug, page.slug)
    return page


def delete_page(page_id):
    page = get_or_404(Page, page_id, 'Page')
    slug = page.slug
    db.session.delete(page)
    commit()
    _revalidate(slug)
