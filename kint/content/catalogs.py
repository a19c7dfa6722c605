from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.models import Catalog
from kint.schemas import CatalogInput, CatalogSchema

TAGS = ('catalogs',)
PATHS = ('/catalogs', '/admin/catalogs')


@cached('catalogs:list', tags=TAGS, ttl=60)
def get_catalogs(category=None, locale=None, is_active=None):
    """Catalogues ordered for display, optionally filtered."""
    query = db.session.query(Catalog)
    if category:
        query = query.filter(Catalog.category == category)
    if locale:
        query = query.filter(Catalog.locale == locale)
    if is_active is not None:
        query = query.filter(Catalog.is_active.is_(is_active))
    rows = query.order_by(Catalog.order.asc(), Catalog.created_at.desc()).all()
    return CatalogSchema(many=True).dump(rows)


@cached('catalogs:by-id', tags=TAGS, ttl=60)
def get_catalog_by_id(catalog_id):
    catalog = db.session.get(Catalog, catalog_id)
    return CatalogSchema().dump(catalog) if catalog else None


def create_catalog(payload):
    catalog = assign(Catalog(), load(CatalogInput, payload))
    db.session.add(catalog)
    commit()
    revalidate(tags=TAGS, paths=PATHS)
    return catalog


def update_catalog(catalog_id, payload):
    catalog = get_or_404(Catalog, catalog_id, 'Catalog')
    assign(catalog, load(CatalogInput, payload, partial=True))
    commit()
    revalidate(tags=TAGS, paths=PATHS)
    return catalog


def delete_catalog(catalog_id):
    catalog = get_or_404(Catalog, catalog_id, 'Catalog')
    db.session.delete(catalog)
    commit()
    revalidate(tags=TAGS, paths=PATHS)
