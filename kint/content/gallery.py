"""Certificates and awards: ordered image galleries on the about pages.

At most ``MAX_ACTIVE_CERTIFICATES`` certificates may be active at once; the
limit is checked before a new certificate is stored.
"""

import logging

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.errors import LimitReachedError
from kint.models import Award, Certificate
from kint.schemas import AwardSchema, CertificateSchema, GalleryItemInput

logger = logging.getLogger(__name__)

MAX_ACTIVE_CERTIFICATES = 5

CERTIFICATE_TAGS = ('certificates',)
CERTIFICATE_PATHS = ('/about/certificates', '/admin/certificates')
AWARD_TAGS = ('awards',)
AWARD_PATHS = ('/about/awards', '/admin/awards')


def _ordered(model):
    return db.session.query(model).order_by(model.order.asc(), model.created_at.desc())


@cached('certificates:active', tags=CERTIFICATE_TAGS, ttl=60)
def get_certificates():
    rows = _ordered(Certificate).filter(Certificate.is_active.is_(True)).all()
    return CertificateSchema(many=True).dump(rows)


@cached('certificates:all', tags=CERTIFICATE_TAGS, ttl=60)
def get_all_certificates():
    return CertificateSchema(many=True).dump(_ordered(Certificate).all())


def count_active_certificates():
    return db.session.query(Certificate).filter(Certificate.is_active.is_(True)).count()


def create_certificate(payload):
    data = load(GalleryItemInput, payload)
    if data.get('is_active', True) and count_active_certificates() >= MAX_ACTIVE_CERTIFICATES:
        raise LimitReachedError(
            'Maximum of %d certificates allowed.' % MAX_ACTIVE_CERTIFICATES,
            limit=MAX_ACTIVE_CERTIFICATES,
        )
    certificate = assign(Certificate(), data)
    db.session.add(certificate)
    commit()
    logger.info("Created certificate %s", certificate.id)
    revalidate(tags=CERTIFICATE_TAGS, paths=CERTIFICATE_PATHS)
    return certificate


def update_certificate(certificate_id, payload):
    certificate = get_or_404(Certificate, certificate_id, 'Certificate')
    data = load(GalleryItemInput, payload, partial=True)
    if data.get('is_active') and not certificate.is_active \
            and count_active_certificates() >= MAX_ACTIVE_CERTIFICATES:
        raise LimitReachedError(
            'Maximum of %d certificates allowed.' % MAX_ACTIVE_CERTIFICATES,
            limit=MAX_ACTIVE_CERTIFICATES,
        )
    assign(certificate, data)
    commit()
    revalidate(tags=CERTIFICATE_TAGS, paths=CERTIFICATE_PATHS)
    return certificate


def delete_certificate(certificate_id):
    certificate = get_or_404(Certificate, certificate_id, 'Certificate')
    db.session.delete(certificate)
    commit()
    revalidate(tags=CERTIFICATE_TAGS, paths=CERTIFICATE_PATHS)


#################################################


@cached('awards:list', tags=AWARD_TAGS, ttl=60)
def get_awards():
    return AwardSchema(many=True).dump(_ordered(Award).all())


@cached('awards:active', tags=AWARD_TAGS, ttl=60)
def get_active_awards():
    rows = _ordered(Award).filter(Award.is_active.is_(True)).all()
    return AwardSchema(many=True).dump(rows)


def create_award(payload):
    data = load(GalleryItemInput, payload)
    award = assign(Award(), data)
    db.session.add(award)
    commit()
    logger.info("Created award %s", award.id)
    revalidate(tags=AWARD_TAGS, paths=AWARD_PATHS)
    return award


def update_award(award_id, payload):
    award = get_or_404(Award, award_id, 'Award')
    assign(award, load(GalleryItemInput, payload, partial=True))
    commit()
    revalidate(tags=AWARD_TAGS, paths=AWARD_PATHS)
    return award


def delete_award(award_id):
    award = get_or_404(Award, award_id, 'Award')
    db.session.delete(award)
    commit()
    revalidate(tags=AWARD_TAGS, paths=AWARD_PATHS)
