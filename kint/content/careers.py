import logging

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, commit_with_uploads, get_or_404, load
from kint.errors import NotFoundError
from kint.models import JobApplication, JobOffer, utcnow
from kint.schemas import (
    ApplicationStatusInput,
    JobApplicationInput,
    JobApplicationSchema,
    JobOfferInput,
    JobOfferSchema,
)
from kint.uploads import save_upload

logger = logging.getLogger(__name__)

OFFER_TAGS = ('job-offers',)
APPLICATION_TAGS = ('job-applications',)
OFFER_PATHS = ('/about/career', '/admin/career')
APPLICATION_PATHS = ('/admin/career',)


@cached('job-offers:active', tags=OFFER_TAGS, ttl=10)
def get_job_offers():
    """Active offers that have not expired, newest first."""
    now = utcnow()
    rows = (
        db.session.query(JobOffer)
        .options(selectinload(JobOffer.applications))
        .filter(
            JobOffer.is_active.is_(True),
            or_(JobOffer.expires_at.is_(None), JobOffer.expires_at > now),
        )
        .order_by(JobOffer.published_at.desc(), JobOffer.id.desc())
        .all()
    )
    return JobOfferSchema(many=True, exclude=('application_count',)).dump(rows)


@cached('job-offers:all', tags=OFFER_TAGS + APPLICATION_TAGS, ttl=10)
def get_all_job_offers():
    rows = (
        db.session.query(JobOffer)
        .options(selectinload(JobOffer.applications))
        .order_by(JobOffer.published_at.desc(), JobOffer.id.desc())
        .all()
    )
    return JobOfferSchema(many=True).dump(rows)


@cached('job-offers:by-id', tags=OFFER_TAGS, ttl=10)
def get_job_offer_by_id(offer_id):
    offer = db.session.get(JobOffer, offer_id)
    return JobOfferSchema().dump(offer) if offer else None


def create_job_offer(payload):
    data = load(JobOfferInput, payload)
    offer = assign(JobOffer(), data)
    db.session.add(offer)
    commit()
    logger.info("Created job offer %s", offer.id)
    revalidate(tags=OFFER_TAGS, paths=OFFER_PATHS)
    return offer


def update_job_offer(offer_id, payload):
    offer = get_or_404(JobOffer, offer_id, 'Job offer')
    data = load(JobOfferInput, payload, partial=True)
    assign(offer, data)
    commit()
    revalidate(tags=OFFER_TAGS, paths=OFFER_PATHS)
    return offer


def delete_job_offer(offer_id):
    """Delete an offer together with the applications submitted for it."""
    offer = get_or_404(JobOffer, offer_id, 'Job offer')
    db.session.delete(offer)
    commit()
    logger.info("Deleted job offer %s", offer_id)
    revalidate(tags=OFFER_TAGS + APPLICATION_TAGS, paths=OFFER_PATHS)


#################################################


@cached('job-applications:list', tags=APPLICATION_TAGS, ttl=10)
def get_job_applications():
    rows = (
        db.session.query(JobApplication)
        .options(selectinload(JobApplication.job_offer))
        .order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
        .all()
    )
    return JobApplicationSchema(many=True).dump(rows)


@cached('job-applications:by-id', tags=APPLICATION_TAGS, ttl=10)
def get_job_application_by_id(application_id):
    application = db.session.get(JobApplication, application_id)
    return JobApplicationSchema().dump(application) if application else None


def create_job_application(payload, cv_file=None):
    """Store an application; the CV, when attached, goes to the ``cvs`` folder."""
    data = load(JobApplicationInput, payload)
    if db.session.get(JobOffer, data['job_offer_id']) is None:
        raise NotFoundError('Job offer not found.')

    application = assign(JobApplication(), data)
    if cv_file is not None and cv_file.filename:
        application.cv_url = save_upload(cv_file, 'cvs')
    db.session.add(application)
    commit_with_uploads(application.cv_url)
    logger.info("Received job application %s for offer %s", application.id, application.job_offer_id)
    revalidate(tags=APPLICATION_TAGS + OFFER_TAGS, paths=APPLICATION_PATHS)
    return application


def update_job_application_status(application_id, payload):
    application = get_or_404(JobApplication, application_id, 'Job application')
    data = load(ApplicationStatusInput, payload)
    assign(application, data)
    commit()
    revalidate(tags=APPLICATION_TAGS, paths=APPLICATION_PATHS)
    return application


def delete_job_application(application_id):
    application = get_or_404(JobApplication, application_id, 'Job application')
    db.session.delete(application)
    commit()
    revalidate(tags=APPLICATION_TAGS + OFFER_TAGS, paths=APPLICATION_PATHS)
