import logging
import smtplib

from flask import current_app
from flask_mail import Message

from kint import db, mail
from kint.cache import cached, revalidate
from kint.content import commit, get_or_404, load
from kint.models import ContactSubmission
from kint.schemas import ContactInput, ContactSubmissionSchema

logger = logging.getLogger(__name__)

TAGS = ('inquiries',)
PATHS = ('/admin/inquiries',)


@cached('inquiries:list', tags=TAGS, ttl=10)
def get_inquiries():
    rows = (
        db.session.query(ContactSubmission)
        .order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
        .all()
    )
    return ContactSubmissionSchema(many=True).dump(rows)


def count_unread():
    return db.session.query(ContactSubmission).filter(ContactSubmission.is_read.is_(False)).count()


def _notify(submission):
    recipient = current_app.config.get('CONTACT_NOTIFY_EMAIL')
    if not recipient:
        return
    msg = Message(
        submission.subject or 'New contact form submission',
        recipients=[recipient],
        reply_to=submission.email,
    )
    msg.body = (
        ":KINT website contact form:\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Phone: {submission.phone or ''}\n"
        f"Department: {submission.department or ''}\n"
        f"Message: {submission.message}\n"
    )
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send notification for contact submission %s", submission.id)


def submit_inquiry(payload):
    """Store one contact submission and notify the configured mailbox."""
    data = load(ContactInput, payload)
    submission = ContactSubmission(**data)
    db.session.add(submission)
    commit()
    logger.info("Stored contact submission %s", submission.id)
    revalidate(tags=TAGS, paths=PATHS)
    _notify(submission)
    return submission


def mark_as_read(inquiry_id):
    submission = get_or_404(ContactSubmission, inquiry_id, 'Inquiry')
    submission.is_read = True
    commit()
    revalidate(tags=TAGS, paths=PATHS)
    return submission


def delete_inquiry(inquiry_id):
    submission = get_or_404(ContactSubmission, inquiry_id, 'Inquiry')
    db.session.delete(submission)
    commit()
    revalidate(tags=TAGS, paths=PATHS)
