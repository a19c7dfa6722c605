import logging

from flask import redirect, request, session, url_for
from sqlalchemy import func

from kint import bcrypt, db, login_manager
from kint.models import Admin
from kint.responses import json_error, wants_json

logger = logging.getLogger(__name__)

ROLES = ('admin', 'super_admin')

# Checked against when the email is unknown so both failure paths cost a bcrypt round.
_DUMMY_HASH = None


def _dummy_hash():
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = bcrypt.generate_password_hash('not-a-real-password').decode('utf-8')
    return _DUMMY_HASH


def find_admin(email):
    if not email:
        return None
    return (
        db.session.query(Admin)
        .filter(func.lower(Admin.email) == email.strip().lower())
        .first()
    )


def authenticate(email, password):
    """Return the active admin for the credentials, or ``None``.

    Unknown email, inactive account and wrong password are indistinguishable.
    """
    if not email or not password:
        return None
    admin = find_admin(email)
    if admin is None:
        bcrypt.check_password_hash(_dummy_hash(), password)
        return None
    if not admin.check_password(password) or not admin.is_active:
        return None
    return admin


def start_session(admin):
    session['admin_role'] = admin.role
    session.permanent = True


def end_session():
    session.pop('admin_role', None)


def create_admin(email, password, name=None, role='admin'):
    if role not in ROLES:
        raise ValueError('Unknown role %r' % role)
    admin = find_admin(email)
    if admin is None:
        admin = Admin(email=email.strip().lower(), name=name, role=role)
        db.session.add(admin)
    else:
        admin.role = role
        if name:
            admin.name = name
    admin.set_password(password)
    db.session.commit()
    return admin


def ensure_default_admin(app):
    """Create the bootstrap administrator when none exists yet."""
    email = app.config.get('ADMIN_INITIAL_EMAIL')
    configured_password = app.config.get('ADMIN_INITIAL_PASSWORD')
    if not email:
        return None
    existing = find_admin(email)
    if existing is None:
        if not configured_password:
            logger.warning(
                "No admin account exists and ADMIN_INITIAL_PASSWORD is not set; "
                "run 'flask create-admin' to add one."
            )
            return None
        admin = create_admin(email, configured_password, name='KINT Admin', role='super_admin')
        logger.info("Created default admin user '%s'.", email)
        return admin
    if configured_password and not existing.check_password(configured_password):
        existing.set_password(configured_password)
        db.session.commit()
        logger.info("Updated default admin user '%s' password from configuration.", email)
    return existing


@login_manager.user_loader
def load_user(user_id):
    try:
        admin = db.session.get(Admin, int(user_id))
    except (TypeError, ValueError):
        return None
    if admin is None or not admin.is_active:
        return None
    return admin


@login_manager.unauthorized_handler
def unauthorized():
    if wants_json():
        return json_error('Authentication required', status=401)
    return redirect(url_for('auth.login', next=request.full_path))
