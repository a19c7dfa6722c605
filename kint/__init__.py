import logging
import os
from datetime import datetime

import click
from flask import Flask, flash, g, redirect, render_template, request, session, url_for
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_mail import Mail
from flask_marshmallow import Marshmallow
from flask_sqlalchemy import SQLAlchemy
from marshmallow import ValidationError
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

db = SQLAlchemy()
bcrypt = Bcrypt()
mail = Mail()
ma = Marshmallow()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = 'warning'

logger = logging.getLogger(__name__)


def create_app(config_object=None, **overrides):
    """Application factory.

    *config_object* is a config class or one of the names understood by
    :func:`kint.config.get_config`; keyword overrides are applied last.
    """
    from kint.cache import TaggedCache
    from kint.config import DEFAULT_DATABASE_URL, get_config
    from kint.logging_setup import configure_logging

    app = Flask(__name__, static_folder='static', template_folder='templates')
    if config_object is None or isinstance(config_object, str):
        config_object = get_config(config_object)
    app.config.from_object(config_object)
    app.config.update(overrides)

    configure_logging(app)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.logger.error("DATABASE_URL is not set; falling back to %s", DEFAULT_DATABASE_URL)
        app.config['SQLALCHEMY_DATABASE_URI'] = DEFAULT_DATABASE_URL

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    db.init_app(app)
    bcrypt.init_app(app)
    mail.init_app(app)
    ma.init_app(app)
    login_manager.init_app(app)
    TaggedCache(default_ttl=app.config.get('PAGE_CACHE_TTL', 300)).init_app(app)

    from kint import auth, models  # noqa: F401  registers the user loader and mappers
    from kint.views import admin as admin_views
    from kint.views import api as api_views
    from kint.views import auth as auth_views
    from kint.views import public as public_views

    app.register_blueprint(public_views.bp)
    app.register_blueprint(auth_views.bp)
    app.register_blueprint(admin_views.bp)
    app.register_blueprint(api_views.bp)

    _register_request_hooks(app)
    _register_error_handlers(app)
    _register_template_helpers(app)
    _register_commands(app)

    with app.app_context():
        _enable_sqlite_foreign_keys()
        try:
            db.create_all()
            if app.config.get('SEED_DEFAULT_ADMIN'):
                auth.ensure_default_admin(app)
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception("Database initialisation failed; continuing without it")

    app.logger.info("KINT application created (%s)", app.config.get('ENV_NAME'))
    return app


def _enable_sqlite_foreign_keys():
    engine = db.engine
    if engine.dialect.name != 'sqlite':
        return

    @event.listens_for(engine, 'connect')
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def _register_request_hooks(app):
    from kint.i18n import resolve_request_language

    @app.before_request
    def _set_language_context():
        lang = resolve_request_language()
        session['lang'] = lang
        g.current_lang = lang


def _register_error_handlers(app):
    from kint.errors import ContentError
    from kint.responses import json_error, wants_json

    def _back_to_form(message, category='danger'):
        flash(message, category)
        return redirect(request.referrer or url_for('public.home'))

    @app.errorhandler(ValidationError)
    def _handle_validation_error(exc):
        if wants_json():
            return json_error('Invalid input.', status=400, errors=exc.messages)
        return _back_to_form('Invalid input: %s' % ', '.join(sorted(exc.messages)))

    @app.errorhandler(ContentError)
    def _handle_content_error(exc):
        if wants_json():
            return json_error(exc.message, status=exc.status_code, **exc.details)
        if request.method == 'GET':
            if exc.status_code == 404:
                return render_template('404.html'), 404
            return exc.message, exc.status_code
        return _back_to_form(exc.message)

    @app.errorhandler(SQLAlchemyError)
    def _handle_database_error(exc):
        db.session.rollback()
        app.logger.exception("Database error while handling %s %s", request.method, request.path)
        if wants_json():
            return json_error('Internal server error.', status=500)
        return render_template('500.html'), 500

    @app.errorhandler(404)
    def _handle_not_found(exc):
        if wants_json():
            return json_error('Not found.', status=404)
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def _handle_server_error(exc):
        if wants_json():
            return json_error('Internal server error.', status=500)
        return render_template('500.html'), 500

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc):
        if wants_json():
            return json_error(exc.description, status=exc.code)
        return exc


def _format_date(value, fmt='%d %B %Y'):
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime(fmt)


def _register_template_helpers(app):
    from kint.content import categories as category_content
    from kint.i18n import (
        AVAILABLE_LANGUAGES,
        DEFAULT_LANGUAGE,
        get_translation,
        localized,
        text_direction,
    )

    app.add_template_filter(_format_date, 'format_date')

    def _navigation():
        # Layout must render even when the database is unavailable.
        try:
            return category_content.get_product_categories()
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception("Failed to load navigation categories")
            return []

    @app.context_processor
    def inject_layout_helpers():
        current_lang = getattr(g, 'current_lang', DEFAULT_LANGUAGE)

        def url_for_lang(endpoint, **values):
            values.setdefault('lang', current_lang)
            return url_for(endpoint, **values)

        def switch_lang_url(lang_code):
            endpoint = request.endpoint or 'public.home'
            values = dict(request.view_args or {})
            values.update(request.args.to_dict())
            values['lang'] = lang_code
            return url_for(endpoint, **values)

        def translate(key, default=None, **kwargs):
            text = get_translation(key, current_lang, default)
            return text.format(**kwargs) if kwargs else text

        def loc(record, field):
            return localized(record, field, current_lang)

        return {
            'current_lang': current_lang,
            'dir': text_direction(current_lang),
            'available_languages': AVAILABLE_LANGUAGES,
            'url_for_lang': url_for_lang,
            'switch_lang_url': switch_lang_url,
            't': translate,
            'loc': loc,
            'nav_categories': _navigation,
            'current_year': datetime.now().year,
        }


def _register_commands(app):
    from kint.auth import ROLES, create_admin

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.password_option()
    @click.option('--name', default=None)
    @click.option('--role', type=click.Choice(ROLES), default='admin')
    def create_admin_command(email, password, name, role):
        """Create an administrator or reset an existing one's password."""
        admin = create_admin(email, password, name=name, role=role)
        click.echo("Admin %s saved with role %s." % (admin.email, admin.role))
