import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

DEFAULT_DATABASE_URL = 'sqlite:///' + os.path.join(BASE_DIR, 'kint.db')


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base settings, read from the environment once at process start."""

    ENV_NAME = 'base'

    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me-please')
    PORT = int(os.environ.get('PORT', 3000))

    # ``None`` here is resolved in ``create_app`` so the missing value gets logged.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Allow sizeable media files (catalogue PDFs, product imagery).
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'public', 'uploads'))
    ALLOWED_UPLOAD_EXTENSIONS = {
        'pdf', 'doc', 'docx', 'xls', 'xlsx',
        'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg',
    }

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE')

    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'localhost')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 465))
    MAIL_USE_TLS = _env_flag('MAIL_USE_TLS')
    MAIL_USE_SSL = _env_flag('MAIL_USE_SSL', True)
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@kint.com')
    CONTACT_NOTIFY_EMAIL = os.environ.get('CONTACT_NOTIFY_EMAIL')

    PAGE_CACHE_ENABLED = _env_flag('PAGE_CACHE_ENABLED', True)
    PAGE_CACHE_TTL = int(os.environ.get('PAGE_CACHE_TTL', 300))

    SEED_DEFAULT_ADMIN = True
    ADMIN_INITIAL_EMAIL = os.environ.get('ADMIN_INITIAL_EMAIL', 'admin@kint.com')
    ADMIN_INITIAL_PASSWORD = os.environ.get('ADMIN_INITIAL_PASSWORD')

    TRANSLATE_CHUNK_SIZE = 450


class DevelopmentConfig(Config):
    ENV_NAME = 'development'
    DEBUG = True
    PAGE_CACHE_ENABLED = _env_flag('PAGE_CACHE_ENABLED', False)


class ProductionConfig(Config):
    ENV_NAME = 'production'
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    ENV_NAME = 'testing'
    TESTING = True
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    SEED_DEFAULT_ADMIN = False
    BCRYPT_LOG_ROUNDS = 4
    LOG_FILE = None


CONFIGS = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}


def get_config(name=None):
    name = (name or os.environ.get('APP_ENV') or 'production').strip().lower()
    return CONFIGS.get(name, ProductionConfig)
