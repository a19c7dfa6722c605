import pytest

from kint import create_app
from kint.auth import create_admin
from kint.content.categories import create_category

ADMIN_EMAIL = 'admin@kint.com'
ADMIN_PASSWORD = 'correct horse battery staple'


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', UPLOAD_FOLDER=str(tmp_path / 'uploads'))
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    with app.app_context():
        return create_admin(ADMIN_EMAIL, ADMIN_PASSWORD, name='Test Admin', role='super_admin').id


@pytest.fixture
def admin_client(app, admin):
    client = app.test_client()
    response = client.post('/admin/login/', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def category_id(app):
    with app.app_context():
        return create_category({'name': 'Fertilizers', 'name_ar': 'أسمدة'}).id
