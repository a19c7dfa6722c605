import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from kint.errors import NotFoundError, UploadError
from kint.uploads import delete_upload, resolve_upload, save_upload


def _file(name, content=b'%PDF-1.4 test'):
    return FileStorage(stream=io.BytesIO(content), filename=name)


def test_save_upload_stores_file_under_folder(app):
    with app.app_context():
        url = save_upload(_file('Safety Sheet.pdf'), 'documents')
        assert url.startswith('/uploads/documents/')
        assert url.endswith('-Safety_Sheet.pdf')

        path = resolve_upload(url[len('/uploads/'):])
        assert os.path.isfile(path)
        assert path.startswith(os.path.abspath(app.config['UPLOAD_FOLDER']))


def test_save_upload_rejects_disallowed_extension(app):
    with app.app_context():
        with pytest.raises(UploadError):
            save_upload(_file('payload.exe'), 'documents')
        with pytest.raises(UploadError):
            save_upload(None, 'documents')


@pytest.mark.parametrize('path', ['../secret.txt', 'documents/../../secret.txt', '/etc/passwd', ''])
def test_resolve_upload_rejects_traversal(app, path):
    with app.app_context():
        with pytest.raises(UploadError):
            resolve_upload(path)


def test_resolve_upload_missing_file(app):
    with app.app_context():
        with pytest.raises(NotFoundError):
            resolve_upload('documents/missing.pdf')


def test_delete_upload(app):
    with app.app_context():
        url = save_upload(_file('catalog.pdf'), 'catalogs')
        assert delete_upload(url) is True
        assert delete_upload(url) is False
        assert delete_upload('https://cdn.example.com/catalog.pdf') is False


def test_uploaded_files_are_served_with_long_cache(app, client):
    with app.app_context():
        url = save_upload(_file('brochure.pdf'), 'catalogs')

    response = client.get(url)
    assert response.status_code == 200
    assert response.data == b'%PDF-1.4 test'
    assert 'immutable' in response.headers['Cache-Control']
    assert 'max-age=31536000' in response.headers['Cache-Control']


def test_missing_upload_is_404(client):
    assert client.get('/uploads/documents/nope.pdf').status_code == 404


def test_double_dots_inside_a_file_name_are_allowed(app, client):
    with app.app_context():
        url = save_upload(_file('report..final.pdf'), 'documents')
        assert url.endswith('-report..final.pdf')

    assert client.get(url).status_code == 200
    with app.app_context():
        with pytest.raises(UploadError):
            resolve_upload('documents\\..\\..\\secret.txt')
        assert delete_upload(url) is True
