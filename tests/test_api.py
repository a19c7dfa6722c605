import io
import os
from datetime import datetime, timedelta, timezone

import pytest
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage

from kint import db
from kint.content import careers, documents, pages, products
from kint.errors import ConflictError, UploadError
from kint.models import Document, JobApplication
from kint.translation import TranslationFailed


def _certificate(n, **extra):
    payload = {'title': 'ISO %d' % n, 'image_url': '/uploads/certificates/%d.png' % n}
    payload.update(extra)
    return payload


def test_certificate_limit(admin_client):
    for n in range(5):
        assert admin_client.post('/api/certificates', json=_certificate(n)).status_code == 201

    response = admin_client.post('/api/certificates', json=_certificate(6))
    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    assert body['message'] == 'Maximum of 5 certificates allowed.'
    assert body['limit'] == 5

    assert admin_client.get('/api/certificates/count').get_json() == {'success': True, 'count': 5, 'limit': 5}

    inactive = admin_client.post('/api/certificates', json=_certificate(7, is_active=False))
    assert inactive.status_code == 201
    activate = admin_client.put('/api/certificates/%d' % inactive.get_json()['data']['id'], json={'is_active': True})
    assert activate.status_code == 400
    assert len(admin_client.get('/api/certificates').get_json()['data']) == 5


def test_award_crud(admin_client):
    missing = admin_client.post('/api/awards', json={'title': 'Exporter of the Year'})
    assert missing.status_code == 400
    assert 'image_url' in missing.get_json()['errors']

    created = admin_client.post('/api/awards', json={
        'title': 'Exporter of the Year', 'image_url': '/uploads/awards/a.png', 'order': 2,
    })
    assert created.status_code == 201
    award_id = created.get_json()['data']['id']

    updated = admin_client.put('/api/awards?id=%d' % award_id, json={'title': 'Exporter of the Decade'})
    assert updated.status_code == 200
    data = updated.get_json()['data']
    assert data['title'] == 'Exporter of the Decade'
    assert data['image_url'] == '/uploads/awards/a.png'
    assert data['order'] == 2

    assert admin_client.put('/api/awards/999', json={'title': 'x'}).status_code == 404
    assert admin_client.delete('/api/awards').status_code == 400
    assert admin_client.delete('/api/awards?id=%d' % award_id).status_code == 200
    assert admin_client.get('/api/awards').get_json()['data'] == []


def test_headquarter_upsert(admin_client, client):
    assert client.get('/api/headquarter').get_json()['data'] == {}
    assert client.post('/api/headquarter', json={'address': 'Warsaw'}).status_code == 401

    first = admin_client.post('/api/headquarter', json={'address': 'ul. Prosta 1, Warsaw', 'latitude': '52.23'})
    assert first.status_code == 200
    assert first.get_json()['data']['title'] == 'Company Headquarter'

    admin_client.post('/api/headquarter', json={'content': '<p>Visit us</p>'})
    data = client.get('/api/headquarter').get_json()['data']
    assert data['id'] == first.get_json()['data']['id']
    assert data['address'] == 'ul. Prosta 1, Warsaw'
    assert data['latitude'] == pytest.approx(52.23)
    assert data['content'] == '<p>Visit us</p>'


def test_slug_check(admin_client, app):
    with app.app_context():
        page_id = pages.create_page({'title': 'About'}).id

    assert admin_client.get('/api/slug/check?slug=about').status_code == 400
    assert admin_client.get('/api/slug/check?slug=about&type=page').get_json()['exists'] is True
    assert admin_client.get('/api/slug/check?slug=other&type=page').get_json()['exists'] is False
    excluded = admin_client.get('/api/slug/check?slug=about&type=page&exclude_id=%d' % page_id)
    assert excluded.get_json()['exists'] is False


def test_upload(admin_client, client):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'%PDF-1.4'), 'price list.pdf'),
        'folder': 'catalogs',
    }, content_type='multipart/form-data')
    assert response.status_code == 200
    url = response.get_json()['url']
    assert url.startswith('/uploads/catalogs/')
    assert url.endswith('-price_list.pdf')
    assert client.get(url).data == b'%PDF-1.4'

    rejected = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'MZ'), 'setup.exe'),
    }, content_type='multipart/form-data')
    assert rejected.status_code == 400
    assert rejected.get_json()['message'] == 'File type is not allowed'

    assert admin_client.post('/api/upload', data={}).status_code == 400


def _document(app, **extra):
    payload = {'title': 'Safety sheet', 'category': 'msds', 'file_path': '/uploads/documents/sds.pdf'}
    payload.update(extra)
    with app.app_context():
        return documents.create_document(payload).id


def _downloads(app, document_id):
    with app.app_context():
        return db.session.get(Document, document_id).downloads


def test_document_download_counts(client, app):
    document_id = _document(app)

    response = client.get('/api/document/download?id=%d' % document_id)
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/uploads/documents/sds.pdf')
    assert _downloads(app, document_id) == 1

    assert client.post('/api/document/download', json={'id': document_id}).status_code == 200
    assert _downloads(app, document_id) == 2

    assert client.get('/api/document/download?id=999').status_code == 404
    assert client.post('/api/document/download', json={'id': 999}).status_code == 404
    assert client.get('/api/document/download').status_code == 400


def test_inactive_document_is_not_downloadable(client, app):
    document_id = _document(app, is_active=False)
    assert client.get('/api/document/download?id=%d' % document_id).status_code == 404
    assert _downloads(app, document_id) == 0


def test_document_requires_local_file(app):
    with app.app_context():
        with pytest.raises(UploadError):
            documents.create_document({'title': 'Empty', 'category': 'msds'})
        with pytest.raises(ValidationError):
            documents.create_document({
                'title': 'Remote', 'category': 'msds', 'file_path': 'https://example.org/sds.pdf',
            })


def test_job_offers_exclude_inactive_and_expired(client, app):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
    with app.app_context():
        careers.create_job_offer({'title': 'Agronomist', 'expires_at': future})
        careers.create_job_offer({'title': 'Sales Manager'})
        careers.create_job_offer({'title': 'Chemist', 'expires_at': past})
        careers.create_job_offer({'title': 'Driver', 'is_active': False})

    offers = client.get('/api/job-offers').get_json()['data']
    assert sorted(o['title'] for o in offers) == ['Agronomist', 'Sales Manager']
    assert all('application_count' not in o for o in offers)


def test_job_application_with_cv(client, admin_client, app):
    with app.app_context():
        offer_id = careers.create_job_offer({'title': 'Agronomist'}).id

    response = client.post('/api/job-applications', data={
        'job_offer_id': str(offer_id),
        'first_name': 'Anna',
        'last_name': 'Nowak',
        'email': 'anna@kint.com',
        'cv_file': (io.BytesIO(b'%PDF-1.4 cv'), 'cv.pdf'),
    }, content_type='multipart/form-data')
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['status'] == 'pending'
    assert data['cv_url'].startswith('/uploads/cvs/')
    assert data['job_offer']['title'] == 'Agronomist'

    assert client.get('/api/job-applications').status_code == 401
    listed = admin_client.get('/api/job-applications').get_json()['data']
    assert [a['email'] for a in listed] == ['anna@kint.com']


def test_job_application_validation(client, app):
    payload = {'job_offer_id': 999, 'first_name': 'Anna', 'last_name': 'Nowak', 'email': 'anna@kint.com'}
    assert client.post('/api/job-applications', json=payload).status_code == 404

    payload['email'] = 'anna'
    assert client.post('/api/job-applications', json=payload).status_code == 400
    with app.app_context():
        assert db.session.query(JobApplication).count() == 0


def test_translate(admin_client, client, monkeypatch):
    calls = []

    def fake_translate(text, source, target):
        calls.append((source, target))
        return 'EN:' + text

    monkeypatch.setattr('kint.views.api.translate', fake_translate)

    response = admin_client.post('/api/translate', json={'q': 'سماد'})
    assert response.get_json() == {'success': True, 'translated_text': 'EN:سماد'}
    assert calls == [('ar', 'en')]

    many = admin_client.post('/api/translate', json={'q': ['a', 'b'], 'source': 'en', 'target': 'ar'})
    assert many.get_json()['translated_text'] == ['EN:a', 'EN:b']

    assert admin_client.post('/api/translate', json={}).status_code == 400
    assert client.post('/api/translate', json={'q': 'x'}).status_code == 401


def test_translate_failure(admin_client, monkeypatch):
    def broken(text, source, target):
        raise TranslationFailed('quota exceeded')

    monkeypatch.setattr('kint.views.api.translate', broken)
    response = admin_client.post('/api/translate', json={'q': 'سماد'})
    assert response.status_code == 500
    assert response.get_json()['success'] is False


def test_read_feeds(client, app, category_id):
    with app.app_context():
        products.create_product({'name': 'Urea', 'category_id': category_id})

    assert [p['name'] for p in client.get('/api/products').get_json()['data']] == ['Urea']
    assert [c['slug'] for c in client.get('/api/categories').get_json()['data']] == ['fertilizers']
    assert client.get('/api/blog').get_json()['data'] == []
    assert client.get('/api/unknown').status_code == 404
    assert client.get('/api/unknown').get_json()['success'] is False


def test_document_with_taken_slug_stores_no_file(app):
    with app.app_context():
        documents.create_document({
            'title': 'SDS', 'slug': 'sds', 'category': 'msds', 'file_path': '/uploads/documents/sds.pdf',
        })
        upload = FileStorage(stream=io.BytesIO(b'%PDF-1.4 sds'), filename='sds-v2.pdf')
        with pytest.raises(ConflictError):
            documents.create_document({'title': 'SDS v2', 'slug': 'sds', 'category': 'msds'}, upload)

    folder = os.path.join(app.config['UPLOAD_FOLDER'], 'documents')
    assert not os.path.isdir(folder) or os.listdir(folder) == []


def test_failed_application_write_removes_cv(app, monkeypatch):
    with app.app_context():
        offer_id = careers.create_job_offer({'title': 'Agronomist'}).id

        def fail():
            raise SQLAlchemyError('database is locked')

        monkeypatch.setattr(db.session, 'commit', fail)
        cv = FileStorage(stream=io.BytesIO(b'%PDF-1.4 cv'), filename='cv.pdf')
        with pytest.raises(SQLAlchemyError):
            careers.create_job_application({
                'job_offer_id': offer_id, 'first_name': 'Anna', 'last_name': 'Nowak', 'email': 'anna@kint.com',
            }, cv)

    assert os.listdir(os.path.join(app.config['UPLOAD_FOLDER'], 'cvs')) == []
