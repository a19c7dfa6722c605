import io
import os

import pytest

from kint import db
from kint.content import careers, categories, inquiries, products
from kint.models import Category, ContactSubmission, ProductSection


def test_dashboard(admin_client, app):
    with app.app_context():
        inquiries.submit_inquiry({'name': 'Jan', 'email': 'jan@kint.com', 'message': 'Hello'})

    response = admin_client.get('/admin/')
    assert response.status_code == 200
    assert b'Test Admin' in response.data


@pytest.mark.parametrize('name', [
    'categories', 'products', 'blog', 'pages', 'career', 'catalogs', 'documents', 'certificates', 'awards',
])
def test_list_and_add_pages_render(admin_client, category_id, name):
    assert admin_client.get('/admin/%s/' % name).status_code == 200
    assert admin_client.get('/admin/%s/add/' % name).status_code == 200


def test_form_add_redirects_to_listing(admin_client, app):
    response = admin_client.post('/admin/categories/add/', data={
        'name': 'Seeds', 'name_ar': 'بذور', 'order': '2', 'is_active': 'true',
    })
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/categories/')

    response = admin_client.post('/admin/categories/add/', data={'name': 'Hidden', 'name_ar': 'مخفي'})
    assert response.status_code == 302

    with app.app_context():
        rows = {c.slug: c for c in db.session.query(Category).all()}
        assert rows['seeds'].is_active is True
        assert rows['seeds'].order == 2
        assert rows['hidden'].is_active is False


def test_invalid_form_post_flashes_and_redirects(admin_client, app):
    response = admin_client.post(
        '/admin/products/add/', data={'name': 'No category'},
        headers={'Referer': 'http://localhost/admin/products/add/'},
    )
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/products/add/')
    assert b'Invalid input' in admin_client.get('/admin/products/add/').data


def test_json_crud(admin_client, app, category_id):
    created = admin_client.post('/admin/products/add/', json={'name': 'Urea', 'category_id': category_id})
    assert created.status_code == 201
    product_id = created.get_json()['id']

    assert admin_client.get('/admin/products/edit/%d/' % product_id).status_code == 200
    assert admin_client.get('/admin/products/edit/999/').status_code == 404

    updated = admin_client.post('/admin/products/edit/%d/' % product_id, json={'sku': 'U-46'})
    assert updated.get_json()['success'] is True

    as_json = {'Accept': 'application/json'}
    deleted = admin_client.delete('/admin/products/del/%d/' % product_id, headers=as_json)
    assert deleted.status_code == 200
    assert admin_client.delete('/admin/products/del/%d/' % product_id, headers=as_json).status_code == 404


def test_edit_gallery_item(admin_client):
    created = admin_client.post('/admin/certificates/add/', json={
        'title': 'ISO 9001', 'image_url': '/uploads/certificates/iso.png',
    })
    certificate_id = created.get_json()['id']
    response = admin_client.get('/admin/certificates/edit/%d/' % certificate_id)
    assert response.status_code == 200
    assert b'ISO 9001' in response.data


def test_product_sections(admin_client, app, category_id):
    with app.app_context():
        product_id = products.create_product({'name': 'Urea', 'category_id': category_id}).id

    added = admin_client.post('/admin/products/%d/sections/add/' % product_id, json={'title': 'Benefits'})
    assert added.status_code == 201
    section_id = added.get_json()['id']

    page = admin_client.get('/admin/products/%d/sections/' % product_id)
    assert b'Benefits' in page.data

    response = admin_client.post(
        '/admin/products/%d/sections/edit/%d/' % (product_id, section_id), data={'title': 'Key benefits'},
    )
    assert response.status_code == 302
    with app.app_context():
        assert db.session.get(ProductSection, section_id).title == 'Key benefits'

    admin_client.post('/admin/products/%d/sections/del/%d/' % (product_id, section_id))
    with app.app_context():
        assert db.session.query(ProductSection).count() == 0
    assert admin_client.get('/admin/products/999/sections/').status_code == 404


def test_inquiries_workflow(admin_client, app):
    with app.app_context():
        inquiry_id = inquiries.submit_inquiry({
            'name': 'Jan', 'email': 'jan@kint.com', 'message': 'Price list please',
        }).id
        assert inquiries.count_unread() == 1

    assert b'Price list please' in admin_client.get('/admin/inquiries/').data

    assert admin_client.post('/admin/inquiries/read/%d/' % inquiry_id).status_code == 302
    with app.app_context():
        assert inquiries.count_unread() == 0

    assert admin_client.post('/admin/inquiries/del/%d/' % inquiry_id, json={}).status_code == 200
    with app.app_context():
        assert db.session.query(ContactSubmission).count() == 0


def test_applications_page(admin_client, app):
    with app.app_context():
        offer_id = careers.create_job_offer({'title': 'Agronomist'}).id
        application_id = careers.create_job_application({
            'job_offer_id': offer_id, 'first_name': 'Anna', 'last_name': 'Nowak', 'email': 'anna@kint.com',
        }).id

    assert b'Nowak' in admin_client.get('/admin/applications/').data
    response = admin_client.post('/admin/applications/status/%d/' % application_id, json={'status': 'hired'})
    assert response.status_code == 200
    assert admin_client.post(
        '/admin/applications/status/%d/' % application_id, json={'status': 'unknown'},
    ).status_code == 400


def test_singleton_editors(admin_client):
    page = admin_client.get('/admin/company-data/')
    assert b'0000100441' in page.data

    saved = admin_client.post('/admin/company-data/', data={'address': 'ul. Prosta 1'})
    assert saved.status_code == 302
    assert b'ul. Prosta 1' in admin_client.get('/admin/company-data/').data

    assert admin_client.get('/admin/headquarter/').status_code == 200
    assert admin_client.post('/admin/headquarter/', json={'address': 'Warsaw'}).status_code == 200


def test_pagination_clamps_bad_input(admin_client, app):
    with app.app_context():
        for n in range(3):
            inquiries.submit_inquiry({'name': 'Jan %d' % n, 'email': 'jan@kint.com', 'message': 'Hi'})

    assert admin_client.get('/admin/inquiries/?page=abc&show=-4').status_code == 200
    body = admin_client.get('/admin/inquiries/?page=9&show=2').get_data(as_text=True)
    assert body.count('<article') == 1


def test_edit_form_can_clear_parent_and_text(admin_client, app):
    with app.app_context():
        parent = categories.create_category({'name': 'Plants', 'name_ar': 'نباتات'})
        child = categories.create_category({
            'name': 'Foliar', 'name_ar': 'ورقي', 'parent_id': parent.id, 'description': 'old text',
        })
        child_id, child_slug = child.id, child.slug

    response = admin_client.post('/admin/categories/edit/%d/' % child_id, data={
        'name': 'Foliar', 'name_ar': 'ورقي', 'slug': '', 'parent_id': '', 'description': '',
        'order': '', 'is_active': 'true',
    })
    assert response.status_code == 302

    with app.app_context():
        child = db.session.get(Category, child_id)
        assert child.parent_id is None
        assert child.description is None
        assert child.order == 0
        assert child.slug == child_slug


def _stored_files(app, folder):
    path = os.path.join(app.config['UPLOAD_FOLDER'], folder)
    return os.listdir(path) if os.path.isdir(path) else []


def test_rejected_form_does_not_keep_uploaded_file(admin_client, app):
    response = admin_client.post('/admin/certificates/add/', data={
        'title_ar': 'شهادة', 'image_url': (io.BytesIO(b'\x89PNG'), 'iso.png'),
    }, content_type='multipart/form-data')
    assert response.status_code == 302
    assert _stored_files(app, 'certificates') == []

    response = admin_client.post('/admin/certificates/add/', data={
        'title': 'ISO 9001', 'image_url': (io.BytesIO(b'\x89PNG'), 'iso.png'),
    }, content_type='multipart/form-data')
    assert response.status_code == 302
    assert len(_stored_files(app, 'certificates')) == 1


def test_edit_form_keeps_offer_expiry(admin_client, app):
    with app.app_context():
        offer_id = careers.create_job_offer({'title': 'Agronomist', 'expires_at': '2030-06-01'}).id

    page = admin_client.get('/admin/career/edit/%d/' % offer_id)
    assert b'value="2030-06-01"' in page.data
