from kint import db, mail
from kint.i18n import get_translation
from kint.models import ContactSubmission

VALID = {
    'name': 'Jan Kowalski',
    'email': 'jan@kint.com',
    'phone': '+48 600 000 000',
    'department': 'sales',
    'subject': 'Price list',
    'message': 'Please send your 2026 price list.',
}


def _count(app):
    with app.app_context():
        return db.session.query(ContactSubmission).count()


def test_json_submission_is_stored(client, app):
    response = client.post('/contact/', json=VALID)
    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['message'] == get_translation('contact.success', 'en')

    with app.app_context():
        stored = db.session.get(ContactSubmission, body['id'])
        assert stored.email == 'jan@kint.com'
        assert stored.is_read is False


def test_incomplete_json_submission_is_rejected(client, app):
    response = client.post('/contact/', json={'name': 'Jan', 'email': 'not-an-email'})
    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    assert set(body['errors']) == {'email', 'message'}
    assert _count(app) == 0


def test_form_submission_redirects_with_flash(client, app):
    response = client.post('/contact/', data=VALID)
    assert response.status_code == 302
    assert _count(app) == 1

    page = client.get(response.headers['Location'])
    assert get_translation('contact.success', 'en') in page.get_data(as_text=True)


def test_invalid_form_submission_rerenders(client, app):
    response = client.post('/contact/', data={'name': 'Jan', 'message': '   '})
    assert response.status_code == 400
    body = response.get_data(as_text=True)
    assert get_translation('contact.error', 'en') in body
    assert 'value="Jan"' in body
    assert _count(app) == 0


def test_notification_mail_is_sent(client, app):
    app.config['CONTACT_NOTIFY_EMAIL'] = 'sales@kint.com'
    with mail.record_messages() as outbox:
        client.post('/contact/', json=VALID)

    assert len(outbox) == 1
    assert outbox[0].recipients == ['sales@kint.com']
    assert outbox[0].reply_to == 'jan@kint.com'
    assert 'Please send your 2026 price list.' in outbox[0].body


def test_mail_failure_does_not_lose_submission(client, app, monkeypatch):
    app.config['CONTACT_NOTIFY_EMAIL'] = 'sales@kint.com'

    def refuse(message):
        raise ConnectionRefusedError('smtp down')

    monkeypatch.setattr(mail, 'send', refuse)
    response = client.post('/contact/', json=VALID)
    assert response.status_code == 200
    assert _count(app) == 1
