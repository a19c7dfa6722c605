from kint import db
from kint.content import company
from kint.models import CompanyData, Headquarter


def test_default_company_data_is_created_once(app):
    with app.app_context():
        data = company.get_company_data()
        assert data['company_name'] == 'KINT Kafri International'
        assert data['ncr_number'] == '0000100441'
        assert data['vat_number'] == 'PL 637-011-20-65'

        company.get_company_data.uncached()
        assert db.session.query(CompanyData).count() == 1


def test_company_data_update_is_partial(app):
    with app.app_context():
        company.update_company_data({'address': 'ul. Prosta 1, Warsaw'})
        data = company.get_company_data()
        assert data['address'] == 'ul. Prosta 1, Warsaw'
        assert data['capital'] == 'PLN 177 000'
        assert db.session.query(CompanyData).count() == 1


def test_headquarter_is_absent_until_saved(app):
    with app.app_context():
        assert company.get_headquarter() is None

        company.save_headquarter({'address': 'Warsaw', 'latitude': 52.23, 'longitude': 21.01})
        company.save_headquarter({'title': 'Head office'})

        assert db.session.query(Headquarter).count() == 1
        headquarter = company.get_headquarter()
        assert headquarter['title'] == 'Head office'
        assert headquarter['address'] == 'Warsaw'


def test_company_pages_render(client, app):
    body = client.get('/about/company-data/?lang=ar').get_data(as_text=True)
    assert 'كينت كفري إنترناشيونال' in body

    assert client.get('/contact/headquarter/').status_code == 200
    with app.app_context():
        company.save_headquarter({'address': 'ul. Prosta 1, Warsaw', 'latitude': 52.23, 'longitude': 21.01})
    assert 'ul. Prosta 1, Warsaw' in client.get('/contact/headquarter/').get_data(as_text=True)
