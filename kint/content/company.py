"""Singleton records: legal company data and the headquarter page."""

import logging

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, load
from kint.models import CompanyData, Headquarter
from kint.schemas import CompanyDataInput, CompanyDataSchema, HeadquarterInput, HeadquarterSchema

logger = logging.getLogger(__name__)

COMPANY_TAGS = ('company-data',)
COMPANY_PATHS = ('/about/company-data', '/admin/company-data')
HEADQUARTER_TAGS = ('headquarter',)
HEADQUARTER_PATHS = ('/contact/headquarter', '/admin/headquarter')

DEFAULT_COMPANY_DATA = {
    'company_name': 'KINT Kafri International',
    'company_name_ar': 'كينت كفري إنترناشيونال',
    'address': '',
    'address_ar': '',
    'court_info': '',
    'court_info_ar': '',
    'ncr_number': '0000100441',
    'vat_number': 'PL 637-011-20-65',
    'capital': 'PLN 177 000',
    'capital_ar': '177,000 زلوتي بولندي',
}


def _company_row():
    row = db.session.query(CompanyData).order_by(CompanyData.id.asc()).first()
    if row is None:
        row = CompanyData(**DEFAULT_COMPANY_DATA)
        db.session.add(row)
        commit()
        logger.info("Created default company data record")
    return row


@cached('company-data:single', tags=COMPANY_TAGS, ttl=30)
def get_company_data():
    """The company data row, created with defaults on first read."""
    return CompanyDataSchema().dump(_company_row())


def update_company_data(payload):
    row = _company_row()
    assign(row, load(CompanyDataInput, payload, partial=True))
    commit()
    revalidate(tags=COMPANY_TAGS, paths=COMPANY_PATHS)
    return row


#################################################


@cached('headquarter:single', tags=HEADQUARTER_TAGS, ttl=3600)
def get_headquarter():
    row = db.session.query(Headquarter).order_by(Headquarter.id.asc()).first()
    return HeadquarterSchema().dump(row) if row else None


def save_headquarter(payload):
    """Create the headquarter record or update the existing one."""
    row = db.session.query(Headquarter).order_by(Headquarter.id.asc()).first()
    if row is None:
        row = assign(Headquarter(), load(HeadquarterInput, payload))
        db.session.add(row)
    else:
        assign(row, load(HeadquarterInput, payload, partial=True))
    commit()
    revalidate(tags=HEADQUARTER_TAGS, paths=HEADQUARTER_PATHS)
    return row
