import re

from kint import db

ARABIC_TO_LATIN = {
    'أ': 'a', 'إ': 'a', 'آ': 'a', 'ا': 'a',
    'ب': 'b', 'ت': 't', 'ث': 'th', 'ج': 'j', 'ح': 'h', 'خ': 'kh',
    'د': 'd', 'ذ': 'dh', 'ر': 'r', 'ز': 'z', 'س': 's', 'ش': 'sh',
    'ص': 's', 'ض': 'd', 'ط': 't', 'ظ': 'z', 'ع': 'a', 'غ': 'gh',
    'ف': 'f', 'ق': 'q', 'ك': 'k', 'ل': 'l', 'م': 'm', 'ن': 'n',
    'ه': 'h', 'و': 'w', 'ي': 'y', 'ة': 'h', 'ى': 'a', 'ئ': 'e',
    'ء': 'a', 'ؤ': 'w',
}

_NON_WORD = re.compile(r'[^a-z0-9\-]+')
_DASHES = re.compile(r'-{2,}')
_SPACES = re.compile(r'\s+')


def slugify(text):
    """URL-safe slug with Arabic letters transliterated to Latin."""
    text = str(text or '').lower().strip()
    text = ''.join(ARABIC_TO_LATIN.get(ch, ch) for ch in text)
    text = _SPACES.sub('-', text)
    text = _NON_WORD.sub('', text.replace('_', '-'))
    text = _DASHES.sub('-', text)
    return text.strip('-')


def slug_exists(model, slug, exclude_id=None):
    query = db.session.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def unique_slug(model, base, exclude_id=None):
    """Return *base* or the first free ``base-N`` for *model*."""
    base = base or 'item'
    slug = base
    counter = 1
    while slug_exists(model, slug, exclude_id):
        slug = '%s-%d' % (base, counter)
        counter += 1
    return slug
