from kint.content.categories import create_category
from kint.models import Category
from kint.slugs import slugify, unique_slug


def test_slugify_latin_text():
    assert slugify('  Hello,  World! ') == 'hello-world'
    assert slugify('NPK 20_20_20') == 'npk-20-20-20'
    assert slugify('--a---b--') == 'a-b'


def test_slugify_transliterates_arabic():
    assert slugify('أسمدة') == 'asmdh'
    assert slugify('شركة كينت') == 'shrkh-kynt'


def test_unique_slug_appends_numeric_suffix(app):
    with app.app_context():
        create_category({'name': 'Seeds', 'name_ar': 'بذور'})
        create_category({'name': 'Seeds', 'name_ar': 'بذور'})

        assert unique_slug(Category, 'seeds') == 'seeds-2'
        assert unique_slug(Category, 'grains') == 'grains'
        assert unique_slug(Category, '') == 'item'
