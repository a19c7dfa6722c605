from kint.cache import TaggedCache, cached, get_cache, path_tag, revalidate


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    store = TaggedCache(clock=clock)
    store.set('products:list', [1, 2], ttl=10, tags=('products',))

    assert store.get('products:list') == (True, [1, 2])
    clock.now += 10
    assert store.get('products:list') == (False, None)
    assert len(store) == 0


def test_invalidate_tag_drops_only_tagged_entries():
    store = TaggedCache()
    store.set('a', 1, ttl=60, tags=('products', 'product-sections'))
    store.set('b', 2, ttl=60, tags=('blog-posts',))

    assert store.invalidate_tag('product-sections') == 1
    assert 'a' not in store
    assert 'b' in store


def test_path_tags_are_normalised():
    assert path_tag('/blog/hello') == 'path:/blog/hello/'
    assert path_tag('/blog/hello/') == 'path:/blog/hello/'
    assert path_tag('/') == 'path:/'

    store = TaggedCache()
    store.set('page:/blog/hello/?lang=en', b'<html>', ttl=60, tags=(path_tag('/blog/hello/'),))
    store.invalidate_path('/blog/hello')
    assert len(store) == 0


def test_cached_accessor_is_recomputed_after_revalidate(app):
    calls = []

    @cached('widgets:by-slug', tags=('widgets',), ttl=60)
    def get_widget(slug):
        calls.append(slug)
        return {'slug': slug, 'version': len(calls)}

    with app.app_context():
        assert get_widget('a') == {'slug': 'a', 'version': 1}
        assert get_widget('a') == {'slug': 'a', 'version': 1}
        assert 'widgets:by-slug:a' in get_cache()

        revalidate(tags=('widgets',))
        assert get_widget('a') == {'slug': 'a', 'version': 2}

    assert calls == ['a', 'a']


def test_keyword_arguments_extend_the_key(app):
    @cached('widgets:list', tags=('widgets',), ttl=60)
    def list_widgets(kind=None):
        return [kind]

    with app.app_context():
        assert list_widgets(kind='x') == ['x']
        assert list_widgets(kind='y') == ['y']
        assert 'widgets:list:kind=x' in get_cache()


def test_each_app_has_its_own_cache(app, tmp_path):
    from kint import create_app

    other = create_app('testing', UPLOAD_FOLDER=str(tmp_path / 'other'))
    with app.app_context():
        get_cache().set('shared', 1, ttl=60)
    with other.app_context():
        assert 'shared' not in get_cache()
