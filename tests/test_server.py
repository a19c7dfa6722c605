from werkzeug.test import Client

from kint import server


def test_failing_factory_serves_unavailable_page(tmp_path, monkeypatch):
    log_file = tmp_path / 'server-debug.log'
    monkeypatch.setattr(server, 'DEBUG_LOG', str(log_file))

    def factory():
        raise RuntimeError('database driver missing')

    application = server.build_application(factory)
    assert application is server.unavailable_app

    response = Client(application).get('/anything')
    assert response.status_code == 503
    assert response.headers['Retry-After'] == '5'
    assert b'Service temporarily unavailable' in response.data

    logged = log_file.read_text(encoding='utf-8')
    assert 'Application startup failed' in logged
    assert 'database driver missing' in logged


def test_working_factory_is_returned():
    sentinel = object()
    assert server.build_application(lambda: sentinel) is sentinel
