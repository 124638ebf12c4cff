import pytest


def test_missing_page_is_reexecuted_with_original_status(client):
    response = client.get('/no/such/page')

    assert response.status_code == 404
    assert b'<h1 class="error-code">404</h1>' in response.data
    assert b'/no/such/page' in response.data


def test_unknown_controller_is_a_404(client):
    assert client.get('/nothing-here').status_code == 404


def test_error_action_can_be_requested_directly(client):
    response = client.get('/home/error/418')

    assert response.status_code == 418
    assert b'418' in response.data


def test_wrong_method_keeps_405(client):
    response = client.get('/login/logoff')

    assert response.status_code == 405
    assert b'<h1 class="error-code">405</h1>' in response.data


def _add_failing_rule(app):
    def boom():
        raise RuntimeError('boom')
    app.add_url_rule('/boom', 'boom', boom)


def test_unhandled_exception_renders_error_page_outside_development(app):
    _add_failing_rule(app)

    response = app.test_client().get('/boom')

    assert response.status_code == 500
    assert b'<h1 class="error-code">500</h1>' in response.data


def test_development_shows_the_exception(make_app):
    app = make_app(environment='Development')
    app.config['PROPAGATE_EXCEPTIONS'] = True
    _add_failing_rule(app)

    assert app.debug is True
    with pytest.raises(RuntimeError):
        app.test_client().get('/boom')


def test_api_errors_are_json(client):
    response = client.get('/api/nothing')

    assert response.status_code == 404
    assert response.is_json
    assert response.get_json()['success'] is False


def test_unknown_project_is_a_404(client):
    assert client.get('/blog?project=missing').status_code == 404
