import pytest

from simplecontent_app.core.error_handlers import ServiceNotRegisteredError
from simplecontent_app.core.services import ServiceCollection
from simplecontent_app.modules.content import (
    IProjectQueries,
    IProjectSecurityResolver,
    SimpleAuthProjectSecurityResolver,
)


class Counter:
    created = 0

    def __init__(self, provider):
        Counter.created += 1
        self.provider = provider


@pytest.fixture(autouse=True)
def reset_counter():
    Counter.created = 0


def test_singleton_is_shared():
    provider = ServiceCollection().add_singleton('counter', Counter).build_provider()

    assert provider.get('counter') is provider.get('counter')
    assert Counter.created == 1


def test_singleton_instance_is_returned_as_is():
    marker = object()
    provider = ServiceCollection().add_singleton('marker', marker).build_provider()

    assert provider.get('marker') is marker


def test_transient_creates_new_instances():
    provider = ServiceCollection().add_transient('counter', Counter).build_provider()

    assert provider.get('counter') is not provider.get('counter')


def test_scoped_is_shared_within_a_request_only(app):
    provider = ServiceCollection().add_scoped('counter', Counter).build_provider()

    with app.test_request_context('/'):
        first = provider.get('counter')
        assert provider.get('counter') is first

    with app.test_request_context('/'):
        assert provider.get('counter') is not first


def test_unregistered_key_raises_and_optional_returns_default():
    provider = ServiceCollection().build_provider()

    with pytest.raises(ServiceNotRegisteredError):
        provider.get('missing')
    assert provider.get_optional('missing', 'fallback') == 'fallback'
    with pytest.raises(ServiceNotRegisteredError):
        provider.options('Missing')


def test_later_registration_replaces_earlier():
    provider = (
        ServiceCollection()
        .add_singleton('value', lambda provider: 'first')
        .add_singleton('value', lambda provider: 'second')
        .build_provider()
    )

    assert provider.get('value') == 'second'


def test_host_registers_content_seams(app):
    services = app.extensions['services']

    with app.test_request_context('/'):
        resolver = services.get(IProjectSecurityResolver)
        assert isinstance(resolver, SimpleAuthProjectSecurityResolver)
        assert services.get(IProjectQueries).get_default_project().project_id == 'main'


def test_route_table_is_a_singleton_service(app):
    from simplecontent_app.core.routing import RouteTable

    route_table = app.extensions['services'].get(RouteTable)

    assert route_table is app.extensions['route_table']
    assert [route.name for route in route_table.routes] == ['def', 'default']
