import pytest
from urllib.parse import parse_qs, urlsplit

from simplecontent_app.core.authorization import (
    BLOG_EDIT_POLICY,
    FILE_MANAGER_DELETE_POLICY,
    FILE_MANAGER_POLICY,
    PAGE_EDIT_POLICY,
    PolicyNotFoundError,
    PolicyRegistry,
    configure_auth_policies,
    require_role,
)
from simplecontent_app.models import SimpleAuthSettings, SimpleAuthUser, UserClaim
from simplecontent_app.modules.simpleauth.principal import LONG_ROLE_CLAIM_TYPE, SiteUser

PROTECTED_PAGES = ['/blog/edit', '/page/edit', '/page/edit/about', '/filemanager/']


def _principal(*roles, claim_type='Role'):
    user = SimpleAuthUser(user_name='someone', claims=[UserClaim(claim_type, role) for role in roles])
    return SiteUser(user, SimpleAuthSettings())


class Anonymous:
    is_authenticated = False


def test_every_policy_requires_administrators():
    registry = configure_auth_policies(PolicyRegistry())

    for name in (BLOG_EDIT_POLICY, PAGE_EDIT_POLICY, FILE_MANAGER_POLICY, FILE_MANAGER_DELETE_POLICY):
        assert registry.authorize(_principal('Administrators'), name)
        assert registry.authorize(_principal('administrators'), name)
        assert not registry.authorize(_principal('Editors'), name)
        assert not registry.authorize(Anonymous(), name)


def test_long_role_claim_type_counts_as_role():
    assert require_role('Administrators')(_principal('Administrators', claim_type=LONG_ROLE_CLAIM_TYPE))


def test_unknown_policy_raises():
    with pytest.raises(PolicyNotFoundError):
        PolicyRegistry().authorize(_principal('Administrators'), 'NoSuchPolicy')


@pytest.mark.parametrize('path', PROTECTED_PAGES)
def test_anonymous_user_is_challenged(client, path):
    response = client.get(path)

    assert response.status_code == 302
    location = urlsplit(response.headers['Location'])
    assert location.path == '/login'
    assert parse_qs(location.query)['next'] == [path]


@pytest.mark.parametrize('path', PROTECTED_PAGES)
def test_signed_in_user_without_role_is_sent_to_access_denied_path(client, login, path):
    login(client, 'editor', 'editor-pass')

    response = client.get(path)

    assert response.status_code == 302
    assert response.headers['Location'] == '/'


def test_delete_needs_delete_policy(client, login):
    login(client, 'editor', 'editor-pass')

    response = client.post('/filemanager/delete', data={'path': 'x.txt'})

    assert response.status_code == 302
    assert response.headers['Location'] == '/'


@pytest.mark.parametrize('path', ['/blog/edit', '/page/edit', '/page/edit/about', '/filemanager/'])
def test_administrator_passes(client, login, path):
    login(client, 'admin', 'admin-pass')

    assert client.get(path).status_code == 200


def test_user_bound_to_another_project_cannot_edit(client, login):
    login(client, 'tenant', 'tenant-pass')

    assert client.get('/blog/edit').status_code == 403
    assert client.get('/blog/edit?project=other-project').status_code == 200


def test_principal_exposes_claims():
    user = SimpleAuthUser(
        user_name='writer',
        claims=[
            UserClaim('Role', 'Editors'),
            UserClaim('Email', 'writer@example.com'),
            UserClaim('ProjectId', 'main'),
        ],
    )
    principal = SiteUser(user, SimpleAuthSettings())

    assert principal.get_id() == 'writer'
    assert principal.is_in_role('editors')
    assert not principal.is_in_role('Administrators')
    assert principal.email == 'writer@example.com'
    assert principal.project_id == 'main'
    assert principal.display_name == 'writer'
    assert principal.authentication_scheme == 'application'
