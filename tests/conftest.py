import json
import os
import sys

import pytest
from werkzeug.security import generate_password_hash

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from simplecontent_app import create_app
from simplecontent_app.core.config import Config


class TestConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'test-secret'


MAIN_PROJECT_ID = 'main'
OTHER_PROJECT_ID = 'other-project'


def write_json(path, data):
    with open(path, 'w', encoding='utf-8') as handle:
        json.dump(data, handle)


def bump_mtime(path, seconds=10):
    stat = os.stat(path)
    os.utime(path, (stat.st_atime + seconds, stat.st_mtime + seconds))


@pytest.fixture
def auth_settings():
    return {
        'SimpleAuthSettings': {
            'AuthenticationScheme': 'application',
            'EnablePasswordHasherUi': True,
        },
        'Users': [
            {
                'UserName': 'admin',
                'Password': 'admin-pass',
                'DisplayName': 'Site Admin',
                'Claims': [{'ClaimType': 'Role', 'ClaimValue': 'Administrators'}],
            },
            {
                'UserName': 'editor',
                'Password': generate_password_hash('editor-pass'),
                'Claims': [{'ClaimType': 'Role', 'ClaimValue': 'Editors'}],
            },
            {
                'UserName': 'tenant',
                'Password': 'tenant-pass',
                'Claims': [
                    {'ClaimType': 'Role', 'ClaimValue': 'Administrators'},
                    {'ClaimType': 'ProjectId', 'ClaimValue': OTHER_PROJECT_ID},
                ],
            },
        ],
    }


@pytest.fixture
def content_settings():
    return {
        'ContentProjects': [
            {
                'ProjectId': MAIN_PROJECT_ID,
                'Title': 'Main Site',
                'Description': 'Pages and posts',
                'CopyrightNotice': 'Copyright Main',
                'ChannelTimeToLive': 30,
            },
            {'ProjectId': OTHER_PROJECT_ID, 'Title': 'Other Site'},
        ]
    }


@pytest.fixture
def content_root(tmp_path, auth_settings, content_settings):
    write_json(tmp_path / 'appsettings.json', {
        'Logging': {'LogLevel': {'Default': 'Warning'}},
        'Site': {'Name': 'base', 'Tagline': 'base tagline'},
        'FileManagerOptions': {'MediaRootPath': 'media', 'MaxUploadSizeBytes': 1024},
    })
    write_json(tmp_path / 'appsettings.Testing.json', {'Site': {'Name': 'testing'}})
    write_json(tmp_path / 'simpleauth-settings.json', auth_settings)
    write_json(tmp_path / 'simplecontent-settings.json', content_settings)
    write_json(tmp_path / 'navigation.json', [
        {'Key': 'home', 'Text': 'Home', 'Url': '/'},
        {'Key': 'files', 'Text': 'Files', 'Url': '/filemanager', 'ViewRoles': 'Administrators;'},
    ])
    return tmp_path


@pytest.fixture
def make_app(content_root):
    def factory(environment='Testing', environ=None, config_class=TestConfig):
        return create_app(
            config_class,
            environment=environment,
            content_root=str(content_root),
            environ=environ if environ is not None else {},
        )
    return factory


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login():
    def sign_in(client, username, password):
        return client.post('/login', data={'username': username, 'password': password})
    return sign_in
