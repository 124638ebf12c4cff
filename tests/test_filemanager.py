import os
from io import BytesIO

import pytest
from werkzeug.datastructures import FileStorage

from simplecontent_app.core.error_handlers import NotFoundError, ValidationError
from simplecontent_app.core.signals import media_deleted
from simplecontent_app.models import FileManagerOptions
from simplecontent_app.modules.filemanager import FileManagerError, FileManagerService


@pytest.fixture
def service(tmp_path):
    options = FileManagerOptions(allowed_file_extensions=['.txt', 'png'], max_upload_size_bytes=16)
    return FileManagerService(str(tmp_path / 'media'), options)


def _upload(name, content=b'hello'):
    return FileStorage(stream=BytesIO(content), filename=name)


def test_save_list_and_delete(service):
    assert service.list() == {'folders': [], 'files': []}

    saved = service.save('docs', _upload('Read Me.txt'))
    service.create_folder('', 'images')

    assert saved == 'docs/Read_Me.txt'
    root = service.list()
    assert [folder['name'] for folder in root['folders']] == ['docs', 'images']
    assert service.list('docs')['files'] == [{'name': 'Read_Me.txt', 'path': 'docs/Read_Me.txt', 'size': 5}]

    service.delete('docs/Read_Me.txt')
    service.delete('docs')
    assert [folder['name'] for folder in service.list()['folders']] == ['images']


def test_extension_without_dot_is_accepted(service):
    assert service.save('', _upload('logo.PNG')) == 'logo.PNG'


def test_disallowed_extension_is_rejected(service):
    with pytest.raises(ValidationError):
        service.save('', _upload('run.exe'))


def test_oversized_upload_is_removed(service):
    with pytest.raises(ValidationError):
        service.save('', _upload('big.txt', b'x' * 17))
    assert not os.path.exists(os.path.join(service.root, 'big.txt'))


@pytest.mark.parametrize('path', ['..', '../outside', 'a/../../b', '/../etc'])
def test_paths_cannot_escape_the_media_root(service, path):
    with pytest.raises(FileManagerError):
        service.list(path)


def test_delete_refuses_root_and_non_empty_folders(service):
    service.save('docs', _upload('a.txt'))

    with pytest.raises(FileManagerError):
        service.delete('')
    with pytest.raises(FileManagerError):
        service.delete('docs')
    with pytest.raises(NotFoundError):
        service.delete('docs/missing.txt')


def test_media_root_comes_from_content_root(app, content_root, client, login):
    login(client, 'admin', 'admin-pass')

    response = client.post(
        '/filemanager/upload',
        data={'path': 'uploads', 'file': (BytesIO(b'hello world'), 'hello.txt')},
        content_type='multipart/form-data',
    )

    assert response.status_code == 201
    assert response.get_json()['data']['path'] == 'uploads/hello.txt'
    assert (content_root / 'media' / 'uploads' / 'hello.txt').read_bytes() == b'hello world'

    listing = client.get('/filemanager/?path=uploads').get_json()
    assert listing['success'] is True
    assert listing['data']['files'][0]['name'] == 'hello.txt'


def test_upload_limit_comes_from_settings(client, login):
    login(client, 'admin', 'admin-pass')

    response = client.post(
        '/filemanager/upload',
        data={'file': (BytesIO(b'x' * 2048), 'big.txt')},
        content_type='multipart/form-data',
    )

    assert response.status_code == 400
    assert response.get_json()['code'] == 'VALIDATION_ERROR'


def test_escaping_path_is_a_json_400(client, login):
    login(client, 'admin', 'admin-pass')

    response = client.get('/filemanager/?path=../../')

    assert response.status_code == 400
    assert response.get_json()['code'] == 'FILE_MANAGER_ERROR'


def test_missing_file_is_a_json_400(client, login):
    login(client, 'admin', 'admin-pass')

    response = client.post('/filemanager/upload', data={}, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_create_folder_and_delete_send_signal(app, client, login):
    login(client, 'admin', 'admin-pass')
    deleted = []

    def on_deleted(sender, virtual_path, user_name, **extra):
        deleted.append((virtual_path, user_name))

    assert client.post('/filemanager/createfolder', data={'name': 'albums'}).status_code == 201
    with media_deleted.connected_to(on_deleted, app):
        response = client.post('/filemanager/delete', data={'path': 'albums'})

    assert response.status_code == 200
    assert deleted == [('albums', 'admin')]
    assert client.post('/filemanager/delete', data={'path': 'albums'}).status_code == 404


def test_rejected_upload_keeps_the_existing_file(service):
    service.save('', _upload('a.txt', b'original'))

    with pytest.raises(ValidationError):
        service.save('', _upload('a.txt', b'x' * 17))

    with open(os.path.join(service.root, 'a.txt'), 'rb') as handle:
        assert handle.read() == b'original'
    assert os.listdir(service.root) == ['a.txt']


def test_upload_replaces_a_file_with_the_same_name(service):
    service.save('', _upload('a.txt', b'first'))
    service.save('', _upload('a.txt', b'second'))

    assert service.list()['files'] == [{'name': 'a.txt', 'path': 'a.txt', 'size': 6}]


def test_symlink_out_of_the_media_root_is_rejected(service, tmp_path):
    outside = tmp_path / 'outside'
    outside.mkdir()
    (outside / 'secret.txt').write_text('secret')
    os.makedirs(service.root)
    try:
        os.symlink(str(outside), os.path.join(service.root, 'link'))
    except (OSError, NotImplementedError):
        pytest.skip('symlinks are not available')

    with pytest.raises(FileManagerError):
        service.list('link')
    with pytest.raises(FileManagerError):
        service.delete('link/secret.txt')
    assert (outside / 'secret.txt').exists()
