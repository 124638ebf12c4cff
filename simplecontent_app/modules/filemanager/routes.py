# File: simplecontent_app/modules/filemanager/routes.py
# File manager endpoints; JSON in and out.

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from ...core.authorization import FILE_MANAGER_DELETE_POLICY, FILE_MANAGER_POLICY, policy_required
from ...core.error_handlers import ValidationError, success_response
from ...core.services import get_service
from ...core.signals import media_deleted
from .service import FileManagerService

filemanager_bp = Blueprint('filemanager', __name__)


def _path_arg() -> str:
    return request.values.get('path', '')


@filemanager_bp.route('/', strict_slashes=False)
@policy_required(FILE_MANAGER_POLICY)
def index():
    listing = get_service(FileManagerService).list(_path_arg())
    return jsonify(success_response(listing))


@filemanager_bp.route('/upload', methods=['POST'])
@policy_required(FILE_MANAGER_POLICY)
def upload():
    uploaded = request.files.get('file')
    if uploaded is None:
        raise ValidationError('A file is required', errors={'file': 'missing'})
    saved = get_service(FileManagerService).save(_path_arg(), uploaded)
    return jsonify(success_response({'path': saved}, 'File uploaded')), 201


@filemanager_bp.route('/createfolder', methods=['POST'])
@policy_required(FILE_MANAGER_POLICY)
def create_folder():
    created = get_service(FileManagerService).create_folder(_path_arg(), request.values.get('name', ''))
    return jsonify(success_response({'path': created}, 'Folder created')), 201


@filemanager_bp.route('/delete', methods=['POST'])
@policy_required(FILE_MANAGER_DELETE_POLICY)
def delete():
    path = _path_arg()
    if not path:
        raise ValidationError('A path is required', errors={'path': 'missing'})
    get_service(FileManagerService).delete(path)
    media_deleted.send(current_app._get_current_object(), virtual_path=path, user_name=current_user.user_name)
    return jsonify(success_response(message='Deleted'))
