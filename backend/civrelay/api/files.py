from flask import Blueprint, current_app, request

from civrelay.auth import credentials_from
from civrelay.errors import MissingCredentials

files = Blueprint('files', __name__)


def _access():
    return current_app.extensions['access_policy']


@files.route('/<path:file_name>', methods=['GET'])
def read_file(file_name):
    credentials = credentials_from(request)
    if credentials is None:
        raise MissingCredentials()
    user_id, password = credentials
    content = _access().read_file(user_id, password, file_name)
    return content, 200, {'Content-Type': 'text/plain; charset=utf-8'}


@files.route('/<path:file_name>', methods=['PUT'])
def write_file(file_name):
    credentials = credentials_from(request)
    if credentials is None:
        raise MissingCredentials()
    user_id, password = credentials
    _access().write_file(user_id, password, file_name, request.get_data(as_text=True))
    return '', 200
