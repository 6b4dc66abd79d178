from flask import Blueprint, current_app, request

from civrelay.auth import ProbeResult, credentials_from
from civrelay.errors import MissingCredentials, Unauthorized

auth = Blueprint('auth', __name__)


@auth.route('', methods=['GET'])
def probe():
    credentials = credentials_from(request)
    if credentials is None:
        raise MissingCredentials()
    user_id, password = credentials
    result = current_app.extensions['auth_gate'].probe(user_id, password)
    if result is ProbeResult.NO_PASSWORD:
        return '', 204
    if result is ProbeResult.MISMATCH:
        raise Unauthorized()
    return '', 200


@auth.route('', methods=['PUT'])
def set_password():
    credentials = credentials_from(request)
    if credentials is None:
        raise MissingCredentials()
    user_id, password = credentials
    new_password = request.get_data(as_text=True)
    current_app.extensions['access_policy'].set_password(user_id, password, new_password)
    return '', 200
