from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

IS_ALIVE = {'authVersion': 1, 'chatVersion': 1}


@main.route('/isalive')
def isalive():
    return jsonify(IS_ALIVE)
