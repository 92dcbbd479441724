from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Coin Chase game server!'})


@main.route('/api/session')
def session_state():
    """Read-only view of the live session: joined players and the active collectible."""
    registry = current_app.extensions['coinchase.registry']
    return jsonify(registry.session_state())
