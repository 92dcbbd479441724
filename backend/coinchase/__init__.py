from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

# Events from one connection are handled in arrival order
socketio = SocketIO(async_mode=None, async_handlers=False)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from coinchase.main import main
    flask_app.register_blueprint(main)

    # One session per app; handlers bind to this registry's state
    from coinchase.broadcast import BroadcastBus
    from coinchase.socketio_events import NAMESPACE, ConnectionRegistry, register_socketio_handlers
    registry = ConnectionRegistry.from_config(flask_app.config, BroadcastBus(socketio, NAMESPACE))
    flask_app.extensions['coinchase.registry'] = registry
    register_socketio_handlers(registry)

    return flask_app
