from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
# Inbound events are handled in arrival order, one at a time
socketio = SocketIO(async_mode=None, async_handlers=False)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if origins == ['*']:
        origins = '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # Storage, auth and chat state live for as long as the app does
    from civrelay.storage import KeyValueStore, CredentialStore, FileStore
    from civrelay.auth import AuthGate
    from civrelay.services import AccessPolicy
    from civrelay.registry import ConnectionRegistry
    from civrelay.protocol import ChannelProtocol
    from civrelay.socketio_events import register_socketio_handlers, send_to

    kv = KeyValueStore()
    credentials = CredentialStore(kv)
    files = FileStore(kv)
    gate = AuthGate(credentials)
    registry = ConnectionRegistry()
    namespace = flask_app.config.get('CHAT_NAMESPACE', '/chat')

    flask_app.extensions['kv_store'] = kv
    flask_app.extensions['auth_gate'] = gate
    flask_app.extensions['access_policy'] = AccessPolicy(
        gate, credentials, files,
        min_password_length=flask_app.config.get('MIN_PASSWORD_LENGTH', 6),
    )
    flask_app.extensions['connection_registry'] = registry
    flask_app.extensions['channel_protocol'] = ChannelProtocol(
        registry, send_to(namespace), log=flask_app.logger,
    )

    # Import and register blueprints here
    from civrelay.main import main
    flask_app.register_blueprint(main)

    from civrelay.api.files import files as files_bp
    flask_app.register_blueprint(files_bp, url_prefix='/files')

    from civrelay.api.auth import auth as auth_bp
    flask_app.register_blueprint(auth_bp, url_prefix='/auth')

    from civrelay.errors import RelayError

    @flask_app.errorhandler(RelayError)
    def handle_relay_error(exc):
        return exc.message, exc.status_code, {'Content-Type': 'text/plain; charset=utf-8'}

    register_socketio_handlers(namespace=namespace)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the key-value table."""
        import civrelay.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
