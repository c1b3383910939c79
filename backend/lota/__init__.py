from flask import Flask, current_app
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from lota.config import Config

bcrypt = Bcrypt()
socketio = SocketIO(async_mode=None)


def get_session(flask_app=None):
    """Return the app's single GameSession."""
    flask_app = flask_app or current_app
    return flask_app.extensions['lota']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    bcrypt.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    flask_app.extensions['lota'] = _build_session(flask_app)

    # Import and register blueprints here
    from lota.main import main
    flask_app.register_blueprint(main)

    from lota.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    # Register Socket.IO event handlers
    from lota.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('hash-admin-password')
    @click.argument('password')
    def hash_admin_password_command(password):
        """Print a bcrypt hash to use as ADMIN_PASSWORD_HASH."""
        click.echo(bcrypt.generate_password_hash(password).decode('utf-8'))

    flask_app.cli.add_command(hash_admin_password_command)

    return flask_app


def _build_session(flask_app):
    from lota.broadcast import SocketIOBroadcaster
    from lota.services.games import DrawTimer, GameSession

    cfg = flask_app.config
    admin_hash = cfg.get('ADMIN_PASSWORD_HASH')
    if not admin_hash:
        admin_hash = bcrypt.generate_password_hash(cfg.get('ADMIN_PASSWORD') or '').decode('utf-8')
        flask_app.logger.info("[config] ADMIN_PASSWORD_HASH not set; hashed ADMIN_PASSWORD at startup")

    def check_credential(credential):
        if not credential:
            return False
        return bcrypt.check_password_hash(admin_hash, str(credential))

    # Timer threads are skipped in tests unless explicitly enabled
    if cfg.get('TESTING') and not cfg.get('ENABLE_SCHEDULER_IN_TESTS'):
        timer = DrawTimer(logger=flask_app.logger)
    else:
        timer = DrawTimer(spawn=socketio.start_background_task, sleep=socketio.sleep, logger=flask_app.logger)

    strict = cfg.get('STRICT_INVARIANTS')
    if strict is None:
        strict = bool(flask_app.debug or cfg.get('TESTING'))

    return GameSession(
        broadcaster=SocketIOBroadcaster(socketio),
        check_credential=check_credential,
        timer=timer,
        settings=cfg,
        logger=flask_app.logger,
        strict=strict,
    )
