from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import click
from config import Config

from broker.errors import BrokerError, Unauthenticated
from broker.services.auth import CredentialGate
from broker.services.registry import GameRegistry
from broker.services.sweeper import Sweeper

bcrypt = Bcrypt()
login_manager = LoginManager()


def create_app(config_class=Config, registry=None):
    """Build the broker app.

    The registry, gate and sweeper live in ``flask_app.extensions`` so each
    app (and each test) owns its own state. Pass ``registry`` to share or
    pre-seed one.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('ALLOWED_ORIGINS', '*'))

    if registry is None:
        registry = GameRegistry(
            expiry_window=flask_app.config.get('EXPIRY_WINDOW_SEC', 600),
            id_length=flask_app.config.get('GAME_ID_LENGTH', 8),
        )
    flask_app.extensions['game_registry'] = registry
    flask_app.extensions['credential_gate'] = CredentialGate.from_config(flask_app.config)

    sweeper = Sweeper(registry, flask_app.config.get('CLEANUP_INTERVAL_SEC', 60), flask_app.logger)
    flask_app.extensions['game_sweeper'] = sweeper

    from broker.api.identity import Guest, load_principal_from_request
    login_manager.anonymous_user = Guest
    login_manager.request_loader(load_principal_from_request)

    from broker.main import main
    flask_app.register_blueprint(main)

    from broker.api.games import games
    flask_app.register_blueprint(games, url_prefix='/game')

    from broker.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/admin')

    @flask_app.errorhandler(BrokerError)
    def handle_broker_error(exc):
        response = jsonify(exc.to_dict())
        if isinstance(exc, Unauthenticated):
            flask_app.logger.info(f'[auth-fail] {exc.message}')
            if flask_app.config.get('AUTH_SCHEME') == 'basic':
                response.headers['WWW-Authenticate'] = 'Basic realm="broker"'
        return response, exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'success': False, 'error': exc.description}), exc.code

    @click.command('hash-password')
    @click.argument('password')
    def hash_password_command(password):
        """Prints a bcrypt hash for use in the credentials file."""
        click.echo(bcrypt.generate_password_hash(password).decode('utf-8'))

    @click.command('sweep')
    def sweep_command():
        """Runs one expiry sweep against this process's registry."""
        removed = sweeper.sweep_once()
        click.echo(f'Removed {removed} expired games.')

    flask_app.cli.add_command(hash_password_command)
    flask_app.cli.add_command(sweep_command)

    testing = flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_SWEEPER_IN_TESTS')
    if flask_app.config.get('SWEEPER_ENABLED', True) and not testing:
        sweeper.start()

    return flask_app
