from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config
from unoroom.services.games.registry import RoomRegistry

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)
# Process-scoped room map and session index; reset by create_app
rooms = RoomRegistry()


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    rooms.init_app(flask_app)

    # Import and register blueprints here
    from unoroom.main import main
    flask_app.register_blueprint(main)

    from unoroom.api.results import results
    flask_app.register_blueprint(results, url_prefix='/api')

    from unoroom.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the game result tables."""
        import unoroom.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
