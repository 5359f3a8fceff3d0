from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from mathsprint.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api')

    @flask_app.route('/')
    def index():
        return jsonify({'message': 'Welcome to the Math Sprint score server!'})

    # Store and validation errors carry their own status code and JSON body
    from mathsprint.errors import MathSprintError

    @flask_app.errorhandler(MathSprintError)
    def handle_mathsprint_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[internal-error] {exc!r}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return exc
        flask_app.logger.exception(f"[unhandled-error] {exc!r}")
        return jsonify({'error': 'Internal server error'}), 500

    from mathsprint.socketio_events import register_socketio_handlers
    register_socketio_handlers(socketio, testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    @click.option('--seed/--no-seed', default=True, help='Insert a few sample scores.')
    def db_reset_command(seed):
        """Drops, recreates, and seeds the database."""
        from mathsprint.services.scores.store import DatabaseScoreStore
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            if seed:
                store = DatabaseScoreStore.from_config(flask_app.config)
                samples = [('Ada', 120, 'purple'), ('Sam', 60, 'blue'), ('Lin', 80, 'orange'), ('Ada', 45, 'ramp')]
                for name, score, mode in samples:
                    store.save(name, score, mode)
            print('Database has been reset and seeded!' if seed else 'Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
