import logging
import os

from dotenv import load_dotenv
load_dotenv()

from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate

from commands import register_commands
from config import config_dict
from models import db
from routes.authentication import auth_bp
from routes.learning_paths import learning_path_bp
from routes.progress import progress_bp
from routes.resources import resource_bp
from routes.uploads import files_bp, upload_bp
from routes.users import users_bp
from utils.errors import register_error_handlers
from utils.storage import init_storage

migrate = Migrate()


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)


def create_app(config_name=None):
    """Build the API. `config_name` defaults to FLASK_ENV."""
    env = (config_name or os.environ.get("FLASK_ENV", "production")).lower()
    app = Flask(__name__)
    app.config.from_object(config_dict.get(env, config_dict["production"]))

    configure_logging(app)
    logging.getLogger(__name__).info("Starting LearnMap API (%s)", env)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    db.init_app(app)
    migrate.init_app(app, db)
    init_storage(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(learning_path_bp, url_prefix='/api/learning-paths')
    app.register_blueprint(resource_bp, url_prefix='/api/resources')
    app.register_blueprint(progress_bp, url_prefix='/api/progress')
    app.register_blueprint(upload_bp, url_prefix='/api/uploads')
    app.register_blueprint(files_bp, url_prefix='/uploads')

    register_commands(app)

    @app.route('/')
    def home():
        return jsonify({"success": True, "message": "Learning Path Dashboard API is running"})

    return app


if __name__ == '__main__':
    application = create_app()
    application.run(debug=application.config.get('DEBUG', False))
