import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .authentication import seed_demo_user
from .config import Config
from .models import db
from .storage import Storage

logger = logging.getLogger(__name__)


def create_app(config_class=Config, storage=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(level=app.config["LOG_LEVEL"])

    CORS(app, resources={r"/api/*": {
        "origins": app.config["FRONTEND_URL"],
        "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization"]
    }})
    db.init_app(app)
    app.extensions["storage"] = storage or Storage()

    from .analysis import bp as analysis_bp
    from .habit import bp as habit_bp
    app.register_blueprint(habit_bp)
    app.register_blueprint(analysis_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"message": e.description}), e.code

    # Create database tables and the demo account
    with app.app_context():
        db.create_all()
        seed_demo_user(
            app.extensions["storage"],
            app.config["DEMO_USERNAME"],
            app.config["DEMO_PASSWORD"],
            rounds=app.config["BCRYPT_ROUNDS"],
        )

    logger.info(f"App ready with database {app.config['SQLALCHEMY_DATABASE_URI']}")
    return app
