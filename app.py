import logging
import os

import cloudinary
from flask import Flask, current_app, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from common.database import db
from common.response import error_response
from config import get_config
from models import *  # Import all models
from routes.category_routes import category_bp
from routes.product_routes import product_bp


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return error_response(error.description, error.code, getattr(error, 'errors', None))

    @app.errorhandler(Exception)
    def handle_error(error):
        app.logger.exception(f"Unhandled error: {error}")
        db.session.rollback()
        return error_response("Internal server error", 500)


def create_app(config_name=None):
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    configure_logging(app)

    # Configure Cloudinary
    cloudinary.config(
        cloud_name=app.config.get('CLOUDINARY_CLOUD_NAME'),
        api_key=app.config.get('CLOUDINARY_API_KEY'),
        api_secret=app.config.get('CLOUDINARY_API_SECRET'),
        secure=True
    )

    CORS(app,
         resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}},
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
         max_age=3600)

    # Initialize extensions
    db.init_app(app)
    JWTManager(app)
    Migrate(app, db)

    # Register blueprints
    app.register_blueprint(product_bp)
    app.register_blueprint(category_bp)

    @app.route('/storage/<path:filename>')
    def stored_file(filename):
        """Serve files written by the local storage provider"""
        return send_from_directory(os.path.abspath(current_app.config['UPLOAD_FOLDER']), filename)

    register_error_handlers(app)

    app.logger.info(f"Catalog service started with '{app.config['STORAGE_PROVIDER']}' storage")
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host='0.0.0.0', port=5110)
