import logging
from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from database import db
from auth import login_manager


def create_app(config_overrides=None, config_class=Config):
    """Build the GeoMatchX API application"""
    app = Flask(__name__)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    # Browser clients live on another origin; keep CORS to the API namespace
    CORS(app, resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}})
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Import routes and register them with the app
    from routes import register_routes
    register_routes(app)

    from cli import register_commands
    register_commands(app)

    with app.app_context():
        # Import models to create tables
        import models  # noqa: F401

        db.create_all()

    return app
