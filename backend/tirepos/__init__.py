# backend/tirepos/__init__.py
import os

from flask import Flask

from .config import Config
from .extensions import db, migrate, register_sqlite_pragmas

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations")


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    # Overrides must land before the engine is built (tests pass an in-memory URI)
    if config:
        app.config.update(config)

    app.logger.setLevel(app.config["LOG_LEVEL"].upper())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)

    with app.app_context():
        register_sqlite_pragmas(db.engine, wal=app.config["SQLITE_WAL"])

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.products import products_bp
    from .routes.inventory import inventory_bp
    from .routes.catalog import brands_bp, tire_sizes_bp, wheel_sizes_bp
    from .routes.invoices import invoices_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(brands_bp)
    app.register_blueprint(tire_sizes_bp)
    app.register_blueprint(wheel_sizes_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(reports_bp)

    from .validation import StorageError

    @app.errorhandler(StorageError)
    def handle_storage_error(exc):
        app.logger.error("Storage failure: %s", exc.__cause__ or exc)
        return {"error": "Internal server error"}, 500

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
