# agencia_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from datetime import datetime, timedelta

from flask import Flask
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .extensions import db, bcrypt, migrate, init_extensions, register_cli
from .errors import register_error_handlers
from .blueprints.core import bp as core_bp
from .blueprints.auth import bp as auth_bp
from .blueprints.catalog import bp as catalog_bp
from .blueprints.clients import bp as clients_bp
from .blueprints.contracts import bp as contracts_bp
from .blueprints.payments import bp as payments_bp
from .blueprints.dashboard import bp as dashboard_bp
from .blueprints.settings import bp as settings_bp

CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__)

    if config_object is None:
        app_env = os.getenv("APP_ENV", "").lower()
        config_object = CONFIGS.get(app_env, Config)
    app.config.from_object(config_object)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_LIFETIME_DAYS"])
    app.config["STARTED_AT"] = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

    # Extensões (DB/Bcrypt/Migrate)
    init_extensions(app)

    # Blueprints (API JSON)
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(catalog_bp, url_prefix="/api/services")
    app.register_blueprint(clients_bp, url_prefix="/api/clients")
    app.register_blueprint(contracts_bp, url_prefix="/api/contracts")
    app.register_blueprint(payments_bp, url_prefix="/api/payments")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")

    register_error_handlers(app)
    # CLI (flask init-db / flask seed)
    register_cli(app)
    return app


__all__ = ["create_app", "db", "bcrypt", "migrate"]
