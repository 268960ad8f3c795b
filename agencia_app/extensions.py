# agencia_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from sqlalchemy import event, text
from sqlalchemy.engine import Engine


db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_conn, _conn_record):
    # só em sqlite3: sem isso as FKs (e o ON DELETE) são ignoradas
    if isinstance(dbapi_conn, sqlite3.Connection):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_extensions(app):
    # DB/Bcrypt/Migrate
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)


def register_cli(app):
    @app.cli.command("init-db")
    def init_db_cmd():
        """Cria as tabelas iniciais (DEV). Para produção: use flask db upgrade."""
        with app.app_context():
            # sanity check
            db.session.execute(text("SELECT 1"))
            db.create_all()
            print("Tabelas criadas.")

    @app.cli.command("seed")
    def seed_cmd():
        """Popula usuários, catálogo de serviços e clientes de exemplo."""
        from .services.seed import run_seed

        with app.app_context():
            db.create_all()
            counts = run_seed()
        for name, total in counts.items():
            print(f"{name}: {total}")
        print("Seed concluído.")
