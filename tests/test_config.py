# tests/test_config.py
from datetime import timedelta

import pytest

from config import Config, TestingConfig, ProductionConfig, StagingConfig
from agencia_app import create_app


@pytest.mark.parametrize("env, cls", [
    ("testing", TestingConfig),
    ("staging", StagingConfig),
    ("production", ProductionConfig),
    ("", Config),
])
def test_app_env_escolhe_a_classe(monkeypatch, env, cls):
    monkeypatch.setenv("APP_ENV", env)
    app = create_app()
    assert app.config["SQLALCHEMY_DATABASE_URI"] == cls.SQLALCHEMY_DATABASE_URI
    assert app.config["SESSION_COOKIE_NAME"] == cls.SESSION_COOKIE_NAME


def test_classe_explicita_vence_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    app = create_app(TestingConfig)
    assert app.config["TESTING"] is True


def test_testing_config(app):
    assert app.config["TESTING"] is True
    assert app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///")
    assert app.config["DASHBOARD_RECENT_PAYMENTS"] == 5
    assert app.permanent_session_lifetime == timedelta(days=7)


def test_production_exige_cookie_seguro():
    assert ProductionConfig.SESSION_COOKIE_SECURE is True


def test_rotas_desconhecidas_em_json(client):
    r = client.get("/api/nao-existe")
    assert r.status_code == 404
    assert "error" in r.get_json()


def test_index_e_health(client):
    assert client.get("/").get_json()["status"] == "ok"
    assert client.get("/api/health").get_json() == {"status": "ok", "database": "ok"}
