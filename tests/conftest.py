# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import pathlib
import tempfile
from decimal import Decimal
from types import SimpleNamespace

import pytest

# =====================================================================================
# Ambiente de testes: precisa estar definido antes de importar config/app
# =====================================================================================
_fd, DB_PATH = tempfile.mkstemp(prefix="agencia_test_", suffix=".sqlite")
os.close(_fd)
os.environ["APP_ENV"] = "testing"
os.environ["FLASK_ENV"] = "testing"
os.environ["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{DB_PATH}"
os.environ.setdefault("SECRET_KEY", "testing-secret")


# =====================================================================================
# Localização do projeto (garante que "agencia_app" esteja no sys.path)
# =====================================================================================
def _add_project_root():
    here = pathlib.Path(__file__).resolve()
    for candidate in [here.parent, *here.parents]:
        if (candidate / "agencia_app").is_dir():
            if str(candidate) not in sys.path:
                sys.path.insert(0, str(candidate))
            return candidate
    return None


PROJECT_ROOT = _add_project_root()


# =====================================================================================
# App Flask com SQLite temporário e schema criado uma vez por sessão
# =====================================================================================
@pytest.fixture(scope="session")
def app():
    from config import TestingConfig
    from agencia_app import create_app
    from agencia_app.extensions import db

    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
    try:
        os.remove(DB_PATH)
    except OSError:
        pass


# =====================================================================================
# Cada teste começa com as tabelas vazias
# =====================================================================================
@pytest.fixture(autouse=True)
def _clean_tables(app):
    from agencia_app.extensions import db
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
    yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    from agencia_app.extensions import db
    with app.app_context():
        try:
            yield db.session
        finally:
            db.session.rollback()
            db.session.remove()


# =====================================================================================
# Usuários e clientes logados
# =====================================================================================
def _make_user(db_session, email, role="MANAGER", password="secret123", active=True):
    from agencia_app.models import User
    u = User(name=email.split("@")[0].title(), email=email, role=role, active=active)
    u.set_password(password)
    db_session.add(u)
    db_session.commit()
    return u


@pytest.fixture
def make_user(db_session):
    def _factory(email, **kw):
        return _make_user(db_session, email, **kw)
    return _factory


@pytest.fixture
def user_admin(db_session):
    return _make_user(db_session, "admin@test.com", role="ADMIN")


@pytest.fixture
def user_manager(db_session):
    return _make_user(db_session, "gerente@test.com", role="MANAGER")


@pytest.fixture
def logged_client(client, user_manager):
    with client.session_transaction() as sess:
        sess["user"] = user_manager.session_data()
    return client


@pytest.fixture
def logged_client_admin(client, user_admin):
    with client.session_transaction() as sess:
        sess["user"] = user_admin.session_data()
    return client


# =====================================================================================
# Catálogo igual ao do seed (com desconto de pacote de 10% no tráfego pago)
# =====================================================================================
@pytest.fixture
def catalog(db_session):
    from agencia_app.models import Service, SubService, Plan

    web = Service(id="web-dev", name="Desenvolvimento Web", description="Sites",
                  type="WEB_DEVELOPMENT", base_price=Decimal("2500"))
    traffic = Service(id="paid-traffic", name="Tráfego Pago", description="Campanhas",
                      type="PAID_TRAFFIC", base_price=Decimal("1800"),
                      traffic_discount={"enabled": True, "percentage": 10, "description": "Pacote"})
    traffic.sub_services = [
        SubService(id="meta-ads", name="Meta Ads", description="", price=Decimal("1200")),
        SubService(id="google-ads", name="Google Ads", description="", price=Decimal("1500")),
    ]
    hosting = Service(id="hosting", name="Hospedagem", description="Servidores",
                      type="HOSTING", base_price=Decimal("150"))
    social = Service(id="social-media", name="Social Media", description="Conteúdo",
                     type="SOCIAL_MEDIA", base_price=Decimal("0"))
    db_session.add_all([web, traffic, hosting, social])
    db_session.flush()

    plans = [
        Plan(id="start", service_id="social-media", name="Plano Start", posts_per_month=4, price=Decimal("500")),
        Plan(id="pro", service_id="social-media", name="Plano Pro", posts_per_month=8, price=Decimal("800")),
        Plan(id="business", service_id="social-media", name="Plano Business", posts_per_month=12, price=Decimal("1200")),
        Plan(id="premium", service_id="social-media", name="Plano Premium", posts_per_month=30, price=Decimal("2000")),
    ]
    db_session.add_all(plans)
    db_session.commit()
    return SimpleNamespace(web=web, traffic=traffic, hosting=hosting, social=social, plans=plans)


def client_body(**overrides):
    body = {
        "name": "Ana Lima",
        "email": "ana@cliente.com",
        "phone": "(11) 98888-7777",
        "company": "Lima LTDA",
        "serviceStartDate": "2024-03-01",
        "services": [{"serviceId": "web-dev"}],
    }
    body.update(overrides)
    return body


@pytest.fixture
def client_payload():
    return client_body
