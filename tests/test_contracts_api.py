# tests/test_contracts_api.py
# -*- coding: utf-8 -*-
from datetime import date

import pytest

from agencia_app.models import Client, Contract


@pytest.fixture
def cliente(db_session, catalog):
    c = Client(name="Carla", email="carla@x.com", phone="11999999999", company="C",
               service_start_date=date(2024, 2, 1))
    db_session.add(c)
    db_session.commit()
    return c


def test_cria_contrato(logged_client, db_session, cliente):
    r = logged_client.post("/api/contracts", json={
        "clientId": cliente.id,
        "serviceId": "paid-traffic",
        "subServiceId": "meta-ads",
        "startDate": "2024-02-10",
    })
    assert r.status_code == 201
    data = r.get_json()
    assert data["status"] == "ACTIVE"
    assert data["startDate"] == "2024-02-10"
    assert data["subService"]["id"] == "meta-ads"
    assert data["client"]["id"] == cliente.id


def test_cria_contrato_obrigatorios(logged_client, db_session, cliente):
    r = logged_client.post("/api/contracts", json={"clientId": cliente.id, "serviceId": "web-dev"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Cliente, serviço e data de início são obrigatórios"


@pytest.mark.parametrize("overrides, message", [
    ({"clientId": "x"}, "Cliente não encontrado"),
    ({"serviceId": "x"}, "Serviço não encontrado"),
    ({"subServiceId": "x"}, "Subserviço não encontrado"),
    ({"planId": "x"}, "Plano não encontrado"),
])
def test_cria_contrato_referencias(logged_client, db_session, cliente, overrides, message):
    body = {"clientId": cliente.id, "serviceId": "web-dev", "startDate": "2024-02-10"}
    body.update(overrides)
    r = logged_client.post("/api/contracts", json=body)
    assert r.status_code == 404
    assert r.get_json()["error"] == message


def test_status_invalido(logged_client, db_session, cliente):
    r = logged_client.post("/api/contracts", json={
        "clientId": cliente.id, "serviceId": "web-dev", "startDate": "2024-02-10", "status": "PAUSED",
    })
    assert r.status_code == 400


def test_lista_mais_recentes_primeiro(logged_client, db_session, cliente):
    for service_id in ("web-dev", "hosting"):
        logged_client.post("/api/contracts", json={
            "clientId": cliente.id, "serviceId": service_id, "startDate": "2024-02-10",
        })
    r = logged_client.get("/api/contracts")
    assert r.status_code == 200
    data = r.get_json()
    assert len(data) == 2
    assert {c["service"]["id"] for c in data} == {"web-dev", "hosting"}
    assert data[0]["createdAt"] >= data[1]["createdAt"]


def test_atualiza_contrato(logged_client, db_session, cliente):
    ct = Contract(client_id=cliente.id, service_id="web-dev", start_date=date(2024, 2, 1))
    db_session.add(ct)
    db_session.commit()

    r = logged_client.put("/api/contracts", json={
        "id": ct.id,
        "serviceId": "social-media",
        "planId": "premium",
        "startDate": "2024-03-01",
        "endDate": "2024-12-31",
        "status": "COMPLETED",
    })
    assert r.status_code == 200
    row = db_session.get(Contract, ct.id)
    assert row.service_id == "social-media"
    assert row.plan_id == "premium"
    assert row.end_date == date(2024, 12, 31)
    assert row.status == "COMPLETED"


def test_atualiza_contrato_inexistente(logged_client, db_session, cliente):
    r = logged_client.put("/api/contracts", json={
        "id": "nao-existe", "serviceId": "web-dev", "startDate": "2024-03-01",
    })
    assert r.status_code == 404
    assert r.get_json()["error"] == "Contrato não encontrado"


@pytest.mark.parametrize("overrides, message", [
    ({"serviceId": "web-dev", "subServiceId": "meta-ads"},
     "Subserviço não pertence ao serviço informado"),
    ({"serviceId": "paid-traffic", "subServiceId": "meta-ads", "planId": "pro"},
     "Plano só pode ser usado com serviço de mídia social"),
    ({"serviceId": "web-dev", "planId": "pro"},
     "Plano só pode ser usado com serviço de mídia social"),
])
def test_cria_contrato_referencias_incoerentes(logged_client, db_session, cliente, overrides, message):
    body = {"clientId": cliente.id, "startDate": "2024-02-10"}
    body.update(overrides)
    r = logged_client.post("/api/contracts", json=body)
    assert r.status_code == 400
    assert r.get_json()["error"] == message
    assert db_session.query(Contract).count() == 0


def test_atualiza_contrato_com_subservico_de_outro_servico(logged_client, db_session, cliente):
    ct = Contract(client_id=cliente.id, service_id="paid-traffic", sub_service_id="meta-ads",
                  start_date=date(2024, 2, 1))
    db_session.add(ct)
    db_session.commit()

    r = logged_client.put("/api/contracts", json={
        "id": ct.id, "serviceId": "hosting", "subServiceId": "meta-ads", "startDate": "2024-03-01",
    })
    assert r.status_code == 400
    assert db_session.get(Contract, ct.id).service_id == "paid-traffic"
