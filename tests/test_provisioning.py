# tests/test_provisioning.py
# -*- coding: utf-8 -*-
from datetime import date
from decimal import Decimal

import pytest

from agencia_app.errors import NotFoundError, ValidationError
from agencia_app.models import Client, Contract, Payment
from agencia_app.schemas import ClientPayload, ClientUpdatePayload, parse_payload
from agencia_app.services.provisioning import create_client, replace_client


def _payload(client_payload, **overrides):
    return parse_payload(ClientPayload, client_payload(**overrides))


def test_cria_cliente_com_dois_servicos(app, db_session, catalog, client_payload):
    payload = _payload(client_payload, services=[
        {"serviceId": "web-dev"},
        {"serviceId": "hosting"},
    ])
    result = create_client(payload)

    assert result.client.phone == "11988887777"
    assert len(result.contracts) == 2
    assert len(result.payments) == 2
    for p in result.payments:
        assert p.status == "PENDING"
        assert p.payment_method == "PIX"
        assert p.due_date == date(2024, 3, 1)
    for c in result.contracts:
        assert c.status == "ACTIVE"
        assert c.start_date == date(2024, 3, 1)

    amounts = sorted(Decimal(p.amount) for p in result.payments)
    assert amounts == [Decimal("150.00"), Decimal("2500.00")]
    assert db_session.query(Contract).count() == 2
    assert db_session.query(Payment).count() == 2


def test_trafego_com_dois_subservicos_gera_dois_contratos(app, db_session, catalog, client_payload):
    payload = _payload(client_payload, services=[
        {"serviceId": "paid-traffic", "subServiceIds": ["meta-ads", "google-ads"]},
    ])
    result = create_client(payload)

    by_sub = {c.sub_service_id: c for c in result.contracts}
    assert set(by_sub) == {"meta-ads", "google-ads"}
    assert all(c.plan_id is None for c in result.contracts)

    by_contract = {p.contract_id: p for p in result.payments}
    assert Decimal(by_contract[by_sub["meta-ads"].id].amount) == Decimal("1080.00")
    assert Decimal(by_contract[by_sub["google-ads"].id].amount) == Decimal("1350.00")
    assert by_contract[by_sub["meta-ads"].id].description == (
        "Pagamento inicial - Tráfego Pago - Meta Ads (com desconto)"
    )


def test_plano_e_desconto_personalizado(app, db_session, catalog, client_payload):
    payload = _payload(
        client_payload,
        services=[{"serviceId": "social-media", "planId": "pro"}],
        customDiscount={"enabled": True, "type": "percentage", "value": 15},
    )
    result = create_client(payload)

    [contract] = result.contracts
    [payment] = result.payments
    assert contract.plan_id == "pro"
    assert Decimal(payment.amount) == Decimal("680.00")
    assert payment.description == "Pagamento inicial - Social Media - Plano Pro (com desconto)"


def test_descricao_sem_desconto(app, db_session, catalog, client_payload):
    result = create_client(_payload(client_payload))
    assert result.payments[0].description == "Pagamento inicial - Desenvolvimento Web"


def test_email_duplicado_nao_cria_nada(app, db_session, catalog, client_payload):
    create_client(_payload(client_payload))
    before = db_session.query(Client).count()

    with pytest.raises(ValidationError) as exc:
        create_client(_payload(client_payload, name="Outra Pessoa"))
    assert exc.value.message == "Já existe um cliente com este e-mail"
    assert db_session.query(Client).count() == before


def test_servico_inexistente_desfaz_tudo(app, db_session, catalog, client_payload):
    payload = _payload(client_payload, services=[
        {"serviceId": "web-dev"},
        {"serviceId": "nao-existe"},
    ])
    with pytest.raises(NotFoundError):
        create_client(payload)

    assert db_session.query(Client).count() == 0
    assert db_session.query(Contract).count() == 0
    assert db_session.query(Payment).count() == 0


def test_subservico_de_outro_servico_e_rejeitado(app, db_session, catalog, client_payload):
    payload = _payload(client_payload, services=[
        {"serviceId": "paid-traffic", "subServiceId": "inexistente"},
    ])
    with pytest.raises(NotFoundError):
        create_client(payload)
    assert db_session.query(Client).count() == 0


@pytest.mark.parametrize("selection, message", [
    ({"serviceId": "paid-traffic"}, "sub-serviço"),
    ({"serviceId": "social-media"}, "plano"),
])
def test_tipos_que_exigem_escolha(app, db_session, catalog, client_payload, selection, message):
    with pytest.raises(ValidationError) as exc:
        create_client(_payload(client_payload, services=[selection]))
    assert message in exc.value.message
    assert db_session.query(Client).count() == 0


def test_edicao_substitui_contratos_e_pagamentos(app, db_session, catalog, client_payload):
    created = create_client(_payload(client_payload, services=[
        {"serviceId": "web-dev"},
        {"serviceId": "hosting"},
    ]))
    client_id = created.client.id

    # ajuste manual que a edição descarta
    created.payments[0].status = "PAID"
    db_session.commit()

    body = client_payload(id=client_id, name="Ana Lima Souza",
                          services=[{"serviceId": "hosting"}])
    result = replace_client(client_id, parse_payload(ClientUpdatePayload, body))

    assert result.client.name == "Ana Lima Souza"
    assert db_session.query(Contract).filter_by(client_id=client_id).count() == 1
    payments = db_session.query(Payment).filter_by(client_id=client_id).all()
    assert len(payments) == 1
    assert payments[0].status == "PENDING"
    assert Decimal(payments[0].amount) == Decimal("150.00")


def test_edicao_cliente_inexistente(app, db_session, catalog, client_payload):
    with pytest.raises(NotFoundError):
        replace_client("nao-existe", _payload(client_payload))


def test_edicao_com_email_de_outro_cliente(app, db_session, catalog, client_payload):
    create_client(_payload(client_payload, email="primeiro@x.com"))
    second = create_client(_payload(client_payload, email="segundo@x.com"))

    with pytest.raises(ValidationError):
        replace_client(second.client.id, _payload(client_payload, email="primeiro@x.com"))
    assert db_session.get(Client, second.client.id).email == "segundo@x.com"


def test_edicao_com_erro_mantem_contratos_antigos(app, db_session, catalog, client_payload):
    created = create_client(_payload(client_payload))
    client_id = created.client.id

    with pytest.raises(NotFoundError):
        replace_client(client_id, _payload(client_payload, services=[{"serviceId": "nao-existe"}]))

    assert db_session.query(Contract).filter_by(client_id=client_id).count() == 1
    assert db_session.query(Payment).filter_by(client_id=client_id).count() == 1
