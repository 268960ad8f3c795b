# agencia_app/services/provisioning.py
# -*- coding: utf-8 -*-
"""
Provisionamento de clientes: cria (ou substitui) o cliente, os contratos e
os pagamentos iniciais numa única transação.

Na edição a troca é total: pagamentos e contratos antigos do cliente são
apagados e gerados de novo a partir da lista de serviços enviada. Ajustes
manuais feitos em pagamentos (ex.: marcar como PAID) se perdem.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError

from pricing import MotorPrecificacao, ReferenciaInvalida, DescontoPersonalizado, LinhaContrato, Selecao
from ..errors import ValidationError, NotFoundError
from ..extensions import db
from ..models import Client, Contract, Payment, Service
from ..schemas import ClientPayload, ClientUpdatePayload

DUPLICATE_EMAIL = "Já existe um cliente com este e-mail"

motor = MotorPrecificacao()


@dataclass
class ProvisioningResult:
    client: Client
    contracts: List[Contract] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "client": self.client.to_dict(),
            "contracts": [c.to_dict() for c in self.contracts],
            "payments": [p.to_dict() for p in self.payments],
        }


def _load_service(service_id: str) -> Service:
    service = db.session.get(Service, service_id)
    if service is None:
        raise NotFoundError(f"Serviço com ID {service_id} não encontrado")
    return service


def _check_requirements(service: Service, selecao: Selecao) -> None:
    if service.type == "PAID_TRAFFIC" and not selecao.sub_service_ids:
        raise ValidationError(f"Selecione pelo menos um sub-serviço para {service.name}")
    if service.type == "SOCIAL_MEDIA" and not selecao.plan_id:
        raise ValidationError(f"Selecione um plano para {service.name}")


def payment_description(service: Service, linha: LinhaContrato) -> str:
    parts = ["Pagamento inicial", service.name]
    ref = linha.sub_service or linha.plan
    if ref is not None:
        parts.append(ref.name)
    text = " - ".join(parts)
    if linha.com_desconto:
        text += " (com desconto)"
    return text


def _provision(client: Client, payload: ClientPayload) -> Tuple[List[Contract], List[Payment]]:
    desconto: Optional[DescontoPersonalizado] = (
        payload.custom_discount.to_desconto() if payload.custom_discount else None
    )
    start = payload.service_start_date
    contracts: List[Contract] = []
    payments: List[Payment] = []

    for selection in payload.services:
        service = _load_service(selection.service_id)
        selecao = selection.to_selecao()
        _check_requirements(service, selecao)
        try:
            linhas = motor.linhas(service, selecao, desconto)
        except ReferenciaInvalida as exc:
            raise NotFoundError(str(exc))

        for linha in linhas:
            contract = Contract(
                client=client,
                service_id=service.id,
                sub_service_id=linha.sub_service.id if linha.sub_service is not None else None,
                plan_id=linha.plan.id if linha.plan is not None else None,
                status="ACTIVE",
                start_date=start,
            )
            db.session.add(contract)
            payment = Payment(
                contract=contract,
                client=client,
                amount=linha.valor,
                due_date=start,
                status="PENDING",
                payment_method="PIX",
                description=payment_description(service, linha),
            )
            db.session.add(payment)
            db.session.flush()

            current_app.logger.info(
                "Contrato %s criado: cliente=%s serviço=%s", contract.id, client.id, service.id
            )
            current_app.logger.info(
                "Pagamento %s criado: contrato=%s valor=%s", payment.id, contract.id, payment.amount
            )
            contracts.append(contract)
            payments.append(payment)

    return contracts, payments


def _email_in_use(email: str, except_id: Optional[str] = None) -> bool:
    q = Client.query.filter(Client.email == email)
    if except_id:
        q = q.filter(Client.id != except_id)
    return q.first() is not None


def _is_email_violation(exc: IntegrityError) -> bool:
    return "email" in str(exc.orig).lower()


def create_client(payload: ClientPayload) -> ProvisioningResult:
    """Cliente + contratos + pagamentos iniciais; tudo ou nada."""
    if _email_in_use(payload.email):
        raise ValidationError(DUPLICATE_EMAIL)

    try:
        client = Client(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            company=payload.company,
            service_start_date=payload.service_start_date,
        )
        db.session.add(client)
        db.session.flush()
        current_app.logger.info("Cliente %s criado (%s)", client.id, client.email)

        contracts, payments = _provision(client, payload)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if _is_email_violation(exc):
            raise ValidationError(DUPLICATE_EMAIL)
        raise
    except Exception:
        db.session.rollback()
        raise

    return ProvisioningResult(client, contracts, payments)


def replace_client(client_id: str, payload: ClientPayload) -> ProvisioningResult:
    """Atualiza o cliente e troca todos os contratos/pagamentos dele."""
    client = db.session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Cliente não encontrado")
    if payload.email != client.email and _email_in_use(payload.email, except_id=client.id):
        raise ValidationError(DUPLICATE_EMAIL)

    try:
        client.name = payload.name
        client.email = payload.email
        client.phone = payload.phone
        client.company = payload.company
        client.service_start_date = payload.service_start_date

        # pagamentos antes dos contratos (FK)
        removed_payments = Payment.query.filter_by(client_id=client.id).delete()
        removed_contracts = Contract.query.filter_by(client_id=client.id).delete()
        db.session.expire(client, ["contracts", "payments"])
        current_app.logger.info(
            "Cliente %s: %s contrato(s) e %s pagamento(s) substituídos",
            client.id, removed_contracts, removed_payments,
        )

        contracts, payments = _provision(client, payload)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if _is_email_violation(exc):
            raise ValidationError(DUPLICATE_EMAIL)
        raise
    except Exception:
        db.session.rollback()
        raise

    return ProvisioningResult(client, contracts, payments)


def update_client(payload: ClientUpdatePayload) -> ProvisioningResult:
    return replace_client(payload.id, payload)
