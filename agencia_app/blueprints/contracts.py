# agencia_app/blueprints/contracts.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from ..decorators import login_required
from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Client, Contract, Service, SubService, Plan
from ..schemas import ContractPayload, ContractUpdatePayload, parse_payload

bp = Blueprint("contracts", __name__)


def _require(model, obj_id, message):
    obj = db.session.get(model, obj_id)
    if obj is None:
        raise NotFoundError(message)
    return obj


def _check_refs(data) -> None:
    service = _require(Service, data.service_id, "Serviço não encontrado")
    if data.sub_service_id:
        sub = _require(SubService, data.sub_service_id, "Subserviço não encontrado")
        if sub.service_id != service.id:
            raise ValidationError("Subserviço não pertence ao serviço informado")
    if data.plan_id:
        _require(Plan, data.plan_id, "Plano não encontrado")
        # planos são globais, mas só valem para SOCIAL_MEDIA
        if service.type != "SOCIAL_MEDIA":
            raise ValidationError("Plano só pode ser usado com serviço de mídia social")


def _apply(contract: Contract, data) -> None:
    contract.service_id = data.service_id
    contract.sub_service_id = data.sub_service_id
    contract.plan_id = data.plan_id
    contract.start_date = data.start_date
    contract.end_date = data.end_date
    contract.status = data.status


@bp.route("", methods=["GET"])
@login_required
def list_contracts():
    contracts = Contract.query.order_by(Contract.created_at.desc()).all()
    return jsonify([c.to_dict(with_client=True) for c in contracts])


@bp.route("", methods=["POST"])
@login_required
def create_contract():
    data = parse_payload(ContractPayload, request.get_json(silent=True))
    client = _require(Client, data.client_id, "Cliente não encontrado")
    _check_refs(data)

    contract = Contract(client_id=client.id)
    _apply(contract, data)
    db.session.add(contract)
    db.session.commit()
    current_app.logger.info("Contrato %s criado para cliente %s", contract.id, client.id)
    return jsonify(contract.to_dict(with_client=True)), 201


@bp.route("", methods=["PUT"])
@login_required
def update_contract():
    data = parse_payload(ContractUpdatePayload, request.get_json(silent=True))
    contract = _require(Contract, data.id, "Contrato não encontrado")
    _check_refs(data)

    _apply(contract, data)
    db.session.commit()
    current_app.logger.info("Contrato %s atualizado", contract.id)
    return jsonify(contract.to_dict(with_client=True))
