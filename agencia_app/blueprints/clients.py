# agencia_app/blueprints/clients.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from ..decorators import login_required
from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Client
from ..schemas import ClientPayload, ClientUpdatePayload, parse_payload
from ..services.provisioning import create_client, update_client

bp = Blueprint("clients", __name__)


@bp.route("", methods=["GET"])
@login_required
def list_clients():
    clients = Client.query.order_by(Client.name.asc()).all()
    return jsonify([c.to_dict(with_contracts=True) for c in clients])


@bp.route("", methods=["POST"])
@login_required
def create():
    payload = parse_payload(ClientPayload, request.get_json(silent=True))
    result = create_client(payload)
    return jsonify(result.to_dict()), 201


@bp.route("", methods=["PUT"])
@login_required
def update():
    payload = parse_payload(ClientUpdatePayload, request.get_json(silent=True))
    result = update_client(payload)
    return jsonify(result.to_dict())


@bp.route("", methods=["DELETE"])
@login_required
def delete():
    client_id = request.args.get("id")
    if not client_id:
        raise ValidationError("ID do cliente é obrigatório")

    client = db.session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Cliente não encontrado")

    # contratos e pagamentos vão junto (cascade)
    db.session.delete(client)
    db.session.commit()
    current_app.logger.info("Cliente %s excluído", client_id)
    return jsonify({"message": "Cliente excluído com sucesso"})
