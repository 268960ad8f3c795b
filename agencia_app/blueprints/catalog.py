# agencia_app/blueprints/catalog.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..decorators import login_required
from ..errors import NotFoundError, ValidationError, delete_conflict
from ..extensions import db
from ..models import Service, SubService, Plan, Contract
from ..schemas import ServicePayload, parse_payload

bp = Blueprint("catalog", __name__)


def _get_service(service_id: str) -> Service:
    service = db.session.get(Service, service_id)
    if service is None:
        raise NotFoundError("Serviço não encontrado")
    return service


def _active_contracts_by_service() -> dict:
    rows = (db.session.query(Contract.service_id, func.count(Contract.id))
            .filter(Contract.status == "ACTIVE")
            .group_by(Contract.service_id)
            .all())
    return {service_id: total for service_id, total in rows}


def _apply_scalars(service: Service, data: ServicePayload) -> None:
    service.name = data.name
    service.description = data.description
    service.type = data.type
    service.base_price = data.base_price
    service.traffic_discount = data.traffic_discount.as_json() if data.traffic_discount else None


def _sync_sub_services(service: Service, items) -> None:
    """Atualiza os que vieram com id, cria os novos e remove os ausentes."""
    existing = {s.id: s for s in service.sub_services}
    keep = set()
    for item in items:
        sub = existing.get(item.id) if item.id else None
        if sub is None:
            sub = SubService()
            service.sub_services.append(sub)
        sub.name = item.name
        sub.description = item.description
        sub.price = item.price
        if sub.id:
            keep.add(sub.id)
    for sub_id, sub in existing.items():
        if sub_id not in keep:
            service.sub_services.remove(sub)


def _sync_plans(service: Service, items) -> None:
    # planos são globais: a lista enviada substitui a lista inteira
    existing = {p.id: p for p in Plan.query.all()}
    keep = set()
    for item in items:
        plan = existing.get(item.id) if item.id else None
        if plan is None:
            plan = Plan(service_id=service.id)
            db.session.add(plan)
        plan.name = item.name
        plan.description = item.description
        plan.posts_per_month = item.posts_per_month
        plan.price = item.price
        if plan.id:
            keep.add(plan.id)
    for plan_id, plan in existing.items():
        if plan_id not in keep:
            db.session.delete(plan)


def _commit_catalog(entity: str) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise delete_conflict(entity)


@bp.route("", methods=["GET"])
@login_required
def list_services():
    counts = _active_contracts_by_service()
    services = Service.query.order_by(Service.name.asc()).all()
    out = []
    for s in services:
        data = s.to_dict()
        data["contracts"] = counts.get(s.id, 0)
        out.append(data)
    return jsonify(out)


@bp.route("/<service_id>", methods=["GET"])
@login_required
def get_service(service_id):
    return jsonify(_get_service(service_id).to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_service():
    data = parse_payload(ServicePayload, request.get_json(silent=True))

    service = Service()
    _apply_scalars(service, data)
    db.session.add(service)
    db.session.flush()

    if data.type == "PAID_TRAFFIC":
        for item in data.sub_services:
            service.sub_services.append(
                SubService(name=item.name, description=item.description, price=item.price)
            )
    if data.type == "SOCIAL_MEDIA":
        for item in data.plans:
            db.session.add(Plan(
                service_id=service.id, name=item.name, description=item.description,
                posts_per_month=item.posts_per_month, price=item.price,
            ))

    db.session.commit()
    current_app.logger.info("Serviço %s criado (%s)", service.id, service.type)
    return jsonify(service.to_dict()), 201


@bp.route("/<service_id>", methods=["PUT"])
@login_required
def update_service(service_id):
    data = parse_payload(ServicePayload, request.get_json(silent=True))
    service = _get_service(service_id)

    _apply_scalars(service, data)
    if data.type == "PAID_TRAFFIC":
        _sync_sub_services(service, data.sub_services)
        _commit_catalog("o sub-serviço")
    elif data.type == "SOCIAL_MEDIA":
        _sync_plans(service, data.plans)
        _commit_catalog("o plano")
    else:
        db.session.commit()

    current_app.logger.info("Serviço %s atualizado", service.id)
    return jsonify(service.to_dict())


@bp.route("/<service_id>", methods=["DELETE"])
@login_required
def delete_service(service_id):
    service = _get_service(service_id)

    active = Contract.query.filter_by(service_id=service.id, status="ACTIVE").count()
    if active > 0:
        raise ValidationError("Não é possível excluir um serviço com contratos ativos")

    db.session.delete(service)
    _commit_catalog("o serviço")
    current_app.logger.info("Serviço %s excluído", service_id)
    return jsonify({"message": "Serviço excluído com sucesso"})
