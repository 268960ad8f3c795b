# agencia_app/blueprints/payments.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import IntegrityError

from ..decorators import login_required
from ..errors import NotFoundError, ValidationError, delete_conflict
from ..extensions import db
from ..models import Client, Contract, Payment
from ..models.base import money
from ..schemas import PaymentPayload, parse_payload

bp = Blueprint("payments", __name__)


def _get_payment(payment_id: str) -> Payment:
    payment = db.session.get(Payment, payment_id)
    if payment is None:
        raise NotFoundError("Pagamento não encontrado")
    return payment


def _check_refs(data: PaymentPayload) -> None:
    contract = db.session.get(Contract, data.contract_id)
    if contract is None:
        raise NotFoundError("Contrato não encontrado")
    if db.session.get(Client, data.client_id) is None:
        raise NotFoundError("Cliente não encontrado")
    if contract.client_id != data.client_id:
        raise ValidationError("Contrato não pertence ao cliente informado")


def _apply(payment: Payment, data: PaymentPayload) -> None:
    payment.contract_id = data.contract_id
    payment.client_id = data.client_id
    payment.amount = data.amount
    payment.due_date = data.due_date
    payment.payment_date = data.payment_date
    payment.status = data.status
    payment.payment_method = data.payment_method
    payment.description = data.description


@bp.route("", methods=["GET"])
@login_required
def list_payments():
    payments = Payment.query.order_by(Payment.created_at.desc()).all()
    return jsonify([p.to_row() for p in payments])


@bp.route("/<payment_id>", methods=["GET"])
@login_required
def get_payment(payment_id):
    return jsonify(_get_payment(payment_id).to_row())


@bp.route("", methods=["POST"])
@login_required
def create_payment():
    data = parse_payload(PaymentPayload, request.get_json(silent=True))
    _check_refs(data)

    payment = Payment()
    _apply(payment, data)
    db.session.add(payment)
    db.session.commit()
    current_app.logger.info("Pagamento %s criado: valor=%s", payment.id, payment.amount)
    return jsonify(payment.to_row()), 201


@bp.route("/<payment_id>", methods=["PUT"])
@login_required
def update_payment(payment_id):
    payment = _get_payment(payment_id)
    data = parse_payload(PaymentPayload, request.get_json(silent=True))
    _check_refs(data)

    _apply(payment, data)
    db.session.commit()
    current_app.logger.info("Pagamento %s atualizado: status=%s", payment.id, payment.status)
    return jsonify(payment.to_row())


@bp.route("/<payment_id>", methods=["DELETE"])
@login_required
def delete_payment(payment_id):
    payment = _get_payment(payment_id)
    summary = {
        "id": payment.id,
        "client": payment.client.name if payment.client else None,
        "amount": money(payment.amount),
        "status": payment.status,
    }

    try:
        db.session.delete(payment)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise delete_conflict("o pagamento")

    current_app.logger.info("Pagamento %s excluído", payment_id)
    return jsonify({"message": "Pagamento excluído com sucesso", "deletedPayment": summary})
