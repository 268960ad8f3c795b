# agencia_app/models/payment.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db
from .base import new_id, iso, money

PAYMENT_STATUSES = ("PENDING", "PAID", "OVERDUE", "CANCELLED")
PAYMENT_METHODS = ("PIX", "BANK_TRANSFER", "CREDIT_CARD", "DEBIT_CARD", "CASH")


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    contract_id = db.Column(db.String(36), db.ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    # redundante com contract.client_id, mas é o que o dashboard consulta
    client_id = db.Column(db.String(36), db.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    due_date = db.Column(db.Date, nullable=False, index=True)
    payment_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="PENDING", index=True)
    payment_method = db.Column(db.String(20), nullable=False, default="PIX")
    description = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "contractId": self.contract_id,
            "clientId": self.client_id,
            "amount": money(self.amount),
            "dueDate": iso(self.due_date),
            "paymentDate": iso(self.payment_date),
            "status": self.status,
            "paymentMethod": self.payment_method,
            "description": self.description,
            "createdAt": iso(self.created_at),
        }

    def to_row(self) -> dict:
        """Formato achatado usado na listagem de pagamentos."""
        contract = self.contract
        return {
            "id": self.id,
            "client": self.client.name if self.client else None,
            "contract": contract.service.name if contract and contract.service else None,
            "amount": money(self.amount),
            "dueDate": iso(self.due_date),
            "paymentDate": iso(self.payment_date),
            "status": self.status,
            "paymentMethod": self.payment_method,
            "description": self.description,
            "contractId": self.contract_id,
            "clientId": self.client_id,
        }
