# agencia_app/models/client.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db
from .base import new_id, iso


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(180), nullable=False)
    email = db.Column(db.String(180), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=False)       # só dígitos
    company = db.Column(db.String(180), nullable=False)
    service_start_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # excluir o cliente leva junto contratos e pagamentos
    contracts = db.relationship(
        "Contract", backref="client", cascade="all, delete-orphan",
        order_by="Contract.created_at",
    )
    payments = db.relationship("Payment", backref="client", cascade="all, delete-orphan")

    def to_dict(self, with_contracts: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "serviceStartDate": iso(self.service_start_date),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_contracts:
            data["contracts"] = [c.to_dict() for c in self.contracts]
        return data
