# agencia_app/models/contract.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db
from .base import new_id, iso

CONTRACT_STATUSES = ("ACTIVE", "INACTIVE", "CANCELLED", "COMPLETED")


class Contract(db.Model):
    __tablename__ = "contracts"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    client_id = db.Column(db.String(36), db.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    # sem cascade: serviço com contratos não pode sumir
    service_id = db.Column(db.String(36), db.ForeignKey("services.id"), nullable=False, index=True)
    sub_service_id = db.Column(db.String(36), db.ForeignKey("sub_services.id"), nullable=True)
    plan_id = db.Column(db.String(36), db.ForeignKey("plans.id"), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="ACTIVE", index=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    service = db.relationship("Service")
    sub_service = db.relationship("SubService")
    plan = db.relationship("Plan")
    payments = db.relationship("Payment", backref="contract", cascade="all, delete-orphan")

    def to_dict(self, with_client: bool = False) -> dict:
        data = {
            "id": self.id,
            "clientId": self.client_id,
            "serviceId": self.service_id,
            "subServiceId": self.sub_service_id,
            "planId": self.plan_id,
            "status": self.status,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "createdAt": iso(self.created_at),
            "service": self.service.to_dict(with_children=False) if self.service else None,
            "subService": self.sub_service.to_dict() if self.sub_service else None,
            "plan": self.plan.to_dict() if self.plan else None,
        }
        if with_client:
            data["client"] = self.client.to_dict() if self.client else None
        return data
