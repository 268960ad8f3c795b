# agencia_app/models/service.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db
from .base import new_id, iso, money

SERVICE_TYPES = ("WEB_DEVELOPMENT", "PAID_TRAFFIC", "HOSTING", "SOCIAL_MEDIA")


class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(180), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    type = db.Column(db.String(30), nullable=False, index=True)   # ver SERVICE_TYPES
    base_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    # só para PAID_TRAFFIC: {"enabled": bool, "percentage": n, "description": "..."}
    traffic_discount = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sub_services = db.relationship(
        "SubService", backref="service", cascade="all, delete-orphan",
        order_by="SubService.price",
    )

    @property
    def plans(self):
        """
        Planos visíveis para o serviço. Os planos são globais: todo serviço
        SOCIAL_MEDIA enxerga a lista inteira, independente de plan.service_id.
        """
        if self.type != "SOCIAL_MEDIA":
            return []
        return Plan.query.order_by(Plan.price.asc(), Plan.name.asc()).all()

    def to_dict(self, with_children: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "basePrice": money(self.base_price),
            "trafficDiscount": self.traffic_discount,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_children:
            data["subServices"] = [s.to_dict() for s in self.sub_services]
            data["plans"] = [p.to_dict() for p in self.plans]
        return data


class SubService(db.Model):
    __tablename__ = "sub_services"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    service_id = db.Column(db.String(36), db.ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(180), nullable=False)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "serviceId": self.service_id,
            "name": self.name,
            "description": self.description,
            "price": money(self.price),
        }


class Plan(db.Model):
    __tablename__ = "plans"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    # informativo; a listagem não filtra por ele
    service_id = db.Column(db.String(36), db.ForeignKey("services.id", ondelete="SET NULL"), nullable=True, index=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, default="")
    posts_per_month = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "serviceId": self.service_id,
            "name": self.name,
            "description": self.description,
            "postsPerMonth": self.posts_per_month,
            "price": money(self.price),
        }
