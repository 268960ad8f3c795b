# agencia_app/services/dashboard.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from sqlalchemy import func

from pricing import D
from ..extensions import db
from ..models import Client, Contract, Payment, Service
from ..models.base import iso, money


def month_bounds(ref: datetime):
    """(início do mês anterior, início do mês corrente)."""
    current = datetime(ref.year, ref.month, 1)
    previous = (current - timedelta(days=1)).replace(day=1)
    return previous, current


def growth(current, previous) -> int:
    """Variação percentual arredondada (meio para cima, como Math.round)."""
    current, previous = D(current), D(previous)
    if previous > 0:
        pct = (current - previous) / previous * 100
        return int((pct + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))
    return 100 if current > 0 else 0


def _paid_sum(*criteria) -> Decimal:
    total = (db.session.query(func.coalesce(func.sum(Payment.amount), 0))
             .filter(Payment.status == "PAID", *criteria)
             .scalar())
    return D(total)


def dashboard_stats(now: Optional[datetime] = None, recent_limit: int = 5) -> dict:
    now = now or datetime.utcnow()
    prev_start, cur_start = month_bounds(now)

    total_clients = Client.query.count()
    total_contracts = Contract.query.filter_by(status="ACTIVE").count()
    total_revenue = _paid_sum()

    pending = (Payment.query.filter_by(status="PENDING")
               .order_by(Payment.due_date.asc()).all())
    pending_amount = sum((D(p.amount) for p in pending), Decimal("0"))

    recent = (Payment.query.order_by(Payment.created_at.desc())
              .limit(recent_limit).all())

    per_service = (db.session.query(Service.name, func.count(Contract.id))
                   .select_from(Contract)
                   .join(Service, Service.id == Contract.service_id)
                   .filter(Contract.status == "ACTIVE")
                   .group_by(Service.id, Service.name)
                   .order_by(Service.name.asc())
                   .all())

    # mês corrente: só limite inferior
    clients_cur = Client.query.filter(Client.created_at >= cur_start).count()
    clients_prev = Client.query.filter(
        Client.created_at >= prev_start, Client.created_at < cur_start
    ).count()
    revenue_cur = _paid_sum(Payment.payment_date >= cur_start.date())
    revenue_prev = _paid_sum(
        Payment.payment_date >= prev_start.date(), Payment.payment_date < cur_start.date()
    )

    return {
        "stats": {
            "totalClients": total_clients,
            "totalContracts": total_contracts,
            "totalRevenue": money(total_revenue),
            "pendingPayments": len(pending),
            "pendingAmount": money(pending_amount),
        },
        "recentPayments": [
            {
                "id": p.id,
                "client": p.client.name,
                "amount": money(p.amount),
                "status": p.status,
                "date": iso(p.payment_date or p.due_date),
            }
            for p in recent
        ],
        "pendingPayments": [
            {
                "id": p.id,
                "client": p.client.name,
                "service": p.contract.service.name,
                "amount": money(p.amount),
                "dueDate": iso(p.due_date),
                "description": p.description,
            }
            for p in pending
        ],
        "serviceStats": [
            {"service": name, "contracts": count} for name, count in per_service
        ],
        "growth": {
            "clients": growth(clients_cur, clients_prev),
            "revenue": growth(revenue_cur, revenue_prev),
        },
    }
