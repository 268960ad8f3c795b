# agencia_app/services/seed.py
# -*- coding: utf-8 -*-
"""Dados iniciais (flask seed). Só cria o que ainda não existe."""
from __future__ import annotations

from datetime import date

from flask import current_app

from ..extensions import db
from ..models import User, Service, SubService, Plan, Client, Contract, Payment

USERS = [
    ("admin@empresa.com", "Administrador Principal", "ADMIN", "SEED_ADMIN_PASSWORD"),
    ("gerente@empresa.com", "Gerente de Projetos", "MANAGER", "SEED_MANAGER_PASSWORD"),
]

SERVICES = [
    dict(id="web-dev", name="Desenvolvimento Web",
         description="Criação de sites institucionais, e-commerces e landing pages",
         type="WEB_DEVELOPMENT", base_price=2500),
    dict(id="paid-traffic", name="Tráfego Pago",
         description="Gestão de campanhas no Meta Ads e Google Ads",
         type="PAID_TRAFFIC", base_price=1800),
    dict(id="hosting", name="Hospedagem de Sites",
         description="Servidores otimizados para performance, backups automáticos e SSL incluso",
         type="HOSTING", base_price=150),
    dict(id="social-media", name="Social Media",
         description="Planejamento e execução de conteúdo para redes sociais",
         type="SOCIAL_MEDIA", base_price=0),
]

SUB_SERVICES = [
    dict(id="meta-ads", service_id="paid-traffic", name="Meta Ads (Facebook/Instagram)",
         description="Campanhas no Facebook e Instagram", price=1200),
    dict(id="google-ads", service_id="paid-traffic", name="Google Ads",
         description="Campanhas no Google Search e Display", price=1500),
]

PLANS = [
    dict(id="start", service_id="social-media", name="Plano Start",
         description="Até 4 posts/mês", posts_per_month=4, price=500),
    dict(id="pro", service_id="social-media", name="Plano Pro",
         description="Até 8 posts/mês", posts_per_month=8, price=800),
    dict(id="business", service_id="social-media", name="Plano Business",
         description="Até 12 posts/mês", posts_per_month=12, price=1200),
    dict(id="premium", service_id="social-media", name="Plano Premium",
         description="Conteúdo diário + stories + reels", posts_per_month=30, price=2000),
]

CLIENTS = [
    dict(id="client-1", name="João Silva", email="joao@empresa.com",
         phone="(11) 99999-9999", company="Empresa ABC", service_start_date=date(2024, 1, 15)),
    dict(id="client-2", name="Maria Santos", email="maria@startup.com",
         phone="(11) 88888-8888", company="Startup XYZ", service_start_date=date(2024, 1, 10)),
    dict(id="client-3", name="Pedro Costa", email="pedro@consultoria.com",
         phone="(11) 77777-7777", company="Consultoria 123", service_start_date=date(2024, 1, 5)),
]

CONTRACTS = [
    dict(id="contract-1", client_id="client-1", service_id="web-dev",
         status="ACTIVE", start_date=date(2024, 1, 15)),
    dict(id="contract-2", client_id="client-2", service_id="paid-traffic",
         sub_service_id="meta-ads", status="ACTIVE", start_date=date(2024, 1, 10)),
    dict(id="contract-3", client_id="client-3", service_id="social-media",
         plan_id="pro", status="ACTIVE", start_date=date(2024, 1, 5)),
]

PAYMENTS = [
    dict(id="payment-1", contract_id="contract-1", client_id="client-1", amount=2500,
         due_date=date(2024, 1, 15), payment_date=date(2024, 1, 14), status="PAID",
         payment_method="PIX", description="Pagamento mensal - Janeiro 2024"),
    dict(id="payment-2", contract_id="contract-2", client_id="client-2", amount=1800,
         due_date=date(2024, 1, 20), status="PENDING",
         payment_method="BANK_TRANSFER", description="Pagamento mensal - Janeiro 2024"),
    dict(id="payment-3", contract_id="contract-3", client_id="client-3", amount=1200,
         due_date=date(2024, 1, 10), status="OVERDUE",
         payment_method="CREDIT_CARD", description="Pagamento mensal - Janeiro 2024"),
]


def _upsert(model, rows) -> int:
    created = 0
    for row in rows:
        if db.session.get(model, row["id"]) is None:
            db.session.add(model(**row))
            created += 1
    db.session.flush()
    return created


def seed_users() -> int:
    created = 0
    for email, name, role, password_key in USERS:
        if User.query.filter_by(email=email).first():
            continue
        u = User(email=email, name=name, role=role)
        u.set_password(current_app.config[password_key])
        db.session.add(u)
        created += 1
    db.session.flush()
    return created


def run_seed() -> dict:
    """Popula o banco e devolve quantos registros de cada tipo foram criados."""
    try:
        counts = {
            "usuarios": seed_users(),
            "servicos": _upsert(Service, SERVICES),
            "sub_servicos": _upsert(SubService, SUB_SERVICES),
            "planos": _upsert(Plan, PLANS),
            "clientes": _upsert(Client, CLIENTS),
            "contratos": _upsert(Contract, CONTRACTS),
            "pagamentos": _upsert(Payment, PAYMENTS),
        }
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info("Seed: %s", counts)
    return counts
