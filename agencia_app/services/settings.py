# agencia_app/services/settings.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..models import Setting

COMPANY_GROUP = "empresa"

# valores exibidos enquanto ninguém salvou as configurações
COMPANY_DEFAULTS = {
    "companyName": "Cliente Management",
    "email": "admin@empresa.com",
    "phone": "(11) 99999-9999",
}


def get_setting(key: str, group: str = COMPANY_GROUP, default: str = "") -> str:
    s = Setting.query.filter_by(group=group, key=key).first()
    return s.value if s else default


def set_setting(key: str, value: str, group: str = COMPANY_GROUP, commit: bool = True) -> None:
    s = Setting.query.filter_by(group=group, key=key).first()
    if not s:
        s = Setting(group=group, key=key, value=value)
        db.session.add(s)
    else:
        s.value = value
    if commit:
        db.session.commit()


def get_company_settings() -> dict:
    return {key: get_setting(key, default=default) for key, default in COMPANY_DEFAULTS.items()}


def save_company_settings(company_name: str, email: str, phone: str) -> dict:
    values = {"companyName": company_name, "email": email, "phone": phone}
    for key, value in values.items():
        set_setting(key, value, commit=False)
    db.session.commit()
    return get_company_settings()
