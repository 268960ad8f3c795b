# agencia_app/blueprints/settings.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify, current_app

from ..decorators import login_required, admin_required
from ..schemas import CompanySettingsPayload, parse_payload
from ..services.settings import get_company_settings, save_company_settings

bp = Blueprint("settings", __name__)


@bp.route("", methods=["GET"])
@login_required
def get_settings():
    return jsonify(get_company_settings())


@bp.route("", methods=["PUT"])
@admin_required
def put_settings():
    data = parse_payload(CompanySettingsPayload, request.get_json(silent=True))
    values = save_company_settings(data.company_name, data.email, data.phone)
    current_app.logger.info("Configurações da empresa atualizadas")
    return jsonify(values)
