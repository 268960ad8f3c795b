# agencia_app/blueprints/dashboard.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, jsonify, current_app

from ..decorators import login_required
from ..services.dashboard import dashboard_stats

bp = Blueprint("dashboard", __name__)


@bp.route("/stats")
@login_required
def stats():
    limit = current_app.config.get("DASHBOARD_RECENT_PAYMENTS", 5)
    return jsonify(dashboard_stats(recent_limit=limit))
