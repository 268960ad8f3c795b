# agencia_app/blueprints/core.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, jsonify, current_app
from sqlalchemy import text

from ..extensions import db

bp = Blueprint("core", __name__)


@bp.route("/")
def index():
    return jsonify({
        "app": "agencia",
        "status": "ok",
        "startedAt": current_app.config.get("STARTED_AT"),
    })


@bp.route("/api/health")
def health():
    # sanity check do banco
    db.session.execute(text("SELECT 1"))
    return jsonify({"status": "ok", "database": "ok"})
