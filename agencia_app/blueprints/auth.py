# agencia_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, request, session, jsonify, current_app

from ..decorators import login_required
from ..errors import AppError, ValidationError, NotFoundError
from ..extensions import db
from ..models import User
from ..schemas import LoginPayload, PasswordChangePayload, parse_payload

bp = Blueprint("auth", __name__)


def current_user() -> User | None:
    data = session.get("user") or {}
    if not data.get("id"):
        return None
    return db.session.get(User, data["id"])


@bp.route("/login", methods=["POST"])
def login():
    data = parse_payload(LoginPayload, request.get_json(silent=True))

    u = User.query.filter_by(email=data.email).first()
    if not u or not u.active or not u.check_password(data.password):
        current_app.logger.info("Login recusado para %s", data.email)
        raise AppError("Credenciais inválidas", 401)

    session.clear()
    session.permanent = True
    session["user"] = u.session_data()
    current_app.logger.info("Login de %s", u.email)
    return jsonify({"success": True, "user": u.session_data()})


@bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify({"success": True})


@bp.route("/me")
@login_required
def me():
    return jsonify({"user": session["user"]})


@bp.route("/password", methods=["POST"])
@login_required
def password_change():
    u = current_user()
    if not u:
        raise NotFoundError("Usuário não encontrado")
    data = parse_payload(PasswordChangePayload, request.get_json(silent=True))
    if not u.check_password(data.current_password):
        raise ValidationError("Senha atual incorreta")
    u.set_password(data.new_password)
    db.session.commit()
    current_app.logger.info("Senha alterada para %s", u.email)
    return jsonify({"success": True})
