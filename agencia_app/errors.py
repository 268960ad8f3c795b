# agencia_app/errors.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import jsonify, current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db


class AppError(Exception):
    """Erro de negócio com status HTTP; vira {"error": msg} na resposta."""
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 400


def delete_conflict(entity: str) -> ConflictError:
    return ConflictError(
        f"Não é possível excluir {entity} pois está relacionado a outros registros"
    )


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def _app_error(err: AppError):
        return error_response(err.message, err.status_code)

    @app.errorhandler(IntegrityError)
    def _integrity_error(err: IntegrityError):
        db.session.rollback()
        current_app.logger.warning("Violação de integridade: %s", err.orig)
        return error_response("Operação viola restrições do banco de dados", 400)

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return error_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        db.session.rollback()
        current_app.logger.exception("Erro inesperado: %s", err)
        return error_response("Erro interno do servidor", 500)
