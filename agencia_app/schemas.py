# agencia_app/schemas.py
# -*- coding: utf-8 -*-
"""
Formatos de entrada da API (pydantic). Os corpos chegam em camelCase;
campos desconhecidos são recusados.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from pricing import DescontoPersonalizado, Selecao
from .errors import ValidationError
from .models import SERVICE_TYPES, CONTRACT_STATUSES, PAYMENT_STATUSES, PAYMENT_METHODS

MIN_PHONE_DIGITS = 10
MAX_SUB_SERVICES = 2


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    # mensagem usada quando falta um campo obrigatório
    required_message: ClassVar[Optional[str]] = None


def empty_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_date(value):
    # aceita "2024-01-15" e "2024-01-15T03:00:00.000Z"
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise ValueError("Data inválida")
    return value


def required(schema, value):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(schema.required_message or "Campo obrigatório")
    return value


# ---------------------------------------------------------------------
# Autenticação
# ---------------------------------------------------------------------
class LoginPayload(_Schema):
    required_message = "Email e senha são obrigatórios"

    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)


class PasswordChangePayload(_Schema):
    required_message = "Informe a senha atual e a nova senha"

    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("current_password", "new_password")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Senhas não conferem")
        return self


# ---------------------------------------------------------------------
# Provisionamento de clientes
# ---------------------------------------------------------------------
class ServiceSelection(_Schema):
    service_id: str
    sub_service_id: Optional[str] = None
    sub_service_ids: List[str] = Field(default_factory=list)
    plan_id: Optional[str] = None

    @field_validator("service_id")
    @classmethod
    def check_service(cls, v):
        if not v:
            raise ValueError("Selecione um serviço")
        return v

    @field_validator("sub_service_id", "plan_id", mode="before")
    @classmethod
    def blank_ids(cls, v):
        return empty_to_none(v)

    @field_validator("sub_service_ids", mode="before")
    @classmethod
    def null_list(cls, v):
        return [] if v is None else v

    @field_validator("sub_service_ids")
    @classmethod
    def distinct_ids(cls, v):
        ids: List[str] = []
        for sid in v:
            sid = sid.strip()
            if sid and sid not in ids:
                ids.append(sid)
        if len(ids) > MAX_SUB_SERVICES:
            raise ValueError("Selecione no máximo dois sub-serviços")
        return ids

    def to_selecao(self) -> Selecao:
        # subServiceIds tem prioridade sobre subServiceId
        return Selecao.de(self.sub_service_id, self.sub_service_ids, self.plan_id)


class CustomDiscount(_Schema):
    enabled: bool = False
    type: Literal["percentage", "fixed"] = "percentage"
    value: Decimal = Decimal("0")

    @field_validator("value", mode="before")
    @classmethod
    def blank_value(cls, v):
        return Decimal("0") if v is None or v == "" else v

    @model_validator(mode="after")
    def check_range(self):
        if self.value < 0:
            raise ValueError("Desconto não pode ser negativo")
        if self.type == "percentage" and self.value > 100:
            raise ValueError("Desconto percentual deve estar entre 0 e 100")
        return self

    def to_desconto(self) -> DescontoPersonalizado:
        return DescontoPersonalizado(enabled=self.enabled, type=self.type, value=self.value)


class ClientPayload(_Schema):
    required_message = "Todos os campos são obrigatórios"

    name: str
    email: str
    phone: str
    company: str
    service_start_date: date
    services: List[ServiceSelection]
    custom_discount: Optional[CustomDiscount] = None

    @field_validator("name", "company")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("service_start_date", mode="before")
    @classmethod
    def parse_start(cls, v):
        return to_date(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        required(cls, v)
        if "@" not in v:
            raise ValueError("E-mail inválido")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        required(cls, v)
        digits = re.sub(r"\D", "", v)
        if len(digits) < MIN_PHONE_DIGITS:
            raise ValueError("Telefone deve ter pelo menos 10 dígitos")
        return digits

    @field_validator("services")
    @classmethod
    def check_services(cls, v):
        if not v:
            raise ValueError("Selecione pelo menos um serviço")
        return v


class ClientUpdatePayload(ClientPayload):
    id: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v):
        return required(cls, v)


# ---------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------
class TrafficDiscountInput(_Schema):
    enabled: bool = False
    percentage: Decimal = Decimal("0")
    description: str = ""

    @field_validator("percentage")
    @classmethod
    def check_range(cls, v):
        if v < 0 or v > 100:
            raise ValueError("Percentual de desconto deve estar entre 0 e 100")
        return v

    def as_json(self) -> dict:
        return {
            "enabled": self.enabled,
            "percentage": float(self.percentage),
            "description": self.description,
        }


class SubServiceInput(_Schema):
    required_message = "Nome do sub-serviço é obrigatório"

    id: Optional[str] = None
    name: str
    description: str = ""
    price: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        if v < 0:
            raise ValueError("Preço não pode ser negativo")
        return v


class PlanInput(_Schema):
    required_message = "Nome do plano é obrigatório"

    id: Optional[str] = None
    name: str
    description: str = ""
    posts_per_month: int = 0
    price: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @model_validator(mode="after")
    def check_values(self):
        if self.price < 0 or self.posts_per_month < 0:
            raise ValueError("Valores do plano não podem ser negativos")
        return self


class ServicePayload(_Schema):
    required_message = "Nome, descrição e tipo são obrigatórios"

    name: str
    description: str
    type: str
    base_price: Decimal = Decimal("0")
    traffic_discount: Optional[TrafficDiscountInput] = None
    sub_services: List[SubServiceInput] = Field(default_factory=list)
    plans: List[PlanInput] = Field(default_factory=list)

    @field_validator("name", "description", "type")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("base_price", mode="before")
    @classmethod
    def blank_price(cls, v):
        return Decimal("0") if v is None or v == "" else v

    @field_validator("base_price")
    @classmethod
    def check_price(cls, v):
        if v < 0:
            raise ValueError("Preço base não pode ser negativo")
        return v

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        if v not in SERVICE_TYPES:
            raise ValueError("Tipo de serviço inválido")
        return v


# ---------------------------------------------------------------------
# Contratos e pagamentos
# ---------------------------------------------------------------------
class ContractPayload(_Schema):
    required_message = "Cliente, serviço e data de início são obrigatórios"

    client_id: str
    service_id: str
    sub_service_id: Optional[str] = None
    plan_id: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    status: str = "ACTIVE"

    @field_validator("client_id", "service_id")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("sub_service_id", "plan_id", mode="before")
    @classmethod
    def blank_ids(cls, v):
        return empty_to_none(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return to_date(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        if v not in CONTRACT_STATUSES:
            raise ValueError("Status de contrato inválido")
        return v


class ContractUpdatePayload(_Schema):
    required_message = "ID do contrato, serviço e data de início são obrigatórios"

    id: str
    service_id: str
    sub_service_id: Optional[str] = None
    plan_id: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    status: str = "ACTIVE"

    @field_validator("id", "service_id")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("sub_service_id", "plan_id", mode="before")
    @classmethod
    def blank_ids(cls, v):
        return empty_to_none(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return to_date(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        if v not in CONTRACT_STATUSES:
            raise ValueError("Status de contrato inválido")
        return v


class PaymentPayload(_Schema):
    required_message = "Dados obrigatórios não fornecidos"

    contract_id: str
    client_id: str
    amount: Decimal
    due_date: date
    payment_date: Optional[date] = None
    status: str
    payment_method: str
    description: Optional[str] = None

    @field_validator("contract_id", "client_id", "status", "payment_method")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)

    @field_validator("due_date", "payment_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return to_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v):
        return empty_to_none(v)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        if v <= 0:
            raise ValueError("Valor deve ser maior que zero")
        return v

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        if v not in PAYMENT_STATUSES:
            raise ValueError("Status de pagamento inválido")
        return v

    @field_validator("payment_method")
    @classmethod
    def check_method(cls, v):
        if v not in PAYMENT_METHODS:
            raise ValueError("Forma de pagamento inválida")
        return v


# ---------------------------------------------------------------------
# Configurações
# ---------------------------------------------------------------------
class CompanySettingsPayload(_Schema):
    required_message = "Nome da empresa é obrigatório"

    company_name: str
    email: str = ""
    phone: str = ""

    @field_validator("company_name")
    @classmethod
    def check_required(cls, v):
        return required(cls, v)


# ---------------------------------------------------------------------
def _message(schema, err: dict) -> str:
    kind = err.get("type")
    campo = ".".join(str(p) for p in err.get("loc", ()))
    if kind == "missing":
        return schema.required_message or f"Campo obrigatório ausente: {campo}"
    if kind == "extra_forbidden":
        return f"Campo não permitido: {campo}"
    if kind == "value_error":
        ctx_error = (err.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
        msg = err.get("msg", "")
        prefix = "Value error, "
        return msg[len(prefix):] if msg.startswith(prefix) else msg
    return f"Campo inválido: {campo}"


def parse_payload(schema, data):
    """Valida o corpo JSON; erro do pydantic vira ValidationError (400)."""
    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição inválido")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors()
        raise ValidationError(_message(schema, errors[0]) if errors else "Dados inválidos")
