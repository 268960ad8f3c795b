# agencia_app/models/__init__.py
# -*- coding: utf-8 -*-
from .user import User, USER_ROLES
from .client import Client
from .service import Service, SubService, Plan, SERVICE_TYPES
from .contract import Contract, CONTRACT_STATUSES
from .payment import Payment, PAYMENT_STATUSES, PAYMENT_METHODS
from .setting import Setting


__all__ = [
    "User",
    "Client",
    "Service",
    "SubService",
    "Plan",
    "Contract",
    "Payment",
    "Setting",
    "USER_ROLES",
    "SERVICE_TYPES",
    "CONTRACT_STATUSES",
    "PAYMENT_STATUSES",
    "PAYMENT_METHODS",
]
