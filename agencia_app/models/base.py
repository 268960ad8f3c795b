# agencia_app/models/base.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import uuid
from datetime import date, datetime
from decimal import Decimal


def new_id() -> str:
    return uuid.uuid4().hex


def iso(value):
    """Data/hora -> ISO 8601 (ou None)."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def money(value) -> float:
    # JSON sai como número
    return float(value if value is not None else Decimal("0"))
