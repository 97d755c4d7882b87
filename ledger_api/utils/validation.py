# ledger_api/utils/validation.py
"""
Field rules for transaction and user mutations.

Every function here either returns a dict of cleaned column values ready for
the CRUD layer or raises InvalidInput naming the rule that failed. Nothing
touches the database, so a rejected request never causes a partial write.
"""
import math
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Mapping

from ledger_api.core.auth import Role
from ledger_api.core.errors import InvalidInput
from ledger_api.models.transaction import TransactionType

REQUIRED_TRANSACTION_FIELDS = ("concept", "amount", "date", "type")

AMOUNT_MESSAGE = "El monto debe ser un número positivo"
DATE_MESSAGE = "La fecha debe ser una fecha ISO 8601 válida"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def parse_amount(value: Any) -> float:
    """
    Accept a JSON number or a numeric string; the result must be a finite
    number greater than zero.
    """
    if isinstance(value, bool):
        raise InvalidInput(AMOUNT_MESSAGE)

    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            raise InvalidInput(AMOUNT_MESSAGE)
    elif isinstance(value, (int, float)):
        # JSON integers have no size limit
        try:
            parsed = float(value)
        except OverflowError:
            raise InvalidInput(AMOUNT_MESSAGE)
    else:
        raise InvalidInput(AMOUNT_MESSAGE)

    if not math.isfinite(parsed) or parsed <= 0:
        raise InvalidInput(AMOUNT_MESSAGE)
    return parsed


def parse_transaction_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise InvalidInput("El tipo debe ser INCOME o EXPENSE")


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidInput("El rol debe ser USER o ADMIN")


def parse_transaction_date(value: Any) -> datetime:
    """Parse an ISO 8601 date or datetime into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        # fromisoformat only understands a trailing Z from Python 3.11 on
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidInput(DATE_MESSAGE)
    else:
        raise InvalidInput(DATE_MESSAGE)

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise InvalidInput(DATE_MESSAGE)
    return parsed


def parse_concept(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("El concepto debe ser un texto no vacío")
    return value.strip()


def validate_transaction_create(data: Mapping[str, Any]) -> Dict[str, Any]:
    missing = [field for field in REQUIRED_TRANSACTION_FIELDS if _is_missing(data.get(field))]
    if missing:
        raise InvalidInput(f"Todos los campos son requeridos: concept, amount, date, type (faltan: {', '.join(missing)})")

    tx_type = parse_transaction_type(data["type"])
    amount = parse_amount(data["amount"])
    return {
        "concept": parse_concept(data["concept"]),
        "amount": amount,
        "date": parse_transaction_date(data["date"]),
        "type": tx_type,
    }


def validate_transaction_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate only the fields present in a partial update."""
    values: Dict[str, Any] = {}
    if "type" in data:
        values["type"] = parse_transaction_type(data["type"])
    if "amount" in data:
        values["amount"] = parse_amount(data["amount"])
    if "concept" in data:
        values["concept"] = parse_concept(data["concept"])
    if "date" in data:
        values["date"] = parse_transaction_date(data["date"])
    return values


def validate_user_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if "role" in data:
        values["role"] = parse_role(data["role"])
    if "name" in data:
        name = data["name"]
        if not isinstance(name, str) or not name.strip():
            raise InvalidInput("El nombre debe ser un texto no vacío")
        values["name"] = name.strip()
    if "phone" in data:
        phone = data["phone"]
        if phone is None or (isinstance(phone, str) and not phone.strip()):
            values["phone"] = None
        elif isinstance(phone, str):
            values["phone"] = phone.strip()
        else:
            raise InvalidInput("El teléfono debe ser un texto o null")
    return values
