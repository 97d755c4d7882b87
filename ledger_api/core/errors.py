# ledger_api/core/errors.py
"""
Domain errors raised by the guard, validators and CRUD layer.

Each carries the HTTP status it maps to; the handlers in main.py render them
as {"error": message}.
"""
from typing import Any, Mapping, Sequence

from fastapi import status


class LedgerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error interno del servidor"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(LedgerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No autorizado"


class Forbidden(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Acceso denegado. Se requiere rol de administrador."


class InvalidInput(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Datos inválidos"


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No encontrado"


def invalid_body(errors: Sequence[Mapping[str, Any]] = ()) -> InvalidInput:
    """400 for a request body that is not JSON or does not have the expected shape."""
    detail = "JSON mal formado"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{location}: {first.get('msg')}" if location else first.get("msg")
    return InvalidInput(f"Cuerpo de la solicitud inválido ({detail})")
