# src/core/exceptions.py
"""
Exceções de domínio
===================

Os serviços levantam estas exceções; os handlers registrados em
src/main.py convertem cada uma na resposta HTTP correspondente.
"""

from typing import Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    """Entrada malformada ou fora do intervalo (400)"""
    status_code = 400

    def __init__(self, errors: list[dict] | str, message: str = "Validation errors"):
        if isinstance(errors, str):
            errors = [{"field": None, "message": errors}]
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "errors": self.errors}


class AuthenticationError(AppError):
    status_code = 401


class AccessDeniedError(AppError):
    """Perfil sem permissão ou dono sem loja ativa (403)"""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Chave única duplicada (409)"""
    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "field": self.field}
