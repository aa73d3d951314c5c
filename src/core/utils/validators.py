"""
Validadores de dados de entrada
===============================
Regras compartilhadas pelos schemas de usuário e loja.
"""

import re

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16

_UPPERCASE_RE = re.compile(r"[A-Z]")
_SPECIAL_RE = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]""")


def password_policy_errors(password: str) -> list[str]:
    """
    Valida a política de senha.

    Regras: 8 a 16 caracteres, ao menos uma letra maiúscula
    e ao menos um caractere especial.

    Returns:
        Lista de mensagens (vazia quando a senha é aceita)

    Examples:
        >>> password_policy_errors('Secret#12')
        []
        >>> len(password_policy_errors('secret12'))
        1
    """
    errors = []
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        errors.append(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )
    if not _UPPERCASE_RE.search(password) or not _SPECIAL_RE.search(password):
        errors.append("Password must contain at least one uppercase letter and one special character")
    return errors


def validate_password(password: str) -> str:
    """Validador para pydantic: levanta ValueError com todas as violações"""
    errors = password_policy_errors(password)
    if errors:
        raise ValueError("; ".join(errors))
    return password


def normalize_email(email: str) -> str:
    return email.strip().lower()


def escape_like(term: str) -> str:
    """Escapa curingas do LIKE para busca por substring literal"""
    return (
        term.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
