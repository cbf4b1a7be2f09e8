# storefront/domain/errors.py
"""
Wyjatki domenowe. Kazdy niesie status HTTP i opcjonalne szczegoly,
ktore exception handler dokleja do koperty odpowiedzi.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class DuplicateEntryError(ConflictError):
    """Naruszenie unikalnosci (user, product)."""


class LimitExceededError(ConflictError):
    """Limit ilosci albo stanu magazynu - klient moze sam poprawic zadanie."""
    status_code = 400


class InvalidStateError(ConflictError):
    status_code = 400


class TransactionError(AppError):
    status_code = 500
