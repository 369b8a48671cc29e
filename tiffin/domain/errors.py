# tiffin/domain/errors.py
from typing import Dict


class ValidationError(ValueError):
    """Brakujace albo niepoprawne pola, operacja nie zostala wykonana."""

    def __init__(self, message: str, fields: Dict[str, str] | None = None):
        super().__init__(message)
        self.fields = fields or {}


class NotFoundError(LookupError):
    pass


class CheckoutAborted(RuntimeError):
    """Warunek wejscia do checkoutu nie spelniony, klient ma wrocic pod redirect_to."""

    def __init__(self, message: str, redirect_to: str):
        super().__init__(message)
        self.redirect_to = redirect_to


class DuplicateSubmission(RuntimeError):
    pass


class OrderWriteError(RuntimeError):
    def __init__(self, message: str, redirect_to: str = "/menu-checkout"):
        super().__init__(message)
        self.redirect_to = redirect_to


class ConcurrencyConflict(RuntimeError):
    pass
