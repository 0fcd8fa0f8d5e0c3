# Overview: Error taxonomy shared by services and routes.

"""
Every failure the ledger core reports carries a stable ``code`` the caller can
display or branch on, plus the HTTP status the routes map it to.

- ValidationError and its subclasses: client-fixable, field-level
- NotFound: referenced product or shift does not exist in the caller's shop
- InsufficientStock / UnsupportedUnit / CalculationError: business rules
- InvalidState: lifecycle violation (e.g. closing a closed shift)
- TransactionConflict: retries exhausted; the whole user action may be retried
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all reportable ledger failures."""

    code = "LEDGER_ERROR"
    http_status = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        payload = {"error": str(self), "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(LedgerError):
    """400-level input problem naming the offending field."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.field = field

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"


class InvalidQuantity(ValidationError):
    code = "INVALID_QUANTITY"


class NotFound(LedgerError):
    code = "NOT_FOUND"
    http_status = 404


class ProductNotFound(NotFound):
    code = "PRODUCT_NOT_FOUND"


class UnsupportedUnit(LedgerError):
    """Only weight-based products can be sold per kg."""

    code = "UNSUPPORTED_UNIT"


class CalculationError(LedgerError):
    """A derived quantity came out non-finite or non-positive."""

    code = "CALCULATION_ERROR"


class InsufficientStock(LedgerError):
    code = "INSUFFICIENT_STOCK"
    http_status = 409


class InvalidState(LedgerError):
    code = "INVALID_STATE"
    http_status = 409


class TransactionConflict(LedgerError):
    """Write conflicts persisted past the retry budget."""

    code = "TRANSACTION_CONFLICT"
    http_status = 409


class Unauthenticated(LedgerError):
    code = "UNAUTHENTICATED"
    http_status = 401
