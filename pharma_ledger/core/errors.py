# pharma_ledger/core/errors.py
from __future__ import annotations

from typing import Optional


class LedgerError(Exception):
    """
    Base class for every rejected ledger operation.

    Raised before any write; the surrounding unit of work rolls back, so a
    rejected operation never leaves partial state behind.
    """

    kind = "ledger_error"
    status_code = 400

    def __init__(self, detail: str, *, reason: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.reason = reason

    def to_dict(self) -> dict:
        body = {"error": self.kind, "detail": self.detail}
        if self.reason:
            body["reason"] = self.reason
        return body


class AuthorizationError(LedgerError):
    """Caller is unregistered, inactive, or holds the wrong role."""

    kind = "authorization_error"
    status_code = 403


class NotFoundError(LedgerError):
    """Unknown drug id, unknown participant, or history index out of range."""

    kind = "not_found"
    status_code = 404


class ConflictError(LedgerError):
    """Duplicate batch number or duplicate participant registration."""

    kind = "conflict"
    status_code = 409


class ValidationError(LedgerError):
    kind = "validation_error"
    status_code = 422
