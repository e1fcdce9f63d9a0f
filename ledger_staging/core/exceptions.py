"""
Error kinds raised by the staging and sync services.

Each error carries a machine-readable ``code`` and a ``retryable`` flag so
callers can decide whether to retry without parsing messages:

    StagingError
    +-- ValidationError   bad input or export-ineligible rows (not retryable)
    +-- NotFoundError     unknown batch / tenant / empty candidate set (not retryable)
    +-- StorageError      database failure, transaction rolled back (not retryable)
    +-- UpstreamError     accounting connector failed, nothing mutated (retryable)
"""
from typing import Any, Optional


class StagingError(Exception):
    code = "staging_error"
    retryable = False

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        payload = {"code": self.code, "error": self.message, "retryable": self.retryable}
        if self.detail is not None:
            payload["details"] = self.detail
        return payload


class ValidationError(StagingError):
    code = "validation_error"

    def __init__(self, message: str, detail: Optional[Any] = None, invalid_transactions: Optional[list] = None):
        super().__init__(message, detail)
        self.invalid_transactions = invalid_transactions or []

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.invalid_transactions:
            payload["invalid_transactions"] = self.invalid_transactions
        return payload


class NotFoundError(StagingError):
    code = "not_found"


class StorageError(StagingError):
    code = "storage_error"


class UpstreamError(StagingError):
    code = "upstream_error"
    retryable = True
