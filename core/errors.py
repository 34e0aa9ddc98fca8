# core/errors.py
"""Application error type carrying status code, kind and operational flag"""
from typing import Dict, Optional

from core.domain import ErrorKind

_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHORIZATION: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 500,
    ErrorKind.STORE: 500,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """
    Base error for everything the API reports to clients.

    ``message`` is safe to show to a client. ``detail`` holds diagnostics
    and is only exposed in development mode. Operational errors are expected
    conditions (bad input, provider outage); non-operational ones are bugs
    and get masked in production.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    is_operational: bool = True

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[ErrorKind] = None,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        is_operational: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.status_code = status_code or _STATUS_BY_KIND[self.kind]
        self.detail = detail
        if is_operational is not None:
            self.is_operational = is_operational

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"

    @classmethod
    def wrap(cls, exc: BaseException, message: str = "Internal server error") -> "AppError":
        """Convert an unexpected exception into a non-operational INTERNAL error."""
        if isinstance(exc, AppError):
            return exc
        err = AppError(
            message,
            kind=ErrorKind.INTERNAL,
            detail=f"{type(exc).__name__}: {exc}",
            is_operational=False,
        )
        err.__cause__ = exc
        return err

    def __str__(self):
        # Format used for logging
        return f"[{self.kind.value}] {self.message}"


GENERIC_ERROR_MESSAGE = "Something went very wrong!"


def public_message(err: AppError, development: bool) -> str:
    """Message a client may see. Non-operational errors are masked outside development."""
    if development or err.is_operational:
        return err.message
    return GENERIC_ERROR_MESSAGE


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class AuthorizationError(AppError):
    kind = ErrorKind.AUTHORIZATION


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class UpstreamError(AppError):
    """Generative-AI provider failure"""
    kind = ErrorKind.UPSTREAM


class TranslationError(UpstreamError):
    pass


class EmbeddingError(UpstreamError):
    pass


class GenerationError(UpstreamError):
    pass


class StoreError(AppError):
    """Relational or vector store failure"""
    kind = ErrorKind.STORE


class VectorStoreError(StoreError):
    pass
