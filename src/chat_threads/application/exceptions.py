from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    """A concurrent writer already created the record."""


class ValidationError(AppError):
    pass


class StoreError(AppError):
    """The persistence layer failed; detail is for logs, never for clients."""
