from __future__ import annotations


class ServiceError(Exception):
    """Base class for business errors surfaced to clients as ``{"message": ...}``."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class InvalidInputError(ServiceError):
    status_code = 400


class InsufficientCapacityError(ServiceError):
    status_code = 400


class InvalidCredentialsError(ServiceError):
    status_code = 401
