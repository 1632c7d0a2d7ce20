"""
Shared helpers for routers.

Maps service exceptions to HTTP status codes so every backend failure
reaches the client as a readable message.
"""
from fastapi import HTTPException

from electromart.errors import (
    BackendUnavailableError,
    CartLockedError,
    CartStorageError,
    ConfigurationError,
    ElectroMartError,
    InvalidCredentialsError,
    OutOfStockError,
    ProductNotFoundError,
    RegistrationError,
)

_STATUS_CODES = {
    ProductNotFoundError: 404,
    OutOfStockError: 400,
    RegistrationError: 400,
    InvalidCredentialsError: 401,
    CartLockedError: 409,
    CartStorageError: 503,
    BackendUnavailableError: 503,
    ConfigurationError: 500,
}


def to_http_exception(error: ElectroMartError) -> HTTPException:
    status_code = next(
        (code for error_type, code in _STATUS_CODES.items() if isinstance(error, error_type)),
        500,
    )
    return HTTPException(status_code=status_code, detail=error.message)
