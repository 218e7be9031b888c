from fastapi import status
from src.libs.result import Error

# Single source of truth for mapping business error codes to HTTP statuses
ERROR_STATUS_CODES = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_OR_EXPIRED_TOKEN": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "MISSING_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "USER_NO_LONGER_EXISTS": status.HTTP_401_UNAUTHORIZED,
    "STALE_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_INVALID": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "EMAIL_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}

# Server-side codes whose message is safe to show to clients
PUBLIC_SERVER_ERRORS = {"DELIVERY_ERROR"}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        self.expose_message = base_error.code in PUBLIC_SERVER_ERRORS
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the HTTP-facing exception for a business error"""
    status_code = ERROR_STATUS_CODES.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
