from fastapi import HTTPException, status
from app.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class ValidationConflict(AppException):
    def __init__(self, message: str = "Username already exists"):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.USERNAME_EXISTS)


class NotFound(AppException):
    def __init__(self, message: str = "User not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, message, ErrorCode.ACCOUNT_NOT_FOUND)


class InvalidCredential(AppException):
    def __init__(self, message: str = "Invalid password"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.INVALID_PASSWORD)


class UnauthorizedError(AppException):
    """
    Token rejected by the access guard.

    `reason` is one of TOKEN_MISSING / TOKEN_EXPIRED / TOKEN_INVALID and is
    only logged; clients always get the same 401 body.
    """

    def __init__(self, reason: ErrorCode):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "Unauthorized",
            ErrorCode.UNAUTHORIZED,
        )
        self.reason = reason


class InternalFailure(AppException):
    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR, message, ErrorCode.INTERNAL_ERROR
        )
