"""Unified error taxonomy and custom exceptions.

Every failure surfaced to a caller is one of four kinds, each pinned to an
HTTP status:
  ValidationError   400  bad caller input / malformed payload
  UnauthorizedError 401  missing or wrong credential / signature
  NotFoundError     404  upstream resource missing
  InternalError     500  network, decode, parse or store failure

Error code ranges:
  1xxx: Auth/Transport security
  4xxx: Request validation / lookup
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- Taxonomy ---

class ValidationError(AppError):
    def __init__(self, message: str, code: int = 4001) -> None:
        super().__init__(code, message, 400)


class UnauthorizedError(AppError):
    def __init__(self, message: str, code: int = 1000) -> None:
        super().__init__(code, message, 401)


class NotFoundError(AppError):
    def __init__(self, message: str, code: int = 4004) -> None:
        super().__init__(code, message, 404)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error", code: int = 9002) -> None:
        super().__init__(code, detail, 500)


# --- 1xxx: Auth ---

class MissingAPIKeyError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__("API key required", 1001)


class InvalidAPIKeyError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__("Invalid API key", 1002)


class InvalidSignatureError(UnauthorizedError):
    def __init__(self, subject: str = "webhook") -> None:
        super().__init__(f"Invalid {subject} signature", 1003)


class HTTPSRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "HTTPS required", 403)


# --- 9xxx: System ---

class DuplicateOrderError(InternalError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order already exists: {order_id}", 9003)
