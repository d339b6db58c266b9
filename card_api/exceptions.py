from http import HTTPStatus

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from .domain import MAX_AMOUNT


class CardServiceError(HTTPException):
    """Base for errors raised by card and customer operations.

    `reason` names the rule that failed; the status code only says which
    class of failure it was.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    reason = "invalid_request"

    def __init__(self, detail: str):
        super().__init__(status_code=type(self).status_code, detail=detail)


def error_envelope(status_code: int, message: str, reason: str | None = None) -> JSONResponse:
    error = {"code": HTTPStatus(status_code).name, "message": message}
    if reason:
        error["reason"] = reason
    return JSONResponse(status_code=status_code, content={"error": error})


# ---- 404 / 409 ----

class CardNotFound(CardServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "card_not_found"

    def __init__(self, number: str):
        super().__init__(f"Card '{number}' does not exist")


class CustomerNotFound(CardServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "customer_not_found"

    def __init__(self, customer_id: str):
        super().__init__(f"Customer '{customer_id}' does not exist")


class CustomerAlreadyExists(CardServiceError):
    status_code = status.HTTP_409_CONFLICT
    reason = "customer_exists"

    def __init__(self, customer_id: str):
        super().__init__(f"Customer '{customer_id}' already exists")


# ---- 403 ----

class CardBlocked(CardServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = "card_blocked"

    def __init__(self, number: str):
        super().__init__(f"Card '{number}' is blocked. Operation not allowed.")


# ---- 400 ----

class InvalidAmount(CardServiceError):
    reason = "invalid_amount"

    def __init__(self):
        super().__init__(f"amount must be > 0 and <= {MAX_AMOUNT}")


class CreditLimitExceeded(CardServiceError):
    reason = "credit_limit_exceeded"

    def __init__(self):
        super().__init__("credit limit exceeded")


class WrongPin(CardServiceError):
    reason = "wrong_pin"

    def __init__(self):
        super().__init__("current PIN is incorrect")


class InvalidPin(CardServiceError):
    reason = "invalid_pin"

    def __init__(self):
        super().__init__("new PIN must be exactly 4 digits")


class LimitNotIncreased(CardServiceError):
    reason = "limit_not_increased"

    def __init__(self):
        super().__init__("new limit must be greater than the current limit")


class LimitOutOfRange(CardServiceError):
    reason = "limit_out_of_range"

    def __init__(self):
        super().__init__(f"new limit must be <= {MAX_AMOUNT}")


class IdMismatch(CardServiceError):
    reason = "id_mismatch"

    def __init__(self, path_id: str, body_id: str):
        super().__init__(f"path id '{path_id}' does not match body id '{body_id}'")
