"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns.
These simplify error raising across services and repositories by
eliminating the need to specify status codes at each call site.

Usage:
    from hrportal.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("Employee not found")
    raise ConflictError("You have already submitted this form.")
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (employee, form, assignment, etc.) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """중복/충돌 예외 — 400으로 응답.

    Conflict exception answered with 400 Bad Request.
    Raised for duplicate submissions, self-relations, and state transitions
    on already-decided records. Clients show ``detail`` verbatim.

    Args:
        detail: 오류 메시지 (Human-readable error message)
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user lacks the required role
    (e.g. an employee calling an admin-only operation).

    Args:
        detail: 오류 메시지 (Error message, default: "Forbidden")
    """

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when the session token is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Unauthorized")
    """

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation catches
    (e.g. missing canonical forms, no assignment candidates).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class FieldValidationError(HTTPException):
    """필드 단위 검증 실패 — 400 + 필드별 상세.

    400 Bad Request carrying structured field-level errors.
    The response body is ``{"detail": "Invalid data", "errors": [...]}``
    where each error is ``{"field": <name>, "message": <reason>}``.

    Args:
        errors: 필드별 오류 목록 (List of {"field", "message"} dicts)
        detail: 요약 메시지 (Summary message)
    """

    def __init__(self, errors: list[dict[str, Any]], detail: str = "Invalid data") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.errors: list[dict[str, Any]] = errors


class IdentityProviderError(HTTPException):
    """502 Bad Gateway 예외 — 외부 인증 공급자 호출 실패.

    502 Bad Gateway exception.
    Raised when a required identity-provider directory call fails.
    """

    def __init__(self, detail: str = "Identity provider unavailable") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
