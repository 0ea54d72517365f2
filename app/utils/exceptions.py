"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error taxonomy
shared by services, dependencies and routers. Services raise these directly;
FastAPI renders them as {"detail": ...} with the mapped status code.

Usage:
    from app.utils.exceptions import NotFoundError, ValidationFailedError
    raise NotFoundError("Report not found")
    raise ValidationFailedError("title", "word_count", "Title must be 1-10 words")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (report, draft, contribution, user) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness constraint
    (e.g. duplicate username, e-mail or phone number).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PermissionDeniedError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user may not perform the operation
    (non-owner mutation, non-admin on admin routes, contributing to own report).

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AuthenticationRequiredError(HTTPException):
    """403 예외 — 세션이 없거나 유효하지 않을 때 사용.

    Raised when a protected route is hit without a valid session.
    Uses 403 like the original web app so that the response never reveals
    whether the addressed record exists.

    Args:
        detail: 오류 메시지 (Error message, default: "Not authenticated")
    """

    def __init__(self, detail: str = "Not authenticated") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 로그인 자격 증명 실패 시 사용.

    401 Unauthorized exception.
    Raised when login credentials are wrong.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid username or password")
    """

    def __init__(self, detail: str = "Invalid username or password") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationFailedError(HTTPException):
    """400 예외 — 필드 규칙 위반.

    Raised when a field rule fails (word count, presence, length, range).
    The detail payload names the field and the violated rule so clients can
    highlight the offending input.

    Attributes:
        field: 위반 필드 이름 (Offending field name)
        rule: 위반 규칙 식별자 (Violated rule identifier)
    """

    def __init__(self, field: str, rule: str, message: str | None = None) -> None:
        self.field: str = field
        self.rule: str = rule
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "field": field,
                "rule": rule,
                "message": message or f"{field} failed {rule}",
            },
        )


class InvalidMediaTypeError(HTTPException):
    """415 예외 — 허용되지 않은 이미지 형식 (jpeg/png/webp 외)."""

    def __init__(self, detail: str = "Only image files are allowed (jpg, png, webp)") -> None:
        super().__init__(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=detail)


class PayloadTooLargeError(HTTPException):
    """413 예외 — 업로드 크기 초과."""

    def __init__(self, detail: str = "File is too large") -> None:
        super().__init__(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=detail)


class MalformedEncodingError(HTTPException):
    """400 예외 — base64 data URI 형식 오류."""

    def __init__(self, detail: str = "Expected data:image/<type>;base64,<data>") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidStateTransitionError(HTTPException):
    """409 Conflict 예외 — 현재 상태에서 허용되지 않는 작업.

    Raised when an owner edits/deletes a report that is no longer open,
    or when an administrator requests a status change the lifecycle forbids.
    """

    def __init__(self, detail: str = "Operation not allowed in the current status") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PersistenceError(HTTPException):
    """500 예외 — 저장소/DB 오류."""

    def __init__(self, detail: str = "Could not save the record") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class UpstreamServiceError(HTTPException):
    """502 예외 — 외부 서비스(지오코더 등) 실패."""

    def __init__(self, detail: str = "Upstream service failed") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
