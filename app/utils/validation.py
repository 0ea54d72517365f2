"""입력 검증 규칙 모듈 — 모든 신고 진입 경로가 공유.

Field validation rules shared by every report entry route (direct upload,
camera capture, draft commit, edit) and by the ORM model hooks.
The predicates are pure; validate_report_fields() turns the first failure
into a ValidationFailedError.
"""

from app.utils.exceptions import ValidationFailedError

TITLE_MIN_WORDS: int = 1
TITLE_MAX_WORDS: int = 10
DESCRIPTION_MIN_WORDS: int = 30
DESCRIPTION_MAX_WORDS: int = 250

CONTRIBUTION_TITLE_MAX_CHARS: int = 100
CONTRIBUTION_DESCRIPTION_MAX_CHARS: int = 500


def count_words(text: str | None) -> int:
    """공백 기준 단어 수 — Words after trimming and splitting on whitespace."""
    if not text:
        return 0
    return len(text.split())


def title_words_valid(text: str | None) -> bool:
    return TITLE_MIN_WORDS <= count_words(text) <= TITLE_MAX_WORDS


def description_words_valid(text: str | None) -> bool:
    return DESCRIPTION_MIN_WORDS <= count_words(text) <= DESCRIPTION_MAX_WORDS


def address_present(text: str | None) -> bool:
    return bool(text and text.strip())


def text_within(text: str | None, max_chars: int) -> bool:
    """비어있지 않고 최대 길이 이내 — Non-empty after trim and at most max_chars."""
    if not text or not text.strip():
        return False
    return len(text.strip()) <= max_chars


def coordinate_valid(value: float | None, limit: float) -> bool:
    """좌표 범위 검사 (None 허용) — None passes; otherwise |value| <= limit."""
    if value is None:
        return True
    return -limit <= value <= limit


def validate_report_fields(
    title: str | None,
    description: str | None,
    address: str | None,
) -> None:
    """신고 필수 필드를 검증합니다.

    Apply the report rules in a fixed order and raise on the first failure.

    Raises:
        ValidationFailedError: 규칙 위반 시 (On the first violated rule)
    """
    if not title_words_valid(title):
        raise ValidationFailedError(
            "title", "word_count",
            f"Title must be {TITLE_MIN_WORDS}-{TITLE_MAX_WORDS} words",
        )
    if not description_words_valid(description):
        raise ValidationFailedError(
            "description", "word_count",
            f"Description must be between {DESCRIPTION_MIN_WORDS} and {DESCRIPTION_MAX_WORDS} words",
        )
    if not address_present(address):
        raise ValidationFailedError("address", "required", "Address is required")


def validate_coordinates(latitude: float | None, longitude: float | None) -> None:
    if not coordinate_valid(latitude, 90.0):
        raise ValidationFailedError("latitude", "range", "Latitude must be between -90 and 90")
    if not coordinate_valid(longitude, 180.0):
        raise ValidationFailedError("longitude", "range", "Longitude must be between -180 and 180")


def parse_coordinate(field: str, raw: str | None) -> float | None:
    """폼 문자열을 좌표로 변환 — Blank form values become None."""
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValidationFailedError(field, "number", f"{field} must be a number")


def validate_contribution_fields(title: str | None, description: str | None) -> None:
    if not text_within(title, CONTRIBUTION_TITLE_MAX_CHARS):
        raise ValidationFailedError(
            "title", "length",
            f"Title is required and cannot exceed {CONTRIBUTION_TITLE_MAX_CHARS} characters",
        )
    if not text_within(description, CONTRIBUTION_DESCRIPTION_MAX_CHARS):
        raise ValidationFailedError(
            "description", "length",
            f"Description is required and cannot exceed {CONTRIBUTION_DESCRIPTION_MAX_CHARS} characters",
        )
