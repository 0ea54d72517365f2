"""사용자 프로필 관련 Pydantic 요청 스키마 정의.

User profile request schemas for self-service settings.
"""

from pydantic import BaseModel


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마 (부분 업데이트).

    Profile update request schema (partial update).
    Only provided fields are updated; omitted fields remain unchanged.
    The admin flag and the password are NOT editable here.

    Attributes:
        username: 사용자명 3-30자 (Username, 3-30 chars, unique)
        email: 이메일 (E-mail, unique)
        first_name: 이름 (Given name, max 50 chars)
        last_name: 성 (Family name, max 50 chars)
        phone_number: 전화번호 10자리 (10-digit phone number)
        address: 주소 최대 200자 (Address, max 200 chars)
        age: 나이 1-120 (Age)
        sex: 성별 (male / female / other)
    """

    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    address: str | None = None
    age: int | None = None
    sex: str | None = None


class PasswordChange(BaseModel):
    """비밀번호 변경 요청 스키마."""

    current_password: str
    new_password: str
    confirm_password: str
