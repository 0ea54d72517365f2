"""사용자 서비스 — 프로필, 프로필 수정, 비밀번호 변경, 관리자 권한 토글.

User Service — Business logic for the account settings pages and the
administrator's user list. Account field rules shared with signup live here.
"""

import re
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.auth import ProfileResponse
from app.schemas.user import PasswordChange, ProfileUpdate
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from app.utils.password import hash_password, verify_password

PHONE_PATTERN = re.compile(r"^\d{10}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN_CHARS: int = 3
USERNAME_MAX_CHARS: int = 30
NAME_MAX_CHARS: int = 50
ADDRESS_MAX_CHARS: int = 200
PASSWORD_MIN_CHARS: int = 6
SEX_CHOICES: tuple[str, ...] = ("male", "female", "other")


def normalize_account_fields(values: dict[str, Any]) -> dict[str, Any]:
    """계정 필드 정규화 및 검증.

    Trim and check the account fields present in values, returning the
    cleaned dict. Absent keys are left alone, so the same rules serve
    signup (all keys) and profile updates (some keys).

    Raises:
        ValidationFailedError: 필드 규칙 위반 (A field rule failed)
    """
    cleaned: dict[str, Any] = dict(values)

    for field in ("first_name", "last_name"):
        if field in cleaned:
            cleaned[field] = (cleaned[field] or "").strip()
            if len(cleaned[field]) > NAME_MAX_CHARS:
                raise ValidationFailedError(
                    field, "length", f"{field} cannot exceed {NAME_MAX_CHARS} characters"
                )

    if "username" in cleaned:
        cleaned["username"] = (cleaned["username"] or "").strip()
        if not USERNAME_MIN_CHARS <= len(cleaned["username"]) <= USERNAME_MAX_CHARS:
            raise ValidationFailedError(
                "username", "length",
                f"Username must be {USERNAME_MIN_CHARS}-{USERNAME_MAX_CHARS} characters",
            )

    if "email" in cleaned:
        cleaned["email"] = (cleaned["email"] or "").strip().lower()
        if not EMAIL_PATTERN.match(cleaned["email"]):
            raise ValidationFailedError("email", "format", "Please enter a valid email address")

    if "phone_number" in cleaned:
        cleaned["phone_number"] = (cleaned["phone_number"] or "").strip()
        if not PHONE_PATTERN.match(cleaned["phone_number"]):
            raise ValidationFailedError(
                "phone_number", "format", "Phone number must be exactly 10 digits"
            )

    if "address" in cleaned:
        cleaned["address"] = (cleaned["address"] or "").strip() or None
        if cleaned["address"] and len(cleaned["address"]) > ADDRESS_MAX_CHARS:
            raise ValidationFailedError(
                "address", "length", f"Address cannot exceed {ADDRESS_MAX_CHARS} characters"
            )

    if cleaned.get("age") is not None and not 1 <= cleaned["age"] <= 120:
        raise ValidationFailedError("age", "range", "Age must be between 1 and 120")

    if cleaned.get("sex"):
        cleaned["sex"] = cleaned["sex"].strip().lower()
        if cleaned["sex"] not in SEX_CHOICES:
            raise ValidationFailedError("sex", "choice", "Sex must be male, female or other")

    return cleaned


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling profile self-service and administrator user management.
    """

    def to_profile(self, user: User) -> ProfileResponse:
        """사용자 모델을 공개 프로필로 변환 — Never includes the password hash."""
        return ProfileResponse(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            email=user.email,
            phone_number=user.phone_number,
            address=user.address,
            age=user.age,
            sex=user.sex,
            avatar_url=user.avatar_url,
            is_verified=user.is_verified,
            is_admin=user.is_admin,
            created_at=user.created_at,
        )

    async def update_profile(
        self,
        db: AsyncSession,
        current_user: User,
        data: ProfileUpdate,
    ) -> ProfileResponse:
        """현재 사용자의 프로필을 업데이트합니다.

        Update the current user's profile with the provided allow-listed fields.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 모델 (Authenticated user model)
            data: 업데이트 데이터 (Profile update data)

        Returns:
            ProfileResponse: 업데이트된 프로필 응답 (Updated profile response)

        Raises:
            ValidationFailedError: 필드 규칙 위반 (A field rule failed)
            DuplicateError: 사용자명/이메일/전화번호 중복 (Unique field taken)
        """
        update_data: dict = normalize_account_fields(data.model_dump(exclude_unset=True))
        # 필수 필드는 비울 수 없음 — Required fields cannot be cleared
        for field in ("first_name", "last_name", "username", "email"):
            if field in update_data and not update_data[field]:
                raise ValidationFailedError(field, "required", f"{field} is required")

        conflict = await user_repository.find_conflict(
            db,
            update_data.get("username"),
            update_data.get("email"),
            update_data.get("phone_number"),
            exclude_id=current_user.id,
        )
        if conflict is not None:
            raise DuplicateError(f"User with this {conflict} already exists")

        user: User = await user_repository.update(db, current_user, update_data)
        return self.to_profile(user)

    async def change_password(
        self,
        db: AsyncSession,
        current_user: User,
        data: PasswordChange,
    ) -> None:
        """비밀번호를 변경합니다.

        Raises:
            BadRequestError: 새 비밀번호 불일치 또는 현재 비밀번호 오류
                             (Confirmation mismatch or wrong current password)
            ValidationFailedError: 새 비밀번호가 너무 짧음 (New password too short)
        """
        if data.new_password != data.confirm_password:
            raise BadRequestError("New passwords do not match")
        if len(data.new_password) < PASSWORD_MIN_CHARS:
            raise ValidationFailedError(
                "new_password", "length",
                f"Password must be at least {PASSWORD_MIN_CHARS} characters long",
            )
        if not verify_password(data.current_password, current_user.password_hash):
            raise BadRequestError("Incorrect current password")

        await user_repository.update(
            db, current_user, {"password_hash": hash_password(data.new_password)}
        )

    # --- 관리자 ---

    async def list_users(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[User], int]:
        return await user_repository.list_users(db, page, per_page)

    async def toggle_admin(self, db: AsyncSession, user_id: UUID, caller: User) -> User:
        """관리자 권한 토글 — Flip is_admin on another account.

        Raises:
            NotFoundError: 사용자 없음 (Unknown user)
            PermissionDeniedError: 자기 자신 (Caller targeted their own account)
        """
        if user_id == caller.id:
            raise PermissionDeniedError("You cannot change your own admin status")
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return await user_repository.update(db, user, {"is_admin": not user.is_admin})


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
