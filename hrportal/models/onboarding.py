"""온보딩 요청 SQLAlchemy ORM 모델 정의.

Onboarding request SQLAlchemy ORM model definition.
A pending self-submitted profile that becomes an Employee on admin approval.

Tables:
    - onboarding_requests: 온보딩 요청 (One request per identity-provider user)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hrportal.database import Base

# 온보딩 상태 — Onboarding request states (PENDING → APPROVED | REJECTED)
ONBOARDING_PENDING: str = "PENDING"
ONBOARDING_APPROVED: str = "APPROVED"
ONBOARDING_REJECTED: str = "REJECTED"


class OnboardingRequest(Base):
    """온보딩 요청 모델.

    Onboarding request model — Submitted profile fields plus review status.
    Only the status fields change after creation.

    Attributes:
        id: 고유 식별자 UUID
        user_id: 인증 공급자 사용자 ID (unique)
        email / first_name / last_name: 인증 공급자에서 복사한 값
        phone_number / department / role: 제출 프로필
        is_manager / is_lead: 직책 플래그
        manager_name: 상사 이름 ("Jane Doe" 또는 "Jane")
        profile_picture_url: 업로드한 사진의 상대 URL
        status: "PENDING" | "APPROVED" | "REJECTED"
        approved_at / approved_by: 승인 기록
        rejected_at / rejected_by: 반려 기록
    """

    __tablename__ = "onboarding_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_manager: Mapped[bool] = mapped_column(Boolean, default=False)
    is_lead: Mapped[bool] = mapped_column(Boolean, default=False)
    manager_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=ONBOARDING_PENDING)  # PENDING, APPROVED, REJECTED
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
