"""온보딩/승인 Pydantic 스키마 — Onboarding and approval schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from hrportal.schemas.common import CamelModel


class OnboardingRequestResponse(CamelModel):
    """온보딩 요청 응답 스키마."""
    id: UUID
    user_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str | None = None
    department: str | None = None
    role: str | None = None
    is_manager: bool = False
    is_lead: bool = False
    manager_name: str | None = None
    profile_picture_url: str | None = None
    status: str
    created_at: datetime
    approved_at: datetime | None = None
    approved_by: str | None = None
    rejected_at: datetime | None = None
    rejected_by: str | None = None


class OnboardingSubmitResponse(CamelModel):
    success: bool = True
    message: str
    request: OnboardingRequestResponse


class ApprovalStatusResponse(CamelModel):
    """승인 여부 확인 응답 — GET /auth/check-approval."""
    is_approved: bool
    status: str | None = None  # 요청이 없으면 None
    user_id: str


class ApprovalAction(CamelModel):
    """승인/반려 요청 본문."""
    request_id: UUID


class ManagerLinkResult(CamelModel):
    """매니저 이름 해석 결과 — 승인 응답에 포함.

    outcome:
        RESOLVED      — 한 명과 일치, MANAGER 관계 생성 (employeeId 설정)
        AMBIGUOUS     — 여러 명과 일치, 관계 생성 생략 (candidateIds 설정)
        NOT_FOUND     — 일치하는 직원 없음
        NOT_REQUESTED — 매니저 이름 미입력
    """
    outcome: Literal["RESOLVED", "AMBIGUOUS", "NOT_FOUND", "NOT_REQUESTED"]
    manager_name: str | None = None
    employee_id: str | None = None
    candidate_ids: list[str] = []


class ApprovalResponse(CamelModel):
    success: bool = True
    message: str
    employee_id: str
    manager_link: ManagerLinkResult
    lead_relations_created: int = 0


class SessionStatusResponse(CamelModel):
    """세션 상태 — GET /auth/session (메뉴 표시용 역할 플래그 포함)."""
    has_submitted: bool
    is_approved: bool
    is_admin: bool = False
    is_employee: bool = False
