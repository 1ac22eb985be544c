"""온보딩 서비스 — 온보딩 요청 제출 및 승인/반려 비즈니스 로직.

Onboarding Service — Self-service onboarding submission and admin review.

Flow:
    1. 사용자가 프로필을 제출 → PENDING 요청 생성 (One request per user)
    2. 관리자 승인 → 직원 업서트, 매니저 관계 연결, 리드 관계 생성, APPROVED
    3. 관리자 반려 → REJECTED (종료 상태는 변경 불가)

승인 전체가 하나의 트랜잭션으로 처리됩니다 (services only flush).
"""

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.config import settings
from hrportal.models.employee import RELATION_LEAD, RELATION_MANAGER, Employee
from hrportal.models.onboarding import (
    ONBOARDING_APPROVED,
    ONBOARDING_PENDING,
    ONBOARDING_REJECTED,
    OnboardingRequest,
)
from hrportal.repositories.employee_repository import employee_repository, relation_repository
from hrportal.repositories.onboarding_repository import onboarding_repository
from hrportal.schemas.onboarding import (
    ApprovalResponse,
    ApprovalStatusResponse,
    ManagerLinkResult,
    OnboardingRequestResponse,
    SessionStatusResponse,
)
from hrportal.services.identity_service import DirectoryUser, IdentityService
from hrportal.services.storage_service import storage_service
from hrportal.utils.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


def is_company_email(email: str, domains: Sequence[str] | None = None) -> bool:
    """회사 이메일 도메인 검사 — 허용 목록이 비어 있으면 모두 허용."""
    allowed = [d.lower().lstrip("@") for d in (settings.COMPANY_EMAIL_DOMAINS if domains is None else domains)]
    if not allowed:
        return bool(email)
    _, _, domain = email.rpartition("@")
    return domain.lower() in allowed


def split_manager_name(name: str) -> tuple[str, str | None]:
    """매니저 이름을 (이름, 성)으로 분리합니다.

    Split on the first space: "Jane Doe Smith" → ("Jane", "Doe Smith").
    A single word is treated as a first name only.
    """
    cleaned = " ".join(name.split())
    first, _, last = cleaned.partition(" ")
    return first, (last or None)


class OnboardingService:
    """온보딩 요청 및 승인 서비스."""

    async def submit(
        self,
        db: AsyncSession,
        identity: IdentityService,
        user_id: str,
        *,
        department: str | None,
        role: str | None,
        phone_number: str | None,
        is_manager: bool,
        is_lead: bool,
        manager_name: str | None,
        picture: tuple[str, bytes] | None = None,
    ) -> OnboardingRequest:
        """온보딩 요청을 제출합니다.

        Submit the caller's onboarding request. Email and names come from
        the identity directory, never from the form.

        Args:
            picture: (원본 파일명, 내용) 또는 None (Original filename and bytes)

        Raises:
            ForbiddenError: 회사 이메일 도메인이 아닌 경우
            ConflictError: 이미 요청이 존재하는 경우
            BadRequestError: 사진 용량 초과
        """
        user: DirectoryUser = await identity.get_user(user_id)
        if not user.email or not is_company_email(user.email):
            raise ForbiddenError("Unauthorized email domain")

        if await onboarding_repository.get_by_user_id(db, user_id) is not None:
            raise ConflictError("An onboarding request has already been submitted")

        if picture is not None and len(picture[1]) > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError("Profile picture is too large")

        request = await onboarding_repository.create(db, {
            "user_id": user_id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "phone_number": phone_number or None,
            "department": department or None,
            "role": role or None,
            "is_manager": is_manager,
            "is_lead": is_lead,
            "manager_name": (manager_name or "").strip() or None,
            "status": ONBOARDING_PENDING,
        })

        # 요청 행이 기록된 뒤에만 파일 저장
        if picture is not None:
            request.profile_picture_url = await self._store_picture(identity, user_id, *picture)
            try:
                await db.flush()
            except Exception:
                storage_service.delete_profile_picture(request.profile_picture_url)
                raise
        return request

    async def _store_picture(
        self, identity: IdentityService, user_id: str, filename: str, data: bytes
    ) -> str | None:
        # 저장 실패 시 사진 없이 계속 진행
        try:
            relative_url = storage_service.save_profile_picture(user_id, filename, data)
        except OSError:
            logger.exception("Failed to save profile picture for %s", user_id)
            return None
        await identity.update_profile_image(user_id, storage_service.absolute_url(relative_url))
        return relative_url

    async def check_approval(self, db: AsyncSession, user_id: str) -> ApprovalStatusResponse:
        """승인 여부 — 직원 레코드가 있거나 요청이 APPROVED이면 승인됨."""
        request = await onboarding_repository.get_by_user_id(db, user_id)
        employee = await employee_repository.get_by_id(db, user_id)
        status = request.status if request else None
        return ApprovalStatusResponse(
            is_approved=employee is not None or status == ONBOARDING_APPROVED,
            status=status,
            user_id=user_id,
        )

    async def session_status(
        self, db: AsyncSession, identity: IdentityService, user_id: str
    ) -> SessionStatusResponse:
        """세션 상태 — 온보딩 제출/승인 여부와 역할 플래그.

        ``is_approved`` follows the same rule as :meth:`check_approval`.
        """
        approval = await self.check_approval(db, user_id)
        return SessionStatusResponse(
            has_submitted=approval.status is not None,
            is_approved=approval.is_approved,
            is_admin=await identity.has_admin_role(user_id),
            is_employee=await identity.is_employee(user_id),
        )

    async def list_pending(self, db: AsyncSession) -> list[OnboardingRequestResponse]:
        requests = await onboarding_repository.list_pending(db)
        return [OnboardingRequestResponse.model_validate(r) for r in requests]

    async def _get_pending(self, db: AsyncSession, request_id: UUID) -> OnboardingRequest:
        request = await onboarding_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("Request not found")
        if request.status != ONBOARDING_PENDING:
            raise ConflictError(f"Request has already been {request.status.lower()}")
        return request

    async def resolve_manager(
        self, db: AsyncSession, manager_name: str | None, employee_id: str
    ) -> ManagerLinkResult:
        """매니저 이름을 직원으로 해석합니다.

        Resolve a free-text manager name to one employee.
        "First Last" matches first and last name exactly; the whole string
        is also tried as a first name. The new employee never matches itself.

        Returns:
            ManagerLinkResult: RESOLVED / AMBIGUOUS / NOT_FOUND / NOT_REQUESTED
        """
        if not manager_name or not manager_name.strip():
            return ManagerLinkResult(outcome="NOT_REQUESTED")

        first, last = split_manager_name(manager_name)
        candidates: dict[str, Employee] = {}
        if last is not None:
            for employee in await employee_repository.find_by_name(db, first, last):
                candidates.setdefault(employee.id, employee)
        for employee in await employee_repository.find_by_name(db, " ".join(manager_name.split()), None):
            candidates.setdefault(employee.id, employee)
        candidates.pop(employee_id, None)

        if not candidates:
            return ManagerLinkResult(outcome="NOT_FOUND", manager_name=manager_name)
        if len(candidates) > 1:
            return ManagerLinkResult(
                outcome="AMBIGUOUS",
                manager_name=manager_name,
                candidate_ids=list(candidates),
            )
        return ManagerLinkResult(
            outcome="RESOLVED",
            manager_name=manager_name,
            employee_id=next(iter(candidates)),
        )

    async def approve(self, db: AsyncSession, request_id: UUID, admin_id: str) -> ApprovalResponse:
        """온보딩 요청을 승인합니다.

        Approve a PENDING request:
            (a) 직원 업서트 (Upsert the employee from the request fields)
            (b) 매니저 이름 해석 후 MANAGER 관계 업서트 (Link the named manager)
            (c) 리드이면 같은 부서의 비리드 직원 전원에게 LEAD 관계 (Lead fan-out)
            (d) 상태 APPROVED 기록

        Raises:
            NotFoundError: 요청이 없음
            ConflictError: 이미 처리된 요청
        """
        request = await self._get_pending(db, request_id)

        profile = {
            "email": request.email,
            "first_name": request.first_name,
            "last_name": request.last_name,
            "phone_number": request.phone_number,
            "department": request.department,
            "role": request.role,
            "is_manager": request.is_manager,
            "is_lead": request.is_lead,
            "profile_picture_url": request.profile_picture_url,
        }
        employee = await employee_repository.get_by_id(db, request.user_id)
        if employee is None:
            employee = await employee_repository.create(db, {"id": request.user_id, **profile})
        else:
            employee = await employee_repository.update(db, employee.id, profile)

        link = await self.resolve_manager(db, request.manager_name, employee.id)
        if link.outcome == "RESOLVED":
            await relation_repository.upsert(db, link.employee_id, employee.id, RELATION_MANAGER)
            logger.info("Linked manager %s -> %s", link.employee_id, employee.id)
        elif link.outcome == "AMBIGUOUS":
            logger.warning(
                "Manager name %r is ambiguous for %s (candidates: %s); no relation created",
                request.manager_name, employee.id, ", ".join(link.candidate_ids),
            )
        elif link.outcome == "NOT_FOUND":
            logger.warning("No employee matches manager name %r for %s", request.manager_name, employee.id)

        lead_created = 0
        if request.is_lead:
            reports = await employee_repository.list_department_non_leads(db, request.department, employee.id)
            for report in reports:
                _, created = await relation_repository.upsert(db, employee.id, report.id, RELATION_LEAD)
                lead_created += int(created)

        request.status = ONBOARDING_APPROVED
        request.approved_at = datetime.now(timezone.utc)
        request.approved_by = admin_id
        await db.flush()

        return ApprovalResponse(
            message="Onboarding request approved",
            employee_id=employee.id,
            manager_link=link,
            lead_relations_created=lead_created,
        )

    async def reject(self, db: AsyncSession, request_id: UUID, admin_id: str) -> OnboardingRequestResponse:
        """온보딩 요청을 반려합니다 — PENDING → REJECTED."""
        request = await self._get_pending(db, request_id)
        request.status = ONBOARDING_REJECTED
        request.rejected_at = datetime.now(timezone.utc)
        request.rejected_by = admin_id
        await db.flush()
        return OnboardingRequestResponse.model_validate(request)


onboarding_service: OnboardingService = OnboardingService()
