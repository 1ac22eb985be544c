"""온보딩/승인 라우터 — 온보딩 제출, 승인 여부 확인, 관리자 승인/반려.

Onboarding Router — Self-service onboarding, approval status and admin review.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.api.deps import get_current_user_id, get_identity, require_admin
from hrportal.config import settings
from hrportal.database import get_db
from hrportal.schemas.onboarding import (
    ApprovalAction,
    ApprovalResponse,
    ApprovalStatusResponse,
    OnboardingRequestResponse,
    OnboardingSubmitResponse,
    SessionStatusResponse,
)
from hrportal.services.identity_service import IdentityService
from hrportal.services.onboarding_service import onboarding_service
from hrportal.services.storage_service import storage_service
from hrportal.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.post("/onboarding", response_model=OnboardingSubmitResponse)
async def submit_onboarding(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[IdentityService, Depends(get_identity)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    department: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = "",
    phone_number: Annotated[str, Form(alias="phoneNumber")] = "",
    is_manager: Annotated[bool, Form(alias="isManager")] = False,
    is_lead: Annotated[bool, Form(alias="isLead")] = False,
    manager: Annotated[str, Form()] = "",
    profile_picture: Annotated[UploadFile | None, File(alias="profilePicture")] = None,
) -> OnboardingSubmitResponse:
    """온보딩 요청 제출 (multipart/form-data)."""
    picture = None
    if profile_picture is not None and profile_picture.filename:
        if profile_picture.size is not None and profile_picture.size > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError("Profile picture is too large")
        # 상한 + 1 바이트까지만 읽고 초과 여부는 서비스에서 판단
        picture = (profile_picture.filename, await profile_picture.read(settings.MAX_UPLOAD_BYTES + 1))
    request = await onboarding_service.submit(
        db, identity, user_id,
        department=department,
        role=role,
        phone_number=phone_number,
        is_manager=is_manager,
        is_lead=is_lead,
        manager_name=manager,
        picture=picture,
    )
    try:
        await db.commit()
    except Exception:
        storage_service.delete_profile_picture(request.profile_picture_url)
        raise
    return OnboardingSubmitResponse(
        message="Onboarding request submitted",
        request=OnboardingRequestResponse.model_validate(request),
    )


@router.get("/auth/check-approval", response_model=ApprovalStatusResponse)
async def check_approval(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ApprovalStatusResponse:
    return await onboarding_service.check_approval(db, user_id)


@router.get("/auth/session", response_model=SessionStatusResponse)
async def get_session_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[IdentityService, Depends(get_identity)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> SessionStatusResponse:
    """온보딩 제출/승인 여부와 역할 플래그."""
    return await onboarding_service.session_status(db, identity, user_id)


@router.get("/approvals", response_model=list[OnboardingRequestResponse])
async def list_pending_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> list[OnboardingRequestResponse]:
    """대기 중인 온보딩 요청 (오래된 순)."""
    return await onboarding_service.list_pending(db)


@router.post("/approvals", response_model=ApprovalResponse)
async def approve_request(
    data: ApprovalAction,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin_id: Annotated[str, Depends(require_admin)],
) -> ApprovalResponse:
    """온보딩 요청 승인 — 직원 생성과 관계 연결이 하나의 트랜잭션."""
    result = await onboarding_service.approve(db, data.request_id, admin_id)
    await db.commit()
    return result


@router.post("/approvals/reject", response_model=OnboardingRequestResponse)
async def reject_request(
    data: ApprovalAction,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin_id: Annotated[str, Depends(require_admin)],
) -> OnboardingRequestResponse:
    result = await onboarding_service.reject(db, data.request_id, admin_id)
    await db.commit()
    return result
