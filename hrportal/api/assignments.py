"""배정/응답 라우터 — 내 배정 목록, 배정 조회, 응답 제출 및 조회.

Assignment Router — The caller's assignments, assignment detail and
response submission. Admin-wide response browsing lives under /responses.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.api.deps import get_current_user_id, require_admin
from hrportal.database import get_db
from hrportal.schemas.form import (
    AssignmentCreate,
    AssignmentDetailResponse,
    AssignmentResponse,
    FormResponseOut,
    ResponseCreate,
    ResponseDetail,
)
from hrportal.services.form_service import assignment_service
from hrportal.services.response_service import response_service

router: APIRouter = APIRouter()


# === 배정 (Assignments) ===

@router.get("/assignments", response_model=list[AssignmentResponse])
async def list_my_assignments(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[AssignmentResponse]:
    """내 배정 목록 (최신순) — 제출 여부 포함."""
    return await assignment_service.list_mine(db, user_id)


@router.post("/assignments", response_model=AssignmentResponse, status_code=201)
async def create_assignment(
    data: AssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> AssignmentResponse:
    result = await assignment_service.create_assignment(db, data)
    await db.commit()
    return result


@router.get("/assignments/{assignment_id}", response_model=AssignmentDetailResponse)
async def get_assignment(
    assignment_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> AssignmentDetailResponse:
    return await assignment_service.get_for_filler(db, assignment_id, user_id)


# === 응답 (Responses) ===

@router.post("/assignments/{assignment_id}/responses", response_model=FormResponseOut, status_code=201)
async def submit_response(
    assignment_id: str,
    data: ResponseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> FormResponseOut:
    """응답 제출 — 배정당 1회 (재제출은 400)."""
    result = await response_service.submit(db, assignment_id, user_id, data)
    await db.commit()
    return result


@router.get("/assignments/{assignment_id}/responses", response_model=list[FormResponseOut])
async def list_my_responses(
    assignment_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[FormResponseOut]:
    return await response_service.list_mine_for_assignment(db, assignment_id, user_id)


@router.get("/assignments/{assignment_id}/responses/{response_id}", response_model=ResponseDetail)
async def get_my_response(
    assignment_id: str,
    response_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ResponseDetail:
    return await response_service.get_own_response(db, assignment_id, response_id, user_id)


@router.get("/responses", response_model=list[ResponseDetail])
async def list_all_responses(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> list[ResponseDetail]:
    """전체 응답 (관리자) — 작성자와 평가 대상 포함, 최신순."""
    return await response_service.list_all(db)


@router.get("/responses/{response_id}", response_model=ResponseDetail)
async def get_response(
    response_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> ResponseDetail:
    return await response_service.get_any(db, response_id)
