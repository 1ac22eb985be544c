"""양식 라우터 — 평가 양식 CRUD, 수동 배정, 기본 양식, 자동 배정.

Form Router — Evaluation form CRUD, manual assignment, default question
sets and the review-cycle auto-assignment run.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.api.deps import get_current_user_id, get_identity, require_admin
from hrportal.database import get_db
from hrportal.schemas.common import MessageResponse
from hrportal.schemas.form import (
    AutoAssignResult,
    DefaultFormsResult,
    FormAssignRequest,
    FormAssignResult,
    FormCreate,
    FormResponse,
    FormUpdate,
)
from hrportal.services.evaluation_service import evaluation_service
from hrportal.services.form_service import form_service
from hrportal.services.identity_service import IdentityService

router: APIRouter = APIRouter()


@router.post("/forms/auto-assign", response_model=AutoAssignResult)
async def auto_assign_forms(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[IdentityService, Depends(get_identity)],
    _: Annotated[str, Depends(require_admin)],
) -> AutoAssignResult:
    """360도 평가 배정 일괄 생성 — 전체 실행이 하나의 트랜잭션."""
    result = await evaluation_service.auto_assign(db, identity)
    await db.commit()
    return result


@router.post("/forms/defaults", response_model=DefaultFormsResult)
async def reset_default_forms(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin_id: Annotated[str, Depends(require_admin)],
) -> DefaultFormsResult:
    result = await form_service.reset_defaults(db, admin_id)
    await db.commit()
    return result


@router.get("/forms", response_model=list[FormResponse])
async def list_forms(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> list[FormResponse]:
    return await form_service.list_forms(db)


@router.post("/forms", response_model=FormResponse, status_code=201)
async def create_form(
    data: FormCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin_id: Annotated[str, Depends(require_admin)],
) -> FormResponse:
    result = await form_service.create_form(db, data, admin_id)
    await db.commit()
    return result


@router.get("/forms/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(get_current_user_id)],
) -> FormResponse:
    return await form_service.get_form(db, form_id)


@router.patch("/forms/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    data: FormUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> FormResponse:
    result = await form_service.update_form(db, form_id, data)
    await db.commit()
    return result


@router.delete("/forms/{form_id}", response_model=MessageResponse)
async def delete_form(
    form_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> MessageResponse:
    await form_service.delete_form(db, form_id)
    await db.commit()
    return MessageResponse(message="Form deleted")


@router.post("/forms/{form_id}/assign", response_model=FormAssignResult, status_code=201)
async def assign_form(
    form_id: str,
    data: FormAssignRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> FormAssignResult:
    result = await form_service.assign_form(db, form_id, data.employee_ids)
    await db.commit()
    return result
