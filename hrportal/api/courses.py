"""교육 과정 라우터 — 과정 CRUD, 직원 배정, 진행 상태.

Course Router — Course CRUD, assignment to employees and progress updates.
/courses/assign 은 /courses/{course_id} 보다 먼저 등록합니다.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.api.deps import get_current_user_id, get_identity, require_admin
from hrportal.database import get_db
from hrportal.schemas.common import MessageResponse
from hrportal.schemas.course import (
    CourseAssignRequest,
    CourseAssignResult,
    CourseCreate,
    CourseDetailResponse,
    CourseUpdate,
    EnrollmentDetailResponse,
    EnrollmentStatusUpdate,
)
from hrportal.services.course_service import course_service
from hrportal.services.identity_service import IdentityService

router: APIRouter = APIRouter()


@router.post("/courses/assign", response_model=CourseAssignResult)
async def assign_course(
    data: CourseAssignRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> CourseAssignResult:
    result = await course_service.assign(db, data)
    await db.commit()
    return result


@router.get("/courses/assign", response_model=list[EnrollmentDetailResponse])
async def list_course_assignments(
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[IdentityService, Depends(get_identity)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    course_id: Annotated[UUID | None, Query(alias="courseId")] = None,
    employee_id: Annotated[str | None, Query(alias="employeeId")] = None,
) -> list[EnrollmentDetailResponse]:
    """과정 배정 목록 — 관리자가 아니면 본인 배정만 조회."""
    if not await identity.has_admin_role(user_id):
        employee_id = user_id
    return await course_service.list_enrollments(db, course_id, employee_id)


@router.patch("/courses/assignments/{enrollment_id}", response_model=EnrollmentDetailResponse)
async def update_course_progress(
    enrollment_id: UUID,
    data: EnrollmentStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Annotated[IdentityService, Depends(get_identity)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> EnrollmentDetailResponse:
    is_admin = await identity.has_admin_role(user_id)
    result = await course_service.update_status(db, enrollment_id, data.status, user_id, is_admin)
    await db.commit()
    return result


@router.get("/courses", response_model=list[CourseDetailResponse])
async def list_courses(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(get_current_user_id)],
) -> list[CourseDetailResponse]:
    return await course_service.list_courses(db)


@router.post("/courses", response_model=CourseDetailResponse, status_code=201)
async def create_course(
    data: CourseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> CourseDetailResponse:
    result = await course_service.create_course(db, data)
    await db.commit()
    return result


@router.get("/courses/{course_id}", response_model=CourseDetailResponse)
async def get_course(
    course_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(get_current_user_id)],
) -> CourseDetailResponse:
    return await course_service.get_course(db, course_id)


@router.patch("/courses/{course_id}", response_model=CourseDetailResponse)
async def update_course(
    course_id: UUID,
    data: CourseUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> CourseDetailResponse:
    result = await course_service.update_course(db, course_id, data)
    await db.commit()
    return result


@router.delete("/courses/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> MessageResponse:
    await course_service.delete_course(db, course_id)
    await db.commit()
    return MessageResponse(message="Course deleted")
