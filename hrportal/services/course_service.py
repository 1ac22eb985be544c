"""교육 과정 서비스 — 과정 CRUD, 직원 배정 및 진행 상태 관리.

Course Service — Course CRUD, assignment to employees and progress tracking.
(employee, course) 쌍은 하나의 행만 가지며, 재배정 시 ASSIGNED 상태로 초기화됩니다.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.repositories.course_repository import course_repository, employee_course_repository
from hrportal.repositories.employee_repository import employee_repository
from hrportal.schemas.course import (
    CourseAssignRequest,
    CourseAssignResult,
    CourseCreate,
    CourseDetailResponse,
    CourseUpdate,
    EmployeeCourseResponse,
    EnrollmentDetailResponse,
)
from hrportal.utils.exceptions import ForbiddenError, NotFoundError


class CourseService:

    async def list_courses(self, db: AsyncSession) -> list[CourseDetailResponse]:
        courses = await course_repository.list_with_assignees(db)
        return [CourseDetailResponse.model_validate(c) for c in courses]

    async def get_course(self, db: AsyncSession, course_id: UUID) -> CourseDetailResponse:
        course = await course_repository.get_with_assignees(db, course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return CourseDetailResponse.model_validate(course)

    async def create_course(self, db: AsyncSession, data: CourseCreate) -> CourseDetailResponse:
        course = await course_repository.create(db, data.model_dump())
        return await self.get_course(db, course.id)

    async def update_course(self, db: AsyncSession, course_id: UUID, data: CourseUpdate) -> CourseDetailResponse:
        course = await course_repository.update(db, course_id, data.model_dump(exclude_unset=True))
        if course is None:
            raise NotFoundError("Course not found")
        return await self.get_course(db, course_id)

    async def delete_course(self, db: AsyncSession, course_id: UUID) -> None:
        if not await course_repository.delete(db, course_id):
            raise NotFoundError("Course not found")

    async def assign(self, db: AsyncSession, data: CourseAssignRequest) -> CourseAssignResult:
        """과정을 직원들에게 배정합니다 (업서트).

        Upsert one row per (employee, course). An existing row is reset to
        ASSIGNED with a fresh ``assigned_at`` and cleared progress timestamps.

        Raises:
            NotFoundError: 과정 또는 직원 중 하나라도 없는 경우
        """
        if await course_repository.get_by_id(db, data.course_id) is None:
            raise NotFoundError("Course not found")
        employee_ids = list(dict.fromkeys(data.employee_ids))
        found = {e.id for e in await employee_repository.get_by_ids(db, employee_ids)}
        if len(found) != len(employee_ids):
            raise NotFoundError("One or more employees not found")

        await employee_course_repository.upsert_assigned(
            db, data.course_id, employee_ids, datetime.now(timezone.utc)
        )

        rows = await employee_course_repository.list_filtered(db, course_id=data.course_id)
        assigned = [EmployeeCourseResponse.model_validate(r) for r in rows if r.employee_id in found]
        return CourseAssignResult(
            message=f"Course assigned to {len(assigned)} employees",
            assignments=assigned,
        )

    async def list_enrollments(
        self, db: AsyncSession, course_id: UUID | None, employee_id: str | None
    ) -> list[EnrollmentDetailResponse]:
        rows = await employee_course_repository.list_filtered(db, course_id=course_id, employee_id=employee_id)
        return [EnrollmentDetailResponse.model_validate(r) for r in rows]

    async def update_status(
        self, db: AsyncSession, enrollment_id: UUID, status: str, user_id: str, is_admin: bool
    ) -> EnrollmentDetailResponse:
        """진행 상태 변경 — 배정된 본인 또는 관리자만 가능.

        IN_PROGRESS 진입 시 started_at, COMPLETED 진입 시 completed_at을 기록합니다.
        """
        row = await employee_course_repository.get_by_id(db, enrollment_id)
        if row is None:
            raise NotFoundError("Course assignment not found")
        if row.employee_id != user_id and not is_admin:
            raise ForbiddenError()

        now = datetime.now(timezone.utc)
        if status == "IN_PROGRESS" and row.started_at is None:
            row.started_at = now
        if status == "COMPLETED":
            row.started_at = row.started_at or now
            row.completed_at = now
        elif status in ("ASSIGNED", "IN_PROGRESS"):
            row.completed_at = None
        row.status = status
        await db.flush()

        row = await employee_course_repository.get_with_details(db, enrollment_id)
        return EnrollmentDetailResponse.model_validate(row)


course_service: CourseService = CourseService()
