"""교육 과정 레포지토리 — Course and employee-course queries."""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrportal.models.course import Course, EmployeeCourse
from hrportal.repositories.base import BaseRepository


class CourseRepository(BaseRepository[Course]):

    def __init__(self) -> None:
        super().__init__(Course)

    async def get_with_assignees(self, db: AsyncSession, course_id: UUID) -> Course | None:
        query: Select = (
            select(Course)
            .options(selectinload(Course.employee_courses).selectinload(EmployeeCourse.employee))
            .where(Course.id == course_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_with_assignees(self, db: AsyncSession) -> Sequence[Course]:
        query: Select = (
            select(Course)
            .options(selectinload(Course.employee_courses).selectinload(EmployeeCourse.employee))
            .execution_options(populate_existing=True)
            .order_by(Course.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()


class EmployeeCourseRepository(BaseRepository[EmployeeCourse]):

    def __init__(self) -> None:
        super().__init__(EmployeeCourse)

    async def upsert_assigned(
        self, db: AsyncSession, course_id: UUID, employee_ids: list[str], assigned_at: datetime
    ) -> None:
        """(직원, 과정) 쌍마다 ASSIGNED 행을 보장합니다.

        Insert one ASSIGNED row per employee. A row that already exists for the
        pair, including one inserted by a concurrent request, is reset to
        ASSIGNED with the new ``assigned_at`` and cleared progress timestamps.
        """
        stmt = self.insert_statement(db).values([
            {"employee_id": employee_id, "course_id": course_id, "status": "ASSIGNED", "assigned_at": assigned_at}
            for employee_id in employee_ids
        ])
        stmt = stmt.on_conflict_do_update(
            index_elements=["employee_id", "course_id"],
            set_={
                "status": "ASSIGNED",
                "assigned_at": stmt.excluded.assigned_at,
                "started_at": None,
                "completed_at": None,
            },
        )
        await db.execute(stmt)

    async def get_with_details(self, db: AsyncSession, enrollment_id: UUID) -> EmployeeCourse | None:
        result = await db.execute(
            select(EmployeeCourse)
            .options(selectinload(EmployeeCourse.course), selectinload(EmployeeCourse.employee))
            .where(EmployeeCourse.id == enrollment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        db: AsyncSession,
        course_id: UUID | None = None,
        employee_id: str | None = None,
    ) -> Sequence[EmployeeCourse]:
        query: Select = select(EmployeeCourse).options(
            selectinload(EmployeeCourse.course), selectinload(EmployeeCourse.employee)
        ).execution_options(populate_existing=True)
        if course_id is not None:
            query = query.where(EmployeeCourse.course_id == course_id)
        if employee_id is not None:
            query = query.where(EmployeeCourse.employee_id == employee_id)
        result = await db.execute(query.order_by(EmployeeCourse.assigned_at.desc()))
        return result.scalars().all()

    async def delete_for_employee(self, db: AsyncSession, employee_id: str) -> int:
        result = await db.execute(delete(EmployeeCourse).where(EmployeeCourse.employee_id == employee_id))
        return result.rowcount or 0


course_repository: CourseRepository = CourseRepository()
employee_course_repository: EmployeeCourseRepository = EmployeeCourseRepository()
