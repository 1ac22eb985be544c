"""교육 과정 Pydantic 스키마 — Course request/response schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from hrportal.schemas.common import CamelModel
from hrportal.schemas.employee import EmployeeResponse

CourseType = Literal["COURSE", "WEBINAR", "CERTIFICATION", "WORKSHOP"]
CourseStatus = Literal["ACTIVE", "INACTIVE", "ARCHIVED"]
EnrollmentStatus = Literal["ASSIGNED", "IN_PROGRESS", "COMPLETED", "OVERDUE"]


class CourseCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    type: CourseType
    status: CourseStatus = "ACTIVE"
    color: str = Field(default="#10b981", max_length=20)
    link: str | None = Field(default=None, max_length=500)


class CourseUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: CourseType | None = None
    status: CourseStatus | None = None
    color: str | None = Field(default=None, max_length=20)
    link: str | None = Field(default=None, max_length=500)


class EmployeeCourseResponse(CamelModel):
    """직원-과정 배정 행."""
    id: UUID
    employee_id: str
    course_id: UUID
    status: str
    assigned_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    due_date: datetime | None = None
    employee: EmployeeResponse | None = None


class CourseResponse(CamelModel):
    id: UUID
    title: str
    description: str | None = None
    type: str
    status: str
    color: str
    link: str | None = None
    created_at: datetime
    updated_at: datetime


class CourseDetailResponse(CourseResponse):
    """배정된 직원 목록 포함."""
    employee_courses: list[EmployeeCourseResponse] = []


class EnrollmentDetailResponse(EmployeeCourseResponse):
    course: CourseResponse | None = None


class CourseAssignRequest(CamelModel):
    course_id: UUID
    employee_ids: list[str] = Field(min_length=1)


class CourseAssignResult(CamelModel):
    success: bool = True
    message: str
    assignments: list[EmployeeCourseResponse]


class EnrollmentStatusUpdate(CamelModel):
    status: EnrollmentStatus
