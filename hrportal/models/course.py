"""교육 과정 SQLAlchemy ORM 모델 정의.

Course SQLAlchemy ORM model definitions.

Tables:
    - courses: 교육 과정 (Courses, webinars, certifications, workshops)
    - employee_courses: 직원별 과정 배정 (Per-employee course assignment with status)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrportal.database import Base

COURSE_TYPES: tuple[str, ...] = ("COURSE", "WEBINAR", "CERTIFICATION", "WORKSHOP")
COURSE_STATUSES: tuple[str, ...] = ("ACTIVE", "INACTIVE", "ARCHIVED")
ENROLLMENT_STATUSES: tuple[str, ...] = ("ASSIGNED", "IN_PROGRESS", "COMPLETED", "OVERDUE")


class Course(Base):
    """교육 과정 모델.

    Course model.

    Attributes:
        id: 고유 식별자 UUID
        title: 과정명
        description: 설명
        type: "COURSE" | "WEBINAR" | "CERTIFICATION" | "WORKSHOP"
        status: "ACTIVE" | "INACTIVE" | "ARCHIVED"
        color: 표시 색상 (hex)
        link: 외부 링크
    """

    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # COURSE, WEBINAR, CERTIFICATION, WORKSHOP
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE, INACTIVE, ARCHIVED
    color: Mapped[str] = mapped_column(String(20), default="#10b981")
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    employee_courses = relationship("EmployeeCourse", back_populates="course", cascade="all, delete-orphan")


class EmployeeCourse(Base):
    """직원-과정 배정 모델.

    Employee-course assignment row. Unique per (employee_id, course_id);
    re-assignment resets status to ASSIGNED and refreshes ``assigned_at``.

    Constraints:
        uq_employee_course: (employee_id, course_id)
    """

    __tablename__ = "employee_courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default="ASSIGNED")  # ASSIGNED, IN_PROGRESS, COMPLETED, OVERDUE
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "course_id", name="uq_employee_course"),
    )

    course = relationship("Course", back_populates="employee_courses")
    employee = relationship("Employee")
