"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    employee: 직원 및 직원 관계 (Employees and relation edges)
    onboarding: 온보딩 요청 (Onboarding requests)
    form: 평가 양식, 배정, 응답 (Forms, assignments, responses)
    course: 교육 과정 및 배정 (Courses and employee-course rows)
"""

from hrportal.models.employee import Employee, EmployeeRelation
from hrportal.models.onboarding import OnboardingRequest
from hrportal.models.form import Form, Assignment, Response
from hrportal.models.course import Course, EmployeeCourse

__all__ = [
    "Employee", "EmployeeRelation",
    "OnboardingRequest",
    "Form", "Assignment", "Response",
    "Course", "EmployeeCourse",
]
