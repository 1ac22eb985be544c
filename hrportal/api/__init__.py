"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router
for inclusion in the FastAPI application under ``/api``.

Included routers:
    - onboarding: 온보딩 제출 및 승인 (Onboarding submission & approvals)
    - employees: 직원/관계 그래프/조직도 (Employees, relation graph, hierarchy)
    - forms: 평가 양식 및 자동 배정 (Evaluation forms & auto-assignment)
    - assignments: 배정 및 응답 (Assignments & responses)
    - courses: 교육 과정 (Courses & enrollments)
"""

from fastapi import APIRouter

from hrportal.api.onboarding import router as onboarding_router
from hrportal.api.employees import router as employees_router
from hrportal.api.forms import router as forms_router
from hrportal.api.assignments import router as assignments_router
from hrportal.api.courses import router as courses_router

api_router: APIRouter = APIRouter()

api_router.include_router(onboarding_router, tags=["Onboarding"])
api_router.include_router(employees_router, tags=["Employees"])
api_router.include_router(forms_router, tags=["Forms"])
api_router.include_router(assignments_router, tags=["Assignments"])
api_router.include_router(courses_router, tags=["Courses"])
