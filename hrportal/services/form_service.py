"""양식/배정 서비스 — 평가 양식 CRUD 및 배정 비즈니스 로직.

Form Service — Business logic for evaluation forms and assignments.
manager-form / employee-form은 자동 배정 엔진이 사용하는 표준 양식으로 삭제할 수 없습니다.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.form import CANONICAL_FORM_IDS, Assignment, Form
from hrportal.repositories.employee_repository import employee_repository
from hrportal.repositories.form_repository import (
    assignment_repository,
    form_repository,
    response_repository,
)
from hrportal.schemas.form import (
    AssignmentCreate,
    AssignmentDetailResponse,
    AssignmentResponse,
    DefaultFormsResult,
    FormAssignResult,
    FormCreate,
    FormResponse,
    FormUpdate,
)
from hrportal.services.default_questions import DEFAULT_FORMS
from hrportal.utils.exceptions import ConflictError, NotFoundError


class FormService:

    def _dump_questions(self, questions) -> list[dict]:
        return [q.model_dump(by_alias=True, exclude_none=True) for q in questions]

    async def list_forms(self, db: AsyncSession) -> list[FormResponse]:
        forms = await form_repository.list_recent(db)
        return [FormResponse.model_validate(f) for f in forms]

    async def get_form(self, db: AsyncSession, form_id: str) -> FormResponse:
        form = await form_repository.get_by_id(db, form_id)
        if form is None:
            raise NotFoundError("Form not found")
        return FormResponse.model_validate(form)

    async def create_form(self, db: AsyncSession, data: FormCreate, created_by: str) -> FormResponse:
        form_id = data.id or str(uuid.uuid4())
        if await form_repository.get_by_id(db, form_id) is not None:
            raise ConflictError(f"Form '{form_id}' already exists")
        form = await form_repository.create(db, {
            "id": form_id,
            "title": data.title,
            "description": data.description,
            "questions": self._dump_questions(data.questions),
            "created_by": created_by,
        })
        return FormResponse.model_validate(form)

    async def update_form(self, db: AsyncSession, form_id: str, data: FormUpdate) -> FormResponse:
        update_data = data.model_dump(exclude_unset=True, exclude={"questions"})
        if data.questions is not None:
            update_data["questions"] = self._dump_questions(data.questions)
        form = await form_repository.update(db, form_id, update_data)
        if form is None:
            raise NotFoundError("Form not found")
        return FormResponse.model_validate(form)

    async def delete_form(self, db: AsyncSession, form_id: str) -> None:
        if form_id in CANONICAL_FORM_IDS:
            raise ConflictError(f"Form '{form_id}' is required for automatic assignment and cannot be deleted")
        if not await form_repository.delete(db, form_id):
            raise NotFoundError("Form not found")

    async def reset_defaults(self, db: AsyncSession, admin_id: str) -> DefaultFormsResult:
        """표준 양식을 기본 질문으로 생성하거나 초기화합니다."""
        forms: list[Form] = []
        for form_id, content in DEFAULT_FORMS.items():
            form = await form_repository.get_by_id(db, form_id)
            if form is None:
                form = await form_repository.create(db, {"id": form_id, "created_by": admin_id, **content})
            else:
                form = await form_repository.update(db, form_id, content)
            forms.append(form)
        return DefaultFormsResult(
            message="Forms updated with the default question sets",
            forms=[FormResponse.model_validate(f) for f in forms],
        )

    async def assign_form(self, db: AsyncSession, form_id: str, employee_ids: list[str]) -> FormAssignResult:
        """양식을 직원들에게 수동 배정합니다 — 이미 배정된 직원은 건너뜀.

        Raises:
            NotFoundError: 양식 또는 직원이 없는 경우
        """
        if await form_repository.get_by_id(db, form_id) is None:
            raise NotFoundError("Form not found")
        unique_ids = list(dict.fromkeys(employee_ids))
        employees = {e.id: e for e in await employee_repository.get_by_ids(db, unique_ids)}
        missing = [eid for eid in unique_ids if eid not in employees]
        if missing:
            raise NotFoundError(f"Employee not found: {', '.join(missing)}")

        created = skipped = 0
        for employee_id in unique_ids:
            if await assignment_repository.get_by_form_and_employee(db, form_id, employee_id):
                skipped += 1
                continue
            await assignment_repository.create(db, {
                "form_id": form_id,
                "employee_id": employee_id,
                "employee_email": employees[employee_id].email,
            })
            created += 1
        return FormAssignResult(
            message=f"Form assigned to {created} employee(s)",
            created=created,
            skipped=skipped,
        )


class AssignmentService:

    def _to_response(
        self, assignment: Assignment, submitted_at: datetime | None = None, form_title: str | None = None
    ) -> AssignmentResponse:
        return AssignmentResponse(
            id=assignment.id,
            form_id=assignment.form_id,
            form_title=form_title,
            employee_id=assignment.employee_id,
            employee_email=assignment.employee_email,
            assigned_at=assignment.assigned_at,
            evaluation_target=assignment.evaluation_target,
            has_response=submitted_at is not None,
            submitted_at=submitted_at,
        )

    async def list_mine(self, db: AsyncSession, user_id: str) -> list[AssignmentResponse]:
        assignments = await assignment_repository.list_for_employee(db, user_id)
        latest = await response_repository.latest_by_assignment(db, [a.id for a in assignments])
        return [
            self._to_response(a, latest[a.id].created_at if a.id in latest else None, a.form.title)
            for a in assignments
        ]

    async def get_for_filler(self, db: AsyncSession, assignment_id: str, user_id: str) -> AssignmentDetailResponse:
        """작성자 본인만 조회 가능 — 다른 사용자에게는 존재 자체를 숨김 (404)."""
        assignment = await assignment_repository.get_with_form(db, assignment_id)
        if assignment is None or assignment.employee_id != user_id:
            raise NotFoundError("Assignment not found")
        latest = await response_repository.latest_by_assignment(db, [assignment.id])
        summary = self._to_response(
            assignment, latest[assignment.id].created_at if latest else None, assignment.form.title
        )
        return AssignmentDetailResponse(
            **summary.model_dump(),
            form=FormResponse.model_validate(assignment.form) if assignment.form else None,
        )

    async def create_assignment(self, db: AsyncSession, data: AssignmentCreate) -> AssignmentResponse:
        form = await form_repository.get_by_id(db, data.form_id)
        if form is None:
            raise NotFoundError("Form not found")
        employee = await employee_repository.get_by_id(db, data.employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        assignment = await assignment_repository.create(db, {
            "form_id": form.id,
            "employee_id": employee.id,
            "employee_email": employee.email,
            "assigned_at": datetime.now(timezone.utc),
            "evaluation_target": (
                data.evaluation_target.model_dump(by_alias=True) if data.evaluation_target else None
            ),
        })
        return self._to_response(assignment, form_title=form.title)


form_service: FormService = FormService()
assignment_service: AssignmentService = AssignmentService()
