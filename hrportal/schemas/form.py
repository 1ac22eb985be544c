"""양식/배정/응답 Pydantic 스키마.

Form, assignment and response request/response schemas.
``EvaluationTarget`` is the value object snapshotted into an assignment:
it is written once when the assignment is created and read back as-is.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field

from hrportal.schemas.common import CamelModel

QuestionType = Literal["rating", "multiple-choice", "text", "select", "tel", "file"]
TargetType = Literal["MANAGER", "EMPLOYEE", "LEAD", "ADMIN", "COLLEAGUE"]


# === 양식 (Form) 스키마 ===

class Question(CamelModel):
    """양식 질문 — 질문 ID가 응답 answers의 키가 됩니다.

    A single form question; its ``id`` keys the answer map of a response.
    ``section``/``section_color`` group questions visually and are
    informational only.
    """
    id: str = Field(min_length=1)
    label: str
    type: QuestionType
    options: list[str] | None = None
    section: str | None = None
    section_color: str | None = None
    optional: bool = False


class FormCreate(CamelModel):
    """양식 생성 요청 — id 생략 시 UUID 발급."""
    id: str | None = Field(default=None, min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    questions: list[Question] = []


class FormUpdate(CamelModel):
    """양식 수정 요청 — questions는 전체 교체."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    questions: list[Question] | None = None


class FormResponse(CamelModel):
    id: str
    title: str
    description: str | None = None
    questions: list[Question]
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class FormAssignRequest(CamelModel):
    """수동 배정 요청 — POST /forms/{id}/assign."""
    employee_ids: list[str] = Field(min_length=1)


class FormAssignResult(CamelModel):
    success: bool = True
    message: str
    created: int
    skipped: int


class DefaultFormsResult(CamelModel):
    success: bool = True
    message: str
    forms: list[FormResponse]


# === 배정 (Assignment) 스키마 ===

class EvaluationTarget(CamelModel):
    """평가 대상 스냅샷 — 배정 생성 시점의 대상 정보.

    Point-in-time description of who an assignment evaluates.
    """
    type: TargetType
    target_id: str
    target_name: str
    target_role: str
    target_department: str = ""


class AssignmentCreate(CamelModel):
    """관리자 단건 배정 생성 요청."""
    form_id: str = Field(min_length=1)
    employee_id: str = Field(min_length=1)
    evaluation_target: EvaluationTarget | None = None


class AssignmentResponse(CamelModel):
    id: str
    form_id: str
    form_title: str | None = None
    employee_id: str
    employee_email: str
    assigned_at: datetime
    evaluation_target: EvaluationTarget | None = None
    has_response: bool = False
    submitted_at: datetime | None = None


class AssignmentDetailResponse(AssignmentResponse):
    """작성 화면용 — 양식 전체 포함."""
    form: FormResponse | None = None


class AutoAssignBreakdown(CamelModel):
    manager_evaluations: int = 0
    lead_evaluations: int = 0
    employee_evaluations: int = 0
    admin_evaluations: int = 0


class AutoAssignResult(CamelModel):
    """자동 배정 결과 — POST /forms/auto-assign."""
    success: bool = True
    message: str
    assignments: int
    breakdown: AutoAssignBreakdown


# === 응답 (Response) 스키마 ===

class ResponseCreate(CamelModel):
    """응답 제출 요청 — {질문 ID: 문자열 답변}."""
    answers: dict[str, Any]


class FormResponseOut(CamelModel):
    """제출된 응답 — Stored submission."""
    id: UUID
    assignment_id: str | None = None
    responder_id: str
    answers: dict[str, Any]
    is_peer: bool
    created_at: datetime


class ResponseDetail(FormResponseOut):
    """관리자 조회용 — 작성자와 평가 대상 포함."""
    responder_name: str | None = None
    responder_email: str | None = None
    form_id: str | None = None
    form_title: str | None = None
    questions: list[Question] = []
    evaluation_target: EvaluationTarget | None = None
