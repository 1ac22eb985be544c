"""평가 양식, 배정, 응답 SQLAlchemy ORM 모델 정의.

Form, assignment and response SQLAlchemy ORM model definitions.
Forms hold an ordered JSON question list; an assignment directs one employee
to fill one form (optionally evaluating a snapshotted target); a response
is one immutable submission of answers.

Tables:
    - forms: 평가 양식 (Question sets; "manager-form"/"employee-form" are canonical)
    - assignments: 양식 배정 (Form → filler, with evaluation target snapshot)
    - responses: 제출 응답 (Answers keyed by question id, orphan-safe)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, String, Boolean, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrportal.database import Base

# 표준 양식 ID — Canonical form ids used by the auto-assignment engine
MANAGER_FORM_ID: str = "manager-form"
EMPLOYEE_FORM_ID: str = "employee-form"
CANONICAL_FORM_IDS: tuple[str, ...] = (MANAGER_FORM_ID, EMPLOYEE_FORM_ID)


class Form(Base):
    """평가 양식 모델.

    Form model — Title, description and an ordered list of questions.
    Each question is a JSON object: id, label, type, options, section,
    sectionColor, optional. Edits replace the whole question list.
    """

    __tablename__ = "forms"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    questions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    assignments = relationship("Assignment", back_populates="form", passive_deletes=True)


class Assignment(Base):
    """양식 배정 모델 — 한 직원이 한 양식을 작성하도록 지시.

    Assignment model — Directs one employee (the filler) to fill one form.
    ``evaluation_target`` is a point-in-time snapshot of who is evaluated
    ({type, targetId, targetName, targetRole, targetDepartment}); later
    profile edits never rewrite it.

    Auto-generated ids follow ``{kind}-eval-{evaluatorId}-{targetId}-{formId}``
    so re-running the engine upserts the same rows.

    Attributes:
        id: 배정 ID (content-derived for auto assignments, UUID otherwise)
        form_id: 양식 FK
        employee_id: 작성자 FK
        employee_email: 작성자 이메일 (denormalized)
        assigned_at: 배정(갱신) 일시 UTC
        evaluation_target: 평가 대상 스냅샷 (JSON, nullable)
    """

    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=lambda: str(uuid.uuid4()))
    form_id: Mapped[str] = mapped_column(String(64), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id: Mapped[str] = mapped_column(String(64), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_email: Mapped[str] = mapped_column(String(255), default="")
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    evaluation_target: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    form = relationship("Form", back_populates="assignments")
    employee = relationship("Employee")


class Response(Base):
    """제출 응답 모델 — 불변 감사 기록.

    Response model — Immutable audit record of one submission.
    ``assignment_id`` carries no foreign key: responses outlive the
    assignment (and the employee) they were submitted against.

    Attributes:
        id: 고유 식별자 UUID
        assignment_id: 대상 배정 ID (no FK, orphan-safe)
        responder_id: 응답자 사용자 ID
        answers: {질문 ID: 문자열 답변}
        is_peer: 동료 평가 여부
        created_at: 제출 일시 UTC
    """

    __tablename__ = "responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    assignment_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    responder_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    answers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_peer: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
