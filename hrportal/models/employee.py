"""직원 및 직원 관계 SQLAlchemy ORM 모델 정의.

Employee and employee-relation SQLAlchemy ORM model definitions.
An employee row is keyed by the identity-provider user id; relations are
directed, typed edges that form the org hierarchy graph.

Tables:
    - employees: 직원 프로필 (Employee profiles, id = identity-provider user id)
    - employee_relations: 직원 간 방향성 관계 (Directed typed edges between employees)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrportal.database import Base

# 관계 유형 — Relation edge types
RELATION_MANAGER: str = "MANAGER"
RELATION_LEAD: str = "LEAD"
RELATION_COLLEAGUE: str = "COLLEAGUE"
RELATION_TYPES: tuple[str, ...] = (RELATION_MANAGER, RELATION_LEAD, RELATION_COLLEAGUE)


class Employee(Base):
    """직원 모델 — 인증 공급자 계정과 1:1로 연결된 프로필.

    Employee model — Profile linked one-to-one with an identity-provider account.
    Created on onboarding approval or admin add, edited by admins,
    deleted with its relations and assignments (responses are kept).

    Attributes:
        id: 인증 공급자 사용자 ID (Identity-provider user id, primary key)
        email: 이메일 (Email address)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        phone_number: 전화번호 (Phone number, optional)
        department: 부서 (Department name, optional)
        role: 직무명 (Job title, optional)
        is_manager: 매니저 여부 (Manager flag)
        is_lead: 리드 여부 (Lead flag)
        profile_picture_url: 프로필 사진 상대 URL (Relative profile picture URL)
        created_at: 생성 일시 UTC (Creation timestamp)

    Relationships:
        relations_from: 이 직원이 출발점인 관계 (Outgoing edges)
        relations_to: 이 직원이 도착점인 관계 (Incoming edges)
    """

    __tablename__ = "employees"

    # 인증 공급자 사용자 ID — Identity-provider user id (e.g. "user_2abc...")
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_manager: Mapped[bool] = mapped_column(Boolean, default=False)
    is_lead: Mapped[bool] = mapped_column(Boolean, default=False)
    profile_picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    relations_from = relationship(
        "EmployeeRelation",
        foreign_keys="EmployeeRelation.from_id",
        back_populates="from_employee",
        passive_deletes=True,
    )
    relations_to = relationship(
        "EmployeeRelation",
        foreign_keys="EmployeeRelation.to_id",
        back_populates="to_employee",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        """표시 이름 — 이름이 없으면 이메일 (Display name, falls back to email)."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.email


class EmployeeRelation(Base):
    """직원 관계 모델 — 방향성과 유형을 가진 간선.

    Employee relation model — Directed, typed edge (from → to).
    (from_id, to_id, type) is unique; writes are upserts on that key.

    Attributes:
        id: 고유 식별자 UUID
        from_id: 출발 직원 FK (Source employee, e.g. the manager)
        to_id: 도착 직원 FK (Target employee, e.g. the report)
        type: 관계 유형 ("MANAGER" | "LEAD" | "COLLEAGUE")
        created_at: 생성 일시 UTC

    Constraints:
        uq_employee_relation_from_to_type: (from_id, to_id, type)
    """

    __tablename__ = "employee_relations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    from_id: Mapped[str] = mapped_column(String(64), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    to_id: Mapped[str] = mapped_column(String(64), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # MANAGER, LEAD, COLLEAGUE
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("from_id", "to_id", "type", name="uq_employee_relation_from_to_type"),
    )

    from_employee = relationship("Employee", foreign_keys=[from_id], back_populates="relations_from")
    to_employee = relationship("Employee", foreign_keys=[to_id], back_populates="relations_to")
