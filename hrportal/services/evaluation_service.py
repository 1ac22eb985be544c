"""평가 자동 배정 서비스 — 360도 평가 배정 엔진.

Evaluation Assignment Service — 360-degree review cycle generator.

직원 집합, 관계 간선, 두 표준 양식으로부터 평가 배정 전체를 계산하고
ID 기준으로 업서트합니다. 배정 ID는 내용에서 파생되므로 재실행은
같은 행의 assigned_at만 갱신하며, 어떤 배정도 삭제하지 않습니다.

Passes (서로 독립, 순서 무관):
    1. manager-eval  — 보고 대상(비리드)이 매니저를 평가 (manager-form)
    2. lead-eval     — 보고 대상(비매니저)이 리드를 평가 (employee-form)
    3. employee-eval — 매니저가 직속 보고 대상을 평가 (MANAGER 간선)
    4. employee-eval — 리드가 직속 보고 대상을 평가 (LEAD 간선)
    5. admin-eval    — 관리자가 직접 연결된 직원을 평가

``plan_assignments``는 DB 접근 없는 순수 함수이며,
``EvaluationService.auto_assign``이 전제 조건 확인과 저장을 담당합니다.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.employee import RELATION_LEAD, RELATION_MANAGER, Employee, EmployeeRelation
from hrportal.models.form import EMPLOYEE_FORM_ID, MANAGER_FORM_ID
from hrportal.repositories.employee_repository import employee_repository, relation_repository
from hrportal.repositories.form_repository import assignment_repository, form_repository
from hrportal.schemas.form import AutoAssignBreakdown, AutoAssignResult, EvaluationTarget
from hrportal.services.identity_service import IdentityService
from hrportal.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)

# 배정 ID 접두사 → 결과 breakdown 필드
_BREAKDOWN_FIELDS: dict[str, str] = {
    "manager-eval-": "manager_evaluations",
    "lead-eval-": "lead_evaluations",
    "employee-eval-": "employee_evaluations",
    "admin-eval-": "admin_evaluations",
}


class PlannedAssignment(BaseModel):
    """계획된 배정 한 건 — Planned assignment row."""

    id: str
    form_id: str
    employee_id: str
    employee_email: str
    evaluation_target: EvaluationTarget


def _display_role(employee: Employee) -> str:
    if employee.is_manager:
        return "Manager"
    if employee.is_lead:
        return "Lead"
    return "Employee"


def plan_assignments(
    employees: Sequence[Employee],
    relations: Iterable[EmployeeRelation],
    admin_ids: Iterable[str] = (),
) -> list[PlannedAssignment]:
    """평가 배정 계획을 계산합니다.

    Compute every assignment of one review cycle from a snapshot of the
    employee set and relation edges. Edges with an endpoint outside the
    employee set are skipped. Rows sharing an id collapse to the first one.

    Args:
        employees: 직원 스냅샷 (Current employee set)
        relations: 관계 간선 (All relation edges)
        admin_ids: 관리자 역할을 가진 직원 ID (Employees holding the admin role)

    Returns:
        list[PlannedAssignment]: ID 기준 중복 제거된 배정 목록
    """
    by_id: dict[str, Employee] = {e.id: e for e in employees}
    admins: set[str] = {a for a in admin_ids if a in by_id}
    planned: dict[str, PlannedAssignment] = {}

    def emit(kind: str, filler: Employee, subject: Employee, form_id: str, target: EvaluationTarget) -> None:
        assignment_id = f"{kind}-eval-{filler.id}-{subject.id}-{form_id}"
        planned.setdefault(assignment_id, PlannedAssignment(
            id=assignment_id,
            form_id=form_id,
            employee_id=filler.id,
            employee_email=filler.email,
            evaluation_target=target,
        ))

    for edge in relations:
        if edge.type not in (RELATION_MANAGER, RELATION_LEAD):
            continue
        source = by_id.get(edge.from_id)
        target = by_id.get(edge.to_id)
        if source is None or target is None:
            logger.warning("Skipping stale %s relation %s -> %s", edge.type, edge.from_id, edge.to_id)
            continue

        if edge.type == RELATION_MANAGER:
            # 1. 보고 대상이 매니저를 평가
            if source.is_manager and not target.is_lead:
                emit("manager", target, source, MANAGER_FORM_ID, EvaluationTarget(
                    type="MANAGER",
                    target_id=source.id,
                    target_name=source.full_name,
                    target_role="Manager",
                    target_department=source.department or "",
                ))
        else:
            # 2. 보고 대상이 리드를 평가
            if source.is_lead and not target.is_manager:
                emit("lead", target, source, EMPLOYEE_FORM_ID, EvaluationTarget(
                    type="LEAD",
                    target_id=source.id,
                    target_name=source.full_name,
                    target_role="Lead",
                    target_department=source.department or "",
                ))

        # 3, 4. 상사가 보고 대상을 평가 (MANAGER/LEAD 간선 모두)
        emit("employee", source, target, EMPLOYEE_FORM_ID, EvaluationTarget(
            type="EMPLOYEE",
            target_id=target.id,
            target_name=target.full_name,
            target_role=target.role or "Employee",
            target_department=target.department or "",
        ))

        # 5. 관리자가 직접 연결된 직원을 평가
        if source.id in admins:
            emit("admin", source, target, EMPLOYEE_FORM_ID, EvaluationTarget(
                type="EMPLOYEE",
                target_id=target.id,
                target_name=target.full_name,
                target_role=_display_role(target),
                target_department=target.department or "",
            ))

    return list(planned.values())


def summarize(assignment_ids: Iterable[str]) -> AutoAssignBreakdown:
    """ID 접두사별 배정 수 — Count assignments per id prefix."""
    counts: dict[str, int] = {field: 0 for field in _BREAKDOWN_FIELDS.values()}
    for assignment_id in assignment_ids:
        for prefix, field in _BREAKDOWN_FIELDS.items():
            if assignment_id.startswith(prefix):
                counts[field] += 1
                break
    return AutoAssignBreakdown(**counts)


class EvaluationService:
    """평가 자동 배정 서비스."""

    async def _require_canonical_forms(self, db: AsyncSession) -> None:
        missing = [
            form_id for form_id in (MANAGER_FORM_ID, EMPLOYEE_FORM_ID)
            if await form_repository.get_by_id(db, form_id) is None
        ]
        if missing:
            raise BadRequestError(
                f"Missing required form(s): {', '.join(missing)}. "
                "Create both Manager and Employee forms before assigning."
            )

    async def auto_assign(self, db: AsyncSession, identity: IdentityService) -> AutoAssignResult:
        """평가 배정을 일괄 생성/갱신합니다.

        Run the review-cycle engine and upsert its rows by id. Existing rows
        only get a fresh ``assigned_at``; nothing is deleted.

        Raises:
            BadRequestError: 표준 양식 누락, 관리자 없음, 배정 대상 없음
        """
        await self._require_canonical_forms(db)

        employees = await employee_repository.get_all(db)
        relations = await relation_repository.get_all(db)
        admin_ids = await identity.get_admin_ids(e.id for e in employees)
        if not admin_ids:
            raise BadRequestError("No admin found among employees")

        plan = plan_assignments(employees, relations, admin_ids)
        if not plan:
            raise BadRequestError("No managers or leads found to assign forms to")

        now = datetime.now(timezone.utc)
        existing = await assignment_repository.get_map_by_ids(db, [p.id for p in plan])
        created = 0
        for item in plan:
            row = existing.get(item.id)
            if row is not None:
                row.assigned_at = now
                continue
            db.add(assignment_repository.model(
                id=item.id,
                form_id=item.form_id,
                employee_id=item.employee_id,
                employee_email=item.employee_email,
                assigned_at=now,
                evaluation_target=item.evaluation_target.model_dump(by_alias=True),
            ))
            created += 1
        await db.flush()

        breakdown = summarize(p.id for p in plan)
        logger.info(
            "Auto-assign: %d assignments (%d new) manager=%d lead=%d employee=%d admin=%d",
            len(plan), created,
            breakdown.manager_evaluations, breakdown.lead_evaluations,
            breakdown.employee_evaluations, breakdown.admin_evaluations,
        )
        return AutoAssignResult(
            message=f"Forms assigned successfully ({len(plan)} assignments, {created} new)",
            assignments=len(plan),
            breakdown=breakdown,
        )


evaluation_service: EvaluationService = EvaluationService()
