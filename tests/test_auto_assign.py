"""360도 평가 자동 배정 테스트.

Evaluation auto-assignment tests — Planner unit tests over in-memory rows
and the POST /forms/auto-assign endpoint (idempotence, preconditions).
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.employee import Employee, EmployeeRelation
from hrportal.models.form import Assignment
from hrportal.services.evaluation_service import plan_assignments, summarize
from hrportal.services.identity_service import ROLE_ADMIN
from tests.conftest import ADMIN_ID, auth_header, make_employee

URL = "/api/forms/auto-assign"


def _employee(employee_id: str, **flags) -> Employee:
    return Employee(
        id=employee_id,
        email=f"{employee_id}@company.com",
        first_name=employee_id.upper(),
        last_name="",
        department=flags.pop("department", "Ops"),
        role=flags.pop("role", None),
        is_manager=flags.pop("is_manager", False),
        is_lead=flags.pop("is_lead", False),
    )


def _edge(from_id: str, to_id: str, relation_type: str) -> EmployeeRelation:
    return EmployeeRelation(id=uuid.uuid4(), from_id=from_id, to_id=to_id, type=relation_type)


class TestPlanAssignments:
    """배정 계획 순수 함수 테스트."""

    def test_manager_edge(self):
        """M1 → E1 MANAGER: 직원이 매니저를, 매니저가 직원을 평가."""
        employees = [_employee("m1", is_manager=True), _employee("e1")]
        plan = plan_assignments(employees, [_edge("m1", "e1", "MANAGER")])
        ids = {p.id for p in plan}
        assert ids == {
            "manager-eval-e1-m1-manager-form",
            "employee-eval-m1-e1-employee-form",
        }
        manager_eval = next(p for p in plan if p.id.startswith("manager-eval"))
        assert manager_eval.employee_id == "e1"
        assert manager_eval.evaluation_target.type == "MANAGER"
        assert manager_eval.evaluation_target.target_id == "m1"
        assert manager_eval.evaluation_target.target_role == "Manager"

    def test_lead_report_does_not_rate_manager(self):
        """보고 대상이 리드이면 매니저 평가를 하지 않음."""
        employees = [_employee("m1", is_manager=True), _employee("l1", is_lead=True)]
        ids = {p.id for p in plan_assignments(employees, [_edge("m1", "l1", "MANAGER")])}
        assert ids == {"employee-eval-m1-l1-employee-form"}

    def test_lead_edge(self):
        """L1 → E1 LEAD: 직원이 리드를 평가 (employee-form)."""
        employees = [_employee("l1", is_lead=True), _employee("e1", role="Analyst")]
        plan = plan_assignments(employees, [_edge("l1", "e1", "LEAD")])
        ids = {p.id for p in plan}
        assert ids == {
            "lead-eval-e1-l1-employee-form",
            "employee-eval-l1-e1-employee-form",
        }
        downward = next(p for p in plan if p.id.startswith("employee-eval"))
        assert downward.evaluation_target.target_role == "Analyst"

    def test_manager_report_does_not_rate_lead(self):
        employees = [_employee("l1", is_lead=True), _employee("m2", is_manager=True)]
        ids = {p.id for p in plan_assignments(employees, [_edge("l1", "m2", "LEAD")])}
        assert ids == {"employee-eval-l1-m2-employee-form"}

    def test_colleague_edges_ignored(self):
        employees = [_employee("a"), _employee("b")]
        assert plan_assignments(employees, [_edge("a", "b", "COLLEAGUE")]) == []

    def test_stale_edge_skipped(self):
        """삭제된 직원을 가리키는 간선은 무시."""
        employees = [_employee("m1", is_manager=True)]
        assert plan_assignments(employees, [_edge("m1", "gone", "MANAGER")]) == []

    def test_admin_source_adds_admin_eval(self):
        """관리자가 출발점이면 admin-eval 추가."""
        employees = [_employee("a1", is_manager=True), _employee("e1")]
        plan = plan_assignments(employees, [_edge("a1", "e1", "MANAGER")], admin_ids={"a1"})
        ids = {p.id for p in plan}
        assert "admin-eval-a1-e1-employee-form" in ids
        admin_eval = next(p for p in plan if p.id.startswith("admin-eval"))
        assert admin_eval.evaluation_target.target_role == "Employee"

    def test_duplicate_edges_collapse(self):
        employees = [_employee("m1", is_manager=True), _employee("e1")]
        edges = [_edge("m1", "e1", "MANAGER"), _edge("m1", "e1", "MANAGER")]
        assert len(plan_assignments(employees, edges)) == 2

    def test_summarize(self):
        breakdown = summarize([
            "manager-eval-e1-m1-manager-form",
            "employee-eval-m1-e1-employee-form",
            "employee-eval-l1-e2-employee-form",
            "admin-eval-a1-e1-employee-form",
        ])
        assert breakdown.manager_evaluations == 1
        assert breakdown.lead_evaluations == 0
        assert breakdown.employee_evaluations == 2
        assert breakdown.admin_evaluations == 1


class TestAutoAssignEndpoint:
    """POST /forms/auto-assign 테스트."""

    async def _setup_team(self, db: AsyncSession) -> None:
        await make_employee(db, ADMIN_ID, "Ada", "Admin", department="Executive")
        await make_employee(db, "m1", "Jane", "Doe", department="Sales", is_manager=True)
        await make_employee(db, "e1", "Eve", "One", department="Sales", role="Rep")
        db.add(EmployeeRelation(from_id="m1", to_id="e1", type="MANAGER"))
        await db.flush()

    async def test_auto_assign(self, client: AsyncClient, db: AsyncSession, admin_headers, canonical_forms):
        await self._setup_team(db)
        res = await client.post(URL, headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert data["assignments"] == 2
        assert data["breakdown"]["managerEvaluations"] == 1
        assert data["breakdown"]["employeeEvaluations"] == 1

        row = await db.get(Assignment, "manager-eval-e1-m1-manager-form")
        assert row is not None
        assert row.employee_id == "e1"
        assert row.form_id == "manager-form"
        assert row.evaluation_target["targetId"] == "m1"
        assert row.evaluation_target["targetName"] == "Jane Doe"

    async def test_rerun_is_idempotent(self, client: AsyncClient, db: AsyncSession, admin_headers, canonical_forms):
        """재실행해도 배정 수가 늘지 않음."""
        await self._setup_team(db)
        await client.post(URL, headers=admin_headers)
        res = await client.post(URL, headers=admin_headers)
        assert res.status_code == 200
        count = (await db.execute(select(func.count()).select_from(Assignment))).scalar()
        assert count == 2

    async def test_missing_forms(self, client: AsyncClient, db: AsyncSession, admin_headers):
        await self._setup_team(db)
        res = await client.post(URL, headers=admin_headers)
        assert res.status_code == 400
        assert "manager-form" in res.json()["detail"]

    async def test_no_admin_among_employees(self, client: AsyncClient, db: AsyncSession, admin_headers, canonical_forms):
        """관리자가 직원 목록에 없으면 400."""
        await make_employee(db, "m1", "Jane", "Doe", is_manager=True)
        res = await client.post(URL, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "No admin found among employees"

    async def test_no_edges(self, client: AsyncClient, db: AsyncSession, admin_headers, canonical_forms):
        await make_employee(db, ADMIN_ID, "Ada", "Admin")
        res = await client.post(URL, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "No managers or leads found to assign forms to"

    async def test_second_admin_gets_admin_eval(
        self, client: AsyncClient, db: AsyncSession, identity, admin_headers, canonical_forms
    ):
        """관리자 역할을 가진 직원이 간선의 출발점이면 admin-eval 생성."""
        await self._setup_team(db)
        identity.add_user("m1", "m1@company.com", "Jane", "Doe", role=ROLE_ADMIN)
        res = await client.post(URL, headers=admin_headers)
        assert res.json()["breakdown"]["adminEvaluations"] == 1
        assert await db.get(Assignment, "admin-eval-m1-e1-employee-form") is not None

    async def test_employee_forbidden(self, client: AsyncClient, identity, canonical_forms):
        identity.add_user("e1", "e1@company.com")
        res = await client.post(URL, headers=auth_header("e1"))
        assert res.status_code == 403
