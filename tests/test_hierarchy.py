"""조직도 테스트.

Hierarchy tests — Edge derivation rules, rank computation and the
GET /employees/hierarchy endpoint.
"""

import uuid

import networkx as nx
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.employee import Employee, EmployeeRelation
from hrportal.services.hierarchy_service import (
    NODE_HEIGHT,
    RANK_SEP,
    SYNTHETIC_TYPE,
    build_hierarchy,
    compute_ranks,
    derive_edges,
)
from tests.conftest import ADMIN_ID, auth_header, make_employee


def _employee(employee_id: str, department: str | None = None, **flags) -> Employee:
    return Employee(
        id=employee_id,
        email=f"{employee_id}@company.com",
        first_name=employee_id,
        last_name="",
        department=department,
        is_manager=flags.get("is_manager", False),
        is_lead=flags.get("is_lead", False),
    )


def _edge(from_id: str, to_id: str, relation_type: str) -> EmployeeRelation:
    return EmployeeRelation(id=uuid.uuid4(), from_id=from_id, to_id=to_id, type=relation_type)


class TestDeriveEdges:
    """간선 파생 규칙 테스트."""

    def test_explicit_edges_win(self):
        """관리자를 제외하고 상사가 있는 직원은 부서 박스에 연결되지 않음."""
        employees = [_employee("admin"), _employee("m1", "Sales", is_manager=True), _employee("e1", "Sales")]
        edges = derive_edges(employees, [_edge("m1", "e1", "MANAGER")], "admin")
        pairs = {(e.source, e.target, e.synthetic) for e in edges}
        assert ("m1", "e1", False) in pairs
        assert ("dept:Sales", "m1", True) in pairs
        assert ("admin", "dept:Sales", True) in pairs
        assert not any(e.target == "e1" and e.synthetic for e in edges)

    def test_no_department_hangs_off_admin(self):
        employees = [_employee("admin"), _employee("e1")]
        edges = derive_edges(employees, [], "admin")
        assert [(e.source, e.target, e.type) for e in edges] == [("admin", "e1", SYNTHETIC_TYPE)]

    def test_colleague_edge_does_not_count_as_supervisor(self):
        employees = [_employee("admin"), _employee("a", "Ops"), _employee("b", "Ops")]
        edges = derive_edges(employees, [_edge("a", "b", "COLLEAGUE")], "admin")
        assert any(e.source == "dept:Ops" and e.target == "b" for e in edges)

    def test_unknown_endpoints_dropped(self):
        employees = [_employee("admin"), _employee("e1")]
        edges = derive_edges(employees, [_edge("ghost", "e1", "MANAGER")], "admin")
        assert all(e.source != "ghost" for e in edges)


class TestLayout:
    """랭크 및 좌표 계산 테스트."""

    def test_ranks_follow_longest_path(self):
        graph = nx.DiGraph([("a", "b"), ("b", "c"), ("a", "c")])
        assert compute_ranks(graph) == {"a": 0, "b": 1, "c": 2}

    def test_cycle_shares_rank(self):
        graph = nx.DiGraph([("root", "x"), ("x", "y"), ("y", "x")])
        ranks = compute_ranks(graph)
        assert ranks["x"] == ranks["y"] == 1

    def test_build_hierarchy_positions(self):
        employees = [_employee("admin"), _employee("m1", "Sales", is_manager=True), _employee("e1", "Sales")]
        result = build_hierarchy(employees, [_edge("m1", "e1", "MANAGER")], "admin")
        nodes = {n.id: n for n in result.nodes}
        assert nodes["admin"].kind == "ADMIN"
        assert nodes["dept:Sales"].kind == "DEPARTMENT"
        assert nodes["admin"].rank == 0
        assert nodes["dept:Sales"].rank == 1
        assert nodes["m1"].rank == 2
        assert nodes["e1"].rank == 3
        assert nodes["e1"].y == 3 * (NODE_HEIGHT + RANK_SEP)


class TestHierarchyEndpoint:
    """GET /employees/hierarchy 테스트."""

    async def test_get_hierarchy(self, client: AsyncClient, db: AsyncSession, admin_headers):
        await make_employee(db, "m1", "Jane", "Doe", department="Sales", is_manager=True)
        await make_employee(db, "e1", "Eve", "One", department="Sales")
        db.add(EmployeeRelation(from_id="m1", to_id="e1", type="MANAGER"))
        await db.flush()

        res = await client.get("/api/employees/hierarchy", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        node_ids = {n["id"] for n in data["nodes"]}
        assert node_ids == {ADMIN_ID, "m1", "e1", "dept:Sales"}
        admin = next(n for n in data["nodes"] if n["id"] == ADMIN_ID)
        assert admin["label"] == "Admin"
        assert data["height"] > 0

    async def test_employee_forbidden(self, client: AsyncClient, identity):
        identity.add_user("e1", "e1@company.com")
        res = await client.get("/api/employees/hierarchy", headers=auth_header("e1"))
        assert res.status_code == 403
