"""조직도 서비스 — 직원/관계 스냅샷으로부터 배치된 조직도 그래프 생성.

Hierarchy Service — Builds a positioned org-chart graph from the
employee and relation snapshot. Nothing is persisted.

Edge derivation (우선순위 순):
    1. 양 끝 직원이 존재하는 저장된 관계 간선 (Explicit relation edges)
    2. MANAGER/LEAD 상사가 없는 직원 → 부서 박스(dept:{부서}) 또는 부서가 없으면 관리자
    3. 부서 박스 → 관리자

Layout: networkx DiGraph의 강결합 요소 축약(condensation) 위에서 루트로부터의
최장 경로로 랭크를 정하고, 랭크 내 순서는 부모 위치의 평균으로 결정합니다.
"""

from typing import Iterable, Sequence

import networkx as nx
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.employee import RELATION_LEAD, RELATION_MANAGER, Employee, EmployeeRelation
from hrportal.repositories.employee_repository import employee_repository, relation_repository
from hrportal.schemas.hierarchy import HierarchyEdge, HierarchyNode, HierarchyResponse

NODE_WIDTH: float = 160
NODE_HEIGHT: float = 140
RANK_SEP: float = 150
NODE_SEP: float = 100

DEPARTMENT_PREFIX: str = "dept:"
SYNTHETIC_TYPE: str = "REPORTS_TO"

_SUPERVISOR_TYPES: tuple[str, ...] = (RELATION_MANAGER, RELATION_LEAD)
_KIND_ORDER: dict[str, int] = {"ADMIN": 0, "DEPARTMENT": 1, "MANAGER": 2, "LEAD": 3, "EMPLOYEE": 4}


def node_kind(employee: Employee, admin_id: str) -> str:
    if employee.id == admin_id:
        return "ADMIN"
    if employee.is_manager:
        return "MANAGER"
    if employee.is_lead:
        return "LEAD"
    return "EMPLOYEE"


def derive_edges(
    employees: Sequence[Employee],
    relations: Iterable[EmployeeRelation],
    admin_id: str,
) -> list[HierarchyEdge]:
    """조직도 간선을 우선순위 규칙에 따라 계산합니다.

    Explicit edges come first; every non-admin employee left without an
    incoming MANAGER/LEAD edge is attached to its department box (or the
    admin when it has no department); each department box used hangs off
    the admin node.
    """
    known: set[str] = {e.id for e in employees} | {admin_id}
    edges: list[HierarchyEdge] = []
    supervised: set[str] = set()

    for relation in relations:
        if relation.from_id not in known or relation.to_id not in known:
            continue
        edges.append(HierarchyEdge(
            id=str(relation.id),
            source=relation.from_id,
            target=relation.to_id,
            type=relation.type,
        ))
        if relation.type in _SUPERVISOR_TYPES:
            supervised.add(relation.to_id)

    departments: list[str] = []
    for employee in employees:
        if employee.id == admin_id or employee.id in supervised:
            continue
        if employee.department:
            source = f"{DEPARTMENT_PREFIX}{employee.department}"
            if employee.department not in departments:
                departments.append(employee.department)
        else:
            source = admin_id
        edges.append(HierarchyEdge(
            id=f"synthetic-{source}-{employee.id}",
            source=source,
            target=employee.id,
            type=SYNTHETIC_TYPE,
            synthetic=True,
        ))

    for department in departments:
        box = f"{DEPARTMENT_PREFIX}{department}"
        edges.append(HierarchyEdge(
            id=f"synthetic-{admin_id}-{box}",
            source=admin_id,
            target=box,
            type=SYNTHETIC_TYPE,
            synthetic=True,
        ))
    return edges


def compute_ranks(graph: nx.DiGraph) -> dict[str, int]:
    """루트로부터의 최장 경로 랭크 — 순환은 축약된 DAG에서 한 랭크로 묶임."""
    cond = nx.condensation(graph)
    members = nx.get_node_attributes(cond, "members")
    depth = {n: 0 for n in cond.nodes}
    for node in nx.topological_sort(cond):
        for succ in cond.successors(node):
            if depth[node] + 1 > depth[succ]:
                depth[succ] = depth[node] + 1
    ranks: dict[str, int] = {}
    for scc_node, scc_members in members.items():
        for member in scc_members:
            ranks[member] = depth[scc_node]
    return ranks


def layout(nodes: list[dict], edges: Sequence[HierarchyEdge]) -> HierarchyResponse:
    """위→아래 계층 배치 — Top-to-bottom layered layout with fixed node size."""
    graph = nx.DiGraph()
    for node in nodes:
        graph.add_node(node["id"])
    for edge in edges:
        # COLLEAGUE 간선은 표시만 하고 랭크 계산에는 쓰지 않음
        if edge.type in _SUPERVISOR_TYPES or edge.synthetic:
            graph.add_edge(edge.source, edge.target)

    ranks = compute_ranks(graph)
    by_rank: dict[int, list[dict]] = {}
    for node in nodes:
        node["rank"] = ranks[node["id"]]
        by_rank.setdefault(node["rank"], []).append(node)

    order: dict[str, float] = {}
    widest = max((len(group) for group in by_rank.values()), default=0)
    span = widest * NODE_WIDTH + max(widest - 1, 0) * NODE_SEP
    for rank in sorted(by_rank):
        def sort_key(node: dict) -> tuple:
            parents = [order[p] for p in graph.predecessors(node["id"]) if p in order]
            barycenter = sum(parents) / len(parents) if parents else float("inf")
            return (barycenter, _KIND_ORDER[node["kind"]], node["label"].lower(), node["id"])

        group = sorted(by_rank[rank], key=sort_key)
        row_width = len(group) * NODE_WIDTH + (len(group) - 1) * NODE_SEP
        offset = (span - row_width) / 2
        for index, node in enumerate(group):
            node["x"] = offset + index * (NODE_WIDTH + NODE_SEP)
            node["y"] = rank * (NODE_HEIGHT + RANK_SEP)
            order[node["id"]] = index

    height = (max(by_rank) + 1) * NODE_HEIGHT + max(by_rank) * RANK_SEP if by_rank else 0
    return HierarchyResponse(
        nodes=[HierarchyNode(**node) for node in nodes],
        edges=list(edges),
        width=span,
        height=height,
    )


def build_hierarchy(
    employees: Sequence[Employee],
    relations: Iterable[EmployeeRelation],
    admin_id: str,
) -> HierarchyResponse:
    edges = derive_edges(employees, relations, admin_id)
    nodes: list[dict] = []
    for employee in employees:
        nodes.append({
            "id": employee.id,
            "kind": node_kind(employee, admin_id),
            "label": employee.full_name,
            "department": employee.department,
            "role": employee.role,
            "email": employee.email,
            "profile_picture_url": employee.profile_picture_url,
        })
    if admin_id not in {e.id for e in employees}:
        nodes.append({"id": admin_id, "kind": "ADMIN", "label": "Admin"})
    seen_boxes: set[str] = set()
    for edge in edges:
        if edge.source.startswith(DEPARTMENT_PREFIX) and edge.source not in seen_boxes:
            seen_boxes.add(edge.source)
            department = edge.source[len(DEPARTMENT_PREFIX):]
            nodes.append({"id": edge.source, "kind": "DEPARTMENT", "label": department, "department": department})
    return layout(nodes, edges)


class HierarchyService:

    async def get_hierarchy(self, db: AsyncSession, admin_id: str) -> HierarchyResponse:
        """요청한 관리자를 루트로 하는 조직도 — Org chart rooted at the calling admin."""
        employees = await employee_repository.get_all(db, order_by=employee_repository.model.created_at)
        relations = await relation_repository.get_all(db, order_by=relation_repository.model.created_at)
        return build_hierarchy(employees, relations, admin_id)


hierarchy_service: HierarchyService = HierarchyService()
