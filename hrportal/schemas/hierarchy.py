"""조직도 Pydantic 스키마 — Positioned hierarchy graph schemas."""

from typing import Literal

from hrportal.schemas.common import CamelModel

NodeKind = Literal["ADMIN", "MANAGER", "LEAD", "EMPLOYEE", "DEPARTMENT"]


class HierarchyNode(CamelModel):
    id: str
    kind: NodeKind
    label: str
    department: str | None = None
    role: str | None = None
    email: str | None = None
    profile_picture_url: str | None = None
    rank: int
    x: float
    y: float


class HierarchyEdge(CamelModel):
    """조직도 간선 — synthetic=True 이면 저장된 관계가 아닌 파생 간선."""
    id: str
    source: str
    target: str
    type: str
    synthetic: bool = False


class HierarchyResponse(CamelModel):
    nodes: list[HierarchyNode]
    edges: list[HierarchyEdge]
    width: float
    height: float
