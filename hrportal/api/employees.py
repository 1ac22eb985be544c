"""직원 라우터 — 직원 관리, 관계 그래프, 상사 목록, 조직도.

Employee Router — Employee management, relation graph, supervisor
directories and the positioned org chart.
고정 경로(/employees/relations, /employees/me 등)는 /employees/{employee_id}보다 먼저 등록합니다.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.api.deps import get_current_user_id, get_identity, require_admin
from hrportal.database import get_db
from hrportal.schemas.common import MessageResponse
from hrportal.schemas.employee import (
    DirectoryListResponse,
    EmployeeAdd,
    EmployeeDeleteResponse,
    EmployeeResponse,
    EmployeeRestoreResponse,
    EmployeeUndoDelete,
    EmployeeUpdate,
    EmployeeWithRelations,
    RelationDelete,
    RelationGraphResponse,
    RelationResponse,
    RelationTypeUpdate,
    RelationUpsert,
    SupervisorResponse,
    UserProfileResponse,
)
from hrportal.schemas.hierarchy import HierarchyResponse
from hrportal.services.employee_service import employee_service, relation_service
from hrportal.services.hierarchy_service import hierarchy_service
from hrportal.services.identity_service import IdentityService

router: APIRouter = APIRouter()


# === 관계 그래프 (Relation graph) ===

@router.post("/employees/relations/manage", response_model=RelationResponse, status_code=201)
async def upsert_relation(
    data: RelationUpsert,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> JSONResponse:
    """관계 업서트 — 신규 201, 기존 관계는 200으로 그대로 반환."""
    relation, created = await relation_service.upsert_relation(db, data)
    await db.commit()
    return JSONResponse(
        status_code=201 if created else 200,
        content=relation.model_dump(mode="json", by_alias=True),
    )


@router.get("/employees/relations", response_model=RelationGraphResponse)
async def get_relation_graph(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> RelationGraphResponse:
    return await relation_service.get_graph(db)


@router.patch("/employees/relations", response_model=RelationResponse)
async def change_relation_type(
    data: RelationTypeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> RelationResponse:
    result = await relation_service.change_type(db, data.id, data.type)
    await db.commit()
    return result


@router.delete("/employees/relations", response_model=MessageResponse)
async def delete_relation(
    data: RelationDelete,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> MessageResponse:
    await relation_service.delete_relation(db, data.id)
    await db.commit()
    return MessageResponse(message="Relation deleted")


# === 조직도 (Hierarchy) ===

@router.get("/employees/hierarchy", response_model=HierarchyResponse)
async def get_hierarchy(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin_id: Annotated[str, Depends(require_admin)],
) -> HierarchyResponse:
    return await hierarchy_service.get_hierarchy(db, admin_id)


# === 직원 (Employees) ===

@router.get("/employees", response_model=list[EmployeeWithRelations])
async def list_employees(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> list[EmployeeWithRelations]:
    return await employee_service.list_employees(db)


@router.get("/employees/me", response_model=EmployeeResponse)
async def get_my_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> EmployeeResponse:
    return await employee_service.get_me(db, user_id)


@router.post("/employees/add", response_model=EmployeeResponse, status_code=201)
async def add_employee(
    data: EmployeeAdd,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> EmployeeResponse:
    result = await employee_service.add_employee(db, data)
    await db.commit()
    return result


@router.post("/employees/undo-delete", response_model=EmployeeRestoreResponse)
async def undo_delete_employee(
    data: EmployeeUndoDelete,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> EmployeeRestoreResponse:
    """삭제 취소 — 삭제 응답의 employeeData로 직원과 관계를 복구."""
    result = await employee_service.restore_employee(db, data.employee_data)
    await db.commit()
    return result


@router.patch("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> EmployeeResponse:
    result = await employee_service.update_employee(db, employee_id, data)
    await db.commit()
    return result


@router.delete("/employees/{employee_id}", response_model=EmployeeDeleteResponse)
async def delete_employee(
    employee_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
) -> EmployeeDeleteResponse:
    """직원 삭제 — 관계/배정 삭제, 응답 보존, 복구용 스냅샷 반환."""
    result = await employee_service.delete_employee(db, employee_id)
    await db.commit()
    return result


# === 사용자 디렉터리 / 프로필 (Directory and profile) ===

@router.get("/users", response_model=DirectoryListResponse)
async def list_directory_users(
    identity: Annotated[IdentityService, Depends(get_identity)],
    _: Annotated[str, Depends(require_admin)],
) -> DirectoryListResponse:
    """인증 공급자 사용자 목록 — 직원 추가 시 사용자 ID 확인용."""
    return await employee_service.list_directory(identity)


@router.get("/user/profile", response_model=UserProfileResponse)
async def get_user_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> UserProfileResponse:
    """내 프로필 — 승인 전이면 온보딩 요청 내용을 반환."""
    return await employee_service.get_profile(db, user_id)


# === 상사 목록 (Supervisor directories) ===

@router.get("/managers", response_model=list[SupervisorResponse])
async def list_managers(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(get_current_user_id)],
    department: Annotated[str | None, Query()] = None,
) -> list[SupervisorResponse]:
    return await employee_service.list_managers(db, department)


@router.get("/leads", response_model=list[SupervisorResponse])
async def list_leads(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(get_current_user_id)],
    department: Annotated[str | None, Query()] = None,
) -> list[SupervisorResponse]:
    return await employee_service.list_leads(db, department)
