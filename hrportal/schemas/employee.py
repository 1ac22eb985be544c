"""직원 및 관계 Pydantic 스키마 — Employee/relation request/response schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field

from hrportal.schemas.common import CamelModel

RelationTypeLiteral = Literal["MANAGER", "LEAD", "COLLEAGUE"]


# === 직원 (Employee) 스키마 ===

class EmployeeResponse(CamelModel):
    """직원 응답 스키마."""
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    department: str | None = None
    role: str | None = None
    is_manager: bool = False
    is_lead: bool = False
    profile_picture_url: str | None = None
    created_at: datetime


class EmployeeAdd(CamelModel):
    """관리자 직원 추가 스키마 (id = 인증 공급자 사용자 ID)."""
    id: str = Field(min_length=1)
    email: EmailStr


class EmployeeUpdate(CamelModel):
    """관리자 직원 수정 스키마 — 빈 문자열은 None으로 저장."""
    department: str | None = None
    role: str | None = None
    is_manager: bool = False
    is_lead: bool = False


class SupervisorResponse(CamelModel):
    """상사 후보 응답 스키마 (매니저/리드 목록)."""
    user_id: str
    name: str
    email: str
    department: str = ""
    role: str = ""
    is_manager: bool = False
    is_lead: bool = False


# === 관계 (Relation) 스키마 ===

class RelationResponse(CamelModel):
    """관계 응답 스키마."""
    id: UUID
    from_id: str
    to_id: str
    type: str
    created_at: datetime


class RelationDetailResponse(RelationResponse):
    """양 끝 직원이 포함된 관계 응답 스키마."""
    from_employee: EmployeeResponse | None = Field(default=None, serialization_alias="from")
    to_employee: EmployeeResponse | None = Field(default=None, serialization_alias="to")


class EmployeeWithRelations(EmployeeResponse):
    """출발/도착 관계 목록이 포함된 직원 응답 스키마."""
    relations_from: list[RelationResponse] = []
    relations_to: list[RelationResponse] = []


class RelationGraphResponse(CamelModel):
    """관계 관리 화면용 전체 그래프 응답."""
    employees: list[EmployeeWithRelations]
    relations: list[RelationDetailResponse]


class RelationUpsert(CamelModel):
    """관계 생성(업서트) 요청 스키마."""
    from_id: str = Field(min_length=1)
    to_id: str = Field(min_length=1)
    type: RelationTypeLiteral


class RelationTypeUpdate(CamelModel):
    """관계 유형 변경 요청 스키마."""
    id: UUID
    type: RelationTypeLiteral


class RelationDelete(CamelModel):
    """관계 삭제 요청 스키마."""
    id: UUID


# === 삭제/복구 (Delete / Undo) 스키마 ===

class EmployeeSnapshot(EmployeeResponse):
    """삭제 취소용 직원 스냅샷 — 삭제 직전의 직원과 관계."""
    relations_from: list[RelationResponse] = []
    relations_to: list[RelationResponse] = []


class EmployeeDeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_relations: int
    deleted_assignments: int
    employee_data: EmployeeSnapshot


class EmployeeUndoDelete(CamelModel):
    employee_data: EmployeeSnapshot


class EmployeeRestoreResponse(CamelModel):
    success: bool = True
    message: str
    employee: EmployeeResponse
    restored_relations: int


# === 사용자 디렉터리 / 프로필 ===

class DirectoryUserResponse(CamelModel):
    """인증 공급자 사용자 — POST /employees/add에 쓸 ID 확인용."""
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    image_url: str | None = None


class DirectoryListResponse(CamelModel):
    users: list[DirectoryUserResponse]


class UserProfileResponse(CamelModel):
    """내 프로필 — 직원 레코드, 없으면 온보딩 요청, 둘 다 없으면 빈 프로필.

    status는 온보딩 요청에서 온 경우에만 채워집니다.
    """
    id: str
    email: str = ""
    phone_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    role: str | None = None
    is_manager: bool = False
    is_lead: bool = False
    profile_picture_url: str | None = None
    years_of_experience: int = 1
    created_at: datetime
    status: str | None = None
