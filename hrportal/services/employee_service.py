"""직원 서비스 — 직원 관리 및 관계 그래프 비즈니스 로직.

Employee Service — Employee management and relation-graph business logic.

Relation graph rules:
    - (fromId, toId, type)가 자연키 — 생성은 항상 업서트 (Writes are upserts)
    - 자기 자신과의 관계 금지 (Self-loops are rejected)
    - 직원 삭제 시 관계/배정/과정 배정 삭제, 응답은 보존 (Responses are kept)
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.employee import Employee, EmployeeRelation
from hrportal.models.onboarding import OnboardingRequest
from hrportal.repositories.course_repository import employee_course_repository
from hrportal.repositories.employee_repository import employee_repository, relation_repository
from hrportal.repositories.form_repository import assignment_repository
from hrportal.repositories.onboarding_repository import onboarding_repository
from hrportal.schemas.employee import (
    DirectoryListResponse,
    DirectoryUserResponse,
    EmployeeAdd,
    EmployeeDeleteResponse,
    EmployeeResponse,
    EmployeeRestoreResponse,
    EmployeeSnapshot,
    EmployeeUpdate,
    EmployeeWithRelations,
    RelationDetailResponse,
    RelationGraphResponse,
    RelationResponse,
    RelationUpsert,
    SupervisorResponse,
    UserProfileResponse,
)
from hrportal.services.identity_service import IdentityService
from hrportal.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def years_since(created_at: datetime, now: datetime | None = None) -> int:
    """가입 후 경과 연수, 최소 1년 (Whole years since ``created_at``, at least 1)."""
    now = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return max((now - created_at).days // 365, 1)


def _to_supervisor(employee: Employee) -> SupervisorResponse:
    return SupervisorResponse(
        user_id=employee.id,
        name=employee.full_name,
        email=employee.email,
        department=employee.department or "",
        role=employee.role or "",
        is_manager=employee.is_manager,
        is_lead=employee.is_lead,
    )


class EmployeeService:
    """직원 관리 서비스."""

    async def list_employees(self, db: AsyncSession) -> list[EmployeeWithRelations]:
        employees = await employee_repository.list_with_relations(db)
        return [EmployeeWithRelations.model_validate(e) for e in employees]

    async def get_me(self, db: AsyncSession, user_id: str) -> EmployeeResponse:
        employee = await employee_repository.get_by_id(db, user_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return EmployeeResponse.model_validate(employee)

    async def get_profile(self, db: AsyncSession, user_id: str) -> UserProfileResponse:
        """내 프로필을 조회합니다.

        Employee row first, then the pending or rejected onboarding request,
        then an empty profile for a user who has not onboarded yet.
        """
        source: Employee | OnboardingRequest | None = await employee_repository.get_by_id(db, user_id)
        status: str | None = None
        if source is None:
            source = await onboarding_repository.get_by_user_id(db, user_id)
            if source is None:
                return UserProfileResponse(id=user_id, created_at=datetime.now(timezone.utc))
            status = source.status
        return UserProfileResponse(
            id=user_id,
            email=source.email,
            phone_number=source.phone_number,
            first_name=source.first_name,
            last_name=source.last_name,
            department=source.department,
            role=source.role,
            is_manager=source.is_manager,
            is_lead=source.is_lead,
            profile_picture_url=source.profile_picture_url,
            years_of_experience=years_since(source.created_at),
            created_at=source.created_at,
            status=status,
        )

    async def list_directory(self, identity: IdentityService) -> DirectoryListResponse:
        users = await identity.list_users()
        return DirectoryListResponse(users=[DirectoryUserResponse.model_validate(u) for u in users])

    async def add_employee(self, db: AsyncSession, data: EmployeeAdd) -> EmployeeResponse:
        """최소 정보로 직원을 업서트합니다 (이미 있으면 이메일만 갱신)."""
        employee = await employee_repository.get_by_id(db, data.id)
        if employee is None:
            employee = await employee_repository.create(db, {"id": data.id, "email": data.email})
        else:
            employee = await employee_repository.update(db, data.id, {"email": data.email})
        return EmployeeResponse.model_validate(employee)

    async def update_employee(
        self, db: AsyncSession, employee_id: str, data: EmployeeUpdate
    ) -> EmployeeResponse:
        employee = await employee_repository.update(db, employee_id, {
            "department": data.department or None,
            "role": data.role or None,
            "is_manager": data.is_manager,
            "is_lead": data.is_lead,
        })
        if employee is None:
            raise NotFoundError("Employee not found")
        return EmployeeResponse.model_validate(employee)

    async def delete_employee(self, db: AsyncSession, employee_id: str) -> EmployeeDeleteResponse:
        """직원과 관련 데이터를 삭제하고 복구용 스냅샷을 반환합니다.

        Delete incoming/outgoing relations, assignments and course
        enrollments, then the employee. Responses are left untouched.
        The returned ``employee_data`` feeds ``restore_employee``.
        """
        employee = await employee_repository.get_with_relations(db, employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        snapshot = EmployeeSnapshot.model_validate(employee)

        deleted_relations = await relation_repository.delete_touching(db, employee_id)
        deleted_assignments = await assignment_repository.delete_for_employee(db, employee_id)
        await employee_course_repository.delete_for_employee(db, employee_id)
        await employee_repository.delete_by_id(db, employee_id)
        await db.flush()

        logger.info(
            "Deleted employee %s (%d relations, %d assignments)",
            employee_id, deleted_relations, deleted_assignments,
        )
        return EmployeeDeleteResponse(
            message="Employee and all related data deleted successfully",
            deleted_relations=deleted_relations,
            deleted_assignments=deleted_assignments,
            employee_data=snapshot,
        )

    async def restore_employee(self, db: AsyncSession, data: EmployeeSnapshot) -> EmployeeRestoreResponse:
        """삭제 스냅샷으로 직원과 관계를 복구합니다.

        Recreate the employee and its relations from a deletion snapshot.
        Relations whose other endpoint no longer exists, or that already
        exist again, are skipped.

        Raises:
            ConflictError: 같은 ID의 직원이 이미 있는 경우
        """
        if await employee_repository.get_by_id(db, data.id) is not None:
            raise ConflictError("Employee already exists")

        employee = await employee_repository.create(db, {
            "id": data.id,
            "email": data.email,
            "first_name": data.first_name,
            "last_name": data.last_name,
            "phone_number": data.phone_number,
            "department": data.department,
            "role": data.role,
            "is_manager": data.is_manager,
            "is_lead": data.is_lead,
            "profile_picture_url": data.profile_picture_url,
            "created_at": data.created_at,
        })

        restored = 0
        seen: set[UUID] = set()
        for relation in [*data.relations_from, *data.relations_to]:
            if relation.id in seen:
                continue
            seen.add(relation.id)
            other_id = relation.to_id if relation.from_id == data.id else relation.from_id
            if other_id != data.id and await employee_repository.get_by_id(db, other_id) is None:
                logger.info("Skipping relation %s: employee %s no longer exists", relation.id, other_id)
                continue
            if await relation_repository.get_by_key(db, relation.from_id, relation.to_id, relation.type):
                continue
            await relation_repository.create(db, {
                "id": relation.id,
                "from_id": relation.from_id,
                "to_id": relation.to_id,
                "type": relation.type,
                "created_at": relation.created_at,
            })
            restored += 1

        return EmployeeRestoreResponse(
            message="Employee restored successfully",
            employee=EmployeeResponse.model_validate(employee),
            restored_relations=restored,
        )

    async def list_managers(self, db: AsyncSession, department: str | None) -> list[SupervisorResponse]:
        """매니저/리드 목록 — 부서 지정 시 해당 부서를 먼저, 이어서 전체.

        With a department, that department's managers come first, followed
        by every other manager or lead (so department heads can pick
        someone above them).
        """
        result: dict[str, Employee] = {}
        if department:
            for employee in await employee_repository.list_supervisors(db, department):
                result.setdefault(employee.id, employee)
        for employee in await employee_repository.list_supervisors(db):
            result.setdefault(employee.id, employee)
        return [_to_supervisor(e) for e in result.values()]

    async def list_leads(self, db: AsyncSession, department: str | None) -> list[SupervisorResponse]:
        leads = await employee_repository.list_supervisors(db, department, leads_only=True)
        return [_to_supervisor(e) for e in leads]


class RelationService:
    """직원 관계 그래프 서비스."""

    async def get_graph(self, db: AsyncSession) -> RelationGraphResponse:
        employees = await employee_repository.list_with_relations(db)
        relations = await relation_repository.list_with_endpoints(db)
        return RelationGraphResponse(
            employees=[EmployeeWithRelations.model_validate(e) for e in employees],
            relations=[RelationDetailResponse.model_validate(r) for r in relations],
        )

    async def upsert_relation(self, db: AsyncSession, data: RelationUpsert) -> tuple[RelationResponse, bool]:
        """관계를 업서트합니다 — 같은 (from, to, type) 재호출은 기존 관계 반환.

        Raises:
            ConflictError: 자기 자신과의 관계
            NotFoundError: 존재하지 않는 직원
        """
        if data.from_id == data.to_id:
            raise ConflictError("An employee cannot be related to themselves")
        found = {e.id for e in await employee_repository.get_by_ids(db, [data.from_id, data.to_id])}
        missing = [eid for eid in (data.from_id, data.to_id) if eid not in found]
        if missing:
            raise NotFoundError(f"Employee not found: {', '.join(missing)}")

        relation, created = await relation_repository.upsert(db, data.from_id, data.to_id, data.type)
        return RelationResponse.model_validate(relation), created

    async def change_type(self, db: AsyncSession, relation_id: UUID, relation_type: str) -> RelationResponse:
        relation: EmployeeRelation | None = await relation_repository.get_by_id(db, relation_id)
        if relation is None:
            raise NotFoundError("Relation not found")
        if relation.type == relation_type:
            return RelationResponse.model_validate(relation)
        if await relation_repository.get_by_key(db, relation.from_id, relation.to_id, relation_type):
            raise ConflictError(f"A {relation_type} relation between these employees already exists")
        relation = await relation_repository.update(db, relation_id, {"type": relation_type})
        return RelationResponse.model_validate(relation)

    async def delete_relation(self, db: AsyncSession, relation_id: UUID) -> None:
        if not await relation_repository.delete(db, relation_id):
            raise NotFoundError("Relation not found")


employee_service: EmployeeService = EmployeeService()
relation_service: RelationService = RelationService()
