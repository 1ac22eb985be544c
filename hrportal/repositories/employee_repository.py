"""직원 레포지토리 — 직원 및 직원 관계 DB 쿼리 담당.

Employee Repository — Queries for the employees and employee_relations tables.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrportal.models.employee import Employee, EmployeeRelation
from hrportal.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """직원 레포지토리.

    Employee repository with relation-aware loading and name lookups.
    """

    def __init__(self) -> None:
        super().__init__(Employee)

    async def get_with_relations(self, db: AsyncSession, employee_id: str) -> Employee | None:
        query: Select = (
            select(Employee)
            .options(selectinload(Employee.relations_from), selectinload(Employee.relations_to))
            .execution_options(populate_existing=True)
            .where(Employee.id == employee_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_with_relations(self, db: AsyncSession) -> Sequence[Employee]:
        query: Select = (
            select(Employee)
            .options(selectinload(Employee.relations_from), selectinload(Employee.relations_to))
            .execution_options(populate_existing=True)
            .order_by(Employee.created_at)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_ids(self, db: AsyncSession, employee_ids: Sequence[str]) -> Sequence[Employee]:
        if not employee_ids:
            return []
        result = await db.execute(select(Employee).where(Employee.id.in_(list(employee_ids))))
        return result.scalars().all()

    async def find_by_name(
        self, db: AsyncSession, first_name: str, last_name: str | None
    ) -> Sequence[Employee]:
        """이름으로 직원을 검색합니다.

        Exact match on first name, and on last name when one is given.
        """
        query: Select = select(Employee).where(Employee.first_name == first_name)
        if last_name is not None:
            query = query.where(Employee.last_name == last_name)
        result = await db.execute(query.order_by(Employee.created_at))
        return result.scalars().all()

    async def list_department_non_leads(
        self, db: AsyncSession, department: str | None, exclude_id: str
    ) -> Sequence[Employee]:
        query: Select = select(Employee).where(
            Employee.department == department,
            Employee.is_lead.is_(False),
            Employee.id != exclude_id,
        )
        result = await db.execute(query.order_by(Employee.created_at))
        return result.scalars().all()

    async def list_supervisors(
        self, db: AsyncSession, department: str | None = None, leads_only: bool = False
    ) -> Sequence[Employee]:
        """매니저/리드 목록 — 온보딩 폼의 상사 선택용.

        Managers and leads, optionally narrowed to a department.
        With ``leads_only`` only employees flagged as lead are returned.
        """
        if leads_only:
            query: Select = select(Employee).where(Employee.is_lead.is_(True))
        else:
            query = select(Employee).where(or_(Employee.is_manager.is_(True), Employee.is_lead.is_(True)))
        if department:
            query = query.where(Employee.department == department)
        result = await db.execute(query.order_by(Employee.first_name))
        return result.scalars().all()

    async def delete_by_id(self, db: AsyncSession, employee_id: str) -> int:
        """직원 행만 삭제 (관계/배정은 호출자가 먼저 정리)."""
        result = await db.execute(delete(Employee).where(Employee.id == employee_id))
        return result.rowcount or 0


class RelationRepository(BaseRepository[EmployeeRelation]):
    """직원 관계 레포지토리.

    Employee-relation repository. (from_id, to_id, type) is the natural key.
    """

    def __init__(self) -> None:
        super().__init__(EmployeeRelation)

    async def get_by_key(
        self, db: AsyncSession, from_id: str, to_id: str, relation_type: str
    ) -> EmployeeRelation | None:
        result = await db.execute(
            select(EmployeeRelation).where(
                EmployeeRelation.from_id == from_id,
                EmployeeRelation.to_id == to_id,
                EmployeeRelation.type == relation_type,
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self, db: AsyncSession, from_id: str, to_id: str, relation_type: str
    ) -> tuple[EmployeeRelation, bool]:
        """관계를 생성하거나 기존 관계를 반환합니다.

        Create the edge or return the existing one (no fields to update).
        A concurrent insert of the same key is absorbed by ``ON CONFLICT DO NOTHING``.

        Returns:
            tuple[EmployeeRelation, bool]: (관계, 신규 생성 여부)
                                           (Edge, whether it was created)
        """
        stmt = (
            self.insert_statement(db)
            .values(from_id=from_id, to_id=to_id, type=relation_type)
            .on_conflict_do_nothing(index_elements=["from_id", "to_id", "type"])
            .returning(EmployeeRelation.id)
        )
        created = (await db.execute(stmt)).scalar_one_or_none() is not None
        relation = await self.get_by_key(db, from_id, to_id, relation_type)
        return relation, created

    async def list_with_endpoints(self, db: AsyncSession) -> Sequence[EmployeeRelation]:
        query: Select = (
            select(EmployeeRelation)
            .options(selectinload(EmployeeRelation.from_employee), selectinload(EmployeeRelation.to_employee))
            .execution_options(populate_existing=True)
            .order_by(EmployeeRelation.created_at)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_with_endpoints(self, db: AsyncSession, relation_id: UUID) -> EmployeeRelation | None:
        query: Select = (
            select(EmployeeRelation)
            .options(selectinload(EmployeeRelation.from_employee), selectinload(EmployeeRelation.to_employee))
            .execution_options(populate_existing=True)
            .where(EmployeeRelation.id == relation_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_touching(self, db: AsyncSession, employee_id: str) -> int:
        """직원이 출발/도착점인 모든 관계를 삭제합니다.

        Delete every edge where the employee is source or target.

        Returns:
            int: 삭제된 관계 수 (Number of deleted edges)
        """
        result = await db.execute(
            delete(EmployeeRelation).where(
                or_(EmployeeRelation.from_id == employee_id, EmployeeRelation.to_id == employee_id)
            )
        )
        return result.rowcount or 0


employee_repository: EmployeeRepository = EmployeeRepository()
relation_repository: RelationRepository = RelationRepository()
