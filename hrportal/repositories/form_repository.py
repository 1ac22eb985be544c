"""양식/배정/응답 레포지토리 — Form, assignment and response queries.

Form Repository — CRUD queries for the forms, assignments and responses tables.
"""

from typing import Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrportal.models.form import Assignment, Form, Response
from hrportal.repositories.base import BaseRepository


class FormRepository(BaseRepository[Form]):

    def __init__(self) -> None:
        super().__init__(Form)

    async def list_recent(self, db: AsyncSession) -> Sequence[Form]:
        result = await db.execute(select(Form).order_by(Form.created_at.desc()))
        return result.scalars().all()


class AssignmentRepository(BaseRepository[Assignment]):
    """양식 배정 레포지토리.

    Assignment repository. Ids are content-derived for auto assignments,
    so ``get_by_id`` doubles as the upsert lookup.
    """

    def __init__(self) -> None:
        super().__init__(Assignment)

    async def get_with_form(self, db: AsyncSession, assignment_id: str) -> Assignment | None:
        query: Select = (
            select(Assignment)
            .options(selectinload(Assignment.form))
            .execution_options(populate_existing=True)
            .where(Assignment.id == assignment_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_employee(self, db: AsyncSession, employee_id: str) -> Sequence[Assignment]:
        query: Select = (
            select(Assignment)
            .options(selectinload(Assignment.form))
            .execution_options(populate_existing=True)
            .where(Assignment.employee_id == employee_id)
            .order_by(Assignment.assigned_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_map_by_ids(
        self, db: AsyncSession, assignment_ids: Sequence[str], with_details: bool = False
    ) -> dict[str, Assignment]:
        """ID → 배정 맵. with_details=True 이면 양식과 작성자를 함께 로드."""
        if not assignment_ids:
            return {}
        query: Select = select(Assignment).where(Assignment.id.in_(list(assignment_ids)))
        if with_details:
            query = query.options(
                selectinload(Assignment.form), selectinload(Assignment.employee)
            ).execution_options(populate_existing=True)
        result = await db.execute(query)
        return {a.id: a for a in result.scalars().all()}

    async def get_by_form_and_employee(
        self, db: AsyncSession, form_id: str, employee_id: str
    ) -> Assignment | None:
        result = await db.execute(
            select(Assignment)
            .where(Assignment.form_id == form_id, Assignment.employee_id == employee_id)
            .limit(1)
        )
        return result.scalars().first()

    async def delete_for_employee(self, db: AsyncSession, employee_id: str) -> int:
        result = await db.execute(delete(Assignment).where(Assignment.employee_id == employee_id))
        return result.rowcount or 0


class ResponseRepository(BaseRepository[Response]):
    """응답 레포지토리.

    Response repository. Responses are insert-only.
    """

    def __init__(self) -> None:
        super().__init__(Response)

    async def find_non_peer(
        self, db: AsyncSession, assignment_id: str, responder_id: str
    ) -> Response | None:
        result = await db.execute(
            select(Response)
            .where(
                Response.assignment_id == assignment_id,
                Response.responder_id == responder_id,
                Response.is_peer.is_(False),
            )
            .limit(1)
        )
        return result.scalars().first()

    async def list_for_assignment(
        self, db: AsyncSession, assignment_id: str, responder_id: str | None = None
    ) -> Sequence[Response]:
        query: Select = select(Response).where(Response.assignment_id == assignment_id)
        if responder_id is not None:
            query = query.where(Response.responder_id == responder_id)
        result = await db.execute(query.order_by(Response.created_at.desc()))
        return result.scalars().all()

    async def latest_by_assignment(
        self, db: AsyncSession, assignment_ids: Sequence[str]
    ) -> dict[str, Response]:
        """배정별 최신 응답 — Latest response per assignment id."""
        if not assignment_ids:
            return {}
        result = await db.execute(
            select(Response)
            .where(Response.assignment_id.in_(list(assignment_ids)))
            .order_by(Response.created_at.desc())
        )
        latest: dict[str, Response] = {}
        for response in result.scalars().all():
            latest.setdefault(response.assignment_id, response)
        return latest

    async def list_recent(self, db: AsyncSession) -> Sequence[Response]:
        result = await db.execute(select(Response).order_by(Response.created_at.desc()))
        return result.scalars().all()


form_repository: FormRepository = FormRepository()
assignment_repository: AssignmentRepository = AssignmentRepository()
response_repository: ResponseRepository = ResponseRepository()
