"""공통 레포지토리 — 테이블별 레포지토리가 상속하는 CRUD 헬퍼.

Shared repository base. Each table repository subclasses it with its model
and adds the eager-loading queries its service needs.
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """단일 모델에 대한 CRUD.

    Primary keys are identity-provider user ids, form slugs or UUIDs,
    so ids are accepted as ``Any`` and compared against ``model.id``.
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def insert_statement(self, db: AsyncSession):
        """방언별 INSERT (ON CONFLICT 절 사용 가능).

        Dialect-specific ``INSERT`` so callers can attach ``on_conflict_do_*``.
        PostgreSQL in deployment, SQLite in the test suite.
        """
        dialect = sqlite if db.get_bind().dialect.name == "sqlite" else postgresql
        return dialect.insert(self.model)

    async def get_by_id(self, db: AsyncSession, record_id: Any) -> ModelType | None:
        """기본키 조회 (Look up one row by primary key)."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_all(self, db: AsyncSession, order_by: Any | None = None) -> Sequence[ModelType]:
        """전체 행 조회, 정렬 기준은 선택 (All rows, optionally ordered)."""
        query = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return (await db.execute(query)).scalars().all()

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """행을 추가하고 서버 기본값을 읽어옵니다.

        Insert a row and refresh it so server-side defaults are populated.
        The caller's transaction is only flushed, never committed.
        """
        row: ModelType = self.model(**values)
        db.add(row)
        await db.flush()
        await db.refresh(row)
        return row

    async def update(self, db: AsyncSession, record_id: Any, values: dict[str, Any]) -> ModelType | None:
        """부분 수정. 행이 없으면 None.

        Apply ``values`` column by column. Explicit ``None`` clears a column,
        so callers pass ``model_dump(exclude_unset=True)`` for partial edits.
        """
        row = await self.get_by_id(db, record_id)
        if row is None:
            return None
        for column, value in values.items():
            if hasattr(row, column):
                setattr(row, column, value)
        await db.flush()
        await db.refresh(row)
        return row

    async def delete(self, db: AsyncSession, record_id: Any) -> bool:
        """삭제 여부 반환 (Returns False when the row does not exist)."""
        row = await self.get_by_id(db, record_id)
        if row is None:
            return False
        await db.delete(row)
        await db.flush()
        return True
