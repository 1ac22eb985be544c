"""데이터베이스 연결 — 엔진, 세션 팩토리, ORM 베이스.

Async SQLAlchemy wiring for the HR portal. ``DATABASE_URL`` selects the
driver: asyncpg in deployment, aiosqlite in the test suite.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from hrportal.config import settings

# DEBUG이면 SQL 출력, 풀에서 꺼낼 때 연결 확인
engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)

# 커밋 후에도 응답 직렬화에서 속성 접근 가능하도록 만료하지 않음
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    """모든 ORM 모델의 베이스 (Alembic과 테스트의 create_all이 이 metadata를 사용)."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 의존성.

    Request-scoped session. Services only flush and the router commits once,
    so an approval, a deletion with its cascade, an undo or an auto-assign
    run lands as one transaction. An exception rolls all of it back.
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
