"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트, 가짜 인증 공급자.

Test infrastructure — In-memory SQLite DB, session, httpx client and a fake
identity provider. The schema is created per test on a fresh engine, so
tests never share data.
"""

from collections.abc import AsyncGenerator
from typing import Iterable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hrportal.api.deps import get_identity
from hrportal.database import Base, get_db
from hrportal.main import app
from hrportal.models import *  # noqa: F401,F403 — register all models with metadata
from hrportal.models.employee import Employee
from hrportal.models.form import EMPLOYEE_FORM_ID, MANAGER_FORM_ID, Form
from hrportal.services.identity_service import ROLE_ADMIN, ROLE_EMPLOYEE, DirectoryUser
from hrportal.utils.jwt import create_access_token

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_ID = "user_admin"


# ---------------------------------------------------------------------------
# 가짜 인증 공급자 — In-memory identity provider
# ---------------------------------------------------------------------------
class FakeIdentity:
    """인증 공급자 대역 — 디렉터리 사용자를 메모리에 보관합니다."""

    def __init__(self) -> None:
        self.users: dict[str, DirectoryUser] = {}
        self.profile_images: dict[str, str] = {}

    def add_user(
        self,
        user_id: str,
        email: str,
        first_name: str = "",
        last_name: str = "",
        role: str | None = ROLE_EMPLOYEE,
    ) -> DirectoryUser:
        user = DirectoryUser(id=user_id, email=email, first_name=first_name, last_name=last_name, role=role)
        self.users[user_id] = user
        return user

    async def get_user(self, user_id: str) -> DirectoryUser:
        return self.users.get(user_id) or DirectoryUser(id=user_id)

    async def get_users(self, user_ids: Iterable[str]) -> list[DirectoryUser]:
        return [self.users[uid] for uid in user_ids if uid in self.users]

    async def list_users(self) -> list[DirectoryUser]:
        return list(self.users.values())

    async def get_role(self, user_id: str) -> str | None:
        user = self.users.get(user_id)
        return user.role if user else None

    async def has_admin_role(self, user_id: str) -> bool:
        return await self.get_role(user_id) == ROLE_ADMIN

    async def is_employee(self, user_id: str) -> bool:
        return await self.get_role(user_id) == ROLE_EMPLOYEE

    async def get_admin_ids(self, user_ids: Iterable[str]) -> set[str]:
        return {u.id for u in await self.get_users(user_ids) if u.role == ROLE_ADMIN}

    async def update_profile_image(self, user_id: str, image_url: str) -> bool:
        self.profile_images[user_id] = image_url
        return True


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def identity() -> FakeIdentity:
    """관리자 한 명이 등록된 가짜 인증 공급자."""
    fake = FakeIdentity()
    fake.add_user(ADMIN_ID, "admin@company.com", "Ada", "Admin", role=ROLE_ADMIN)
    return fake


@pytest_asyncio.fixture
async def client(db: AsyncSession, identity: FakeIdentity) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 인증 공급자를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_identity] = lambda: identity

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 토큰 및 테스트 데이터 생성
# ---------------------------------------------------------------------------
def auth_header(user_id: str) -> dict[str, str]:
    """Authorization 헤더 딕셔너리를 생성합니다."""
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return auth_header(ADMIN_ID)


async def make_employee(
    db: AsyncSession,
    employee_id: str,
    first_name: str,
    last_name: str = "",
    *,
    department: str | None = None,
    role: str | None = None,
    is_manager: bool = False,
    is_lead: bool = False,
) -> Employee:
    """테스트 직원을 생성합니다."""
    employee = Employee(
        id=employee_id,
        email=f"{employee_id}@company.com",
        first_name=first_name,
        last_name=last_name,
        department=department,
        role=role,
        is_manager=is_manager,
        is_lead=is_lead,
    )
    db.add(employee)
    await db.flush()
    return employee


@pytest_asyncio.fixture
async def admin_employee(db: AsyncSession) -> Employee:
    """관리자 본인의 직원 레코드."""
    return await make_employee(db, ADMIN_ID, "Ada", "Admin", department="Executive")


@pytest_asyncio.fixture
async def canonical_forms(db: AsyncSession) -> list[Form]:
    """자동 배정에 필요한 두 표준 양식 (질문 하나씩)."""
    forms = [
        Form(
            id=MANAGER_FORM_ID,
            title="Manager Assessment Form",
            questions=[{"id": "q1", "label": "Communicates clearly", "type": "text"}],
        ),
        Form(
            id=EMPLOYEE_FORM_ID,
            title="Employee Performance Form",
            questions=[
                {"id": "q1", "label": "Meets deadlines", "type": "text"},
                {"id": "q2", "label": "Anything else?", "type": "text", "optional": True},
            ],
        ),
    ]
    db.add_all(forms)
    await db.flush()
    return forms
