"""인증 공급자 어댑터 및 토큰 의존성 테스트.

Identity adapter tests over ``httpx.MockTransport`` plus session-token
handling at the API edge.
"""

import httpx
import pytest
from httpx import AsyncClient

from hrportal.services import identity_service as identity_module
from hrportal.services.identity_service import IdentityService
from hrportal.utils.exceptions import IdentityProviderError


def _user(user_id: str, role: str | None) -> dict:
    return {
        "id": user_id,
        "first_name": user_id.title(),
        "last_name": "",
        "email_addresses": [{"email_address": f"{user_id}@company.com"}],
        "public_metadata": {"role": role} if role else {},
    }


DIRECTORY = {"alice": _user("alice", "admin"), "bob": _user("bob", "employee"), "carol": _user("carol", None)}


def _service(monkeypatch, handler) -> IdentityService:
    service = IdentityService(base_url="https://identity.test/v1", secret_key="sk_test")
    monkeypatch.setattr(service, "_client", lambda: httpx.AsyncClient(
        base_url="https://identity.test/v1",
        transport=httpx.MockTransport(handler),
    ))
    return service


def _directory_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/v1/users":
        ids = request.url.params.get_list("user_id")
        return httpx.Response(200, json=[DIRECTORY[i] for i in ids if i in DIRECTORY])
    user_id = request.url.path.rsplit("/", 1)[-1]
    if user_id in DIRECTORY:
        return httpx.Response(200, json=DIRECTORY[user_id])
    return httpx.Response(404, json={"errors": []})


class TestIdentityService:
    """디렉터리 조회 테스트."""

    async def test_get_user(self, monkeypatch):
        service = _service(monkeypatch, _directory_handler)
        user = await service.get_user("alice")
        assert user.email == "alice@company.com"
        assert user.role == "admin"

    async def test_roles(self, monkeypatch):
        service = _service(monkeypatch, _directory_handler)
        assert await service.has_admin_role("alice") is True
        assert await service.is_employee("bob") is True
        assert await service.get_role("carol") is None

    async def test_unknown_user_has_no_role(self, monkeypatch):
        """조회 실패는 역할 없음으로 처리."""
        service = _service(monkeypatch, _directory_handler)
        assert await service.get_role("nobody") is None
        with pytest.raises(IdentityProviderError):
            await service.get_user("nobody")

    async def test_admin_ids_batched(self, monkeypatch):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _directory_handler(request)

        service = _service(monkeypatch, handler)
        assert await service.get_admin_ids(["alice", "bob", "carol", "alice"]) == {"alice"}
        assert len(calls) == 1

    async def test_list_users_pages_until_short_page(self, monkeypatch):
        """limit/offset 페이지를 짧은 페이지가 나올 때까지 조회."""
        monkeypatch.setattr(identity_module, "_BATCH_SIZE", 2)
        everyone = list(DIRECTORY.values())
        offsets: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            offset = int(request.url.params["offset"])
            offsets.append(offset)
            return httpx.Response(200, json=everyone[offset:offset + 2])

        service = _service(monkeypatch, handler)
        users = await service.list_users()
        assert [u.id for u in users] == ["alice", "bob", "carol"]
        assert offsets == [0, 2]

    async def test_list_users_failure(self, monkeypatch):
        service = _service(monkeypatch, lambda request: httpx.Response(503))
        with pytest.raises(IdentityProviderError):
            await service.list_users()

    async def test_update_profile_image_failure(self, monkeypatch):
        service = _service(monkeypatch, lambda request: httpx.Response(500))
        assert await service.update_profile_image("alice", "http://x/uploads/a.png") is False


class TestSessionToken:
    """세션 토큰 검증 테스트."""

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get("/api/employees/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert res.status_code == 401

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.json() == {"status": "ok"}
