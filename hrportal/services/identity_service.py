"""인증 공급자 어댑터 — 외부 사용자 디렉터리 및 역할 메타데이터.

Identity provider adapter — External user directory and role metadata.
Wraps the identity provider's backend API (Clerk-compatible REST) behind a
small capability interface so that business logic only asks questions like
``has_admin_role(user_id)`` and never deals with provider specifics.

Role metadata lives in the directory user's ``public_metadata.role``
("admin" | "employee").
"""

import logging
from typing import Any, Iterable

import httpx
from pydantic import BaseModel

from hrportal.config import settings
from hrportal.utils.exceptions import IdentityProviderError

logger = logging.getLogger(__name__)

ROLE_ADMIN: str = "admin"
ROLE_EMPLOYEE: str = "employee"

# 디렉터리 일괄 조회 페이지 크기 — Directory batch page size
_BATCH_SIZE: int = 100


class DirectoryUser(BaseModel):
    """디렉터리 사용자 — 인증 공급자의 사용자 정보 투영.

    Projection of an identity-provider user.
    """

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    image_url: str | None = None
    role: str | None = None


def _to_directory_user(payload: dict[str, Any]) -> DirectoryUser:
    emails = payload.get("email_addresses") or []
    email = emails[0].get("email_address", "") if emails else ""
    metadata = payload.get("public_metadata") or {}
    return DirectoryUser(
        id=payload["id"],
        email=email,
        first_name=payload.get("first_name") or "",
        last_name=payload.get("last_name") or "",
        image_url=payload.get("image_url"),
        role=metadata.get("role"),
    )


class IdentityService:
    """인증 공급자 API 클라이언트.

    Identity provider API client over httpx.
    A fresh ``AsyncClient`` is opened per call; calls are few and
    request-scoped, so no connection pool is kept across requests.
    """

    def __init__(self, base_url: str | None = None, secret_key: str | None = None) -> None:
        self._base_url: str = (base_url or settings.IDENTITY_API_URL).rstrip("/")
        self._secret_key: str = secret_key if secret_key is not None else settings.IDENTITY_SECRET_KEY

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._secret_key}"},
            timeout=settings.IDENTITY_TIMEOUT_SECONDS,
        )

    async def get_user(self, user_id: str) -> DirectoryUser:
        """사용자 한 명을 조회합니다.

        Fetch a single directory user.

        Raises:
            IdentityProviderError: 호출 실패 시 (When the directory call fails)
        """
        try:
            async with self._client() as client:
                res = await client.get(f"/users/{user_id}")
                res.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Identity lookup failed for %s: %s", user_id, exc)
            raise IdentityProviderError() from exc
        return _to_directory_user(res.json())

    async def get_users(self, user_ids: Iterable[str]) -> list[DirectoryUser]:
        """여러 사용자를 일괄 조회합니다.

        Fetch many directory users with batched list queries
        (``GET /users?user_id=..&user_id=..``) instead of one call per user.
        """
        ids = list(dict.fromkeys(user_ids))
        users: list[DirectoryUser] = []
        try:
            async with self._client() as client:
                for start in range(0, len(ids), _BATCH_SIZE):
                    chunk = ids[start:start + _BATCH_SIZE]
                    res = await client.get(
                        "/users",
                        params=[("user_id", uid) for uid in chunk] + [("limit", str(len(chunk)))],
                    )
                    res.raise_for_status()
                    users.extend(_to_directory_user(item) for item in res.json())
        except httpx.HTTPError as exc:
            logger.warning("Identity batch lookup failed: %s", exc)
            raise IdentityProviderError() from exc
        return users

    async def list_users(self) -> list[DirectoryUser]:
        """디렉터리 전체 사용자 목록 (페이지 단위 조회).

        Page through ``GET /users`` with ``limit`` and ``offset`` until a short
        page comes back.

        Raises:
            IdentityProviderError: 호출 실패 시
        """
        users: list[DirectoryUser] = []
        try:
            async with self._client() as client:
                while True:
                    res = await client.get("/users", params={"limit": _BATCH_SIZE, "offset": len(users)})
                    res.raise_for_status()
                    page = [_to_directory_user(item) for item in res.json()]
                    users.extend(page)
                    if len(page) < _BATCH_SIZE:
                        break
        except httpx.HTTPError as exc:
            logger.warning("Identity directory listing failed: %s", exc)
            raise IdentityProviderError() from exc
        return users

    async def get_role(self, user_id: str) -> str | None:
        """사용자 역할 — 조회 실패 시 None (Role, None when the lookup fails)."""
        try:
            user = await self.get_user(user_id)
        except IdentityProviderError:
            return None
        return user.role

    async def has_admin_role(self, user_id: str) -> bool:
        return await self.get_role(user_id) == ROLE_ADMIN

    async def is_employee(self, user_id: str) -> bool:
        return await self.get_role(user_id) == ROLE_EMPLOYEE

    async def get_admin_ids(self, user_ids: Iterable[str]) -> set[str]:
        """주어진 사용자 중 관리자 ID 집합을 반환합니다.

        Return the subset of ``user_ids`` whose role metadata is "admin".
        """
        return {user.id for user in await self.get_users(user_ids) if user.role == ROLE_ADMIN}

    async def update_profile_image(self, user_id: str, image_url: str) -> bool:
        """프로필 사진 URL을 공급자 메타데이터에 반영합니다 (best-effort).

        Push the absolute profile picture URL into the user's public metadata.
        Failures are logged and reported as False.
        """
        try:
            async with self._client() as client:
                res = await client.patch(
                    f"/users/{user_id}/metadata",
                    json={"public_metadata": {"profile_picture_url": image_url}},
                )
                res.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to update profile picture for %s: %s", user_id, exc)
            return False
        return True


# 싱글턴 인스턴스
identity_service: IdentityService = IdentityService()
