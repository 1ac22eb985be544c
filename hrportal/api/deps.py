"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Session issuance and roles belong to the external identity provider;
this module verifies the session token and asks the provider adapter
for role capabilities.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <session token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies the JWT and returns its payload)
    3. 페이로드의 "sub" 필드가 현재 사용자 ID
       (The "sub" claim is the current user id)

Authorization Flow:
    require_admin → 공급자 역할 메타데이터가 "admin" 이어야 함
"""

from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hrportal.services.identity_service import IdentityService, identity_service
from hrportal.utils.exceptions import ForbiddenError, UnauthorizedError
from hrportal.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — auto_error=False: 누락 시 401을 직접 발생
# (Missing header is reported as 401 by get_current_user_id, not 403)
security: HTTPBearer = HTTPBearer(auto_error=False)


def get_identity() -> IdentityService:
    """인증 공급자 어댑터 의존성 (테스트에서 교체 가능).

    Identity provider adapter dependency; overridden in tests.
    """
    return identity_service


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """세션 토큰에서 현재 사용자 ID를 추출합니다.

    Decode the session token from the Authorization header and return ``sub``.

    Raises:
        UnauthorizedError(401): 토큰 누락/만료/위조 (Missing, expired or invalid token)
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        payload: dict = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired session")

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid session")
    return user_id


async def require_admin(
    user_id: Annotated[str, Depends(get_current_user_id)],
    identity: Annotated[IdentityService, Depends(get_identity)],
) -> str:
    """관리자 권한 검사 — 관리자가 아니면 403."""
    if not await identity.has_admin_role(user_id):
        raise ForbiddenError()
    return user_id

