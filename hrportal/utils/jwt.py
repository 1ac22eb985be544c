"""세션 토큰 생성 및 검증 유틸리티 모듈.

Session token creation and verification utility module.
Session tokens are issued by the external identity provider; this module
only verifies them. ``create_access_token`` mints tokens with the shared
secret for local development and tests.

JWT Payload Structure:
    {
        "sub": "user_xxx",   # 인증 공급자 사용자 ID (Identity-provider user id)
        "exp": 1234567890,   # 만료 시간 UNIX timestamp (Expiration)
        ...                  # 공급자별 추가 클레임 (Provider-specific claims, ignored)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from hrportal.config import settings


def create_access_token(data: dict[str, Any]) -> str:
    """HS 비밀키로 서명된 세션 토큰을 생성합니다.

    Generate a session token signed with JWT_SECRET_KEY.
    Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES.

    Args:
        data: JWT 페이로드 데이터, 최소 {"sub": user_id}
              (JWT payload data, must contain "sub")

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)

    Example:
        token = create_access_token({"sub": "user_2abc"})
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """세션 토큰을 디코딩하고 검증합니다.

    Decode and verify a session token string.
    Uses JWT_PUBLIC_KEY (RS256) when configured, otherwise JWT_SECRET_KEY
    with JWT_ALGORITHM.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    if settings.JWT_PUBLIC_KEY:
        return jwt.decode(token, settings.JWT_PUBLIC_KEY, algorithms=["RS256"])
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
