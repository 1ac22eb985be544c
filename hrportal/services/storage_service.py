"""스토리지 서비스 — 로컬 파일 저장.

Storage Service — Local file storage for uploaded profile pictures.
파일은 UPLOADS_DIR 아래에 저장되고 /uploads/{name} 상대 URL로 참조됩니다.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from hrportal.config import settings

logger = logging.getLogger(__name__)

# 로컬 업로드 디렉토리 — .env의 UPLOADS_DIR 또는 <project>/uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.UPLOADS_DIR) if settings.UPLOADS_DIR else _PROJECT_ROOT / "uploads"

# 정적 파일 URL 접두사 — main.py의 StaticFiles 마운트 경로와 일치
UPLOADS_URL_PREFIX: str = "/uploads"

_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]")


class StorageService:
    """파일 업로드 서비스."""

    def __init__(self, root: Path | None = None) -> None:
        self.root: Path = root or UPLOADS_DIR

    def _generate_name(self, owner_id: str, filename: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
        return _SAFE_NAME.sub("_", f"{owner_id}-{timestamp}.{ext}")

    def save_local(self, name: str, data: bytes) -> str:
        """로컬 파일 저장. 경로를 반환합니다."""
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    def save_profile_picture(self, owner_id: str, filename: str, data: bytes) -> str:
        """프로필 사진을 저장하고 상대 URL을 반환합니다.

        Save a profile picture as ``{ownerId}-{timestamp}.{ext}`` and
        return its relative URL (``/uploads/{name}``).

        Raises:
            OSError: 파일 쓰기 실패 시 (When the file cannot be written)
        """
        name = self._generate_name(owner_id, filename)
        self.save_local(name, data)
        logger.info("Saved profile picture %s (%d bytes)", name, len(data))
        return f"{UPLOADS_URL_PREFIX}/{name}"

    def delete_profile_picture(self, relative_url: str | None) -> None:
        """저장된 사진 삭제 — 요청 저장이 실패했을 때 호출됩니다.

        Remove a file saved by ``save_profile_picture``. Unknown URLs are ignored.
        """
        if not relative_url or not relative_url.startswith(f"{UPLOADS_URL_PREFIX}/"):
            return
        path = self.root / relative_url[len(UPLOADS_URL_PREFIX) + 1:]
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to remove orphaned upload %s", path)

    def absolute_url(self, relative_url: str) -> str:
        """APP_BASE_URL 기준 절대 URL — Absolute URL for a relative upload path."""
        return f"{settings.APP_BASE_URL.rstrip('/')}{relative_url}"


storage_service: StorageService = StorageService()
