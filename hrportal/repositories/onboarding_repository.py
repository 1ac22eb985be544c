"""온보딩 요청 레포지토리 — Onboarding request queries."""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrportal.models.onboarding import ONBOARDING_PENDING, OnboardingRequest
from hrportal.repositories.base import BaseRepository


class OnboardingRepository(BaseRepository[OnboardingRequest]):

    def __init__(self) -> None:
        super().__init__(OnboardingRequest)

    async def get_by_user_id(self, db: AsyncSession, user_id: str) -> OnboardingRequest | None:
        result = await db.execute(select(OnboardingRequest).where(OnboardingRequest.user_id == user_id))
        return result.scalar_one_or_none()

    async def list_pending(self, db: AsyncSession) -> Sequence[OnboardingRequest]:
        result = await db.execute(
            select(OnboardingRequest)
            .where(OnboardingRequest.status == ONBOARDING_PENDING)
            .order_by(OnboardingRequest.created_at.asc())
        )
        return result.scalars().all()


onboarding_repository: OnboardingRepository = OnboardingRepository()
