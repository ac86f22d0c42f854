# backend/bookit/api/deps.py
# Fournisseurs de services pour les routes (surchargeables en test via `dependency_overrides`).

from typing import Annotated

from fastapi import Depends

from bookit.core.settings import Settings, get_settings
from bookit.core.utils import utcnow
from bookit.db.profile_store import ProfileStore, get_profile_store
from bookit.services.challenges import ChallengeService
from bookit.services.profile_service import Clock, ProfileService
from bookit.services.reading_log_service import ReadingLogService


def get_clock() -> Clock:
    return utcnow


def get_profile_service(
    store: Annotated[ProfileStore, Depends(get_profile_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> ProfileService:
    return ProfileService(store, clock=clock, max_retries=settings.profile_write_retries)


def get_challenge_service(
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> ChallengeService:
    return ChallengeService(profiles)


def get_reading_log_service(
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> ReadingLogService:
    return ReadingLogService(profiles)


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
ChallengeServiceDep = Annotated[ChallengeService, Depends(get_challenge_service)]
ReadingLogServiceDep = Annotated[ReadingLogService, Depends(get_reading_log_service)]
