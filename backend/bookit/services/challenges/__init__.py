from .challenge_lifecycle import apply_changes, build_challenge, refresh_all_challenges
from .challenge_service import ChallengeService
from .challenge_validator import ChallengeValidator

__all__ = [
    "ChallengeService",
    "ChallengeValidator",
    "apply_changes",
    "build_challenge",
    "refresh_all_challenges",
]
