# backend/bookit/services/challenges/challenge_validator.py
# Validation des paramètres de challenge, appliquée avant tout appel au moteur.

from __future__ import annotations

from bookit.core.errors import ChallengeValidationError
from bookit.models.challenge import ChallengeType, ReadingChallenge, TimeFrame


class ChallengeValidator:
    """Validation des challenges à la frontière création / modification.

    Description:
        Le moteur ne lève jamais d'erreur ; les entrées invalides doivent donc être
        refusées ici, avec le nom de la précondition violée.
    """

    @staticmethod
    def validate(challenge: ReadingChallenge) -> None:
        """Vérifier les préconditions d'un challenge complet.

        Args:
            challenge (ReadingChallenge): Challenge à valider (après fusion des modifications).

        Raises:
            ChallengeValidationError: target <= 0, endDate <= startDate, type ou timeframe inconnus.
        """
        # `model_copy(update=...)` ne revalide pas : un appel direct à `apply_changes`
        # avec des valeurs brutes ("NOVELS") arrive ici sans passer par les DTO.
        if not isinstance(challenge.type, ChallengeType):
            raise ChallengeValidationError(
                f"Unknown challenge type: {challenge.type!r}", {"field": "type"}
            )
        if not isinstance(challenge.time_frame, TimeFrame):
            raise ChallengeValidationError(
                f"Unknown timeframe: {challenge.time_frame!r}", {"field": "timeframe"}
            )
        if challenge.target <= 0:
            raise ChallengeValidationError(
                "Target must be a positive integer", {"field": "target", "value": challenge.target}
            )
        if challenge.end_date <= challenge.start_date:
            raise ChallengeValidationError(
                "endDate must be strictly after startDate",
                {
                    "field": "endDate",
                    "startDate": challenge.start_date.isoformat(),
                    "endDate": challenge.end_date.isoformat(),
                },
            )
