# backend/bookit/models/_shared.py
# Types communs utilisés par plusieurs modèles.

from __future__ import annotations

import datetime as dt
from typing import Annotated

from pydantic import AfterValidator

from bookit.core.utils import ensure_utc

# Datetime toujours aware en UTC (un datetime naïf est lu comme de l'UTC).
UtcDatetime = Annotated[dt.datetime, AfterValidator(ensure_utc)]
