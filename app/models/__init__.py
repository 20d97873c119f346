"""Record registry. Application code can do::

    from app.models import CropRecord, ClimateObservation, PredictionRecord, ...

``User`` lives in ``app.auth.models`` and is not re-exported here so that
importing the auth package never cycles back through this module.
"""

# ── Base ────────────────────────────────────────────────────────────────────
from app.models.base import StoredRecord

# ── Enums ───────────────────────────────────────────────────────────────────
from app.models.enums import CropTypeEnum, LanguageEnum

# ── Per-user records ────────────────────────────────────────────────────────
from app.models.records import (
    ClimateImpact,
    ClimateObservation,
    CropRecord,
    PredictionRecord,
)

__all__ = [
    "ClimateImpact",
    "ClimateObservation",
    # Per-user records
    "CropRecord",
    # Enums
    "CropTypeEnum",
    "LanguageEnum",
    "PredictionRecord",
    # Base
    "StoredRecord",
]
