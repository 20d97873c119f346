"""Closed value sets used by persisted records.

These are separate from the StrEnums in app/config.py:
config enums validate settings, record enums type stored fields.
"""

from enum import StrEnum

# ── Crop enums ──────────────────────────────────────────────────────────────


class CropTypeEnum(StrEnum):
    """Crop categories understood by the estimation engine.

    Declaration order is the feature index fed to the learned yield model.
    """

    maize = "maize"
    rice = "rice"
    beans = "beans"

    @property
    def index(self) -> int:
        return list(CropTypeEnum).index(self)


# ── Preference enums ────────────────────────────────────────────────────────


class LanguageEnum(StrEnum):
    """Two-letter locale codes a user may select."""

    en = "en"
    sw = "sw"
