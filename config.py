from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_TOTAL_PARTICIPANTS = 1
MAX_TOTAL_PARTICIPANTS = 20

DEFAULT_TIME_FORMAT = "%b %d, %Y at %I:%M %p"


class EventCategory(Enum):
    """Kind of event being planned. Drives which delay formula applies."""

    MEAL = "meal"
    MOVIES = "movies"
    DATE = "date"
    SHOPPING = "shopping"
    VACATION = "vacation"
    WEDDING = "wedding"
    SPECIAL_OCCASION = "special_occasion"
    COURT = "court"

    @property
    def label(self) -> str:
        return _CATEGORY_TABLE[self][0]

    @property
    def emoji(self) -> str:
        return _CATEGORY_TABLE[self][1]

    @property
    def is_informal(self) -> bool:
        return _CATEGORY_TABLE[self][2]

    @property
    def is_shopping(self) -> bool:
        return _CATEGORY_TABLE[self][3]


# label, emoji, is_informal, shopping special case
_CATEGORY_TABLE = {
    EventCategory.MEAL: ("Dinner", "🍽️", True, False),
    EventCategory.MOVIES: ("Movies", "🎬", True, False),
    EventCategory.DATE: ("Date", "💕", True, False),
    EventCategory.SHOPPING: ("Shopping", "🛍️", True, True),
    EventCategory.VACATION: ("Beach Vacation", "🏖️", True, False),
    EventCategory.WEDDING: ("Wedding", "💒", False, False),
    EventCategory.SPECIAL_OCCASION: ("Special Occasion", "🌃", False, False),
    EventCategory.COURT: ("Court", "⚖️", False, False),
}


class CulturalFamily(Enum):
    """Cultural family selector. Only Colombian has a calculator."""

    COLOMBIAN = "colombian"
    VIETNAMESE = "vietnamese"
    JEWISH = "jewish"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def flag(self) -> str:
        return {"colombian": "🇨🇴", "vietnamese": "🇻🇳", "jewish": "🇮🇱"}[self.value]

    @property
    def is_available(self) -> bool:
        return self is CulturalFamily.COLOMBIAN


@dataclass(frozen=True)
class DelayRules:
    """Constants of the delay formula, in minutes."""

    shopping_base: int = 10
    informal_base: int = 30
    informal_per_head: int = 5
    shopping_per_head: int = 3
    shopping_spicy_per_head: int = 5
    informal_spicy_surcharge: int = 15
    formal_base: int = 44
    formal_per_head: int = 4
    formal_spicy_surcharge: int = 43
    # Surcharge written in the breakdown for informal non-shopping events.
    # Differs from informal_spicy_surcharge; kept as shipped.
    stated_informal_spicy_surcharge: int = 20


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


class InputModel:
    """The five user-supplied parameters of one wizard run.

    Participant counts are sanitized on write: out-of-range values are
    clamped to the nearest bound, and lowering the total pulls the Colombian
    count down with it.
    """

    def __init__(
        self,
        requested_time: datetime,
        event_category: EventCategory = EventCategory.MEAL,
        total_participants: int = MIN_TOTAL_PARTICIPANTS,
        colombian_participants: int = 0,
        spicy_factor_present: bool = False,
    ):
        self.requested_time = requested_time
        self.event_category = event_category
        self._total_participants = MIN_TOTAL_PARTICIPANTS
        self._colombian_participants = 0
        self.total_participants = total_participants
        self.colombian_participants = colombian_participants
        self.spicy_factor_present = spicy_factor_present
        self._computed_delay_minutes: Optional[int] = None
        self._computed_arrival_time: Optional[datetime] = None

    @property
    def total_participants(self) -> int:
        return self._total_participants

    @total_participants.setter
    def total_participants(self, value: int) -> None:
        self._total_participants = _clamp(value, MIN_TOTAL_PARTICIPANTS, MAX_TOTAL_PARTICIPANTS)
        if self._colombian_participants > self._total_participants:
            self._colombian_participants = self._total_participants

    @property
    def colombian_participants(self) -> int:
        return self._colombian_participants

    @colombian_participants.setter
    def colombian_participants(self, value: int) -> None:
        self._colombian_participants = _clamp(value, 0, self._total_participants)

    @property
    def computed_delay_minutes(self) -> Optional[int]:
        return self._computed_delay_minutes

    @property
    def computed_arrival_time(self) -> Optional[datetime]:
        return self._computed_arrival_time

    def record_result(self, delay_minutes: int, arrival_time: datetime) -> None:
        self._computed_delay_minutes = delay_minutes
        self._computed_arrival_time = arrival_time

    def restore_defaults(self, now: datetime) -> None:
        """Reset every field in place, keeping the object identity."""
        self.requested_time = now
        self.event_category = EventCategory.MEAL
        self._total_participants = MIN_TOTAL_PARTICIPANTS
        self._colombian_participants = 0
        self.spicy_factor_present = False
        self._computed_delay_minutes = None
        self._computed_arrival_time = None

    def __repr__(self) -> str:
        return (
            f"InputModel(requested_time={self.requested_time!r}, "
            f"event_category={self.event_category}, "
            f"total_participants={self.total_participants}, "
            f"colombian_participants={self.colombian_participants}, "
            f"spicy_factor_present={self.spicy_factor_present})"
        )


@dataclass(frozen=True)
class Breakdown:
    """Readable explanation of a delay and the minutes its text adds up to."""

    text: str
    stated_minutes: int
    delay_minutes: int

    @property
    def discrepancy_minutes(self) -> int:
        return self.stated_minutes - self.delay_minutes

    @property
    def is_consistent(self) -> bool:
        return self.discrepancy_minutes == 0


@dataclass(frozen=True)
class DelayResult:
    """Output container returned by the calculation engine."""

    delay_minutes: int
    arrival_time: datetime
    breakdown: Breakdown


class AppSettings(BaseSettings):
    """Process-level settings, read from CTC_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CTC_",
        extra="ignore",
        frozen=True,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    timezone: Optional[str] = None
    time_format: str = DEFAULT_TIME_FORMAT

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("timezone", mode="before")
    @classmethod
    def blank_timezone_is_local(cls, value):
        return value or None
