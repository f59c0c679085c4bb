"""Data models for episodes and feeds.

Episode records are built from descriptors that an ingestion collaborator has
already decoded. Construction never fails: malformed values fall back to the
documented defaults so a UI can always render partial data.
"""

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "Untitled"
UNKNOWN_MODEL = "Unknown"
LOCATION_SEPARATOR = ", "
LOCATION_FIELDS = ("origin", "locale", "region", "zone", "planet")


def _coerce_text(value: Any, default: str) -> str:
    if isinstance(value, str):
        return value if value.strip() else default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _coerce_number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_timestamp(value: Any) -> datetime | None:
    """Convert a decoded timestamp into a datetime, or None when unusable.

    Accepts datetime and date objects, ISO-8601 strings and epoch seconds.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class EpisodeRecord(BaseModel):
    """Immutable metadata for a single episode.

    Attributes:
        id: Opaque key, unique within one ingest batch
        title: Display title (placeholder when absent)
        recording_time: When the episode was recorded, if known
        published: Publication time, the default sort key
        model: Recording device model
        integrity: Integrity percentage in [0, 100]
        origin, locale, region, zone, planet: Location hierarchy, any may be empty
        tags: Tags in feed order, duplicates permitted
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    title: str = DEFAULT_TITLE
    shortcode: str = ""

    recording_time: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("recording_time", "recordingTime", "date"),
    )
    published: datetime | None = None

    model: str = UNKNOWN_MODEL
    integrity: float = 0.0

    origin: str = ""
    locale: str = ""
    region: str = ""
    zone: str = ""
    planet: str = ""

    tags: tuple[str, ...] = ()
    description: str = ""

    audio_url: str | None = Field(
        default=None, validation_alias=AliasChoices("audio_url", "audioUrl")
    )
    duration: float = 0.0
    size: int = 0

    @classmethod
    def from_descriptor(cls, descriptor: Any) -> "EpisodeRecord":
        """Build a record from a decoded descriptor mapping.

        Non-mapping input yields a record made entirely of defaults.
        """
        if isinstance(descriptor, EpisodeRecord):
            return descriptor
        if not isinstance(descriptor, Mapping):
            return cls()
        return cls.model_validate(dict(descriptor))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str | None:
        if v is None or isinstance(v, bool):
            return None
        text = str(v) if isinstance(v, (str, int, float)) else None
        return text or None

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        return _coerce_text(v, DEFAULT_TITLE)

    @field_validator("model", mode="before")
    @classmethod
    def _coerce_model(cls, v: Any) -> str:
        return _coerce_text(v, UNKNOWN_MODEL)

    @field_validator(
        "shortcode", "origin", "locale", "region", "zone", "planet", "description",
        mode="before",
    )
    @classmethod
    def _coerce_optional_text(cls, v: Any) -> str:
        return _coerce_text(v, "")

    @field_validator("audio_url", mode="before")
    @classmethod
    def _coerce_audio_url(cls, v: Any) -> str | None:
        return v if isinstance(v, str) and v.strip() else None

    @field_validator("recording_time", "published", mode="before")
    @classmethod
    def _coerce_timestamps(cls, v: Any) -> datetime | None:
        return coerce_timestamp(v)

    @field_validator("integrity", mode="before")
    @classmethod
    def _coerce_integrity(cls, v: Any) -> float:
        return min(100.0, max(0.0, _coerce_number(v)))

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> float:
        return max(0.0, _coerce_number(v))

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, v: Any) -> int:
        return max(0, int(_coerce_number(v)))

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> tuple[str, ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(tag for tag in v if isinstance(tag, str))

    @property
    def location(self) -> str:
        """Non-empty location fields joined in hierarchy order."""
        parts = (getattr(self, name) for name in LOCATION_FIELDS)
        return LOCATION_SEPARATOR.join(part for part in parts if part)

    @property
    def recording_year(self) -> int | None:
        return self.recording_time.year if self.recording_time else None

    @property
    def date_label(self) -> str:
        """Recording date as MM/DD/YYYY, empty when unknown."""
        if self.recording_time is None:
            return ""
        return self.recording_time.strftime("%m/%d/%Y")

    @property
    def long_date_label(self) -> str:
        """Recording date spelled out, e.g. "Tuesday, March 5, 2024"."""
        if self.recording_time is None:
            return ""
        dt = self.recording_time
        return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"

    @property
    def integrity_label(self) -> str:
        return f"{self.integrity:g}%"

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation including derived fields."""
        data = self.model_dump(mode="json")
        data["location"] = self.location
        data["date"] = self.date_label
        data["integrity_label"] = self.integrity_label
        return data


class FeedMetadata(BaseModel):
    """Feed-level information shown alongside the episode list."""

    title: str = "Episode Feed"
    description: str = ""
    icon: str = ""
    author: str | None = None
    total: int = 0

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        return _coerce_text(v, "Episode Feed")

    @field_validator("description", "icon", mode="before")
    @classmethod
    def _coerce_text_fields(cls, v: Any) -> str:
        return _coerce_text(v, "")
