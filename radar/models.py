"""
Data models for the radar.

A Record is one normalized item (event or news entry); a Session is the
batch of records produced by one scan. Both are immutable value objects:
updates go through ``model_copy`` and return new instances.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from radar.utils.text import clean_text


class Category(str, Enum):
    """Thematic category of a record."""

    FRANCE_ADMIN = "FRANCE_ADMIN"
    WORLD_MACRO = "WORLD_MACRO"
    TECH_INNOVATION = "TECH_INNOVATION"
    OTHER = "OTHER"


class Criticality(str, Enum):
    """Priority tag of a record."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class UserFlag(str, Enum):
    """User-state flags carried by every record."""

    READ = "read"
    ADDED = "added"


CATEGORY_LABELS = {
    Category.FRANCE_ADMIN: "France & Études",
    Category.WORLD_MACRO: "Monde & Géopo",
    Category.TECH_INNOVATION: "Tech & Apps",
    Category.OTHER: "Autre",
}

CRITICALITY_LABELS = {
    Criticality.HIGH: "CRITIQUE",
    Criticality.MEDIUM: "IMPORTANT",
    Criticality.LOW: "INFO",
}

_TEXT_FIELDS = (
    "headline",
    "date",
    "impact_analysis",
    "suggested_action",
    "description",
    "source",
    "location",
    "url",
    "price",
)


def _enum_key(value) -> str:
    """Upper-cased member name for enum members and loose strings alike."""
    return clean_text(getattr(value, "value", value)).upper()


class Record(BaseModel):
    """One normalized item of information."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    headline: str = Field(default="", validation_alias=AliasChoices("headline", "title"))
    date: str = ""  # free-form date/time text, not a timestamp
    category: Category = Category.OTHER
    criticality: Criticality = Criticality.LOW
    impact_analysis: str = ""
    suggested_action: str = ""
    description: str = ""
    source: str = ""
    location: str = ""
    url: str = ""
    price: str = ""
    tags: list[str] = Field(default_factory=list)
    read: bool = False
    added: bool = False

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v):
        return clean_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v):
        """Unknown categories from the generator fall back to OTHER."""
        value = _enum_key(v)
        return value if value in Category.__members__ else Category.OTHER

    @field_validator("criticality", mode="before")
    @classmethod
    def coerce_criticality(cls, v):
        value = _enum_key(v)
        return value if value in Criticality.__members__ else Criticality.LOW

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple)):
            return v
        return [clean_text(t) for t in v if clean_text(t)]

    @field_validator("read", "added", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        return False if v is None else v

    def flag(self, flag: UserFlag) -> bool:
        """Current value of a user-state flag."""
        return getattr(self, UserFlag(flag).value)

    def with_flag(self, flag: UserFlag, value: bool) -> "Record":
        """Copy of this record with one flag set."""
        return self.model_copy(update={UserFlag(flag).value: bool(value)})

    def with_content_of(self, other: "Record") -> "Record":
        """Copy of ``other``'s content keeping this record's flags OR-ed in."""
        return other.model_copy(
            update={f.value: self.flag(f) or other.flag(f) for f in UserFlag}
        )


class Session(BaseModel):
    """One batch of records produced by a single scan."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int  # epoch milliseconds at creation
    date_str: str = Field(default="", alias="dateStr")
    items: list[Record] = Field(default_factory=list)
