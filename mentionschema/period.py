"""Partial calendar dates and periods, the values carried by DATE mentions.

Dates found in news text are frequently incomplete ("March 2015", "in
2012", "the 14th"), so each component may be unknown; ``0`` stands for an
unknown day, month or year. A :class:`Period` is a pair of such dates; a
single date is represented as a period whose bounds are equal.
"""

from pydantic import BaseModel, Field, model_validator


class PartialDate(BaseModel, frozen=True):
    """A calendar date whose components may be unknown (``0``)."""

    year: int = Field(default=0, ge=0, description="Year, or 0 if unknown.")
    month: int = Field(default=0, ge=0, le=12, description="Month (1-12), or 0 if unknown.")
    day: int = Field(default=0, ge=0, le=31, description="Day of month (1-31), or 0 if unknown.")

    @property
    def is_empty(self) -> bool:
        return self.year == 0 and self.month == 0 and self.day == 0

    def is_compatible(self, other: "PartialDate") -> bool:
        """Two dates are compatible if no known component disagrees."""
        for mine, theirs in ((self.year, other.year), (self.month, other.month), (self.day, other.day)):
            if mine and theirs and mine != theirs:
                return False
        return True

    def export_to_string(self) -> str:
        return f"{self.year:04d}.{self.month:02d}.{self.day:02d}"

    @classmethod
    def import_from_string(cls, string: str) -> "PartialDate":
        year, month, day = (int(part) for part in string.strip().split("."))
        return cls(year=year, month=month, day=day)

    def __str__(self) -> str:
        parts = []
        if self.day:
            parts.append(f"{self.day:02d}")
        if self.month:
            parts.append(f"{self.month:02d}")
        if self.year:
            parts.append(f"{self.year:04d}")
        return "/".join(parts) if parts else "?"


class Period(BaseModel, frozen=True):
    """An interval between two partial dates (bounds included)."""

    start: PartialDate
    end: PartialDate

    @model_validator(mode="after")
    def _not_empty(self) -> "Period":
        if self.start.is_empty and self.end.is_empty:
            raise ValueError("A period needs at least one known date component")
        return self

    @classmethod
    def single(cls, date: PartialDate) -> "Period":
        return cls(start=date, end=date)

    def is_compatible(self, other: "Period | None") -> bool:
        if other is None:
            return False
        return self.start.is_compatible(other.start) and self.end.is_compatible(other.end)

    def export_to_string(self) -> str:
        return f"{self.start.export_to_string()}-{self.end.export_to_string()}"

    @classmethod
    def import_from_string(cls, string: str) -> "Period":
        start_str, end_str = string.split("-")
        return cls(
            start=PartialDate.import_from_string(start_str),
            end=PartialDate.import_from_string(end_str),
        )

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"
