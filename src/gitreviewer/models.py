"""Pydantic models for git-reviewer attribution results."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class AttributionRecord(BaseModel):
    """One piece of authorship evidence produced by a blame source.

    A record covers one or more consecutive lines of a file that were last
    touched by the same commit.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
    )

    contributor_name: str
    contributor_email: str
    line_count: int = Field(default=1, ge=1)
    commit_time: datetime
    path: str | None = None
    commit: str | None = None

    @field_validator("commit_time", mode="before")
    @classmethod
    def parse_commit_time(cls, v: str | int | float | datetime) -> datetime:
        """Accept epoch seconds or ISO strings, assume UTC if no timezone."""
        if isinstance(v, (int, float)):
            return datetime.fromtimestamp(v, tz=timezone.utc)
        if isinstance(v, str):
            v = datetime.fromisoformat(v.replace("Z", "+00:00"))
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("commit_time")
    def serialize_dt(self, dt: datetime) -> str:
        """Serialize datetime to ISO 8601 format with timezone."""
        return dt.isoformat()


class ContributorIdentity(BaseModel):
    """A canonical (name, email) pair after alias resolution."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str

    @property
    def key(self) -> str:
        """Aggregation key: the canonical email, lowercased.

        Identities without an email fall back to their name.
        """
        if self.email:
            return self.email.lower()
        return self.name

    @property
    def label(self) -> str:
        """Display form, ``"Name <email>"``."""
        if self.name and self.email:
            return f"{self.name} <{self.email}>"
        return self.email or self.name


class Stat(BaseModel):
    """Normalized ownership score for one contributor."""

    model_config = ConfigDict(frozen=True)

    reviewer: str
    score: float = Field(ge=0.0, le=1.0)
    lines: int = Field(default=0, ge=0)

    @property
    def percentage(self) -> float:
        """Score scaled to 0-100 for display."""
        return self.score * 100


class RankedStats(BaseModel):
    """Terminal output of an engine run.

    ``stats`` holds at most ``top_n`` entries in descending score order.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    stats: list[Stat] = Field(default_factory=list)
    top_n: int = Field(ge=0)
    since: datetime
    total_lines: int = Field(ge=0)
    contributors: int = Field(default=0, ge=0)
    paths_considered: list[str] = Field(default_factory=list)
    skipped: dict[str, str] = Field(default_factory=dict)

    @field_serializer("since")
    def serialize_dt(self, dt: datetime) -> str:
        """Serialize datetime to ISO 8601 format with timezone."""
        return dt.isoformat()

    @property
    def reviewers(self) -> list[str]:
        """Reviewer keys in rank order."""
        return [stat.reviewer for stat in self.stats]


__all__ = [
    "AttributionRecord",
    "ContributorIdentity",
    "Stat",
    "RankedStats",
]
