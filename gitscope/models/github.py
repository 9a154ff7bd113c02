from datetime import date, datetime, timedelta
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator

SERIES_LENGTH = 365


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str = Field(..., description="Unique GitHub handle")
    avatar_url: str = Field(..., description="URL to the user's avatar image")
    name: Optional[str] = Field(None, description="Display name, if the user set one")
    bio: Optional[str] = Field(None, description="Free-text biography, if the user set one")
    public_repos: NonNegativeInt = 0
    followers: NonNegativeInt = 0
    following: NonNegativeInt = 0
    joined: datetime = Field(..., description="Account creation timestamp")

    @classmethod
    def from_api(cls, payload: dict) -> "Profile":
        return cls(
            login=payload["login"],
            avatar_url=payload["avatar_url"],
            name=payload.get("name"),
            bio=payload.get("bio"),
            public_repos=payload.get("public_repos") or 0,
            followers=payload.get("followers") or 0,
            following=payload.get("following") or 0,
            joined=payload["created_at"],
        )


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str = Field(..., description="Canonical web URL of the repository")
    language: Optional[str] = Field(None, description="Primary language; None when GitHub detected none")
    stars: NonNegativeInt = 0
    last_updated: datetime

    @classmethod
    def from_api(cls, payload: dict) -> "Repository":
        return cls(
            name=payload["name"],
            url=payload["html_url"],
            language=payload.get("language"),
            stars=payload.get("stargazers_count") or 0,
            last_updated=payload["updated_at"],
        )


class ActivityDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    contributions: NonNegativeInt = 0


class ActivitySeries(BaseModel):
    """
    A dense, gap-free run of 365 calendar days ending today, oldest first.
    `degraded` is set when the events feed could not be read and the counts
    are zero-filled rather than observed.
    """
    model_config = ConfigDict(frozen=True)

    days: List[ActivityDay]
    degraded: bool = False

    @model_validator(mode="after")
    def _check_calendar(self) -> "ActivitySeries":
        if len(self.days) != SERIES_LENGTH:
            raise ValueError(f"expected {SERIES_LENGTH} days, got {len(self.days)}")
        for previous, current in zip(self.days, self.days[1:]):
            if current.date - previous.date != timedelta(days=1):
                raise ValueError(f"series is not consecutive at {previous.date} -> {current.date}")
        return self

    @property
    def start(self) -> date:
        return self.days[0].date

    @property
    def end(self) -> date:
        return self.days[-1].date

    @property
    def total_contributions(self) -> int:
        return sum(day.contributions for day in self.days)

    @property
    def max_contributions(self) -> int:
        return max(day.contributions for day in self.days)

    @property
    def active_days(self) -> int:
        return sum(1 for day in self.days if day.contributions > 0)

    @property
    def longest_streak(self) -> int:
        best = run = 0
        for day in self.days:
            run = run + 1 if day.contributions > 0 else 0
            best = max(best, run)
        return best

    @property
    def current_streak(self) -> int:
        # Counted back from today; an empty today breaks the streak.
        run = 0
        for day in reversed(self.days):
            if day.contributions == 0:
                break
            run += 1
        return run


class GithubSnapshot(BaseModel):
    """Everything the dashboard needs for one user, fetched in one fan-out."""
    model_config = ConfigDict(frozen=True)

    profile: Profile
    repositories: List[Repository] = Field(default_factory=list)
    activity: ActivitySeries
    repository_error: Optional[str] = Field(None, description="Why repositories are empty, when their fetch failed")
