from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from gitscope.models.github import ActivitySeries, GithubSnapshot, Repository

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
MAX_QUALITY_SCORE = 5
TOP_REPOSITORY_LIMIT = 5

class LanguageShare(BaseModel):
    name: str
    count: int
    percent: float

class RepositoryQuality(BaseModel):
    repository: Repository
    score: int = Field(..., description="0-5 heuristic quality score")
    badge: str = Field(..., description="High, Medium or Low")
    feedback: List[str] = Field(default_factory=list)

class MonthLabel(BaseModel):
    label: str
    week_index: int

class HeatmapGrid(BaseModel):
    # Each week is 7 slots, Sunday first; None pads the first week.
    weeks: List[List[Optional[date]]]
    levels: Dict[date, int] = Field(default_factory=dict, description="Intensity level 0-5 per day")
    month_labels: List[MonthLabel] = Field(default_factory=list)
    max_contributions: int = 0

class DashboardManifest(BaseModel):
    snapshot: GithubSnapshot
    languages: List[LanguageShare] = Field(default_factory=list)
    top_repositories: List[RepositoryQuality] = Field(default_factory=list)
    heatmap: HeatmapGrid


def language_distribution(repositories: List[Repository]) -> List[LanguageShare]:
    counts = Counter(repo.language for repo in repositories if repo.language)
    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        LanguageShare(name=name, count=count, percent=round(count * 100.0 / total, 2))
        for name, count in ordered
    ]

def quality_badge(score: int) -> str:
    if score >= 4:
        return "High"
    if score >= 2:
        return "Medium"
    return "Low"

def score_repository(repository: Repository, now: Optional[datetime] = None) -> RepositoryQuality:
    """
    Heuristic quality score from stars, freshness and whether a language was detected.
    """
    now = now or datetime.now(timezone.utc)
    score = 0
    feedback = []

    if repository.stars > 50:
        score += 3
    elif repository.stars > 10:
        score += 1
    else:
        feedback.append("Low stars count.")

    last_updated = repository.last_updated
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    months_since_update = (now - last_updated) / timedelta(days=30)
    if months_since_update < 3:
        score += 2
    elif months_since_update < 6:
        score += 1
    else:
        feedback.append("Repository not updated recently.")

    if repository.language and repository.language.strip():
        score += 1
    else:
        feedback.append("Language not specified.")

    score = min(score, MAX_QUALITY_SCORE)
    return RepositoryQuality(repository=repository, score=score, badge=quality_badge(score), feedback=feedback)

def top_repositories(
    repositories: List[Repository],
    limit: int = TOP_REPOSITORY_LIMIT,
    now: Optional[datetime] = None
) -> List[RepositoryQuality]:
    ranked = sorted(repositories, key=lambda repo: repo.stars, reverse=True)
    return [score_repository(repo, now) for repo in ranked[:limit]]

def intensity_level(contributions: int, maximum: int) -> int:
    if contributions <= 0 or maximum <= 0:
        return 0
    ratio = contributions / maximum
    for level, bound in enumerate((0.2, 0.4, 0.6, 0.8), start=1):
        if ratio <= bound:
            return level
    return 5

def heatmap_weeks(series: ActivitySeries) -> List[List[Optional[date]]]:
    # date.weekday() is Monday=0; the grid starts its columns on Sunday.
    padding = (series.start.weekday() + 1) % 7
    slots: List[Optional[date]] = [None] * padding + [day.date for day in series.days]
    return [slots[i:i + 7] for i in range(0, len(slots), 7)]

def month_labels(weeks: List[List[Optional[date]]]) -> List[MonthLabel]:
    labels = []
    current_month = None
    for index, week in enumerate(weeks):
        first = next((day for day in week if day is not None), None)
        if first is not None and first.month != current_month:
            labels.append(MonthLabel(label=MONTH_LABELS[first.month - 1], week_index=index))
            current_month = first.month
    return labels

def build_heatmap(series: ActivitySeries) -> HeatmapGrid:
    weeks = heatmap_weeks(series)
    maximum = series.max_contributions
    return HeatmapGrid(
        weeks=weeks,
        levels={day.date: intensity_level(day.contributions, maximum) for day in series.days},
        month_labels=month_labels(weeks),
        max_contributions=maximum
    )

def create_manifest(snapshot: GithubSnapshot, now: Optional[datetime] = None) -> DashboardManifest:
    """
    Prepares everything the dashboard renders from one snapshot.
    """
    return DashboardManifest(
        snapshot=snapshot,
        languages=language_distribution(snapshot.repositories),
        top_repositories=top_repositories(snapshot.repositories, now=now),
        heatmap=build_heatmap(snapshot.activity)
    )
