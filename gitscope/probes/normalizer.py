from typing import List, Optional
from gitscope.models.github import ActivitySeries, Profile, Repository

def normalize_profile_context(
    profile: Optional[Profile],
    repositories: Optional[List[Repository]] = None,
    activity: Optional[ActivitySeries] = None,
    max_repos: int = 30
) -> str:
    """
    Transforms fetched GitHub data into a dense Markdown context for the LLM flows.
    """
    lines = ["# GitHub Profile Snapshot\n"]

    if profile is None:
        lines.append("No profile data available.")
    else:
        lines.append("## Identity")
        lines.append(f"Handle: {profile.login}")
        lines.append(f"Name: {profile.name if profile.name is not None else 'Not set'}")
        lines.append(f"Bio: {profile.bio if profile.bio is not None else 'Not set'}")
        lines.append(f"Public Repositories: {profile.public_repos}")
        lines.append(f"Followers: {profile.followers} | Following: {profile.following}")
        lines.append(f"Joined: {profile.joined.date().isoformat()}")
    lines.append("")

    repositories = repositories or []
    lines.append("## Repositories (Most Recently Updated First)")
    if not repositories:
        lines.append("No public repositories available.")
    # Limit detailed context to avoid context flooding
    for repo in repositories[:max_repos]:
        lines.append(
            f"- **{repo.name}** ({repo.language or 'No language detected'}): "
            f"Stars: {repo.stars} | Updated: {repo.last_updated.date().isoformat()} | URL: {repo.url}"
        )
    if len(repositories) > max_repos:
        lines.append(f"- ...and {len(repositories) - max_repos} more")
    lines.append("")

    if activity is not None:
        lines.append("## Public Activity (Last 365 Days)")
        if activity.degraded:
            lines.append("Activity data unavailable.")
        else:
            lines.append(f"Public events: {activity.total_contributions} across {activity.active_days} active days")
            lines.append(f"Longest streak: {activity.longest_streak} days | Current streak: {activity.current_streak} days")
        lines.append("")

    return "\n".join(lines)
