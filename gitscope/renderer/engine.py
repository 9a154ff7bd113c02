from typing import Optional
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from gitscope.renderer.manifest import DashboardManifest, HeatmapGrid

# Level 0 (no activity) through 5 (busiest day).
HEATMAP_STYLES = ["grey23", "dark_green", "green4", "green3", "green1", "bold bright_green"]
HEATMAP_CELL = "■"
DAY_LABELS = ["", "Mon", "", "Wed", "", "Fri", ""]
BADGE_STYLES = {"High": "bold green", "Medium": "bold yellow", "Low": "bold red"}

def render_profile(manifest: DashboardManifest) -> Panel:
    profile = manifest.snapshot.profile
    body = Text()
    body.append(profile.name or profile.login, style="bold green")
    body.append(f"  @{profile.login}\n", style="cyan")
    if profile.bio:
        body.append(f"{profile.bio}\n", style="italic")
    body.append(
        f"Repos: {profile.public_repos}  Followers: {profile.followers}  "
        f"Following: {profile.following}  Joined: {profile.joined.date().isoformat()}"
    )
    return Panel(body, title="Profile")

def render_languages(manifest: DashboardManifest) -> Table:
    table = Table(title="Language Distribution")
    table.add_column("Language")
    table.add_column("Repos", justify="right")
    table.add_column("Share", justify="right")
    for share in manifest.languages:
        table.add_row(share.name, str(share.count), f"{share.percent:.2f}%")
    if not manifest.languages:
        table.add_row("No language data available", "", "")
    return table

def render_repositories(manifest: DashboardManifest) -> Table:
    table = Table(title="Top Repositories")
    table.add_column("Repository")
    table.add_column("Language")
    table.add_column("Stars", justify="right")
    table.add_column("Updated")
    table.add_column("Quality")
    table.add_column("Notes")
    for quality in manifest.top_repositories:
        repo = quality.repository
        table.add_row(
            f"[link={repo.url}]{repo.name}[/link]",
            repo.language or "-",
            str(repo.stars),
            repo.last_updated.date().isoformat(),
            Text(quality.badge, style=BADGE_STYLES[quality.badge]),
            " ".join(quality.feedback)
        )
    if not manifest.top_repositories:
        message = manifest.snapshot.repository_error or "No public repositories found."
        table.add_row(message, "", "", "", "", "")
    return table

def render_heatmap(grid: HeatmapGrid) -> Text:
    """
    Draws the contribution grid: one column per week, one row per weekday.
    """
    text = Text()
    header = [" "] * (len(grid.weeks) * 2)
    for label in grid.month_labels:
        start = label.week_index * 2
        for offset, char in enumerate(label.label):
            if start + offset < len(header):
                header[start + offset] = char
    text.append("    " + "".join(header).rstrip() + "\n", style="dim")

    for row, day_label in enumerate(DAY_LABELS):
        text.append(f"{day_label:<4}", style="dim")
        for week in grid.weeks:
            day = week[row] if row < len(week) else None
            if day is None:
                text.append("  ")
            else:
                text.append(HEATMAP_CELL + " ", style=HEATMAP_STYLES[grid.levels.get(day, 0)])
        text.append("\n")

    text.append("    Less ", style="dim")
    for style in HEATMAP_STYLES:
        text.append(HEATMAP_CELL + " ", style=style)
    text.append("More", style="dim")
    return text

def render_activity(manifest: DashboardManifest) -> Panel:
    activity = manifest.snapshot.activity
    if activity.degraded:
        summary = Text("Public activity could not be loaded; showing an empty year.", style="yellow")
    else:
        summary = Text(
            f"{activity.total_contributions} public events on {activity.active_days} days "
            f"| Longest streak: {activity.longest_streak} | Current streak: {activity.current_streak}"
        )
    return Panel(
        Group(render_heatmap(manifest.heatmap), summary),
        title=f"Activity {activity.start.isoformat()} - {activity.end.isoformat()}"
    )

def render_dashboard(manifest: DashboardManifest, console: Optional[Console] = None) -> Console:
    """
    Prints the full dashboard to the console.
    """
    console = console or Console()
    console.print(render_profile(manifest))
    console.print(render_activity(manifest))
    console.print(render_languages(manifest))
    console.print(render_repositories(manifest))
    return console
