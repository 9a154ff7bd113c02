import argparse
import asyncio
import logging
import sys
from typing import List, Optional
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from gitscope.models.github import GithubSnapshot
from gitscope.probes.errors import GithubProbeError
from gitscope.probes.github import GithubProbe
from gitscope.renderer.manifest import create_manifest
from gitscope.renderer.engine import render_dashboard

console = Console()

def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )

def fetch_snapshot(username: str, token: Optional[str] = None) -> GithubSnapshot:
    probe = GithubProbe(token=token)
    return asyncio.run(probe.fetch_snapshot(username))

def run_ai_flows(args, snapshot: GithubSnapshot):
    """
    Runs the requested LLM flows. A failing flow is reported and the rest still run.
    """
    from gitscope.refinery.engine import answer_question, suggest_improvements, suggest_projects

    username = snapshot.profile.login

    if args.suggest:
        try:
            with console.status("Generating improvement suggestions..."):
                result = suggest_improvements(username, snapshot.profile, snapshot.repositories, model=args.model)
            console.print(Panel(Markdown(result.suggestions), title="Improvement Suggestions"))
        except Exception as e:
            console.print(f"[red]Could not load improvement suggestions: {escape(str(e))}[/red]")

    if args.projects:
        try:
            with console.status("Generating project ideas..."):
                result = suggest_projects(username, snapshot.profile, snapshot.repositories, model=args.model)
            ideas = "\n".join(f"{i}. {idea}" for i, idea in enumerate(result.project_suggestions, start=1))
            console.print(Panel(Markdown(ideas or "_No project ideas returned._"), title="Project Ideas"))
        except Exception as e:
            console.print(f"[red]Could not load project suggestions: {escape(str(e))}[/red]")

    for question in args.ask or []:
        try:
            with console.status("Asking the AI mentor..."):
                result = answer_question(username, question, snapshot.profile, snapshot.repositories, model=args.model)
            console.print(Panel(Markdown(result.answer), title=f"Q: {question}"))
        except Exception as e:
            console.print(f"[red]Could not answer '{escape(question)}': {escape(str(e))}[/red]")

def main(argv: Optional[List[str]] = None):
    load_dotenv()

    parser = argparse.ArgumentParser(description="gitscope: GitHub profile dashboard and AI mentor")
    parser.add_argument("username", help="GitHub username to analyze")
    parser.add_argument("--token", help="GitHub Personal Access Token (optional, overrides env)", default=None)
    parser.add_argument("--model", help="LLM model to use (defaults to GITSCOPE_MODEL or Gemini Flash)", default=None)
    parser.add_argument("--suggest", action="store_true", help="Ask the AI mentor for profile improvement suggestions")
    parser.add_argument("--projects", action="store_true", help="Ask the AI mentor for three project ideas")
    parser.add_argument("--ask", action="append", metavar="QUESTION", help="Ask the AI mentor a question (repeatable)")
    parser.add_argument("--json", action="store_true", help="Print the fetched data as JSON instead of the dashboard")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show informational log messages")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    username = args.username.strip()
    if not username:
        console.print("[red]Please enter a GitHub username.[/red]")
        sys.exit(1)

    # 1. Fetch GitHub Data
    try:
        with console.status(f"Fetching GitHub data for {username}..."):
            snapshot = fetch_snapshot(username, token=args.token)
    except GithubProbeError as e:
        console.print(f"[red]Error Fetching Data: {escape(str(e))}[/red]")
        sys.exit(1)

    if args.json:
        console.print_json(snapshot.model_dump_json())
        return

    # 2. Render
    console.print(f"[bold green]Profile Loaded![/bold green] Successfully fetched data for {snapshot.profile.login}.")
    render_dashboard(create_manifest(snapshot), console)

    # 3. AI Mentor (Optional)
    if args.suggest or args.projects or args.ask:
        run_ai_flows(args, snapshot)

if __name__ == "__main__":
    main()
