"""CLI entry point for devsignal."""

import asyncio
import json
import logging
import os
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from devsignal.analyzers.github import GitHubFetcher, ProfileNotFoundError
from devsignal.analyzers.llm import ReviewWriter
from devsignal.analyzers.pipeline import ProfilePipeline
from devsignal.analyzers.revival import plan_revivals
from devsignal.analyzers.shadow import analyze as analyze_shadow
from devsignal.analyzers.timeline import classify
from devsignal.models.schemas import ChatMessage, Report
from devsignal.storage.history import ScoreHistory

app = typer.Typer(help="Developer profile signal scoring tool.")

console = Console()

DEFAULT_DATA_DIR = Path(os.environ.get("DEVSIGNAL_DATA_DIR", "data"))

LEVEL_COLORS = {0: "dim", 1: "white", 2: "cyan", 3: "green", 4: "yellow", 5: "magenta"}

MAX_XRAY_ENTRIES = 100

CHAT_EXIT_WORDS = {"", "exit", "quit"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _score_color(score: float) -> str:
    return "green" if score >= 75 else "yellow" if score >= 55 else "red"


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score / 100 * width)
    empty = width - filled
    color = _score_color(score)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


def _load_saved_report(login: str, data_dir: Path) -> Report:
    """Load a saved report or exit with a hint to run analyze first."""
    report = ProfilePipeline(data_dir=data_dir, skip_llm=True).load_report(login)
    if report is None:
        console.print(f"[red]No saved report for {login}. Run 'devsignal analyze {login}' first.[/red]")
        raise typer.Exit(1)
    return report


@app.command()
def analyze(
    login: str = typer.Argument(..., help="GitHub login to analyze"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    skip_llm: bool = typer.Option(False, "--skip-llm", help="Use the templated review instead of Ollama"),
    model: str | None = typer.Option(None, "--model", "-m", help="Ollama model for the review"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", "-d", help="Data directory"),
    show_review: bool = typer.Option(False, "--review", "-r", help="Print the recruiter review"),
) -> None:
    """Analyze a GitHub profile and calculate its signal score."""
    asyncio.run(_analyze_profile(login, output, skip_llm, model, data_dir, show_review))


async def _analyze_profile(
    login: str,
    output: Path | None,
    skip_llm: bool,
    model: str | None,
    data_dir: Path,
    show_review: bool,
) -> None:
    """Async implementation of analyze."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Analyzing {login}...", total=None)

        try:
            async with ProfilePipeline(
                data_dir=data_dir,
                github_token=os.environ.get("GITHUB_TOKEN"),
                llm_model=model,
                skip_llm=skip_llm,
            ) as pipeline:
                report = await pipeline.analyze_profile(login)
        except ProfileNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        except httpx.HTTPError as e:
            console.print(f"[red]Error analyzing profile: {e}[/red]")
            raise typer.Exit(1)

    # Display results
    console.print()
    console.print(f"[bold cyan]{report.username}[/bold cyan]  [dim]{report.role_fit}[/dim]")
    console.print()

    color = _score_color(report.score)
    console.print(
        Panel(
            f"[bold][{color}]{report.score}[/{color}][/bold] / 100  Verdict: [bold]{report.verdict.value}[/bold]\n"
            f"[dim]Potential after fixes: {report.potential_score}[/dim]",
            title="Signal Score",
            expand=False,
        )
    )

    info_table = Table(show_header=False, box=None)
    info_table.add_column("Key", style="bold")
    info_table.add_column("Value")

    info_table.add_row("Repositories", str(report.total_repos))
    info_table.add_row("Stars", f"{report.total_stars:,}")
    info_table.add_row("Recent contributions", str(report.recent_contributions))
    info_table.add_row("Consistency", report.consistency)
    if report.total_lifetime_contributions is not None:
        info_table.add_row("Lifetime contributions", f"{report.total_lifetime_contributions:,}")
    info_table.add_row("Community health", f"{report.community_health.health_score}/100")
    if report.tech_stack:
        info_table.add_row("Tech stack", ", ".join(s.name for s in report.tech_stack[:6]))
    console.print(info_table)

    if report.strengths:
        console.print()
        console.print("[bold green]Strengths:[/bold green]")
        for strength in report.strengths:
            console.print(f"  [green]+[/green] {strength}")

    if report.red_flags:
        console.print()
        console.print("[bold yellow]Red flags:[/bold yellow]")
        for flag in report.red_flags:
            console.print(f"  [yellow]![/yellow] {flag}")

    if report.priority_fixes:
        console.print()
        fixes_table = Table(title="Priority Fixes", show_header=True)
        fixes_table.add_column("Repository", style="cyan")
        fixes_table.add_column("Action")
        for fix in report.priority_fixes:
            fixes_table.add_row(fix.name, "; ".join(fix.issues))
        console.print(fixes_table)

    if report.all_repos:
        console.print()
        repos_table = Table(title="Most Active Repositories", show_header=True)
        repos_table.add_column("Repository", style="cyan")
        repos_table.add_column("Language")
        repos_table.add_column("Commits", justify="right")
        repos_table.add_column("Stars", justify="right", style="green")
        repos_table.add_column("Activity", justify="right")
        for repo in report.all_repos[:10]:
            repos_table.add_row(
                repo.name,
                repo.language,
                str(repo.recent_commits),
                str(repo.stars),
                f"{repo.activity_score:.0f}",
            )
        console.print(repos_table)

    if show_review and report.ai_review:
        console.print()
        console.print(Panel(report.ai_review, title="Recruiter Review", border_style="blue"))

    if output:
        output.write_text(json.dumps(report.model_dump(mode="json"), indent=2, default=str))
        console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def history(
    login: str = typer.Argument(..., help="GitHub login"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", "-d", help="Data directory"),
) -> None:
    """Show recorded scores for a profile."""
    entries = ScoreHistory(data_dir).read_history(login)
    if not entries:
        console.print(f"[yellow]No history recorded for {login}.[/yellow]")
        return

    table = Table(title=f"Score History: {login}")
    table.add_column("Recorded", style="dim")
    table.add_column("Score", justify="right")
    table.add_column("Contributions", justify="right")
    table.add_column("Bar", width=20)

    for entry in entries:
        color = _score_color(entry.score)
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"[{color}]{entry.score}[/{color}]",
            str(entry.contributions),
            _score_bar(entry.score),
        )
    console.print(table)


@app.command()
def impact(
    login: str = typer.Argument(..., help="GitHub login"),
    days: int = typer.Option(14, "--days", "-n", min=1, max=60, help="Number of recent days to show"),
) -> None:
    """Show the day-by-day engineering impact timeline."""
    asyncio.run(_impact(login, days))


async def _impact(login: str, days: int) -> None:
    """Async implementation of impact."""
    fetcher = GitHubFetcher()
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Fetching activity events...", total=None)
        events = await fetcher.fetch_events(login)

    timeline = classify(events)

    table = Table(title=f"Impact Timeline: {login}")
    table.add_column("Date", style="dim")
    table.add_column("Level", justify="right")
    table.add_column("Type")
    table.add_column("Summary", max_width=60)

    for day in timeline.impact_days[:days]:
        color = LEVEL_COLORS[day.level]
        table.add_row(
            day.date.isoformat(),
            f"[{color}]{day.level}[/{color}]",
            day.type,
            day.summary,
        )
    console.print(table)
    console.print(f"\n[bold]Top achievement:[/bold] {timeline.top_achievement}")


@app.command()
def shadow(
    login: str = typer.Argument(..., help="GitHub login"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", "-d", help="Data directory"),
) -> None:
    """Benchmark a saved report against top-tier reference levels."""
    report = _load_saved_report(login, data_dir)
    profile = analyze_shadow(report)

    console.print(
        Panel(
            f"[bold]{profile.persona}[/bold]\n[dim]{profile.persona_details.desc}[/dim]",
            title="Shadow Persona",
            expand=False,
        )
    )

    table = Table(title="Benchmarks", show_header=True)
    table.add_column("Category", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Top Tier", justify="right", style="dim")
    table.add_column("Bar", width=20)
    table.add_column("Gap")
    for benchmark in profile.benchmarks:
        table.add_row(
            benchmark.category,
            str(benchmark.score),
            str(benchmark.top_tier),
            _score_bar(benchmark.score),
            benchmark.gap,
        )
    console.print(table)

    console.print()
    console.print("[bold]Growth targets:[/bold]")
    for target in profile.growth_targets:
        console.print(f"  [cyan]>[/cyan] {target.title}: {target.desc}")


@app.command()
def revive(
    login: str = typer.Argument(..., help="GitHub login"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", "-d", help="Data directory"),
) -> None:
    """Suggest revival missions for repositories that undersell the profile."""
    report = _load_saved_report(login, data_dir)

    for plan in plan_revivals(report.all_repos):
        tasks = "\n".join(f"  [green]-[/green] {task}" for task in plan.tasks)
        console.print(
            Panel(
                f"[dim]{plan.why}[/dim]\n\n{tasks}\n\n[yellow]{plan.bonus}[/yellow]",
                title=f"{plan.repo}" + (f"  [dim]{plan.mission_name}[/dim]" if plan.mission_name else ""),
                expand=False,
            )
        )


@app.command()
def xray(
    login: str = typer.Argument(..., help="Repository owner"),
    repo: str = typer.Argument(..., help="Repository name"),
) -> None:
    """Show the file structure of a repository's default branch."""
    entries = asyncio.run(GitHubFetcher().fetch_repo_tree(login, repo))
    if not entries:
        console.print(f"[yellow]No file tree available for {login}/{repo}.[/yellow]")
        raise typer.Exit(1)

    root = Tree(f"[bold cyan]{login}/{repo}[/bold cyan]")
    nodes: dict[str, Tree] = {}
    for entry in entries[:MAX_XRAY_ENTRIES]:
        parent, _, name = entry.path.rpartition("/")
        label = f"[bold blue]{name}/[/bold blue]" if entry.is_folder else name
        nodes[entry.path] = nodes.get(parent, root).add(label)
    console.print(root)

    hidden = len(entries) - MAX_XRAY_ENTRIES
    if hidden > 0:
        console.print(f"[dim]... and {hidden} more entries[/dim]")


@app.command()
def chat(
    login: str = typer.Argument(..., help="GitHub login"),
    model: str | None = typer.Option(None, "--model", "-m", help="Ollama model for the interview"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", "-d", help="Data directory"),
) -> None:
    """Hold a recruiter-style technical interview about a saved report."""
    report = _load_saved_report(login, data_dir)
    writer = ReviewWriter(model=model)
    messages: list[ChatMessage] = []

    console.print(f"[dim]Interviewing {report.username}. Type 'exit' to finish.[/dim]")
    while True:
        text = typer.prompt("You", default="", show_default=False).strip()
        if text.lower() in CHAT_EXIT_WORDS:
            break
        messages.append(ChatMessage(role="user", content=text))
        reply = asyncio.run(writer.chat_reply(report.username, messages, report))
        messages.append(ChatMessage(role="assistant", content=reply))
        console.print(f"[bold cyan]Recruiter:[/bold cyan] {reply}")


@app.command()
def version() -> None:
    """Show version information."""
    from devsignal import __version__

    console.print(f"devsignal v{__version__}")


if __name__ == "__main__":
    app()
