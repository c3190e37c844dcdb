"""Command-line entry point for org-leaderboard."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.logging import RichHandler

from . import __version__
from .config import LeaderboardConfig, RetryPolicy
from .github.errors import LeaderboardError
from .orchestrator import run


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.command()
@click.argument("org", envvar="ORG")
@click.option("--token", envvar=["GH_TOKEN", "GITHUB_TOKEN"], required=True,
              help="GitHub token (or set GH_TOKEN / GITHUB_TOKEN).")
@click.option("--months", envvar="MONTHS", type=click.IntRange(min=0), default=6,
              show_default=True, help="Lookback window in months.")
@click.option("--overall-top", "overall_top_n", envvar="OVERALL_TOP_N",
              type=click.IntRange(min=0), default=50, show_default=True,
              help="Contributors in the overall leaderboard.")
@click.option("--per-repo-top", "per_repo_top_n", envvar="PER_REPO_TOP_N",
              type=click.IntRange(min=0), default=10, show_default=True,
              help="Contributors per repository leaderboard.")
@click.option("--enrich-repos", "enrich_top_repos", envvar="PER_REPO_ENRICH_TOP_REPOS",
              type=click.IntRange(min=0), default=10, show_default=True,
              help="Busiest repositories that get PR and issue counts.")
@click.option("--output", "-o", default="leaderboard.svg", show_default=True,
              type=click.Path(dir_okay=False, writable=True), help="SVG output file.")
@click.option("--parallelism", type=click.IntRange(min=1), default=4, show_default=True,
              help="Concurrent stats requests.")
@click.option("--max-attempts", type=click.IntRange(min=1), default=7, show_default=True,
              help="Attempts while GitHub is still computing stats.")
@click.option("--max-backoff", type=click.FloatRange(min=0), default=60.0, show_default=True,
              help="Upper bound in seconds for the wait between attempts.")
@click.option("--api-url", envvar="GITHUB_API_URL", default=None,
              help="GitHub API base URL (for GitHub Enterprise).")
@click.option("--no-summary", is_flag=True, help="Do not print the console summary.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="org-leaderboard")
def main(
    org: str,
    token: str,
    months: int,
    overall_top_n: int,
    per_repo_top_n: int,
    enrich_top_repos: int,
    output: str,
    parallelism: int,
    max_attempts: int,
    max_backoff: float,
    api_url: str | None,
    no_summary: bool,
    verbose: bool,
) -> None:
    """Rank contributors of ORG and render an SVG leaderboard."""
    _configure_logging(verbose)
    config = LeaderboardConfig(
        org=org,
        token=token,
        months=months,
        overall_top_n=overall_top_n,
        per_repo_top_n=per_repo_top_n,
        enrich_top_repos=enrich_top_repos,
        output=output,
        parallelism=parallelism,
        api_url=api_url,
        retry=RetryPolicy(max_attempts=max_attempts, max_delay=max_backoff),
    )
    try:
        asyncio.run(run(config, show_summary=not no_summary))
    except LeaderboardError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
