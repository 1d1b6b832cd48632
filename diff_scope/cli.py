"""Command-line entry point for diff-scope."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from .config import DiffScopeSettings
from .errors import ConfigurationError, DiffScopeError
from .git_client import GitClient
from .github_client import GithubClient
from .reporter import CommitCommentsReporter
from .scope import DiffScope
from .violations import filter_violations, load_scanner_results

app = typer.Typer(help="Restrict static-analysis findings to the lines a pull request changed.")


def _setup(repo: Optional[Path]) -> DiffScopeSettings:
    settings = DiffScopeSettings()
    if repo is not None:
        settings = settings.model_copy(update={"repo_path": str(repo)})
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


@app.command("changed-lines")
def changed_lines(
    refs: Optional[List[str]] = typer.Argument(None, help="Base ref, then optional target ref"),
    remote_url: Optional[str] = typer.Option(
        None,
        "--remote-url",
        "-r",
        help="Repository to fetch the target ref from (e.g. a fork)",
    ),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Path to the git repository"),
):
    """Print the changed line numbers of every file as JSON."""
    settings = _setup(repo)
    try:
        client = GitClient(settings.repo_path)
        change_set = DiffScope(client, settings).compute_changed_lines(refs or [], remote_url)
    except DiffScopeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    payload = {path: sorted(lines) for path, lines in sorted(change_set.items())}
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def annotate(
    scanner_results: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="JSON report written by the scanner",
    ),
    refs: Optional[List[str]] = typer.Argument(None, help="Base ref, then optional target ref"),
    remote_url: Optional[str] = typer.Option(
        None,
        "--remote-url",
        "-r",
        help="Repository to fetch the target ref from (e.g. a fork)",
    ),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Path to the git repository"),
    severity_threshold: Optional[int] = typer.Option(
        None,
        "--severity-threshold",
        min=0,
        help="Fail when a violation is at least this severe (1 is most severe)",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print comments instead of posting them"),
):
    """Comment on the pull request commit for violations on changed lines."""
    settings = _setup(repo)
    threshold = settings.severity_threshold if severity_threshold is None else severity_threshold
    try:
        github = None
        if not dry_run:
            if not settings.github_sha:
                raise ConfigurationError("GITHUB_SHA is required to post comments")
            token = settings.github_token.get_secret_value() if settings.github_token else None
            github = GithubClient(settings.github_repository, token, settings.github_api_url)

        results = load_scanner_results(scanner_results)
        client = GitClient(settings.repo_path)
        change_set = DiffScope(client, settings).compute_changed_lines(refs or [], remote_url)
        scoped = filter_violations(results, change_set, client.working_dir)

        reporter = CommitCommentsReporter(settings.github_sha, github, threshold)
        comments = reporter.translate(scoped)

        if dry_run:
            for comment in comments:
                typer.echo(comment.model_dump_json())
        else:
            reporter.write()
    except DiffScopeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"{len(comments)} violations on changed lines")
    if reporter.has_halting_error():
        typer.echo("Halting error found", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
