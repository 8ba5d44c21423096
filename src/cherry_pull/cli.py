"""Command line entry point for cherry-picking a pull request onto a branch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import CherryPickConfig, load_config
from .errors import CherryPickError, OperatorAbortedError
from .tools.vcs import GitError, GitRepository
from .workflow import CherryPickRequest, run_cherry_pick

APP_HELP = (
    "Cherry pick PULL onto BRANCH and leave instructions for proposing a pull request.\n\n"
    "Checks out BRANCH and handles the cherry-pick of PULL for you. "
    "Example: cherry-pull 12345 upstream/release-3.14"
)
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(help=APP_HELP, add_completion=False)


def configure_logging(level: str) -> None:
    """Configure root logging for the command."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
    )


def prompt_operator(text: str) -> str:
    """Return the operator's reply; end of input counts as a refusal."""

    try:
        return typer.prompt(text, default="", show_default=False, prompt_suffix=" ")
    except typer.Abort:
        return ""


def _load(config_path: Optional[Path], repo_root: Path) -> CherryPickConfig:
    try:
        return load_config(config_path, repo_root=repo_root)
    except CherryPickError as error:
        typer.echo(f"!!! {error}", err=True)
        raise typer.Exit(code=error.exit_code) from error


@app.command()
def main(
    pull: str = typer.Argument(..., help="Pull request number to cherry pick."),
    branch: str = typer.Argument(..., help="Existing remote branch to pick onto, e.g. upstream/release-0.21."),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the YAML configuration file (defaults to .cherry-pull.yaml in the repository).",
    ),
    repo_path: Optional[Path] = typer.Option(
        None,
        "--repo",
        help="Repository to operate on (defaults to the one containing the current directory).",
    ),
    skip_remote_update: bool = typer.Option(
        False,
        "--skip-remote-update",
        help="Do not run 'git remote update' before resolving BRANCH.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level.",
    ),
) -> None:
    """Cherry pick PULL onto BRANCH."""
    try:
        repo = GitRepository.discover(repo_path)
    except GitError as error:
        typer.echo(f"!!! {error}", err=True)
        raise typer.Exit(code=1) from error

    settings = _load(config, repo.root)
    if log_level:
        settings = _load_with_level(settings, log_level)
    configure_logging(settings.log_level)

    request = CherryPickRequest(pull=pull, branch=branch)
    try:
        run_cherry_pick(
            repo,
            request,
            settings,
            confirm=prompt_operator,
            echo=typer.echo,
            update_remotes=False if skip_remote_update else None,
        )
    except OperatorAbortedError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=error.exit_code) from error
    except CherryPickError as error:
        typer.echo(f"!!! {error}", err=True)
        raise typer.Exit(code=error.exit_code) from error
    except GitError as error:
        typer.echo(f"!!! {error}", err=True)
        raise typer.Exit(code=1) from error
    except KeyboardInterrupt:
        typer.echo("Interrupted.", err=True)
        raise typer.Exit(code=130)


def _load_with_level(settings: CherryPickConfig, level: str) -> CherryPickConfig:
    try:
        return CherryPickConfig.model_validate({**settings.model_dump(), "log_level": level})
    except ValueError as error:
        raise typer.BadParameter(f"Invalid log level: {level}", param_hint="--log-level") from error


if __name__ == "__main__":
    app()
