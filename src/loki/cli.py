"""Command line interface for loki."""

from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from loki import __version__
from loki.exceptions import GitError
from loki.git import GitRepo

app = typer.Typer(help="Shorthand git workflow commands")
console = Console()
err_console = Console(stderr=True)

NEW_PREFIX_ENV = "LOKI_NEW_PREFIX"

PathOption = Annotated[Path, typer.Option(help="Path to git repository")]


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path, console=console, err_console=err_console)
    except GitError as err:
        fail(err)


def fail(err: GitError) -> NoReturn:
    """Report an error and exit non-zero."""
    err_console.print(f"[red]Error:[/red] {escape(str(err))}", soft_wrap=True)
    raise typer.Exit(code=1) from err


def version_callback(value: bool) -> None:
    if value:
        console.print(f"lk {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
) -> None:
    """Shorthand git workflow commands."""


@app.command()
def new(
    name: Annotated[Optional[list[str]], typer.Argument(help="Words joined with dashes to form the branch name")] = None,
    prefix: Annotated[
        Optional[str],
        typer.Option(envvar=NEW_PREFIX_ENV, help="Prefix for the new branch name"),
    ] = None,
    path: PathOption = Path("."),
) -> None:
    """Create a new branch from HEAD and push it to origin."""
    repo = get_repo(path)
    if prefix:
        err_console.print(f"Using branch prefix [blue]{escape(prefix)}[/blue]", soft_wrap=True)
    try:
        repo.new_branch(name or [], prefix=prefix)
    except GitError as err:
        fail(err)


@app.command()
def push(
    force: Annotated[bool, typer.Option("--force", "-f", help="Use --force-with-lease")] = False,
    path: PathOption = Path("."),
) -> None:
    """Push the current branch to origin with --set-upstream."""
    repo = get_repo(path)
    try:
        repo.push_branch(force=force)
    except GitError as err:
        fail(err)


@app.command()
def pull(path: PathOption = Path(".")) -> None:
    """Pull with --prune, deleting local branches pruned from the remote."""
    prune(path, "pull")


@app.command()
def fetch(path: PathOption = Path(".")) -> None:
    """Fetch with --prune, deleting local branches pruned from the remote."""
    prune(path, "fetch")


def prune(path: Path, command: str) -> None:
    repo = get_repo(path)
    try:
        repo.prune(command)
    except GitError as err:
        fail(err)


@app.command()
def save(
    message: Annotated[Optional[list[str]], typer.Argument(help="Words appended after the timestamp")] = None,
    all_files: Annotated[bool, typer.Option("--all", "-a", help="Include all untracked (new) files")] = False,
    path: PathOption = Path("."),
) -> None:
    """Add, commit, and push using a timestamp based commit message."""
    repo = get_repo(path)
    try:
        repo.save(all_files=all_files, message=message or [])
    except GitError as err:
        fail(err)


app.command("n", help="Alias for new.")(new)
app.command("p", help="Alias for push.")(push)


if __name__ == "__main__":
    app()
