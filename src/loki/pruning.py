"""Detect branches pruned by `git fetch --prune` / `git pull --prune`."""

from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from loki.exceptions import GitError

DELETED_MARKER = "- [deleted]"
NONE_MARKER = "(none)"
ARROW_MARKER = "->"


def parse_pruned_branch(line: str) -> Optional[str]:
    """Extract the branch name from a pruning notice.

    A pruning notice looks like::

        - [deleted]         (none)     -> origin/feature/foo

    Returns None for any other line.
    """
    line = line.strip()

    deleted = line.find(DELETED_MARKER)
    if deleted == -1:
        return None
    none = line.find(NONE_MARKER, deleted + len(DELETED_MARKER))
    if none == -1:
        return None
    arrow = line.find(ARROW_MARKER, none + len(NONE_MARKER))
    if arrow == -1:
        return None

    # Name is whatever follows the last arrow
    branch = line[line.rfind(ARROW_MARKER) + len(ARROW_MARKER) :].strip()
    return branch or None


def local_branch_name(pruned: str, remote: str = "origin") -> str:
    """Map a remote-tracking name like `origin/foo` to the local name `foo`."""
    prefix = f"{remote}/"
    if pruned.startswith(prefix) and len(pruned) > len(prefix):
        return pruned[len(prefix) :]
    return pruned


def prune_branches(
    lines: Iterable[str],
    current_branch: str,
    local_branches: set[str],
    delete_branch: Callable[[str], None],
    console: Console,
    err_console: Console,
) -> list[str]:
    """Delete local branches whose remote-tracking branch was pruned.

    Every line is echoed to `console` before it is examined. The checked out
    branch is never deleted. A failed deletion is reported on `err_console`
    and the remaining lines are still processed.

    Returns:
        Names of the branches that were deleted, in output order.
    """
    deleted = []
    for line in lines:
        console.print(line, markup=False, emoji=False, highlight=False, soft_wrap=True)

        pruned = parse_pruned_branch(line)
        if pruned is None:
            continue
        branch = local_branch_name(pruned)

        if branch == current_branch:
            err_console.print(
                f"[yellow]⚠️ Cannot delete pruned branch {escape(branch)} because HEAD is pointing to it.[/yellow]",
                soft_wrap=True,
            )
        elif branch in local_branches:
            try:
                delete_branch(branch)
            except GitError as err:
                err_console.print(
                    f"[red]Failed to delete pruned branch {escape(branch)}:[/red] {escape(str(err))}",
                    soft_wrap=True,
                )
                continue
            deleted.append(branch)

    return deleted
