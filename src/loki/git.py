"""Git repository operations."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from rich.console import Console

from loki.exceptions import CommandError, GitError, PreconditionError
from loki.pruning import prune_branches

REMOTE = "origin"
DETACHED_HEAD = "HEAD"


def format_timestamp(now: datetime) -> str:
    """Format a commit timestamp, e.g. `2024-05-01 14:03:12 +0200`."""
    return now.strftime("%Y-%m-%d %H:%M:%S %z").strip()


class GitRepo:
    """Git repository operations."""

    def __init__(
        self,
        path: Path,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ) -> None:
        """Initialize repository.

        Args:
            path: Path inside the working tree
            console: Where git output is echoed
            err_console: Where warnings and errors are reported
        """
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def run_lines(self, description: str, args: Sequence[str]) -> list[str]:
        """Run `git <args>` and return its output split into lines.

        git reports ref updates (including pruned branches) on stderr, so those
        lines come first, followed by anything written to stdout.
        """
        try:
            _, stdout, stderr = self.repo.git.execute(["git", *args], with_extended_output=True)
        except GitCommandError as err:
            raise CommandError(description, str(err)) from err
        return stderr.splitlines() + stdout.splitlines()

    def run(self, description: str, args: Sequence[str]) -> None:
        """Run `git <args>`, echoing its output."""
        for line in self.run_lines(description, args):
            self.console.print(line, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def run_steps(self, steps: Sequence[tuple[str, Sequence[str]]]) -> None:
        """Run several git commands in order, stopping at the first failure."""
        for description, args in steps:
            self.run(description, args)

    def get_current_branch_name(self) -> str:
        """Get current branch name, or `HEAD` when detached."""
        try:
            return self.repo.git.rev_parse("--abbrev-ref", "HEAD").strip()
        except GitCommandError as err:
            raise CommandError("get current branch", str(err)) from err

    def get_local_branch_names(self) -> set[str]:
        """Get the names of all local branches."""
        try:
            output = self.repo.git.for_each_ref("--format=%(refname:short)", "refs/heads/")
        except GitCommandError as err:
            raise CommandError("list local branches", str(err)) from err
        return {branch for branch in output.splitlines() if branch}

    def delete_branch(self, branch_name: str) -> None:
        """Force delete a local branch."""
        self.run(f"delete branch {branch_name}", ["branch", "-D", branch_name])

    def new_branch(self, names: Sequence[str], prefix: Optional[str] = None) -> str:
        """Create a branch from HEAD and push it to origin.

        Args:
            names: Words joined with dashes to form the branch name
            prefix: Prepended verbatim to the joined name

        Returns:
            The name of the created branch
        """
        if not names:
            raise PreconditionError("name cannot be empty.")

        branch_name = "-".join(names)
        if prefix:
            branch_name = f"{prefix}{branch_name}"

        self.run_steps(
            [
                ("create new branch", ["switch", "--create", branch_name]),
                ("push to origin", ["push", "--set-upstream", REMOTE, branch_name]),
            ]
        )
        return branch_name

    def push_branch(self, force: bool = False) -> None:
        """Push the current branch to origin with upstream tracking."""
        current = self.get_current_branch_name()
        if current.lower() == DETACHED_HEAD.lower():
            raise PreconditionError("HEAD is currently detached, no branch to push!")

        args = ["push", "--set-upstream"]
        if force:
            args.append("--force-with-lease")
        args.extend([REMOTE, current])

        self.run("push", args)

    def prune(self, command: str) -> list[str]:
        """Run `git <command> --prune` and delete local branches it pruned.

        Args:
            command: Either "pull" or "fetch"

        Returns:
            Names of the local branches that were deleted
        """
        current = self.get_current_branch_name()
        branches = self.get_local_branch_names()
        lines = self.run_lines(f"{command} with pruning", [command, "--prune"])

        return prune_branches(
            lines,
            current,
            branches,
            self.delete_branch,
            self.console,
            self.err_console,
        )

    def save(
        self,
        all_files: bool = False,
        message: Sequence[str] = (),
        now: Optional[datetime] = None,
    ) -> str:
        """Add, commit and push using a timestamp based commit message.

        Args:
            all_files: Stage untracked files too, not just tracked modifications
            message: Words appended to the timestamp
            now: Commit time, defaults to the current local time

        Returns:
            The commit message that was used
        """
        if now is None:
            now = datetime.now().astimezone()

        commit_message = f"lk save [{format_timestamp(now)}]"
        if message:
            commit_message += f" | {' '.join(message)}"

        self.run_steps(
            [
                ("add files", ["add", "--all" if all_files else "--update"]),
                ("commit", ["commit", "--message", commit_message]),
                ("push", ["push"]),
            ]
        )
        return commit_message
