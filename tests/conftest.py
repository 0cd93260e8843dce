"""Test configuration and fixtures."""

from pathlib import Path
from typing import Callable, Generator

import pytest
from git import Actor, Repo


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    The local repository has `main`, `feature/stale`, `feature/other` and
    `feature/current`, all pushed to a bare `origin` with tracking set up.
    `feature/current` is checked out.

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Ensure we're on main branch
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    def create_branch(name: str) -> None:
        """Create a branch with one commit and push it."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        test_file = local_path / f"{name.replace('/', '_')}.txt"
        test_file.write_text(f"{name} content")
        local_repo.index.add([test_file.name])
        local_repo.index.commit(f"Add {name}", author=author)

        origin.push(name)
        branch.set_tracking_branch(origin.refs[name])

    create_branch("feature/stale")
    create_branch("feature/other")
    create_branch("feature/current")

    yield local_path, remote_path


@pytest.fixture
def delete_on_remote(test_env: tuple[Path, Path]) -> Callable[..., None]:
    """Delete branches directly in the remote, as if merged and removed elsewhere."""
    _, remote_path = test_env

    def delete(*branch_names: str) -> None:
        remote_repo = Repo(remote_path)
        for branch_name in branch_names:
            remote_repo.git.branch("-D", branch_name)

    return delete


@pytest.fixture
def remote_branches(test_env: tuple[Path, Path]) -> Callable[[], set[str]]:
    """Names of the branches that currently exist in the remote."""
    _, remote_path = test_env

    def names() -> set[str]:
        return {head.name for head in Repo(remote_path).heads}

    return names
