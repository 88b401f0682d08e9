"""Fixtures that build small throwaway git repositories with GitPython."""
from datetime import datetime, timezone
from pathlib import Path

import pytest
from git import Repo


def commit_file(repo: Repo, filename: str, message: str, when: int):
    """Write a file and commit it with a fixed author/commit time (epoch seconds)."""
    path = Path(repo.working_tree_dir) / filename
    path.write_text(f"{message}\n")
    repo.index.add([filename])
    date = datetime.fromtimestamp(when, tz=timezone.utc)
    return repo.index.commit(message, author_date=date, commit_date=date)


def _configure_user(repo: Repo):
    repo.config_writer().set_value("user", "name", "Branch Tester").release()
    repo.config_writer().set_value("user", "email", "tester@branches.local").release()


@pytest.fixture
def origin_repo(tmp_path: Path) -> Repo:
    """Repository with three local branches.

    main:    c1(1000) - c2(2000) - c4(2500)
    feature:               c2    - f1(3000) - f2(3000)   ahead 2, behind 1
    stale:   c1                                          ahead 0, behind 2
    """
    repo = Repo.init(str(tmp_path / "origin"))
    _configure_user(repo)
    repo.git.symbolic_ref("HEAD", "refs/heads/main")

    first = commit_file(repo, "a.txt", "Initial commit", 1000)
    commit_file(repo, "b.txt", "Second commit", 2000)

    repo.git.checkout("-b", "feature")
    commit_file(repo, "feature.txt", "Start feature", 3000)
    commit_file(repo, "feature.txt", "Finish feature", 3000)

    repo.git.checkout("main")
    commit_file(repo, "c.txt", "Third commit", 2500)

    repo.create_head("stale", first)
    yield repo
    repo.close()


@pytest.fixture
def clone_repo(origin_repo: Repo, tmp_path: Path) -> Repo:
    """Clone of origin_repo.

    Local main is one commit ahead of origin/main; local `topic` has no upstream.
    """
    repo = Repo.clone_from(origin_repo.working_tree_dir, str(tmp_path / "clone"))
    _configure_user(repo)
    commit_file(repo, "local.txt", "Local work", 4000)
    repo.create_head("topic")
    yield repo
    repo.close()
