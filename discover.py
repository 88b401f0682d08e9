#!/usr/bin/env python3
"""
Branch discovery — walk a repository's local and remote branches and measure
how far each one is ahead of / behind a base revision or its upstream.
"""

import sys
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from git import Commit, Head, Reference, RemoteReference, Repo
from git.exc import (
    BadName,
    BadObject,
    GitCommandError,
    InvalidGitRepositoryError,
    NoSuchPathError,
)

from report import BranchRecord


class BranchesOverviewError(Exception):
    """A failure that stops the whole run (bad repository, bad revision)."""


class BranchScope(Enum):
    LOCAL = "local"
    REMOTE = "remote"
    ALL = "all"

    @property
    def includes_local(self) -> bool:
        return self is not BranchScope.REMOTE

    @property
    def includes_remote(self) -> bool:
        return self is not BranchScope.LOCAL


def resolve_scope(local: bool = False, remote: bool = False,
                  all_branches: bool = False, remotes: Iterable[str] = ()) -> BranchScope:
    """Work out which branches to list from the -l/-r/-a/--remote flags."""
    if remotes:
        remote = True
    if all_branches or (remote and local):
        return BranchScope.ALL
    if remote:
        return BranchScope.REMOTE
    return BranchScope.LOCAL


def _note(message: str, verbose: bool):
    if verbose:
        print(message, file=sys.stderr)


# ---------------------------------------------------------------------------
# Repository access
# ---------------------------------------------------------------------------


def open_repo(repo_path: str) -> Repo:
    try:
        return Repo(repo_path)
    except NoSuchPathError as e:
        raise BranchesOverviewError(f"No such path: {repo_path}") from e
    except InvalidGitRepositoryError as e:
        raise BranchesOverviewError(f"Not a git repository: {repo_path}") from e


def resolve_revision(repo: Repo, revision: str) -> Commit:
    """Peel a revision (branch, tag, sha, HEAD~2, ...) to its commit."""
    try:
        return repo.commit(revision)
    except (BadName, BadObject, ValueError) as e:
        raise BranchesOverviewError(f"Revision '{revision}' not found: {e}") from e


def ahead_behind(repo: Repo, tip: Commit, target: Commit) -> Tuple[int, int]:
    """(commits only in tip, commits only in target)."""
    if tip == target:
        return 0, 0
    output = repo.git.rev_list("--left-right", "--count", f"{tip.hexsha}...{target.hexsha}")
    ahead, behind = output.split()
    return int(ahead), int(behind)


def iter_branch_refs(repo: Repo, scope: BranchScope,
                     remotes: Iterable[str] = ()) -> Iterator[Reference]:
    """Yield branch refs in scope; remote refs are limited to `remotes` when given."""
    remotes = set(remotes)
    for ref in repo.references:
        if isinstance(ref, RemoteReference):
            if not scope.includes_remote:
                continue
            # refs/remotes/<remote>/HEAD only points at another remote branch
            if ref.remote_head == "HEAD":
                continue
            if remotes and ref.remote_name not in remotes:
                continue
            yield ref
        elif isinstance(ref, Head):
            if scope.includes_local:
                yield ref


def branch_identity(ref: Reference) -> Tuple[str, Optional[str]]:
    """(display name, remote name or None) for a branch ref."""
    if isinstance(ref, RemoteReference):
        return ref.remote_head, ref.remote_name
    return ref.name, None


def upstream_commit(repo: Repo, ref: Reference) -> Optional[Commit]:
    """Commit of the branch's configured upstream, if it has one that exists.

    Resolved by git itself, so upstreams on the local repository (remote ".")
    work as well as remote-tracking ones.
    """
    # RemoteReference subclasses Head but never tracks anything
    if isinstance(ref, RemoteReference) or not isinstance(ref, Head):
        return None
    try:
        sha = repo.git.rev_parse("--verify", "-q", f"{ref.name}@{{upstream}}^{{commit}}")
    except GitCommandError:
        return None
    return repo.commit(sha)


def make_record(repo: Repo, ref: Reference, target: Commit) -> BranchRecord:
    name, remote = branch_identity(ref)
    tip = ref.commit
    ahead, behind = ahead_behind(repo, tip, target)
    return BranchRecord(
        name=name,
        remote=remote,
        ahead=ahead,
        behind=behind,
        last_commit_time=tip.authored_date,
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def collect_branches(repo_path: str = ".", base_revision: str = "HEAD",
                     scope: BranchScope = BranchScope.LOCAL,
                     remotes: Iterable[str] = (),
                     compare_with_upstream: bool = False,
                     verbose: bool = False) -> List[BranchRecord]:
    """Build a BranchRecord for every branch in scope.

    Branches are compared with `base_revision`, or with their own upstream when
    `compare_with_upstream` is set. A branch that cannot be measured (no
    upstream, dangling ref, ...) is left out rather than reported half-filled.
    """
    records = []
    with open_repo(repo_path) as repo:
        base = resolve_revision(repo, base_revision)

        for ref in iter_branch_refs(repo, scope, remotes):
            try:
                target = upstream_commit(repo, ref) if compare_with_upstream else base
                if target is None:
                    _note(f"Skipping {ref.path}: no upstream", verbose)
                    continue
                records.append(make_record(repo, ref, target))
            except (GitCommandError, ValueError) as e:
                _note(f"Skipping {ref.path}: {e}", verbose)

    _note(f"Found {len(records)} branches in {repo_path}", verbose)
    return records
