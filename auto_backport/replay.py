"""
Replaying a merged pull request onto another branch.

The replay happens in a working copy that already has ``origin`` set up. A new
head branch is created from the target base, the original change is
cherry-picked onto it, the branch is pushed and a pull request is opened.

Two strategies are used, picked by looking at the merge commit:

- merge-commit: the PR was merged with a real merge commit, so the range from
  its first parent to its second parent is exactly what the PR introduced.
- commit-list: the PR was rebased or squashed, so every commit GitHub lists for
  the PR is cherry-picked in order.

Only one strategy is tried per target. Any failure is turned into one of the
``BackportError`` subclasses and returned in the ``ReplayResult``.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Type

from github import GithubException

from auto_backport.errors import (
    BackportError,
    CreatePRFailure,
    GitError,
    LabelFailure,
    PublishFailure,
    ReplayFailure,
    SetupFailure,
)
from auto_backport.event import BackportTarget, ChangeSet
from auto_backport.messages import render_body, render_title


class ReplayStrategy(Enum):
    MERGE_COMMIT = 'merge-commit'
    COMMIT_LIST = 'commit-list'


@dataclass(frozen=True)
class PullRequestContext:
    """Everything needed to open the backport PR, besides the target itself."""
    github: object
    git: object
    title_template: str
    labels_to_add: Sequence[str] = ()


@dataclass(frozen=True)
class ReplayResult:
    target: BackportTarget
    commits: Tuple[str, ...]
    pull_request_number: Optional[int] = None
    failure: Optional[BackportError] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@contextmanager
def stage(failure: Type[BackportError]):
    """Report git and GitHub API errors raised in this block as ``failure``."""
    try:
        yield
    except (GitError, GithubException) as e:
        raise failure.wrap(e) from e


def remote_branch_exists(git, branch: str) -> bool:
    """True when ``branch`` is already a branch on origin."""
    try:
        git.run('ls-remote', '--exit-code', '--heads', 'origin', branch)
    except GitError as e:
        # --exit-code exits with 2 when no ref matched
        if e.status == 2:
            return False
        raise
    return True


def get_parents(git, sha: str) -> Optional[List[str]]:
    """
    Parent SHAs of ``sha``, or None when git could not tell.

    A failed lookup is not told apart from a commit that is not a merge; both
    end up using the commit-list strategy.
    """
    try:
        output = git.run('rev-list', '--parents', '-n', '1', sha)
    except GitError as e:
        logging.warning(f"Could not read the parents of {sha}: {e.stderr or e}")
        return None
    return output.split()[1:]


def choose_strategy(parents: Optional[List[str]]) -> ReplayStrategy:
    if parents is not None and len(parents) >= 2:
        return ReplayStrategy.MERGE_COMMIT
    return ReplayStrategy.COMMIT_LIST


def cherry_pick_args(strategy: ReplayStrategy, change_set: ChangeSet) -> List[str]:
    if strategy is ReplayStrategy.MERGE_COMMIT:
        sha = change_set.merge_commit_sha
        return [f'{sha}^..{sha}^2']
    return list(change_set.commits)


def cherry_pick(git, args: List[str]) -> None:
    try:
        git.run('cherry-pick', *args)
    except GitError:
        try:
            git.run('cherry-pick', '--abort')
        except GitError as abort_error:
            logging.warning(f"git cherry-pick --abort failed: {abort_error.stderr or abort_error}")
        raise


def backport_once(target: BackportTarget, change_set: ChangeSet, context: PullRequestContext) -> int:
    git = context.git
    github = context.github

    with stage(SetupFailure):
        git.run('fetch', 'origin', f'pull/{change_set.number}/head')
        if remote_branch_exists(git, target.head):
            raise SetupFailure(RuntimeError(f"The branch '{target.head}' already exists on origin"))
        git.run('switch', target.base)
        git.run('switch', '--create', target.head)

    strategy = choose_strategy(get_parents(git, change_set.merge_commit_sha))
    logging.info(f"Backporting #{change_set.number} to {target.base} with the {strategy.value} strategy")
    with stage(ReplayFailure):
        cherry_pick(git, cherry_pick_args(strategy, change_set))

    with stage(PublishFailure):
        git.run('push', '--set-upstream', 'origin', target.head)

    with stage(CreatePRFailure):
        number = github.create_pull(
            base=target.base,
            head=target.head,
            title=render_title(context.title_template, target.base, change_set.title),
            body=render_body(change_set.number, change_set.author),
        )

    if context.labels_to_add:
        with stage(LabelFailure):
            github.add_labels(number, context.labels_to_add)
    return number


def replay(target: BackportTarget, change_set: ChangeSet, context: PullRequestContext) -> ReplayResult:
    """
    Backport ``change_set`` to ``target`` and describe how it went.

    Only ``BackportError`` is captured into the result; anything else is a bug
    and is left to propagate.
    """
    try:
        number = backport_once(target, change_set, context)
    except BackportError as e:
        return ReplayResult(target=target, commits=change_set.commits, failure=e)
    return ReplayResult(target=target, commits=change_set.commits, pull_request_number=number)
