import logging
from contextlib import contextmanager
from typing import Callable, Optional

from auto_backport.config import BackportConfig
from auto_backport.event import PullRequestEvent
from auto_backport.git import GitRunner, clone_repository
from auto_backport.github_api import GithubClient
from auto_backport.labels import resolve_targets
from auto_backport.messages import failed_backport_comment
from auto_backport.replay import PullRequestContext, ReplayResult, replay

Cloner = Callable[[str, str, str, str], GitRunner]


@contextmanager
def log_group(title: str):
    """Fold everything logged inside into one group of the workflow log."""
    print(f'::group::{title}', flush=True)
    try:
        yield
    finally:
        print('::endgroup::', flush=True)


def escape_workflow_data(value: str) -> str:
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def report_failure(github, event: PullRequestEvent, result: ReplayResult, failure_label: str) -> None:
    target = result.target
    failure = result.failure
    logging.error(f"Backport of #{event.number} to {target.base} failed: {failure}")
    print(f'::error::{escape_workflow_data(str(failure))}', flush=True)
    github.create_comment(
        event.number,
        failed_backport_comment(target.base, target.head, result.commits, failure),
    )
    github.add_labels(event.number, [failure_label])


def run(event: PullRequestEvent, config: BackportConfig, github=None, clone: Optional[Cloner] = None) -> None:
    """
    Backport a merged PR to every base branch its labels ask for.

    Targets are handled one after another in a single working copy, each
    switching that copy to its own branch. Running them in parallel would need
    a separate clone or worktree per target.

    A target that fails with a ``BackportError`` gets a comment and a failure
    label on the original PR, and the next target is still attempted. Any other
    exception aborts the run.
    """
    if not event.merged:
        logging.info(f"PR #{event.number} is not merged, nothing to backport")
        return

    targets = resolve_targets(event)
    if not targets:
        logging.info(f"No backport labels to act on for PR #{event.number}")
        return

    if github is None:
        github = GithubClient(config.token, event.owner, event.repo)
    if clone is None:
        clone = clone_repository

    change_set = event.change_set(github.list_commits(event.number))
    logging.info(f"Backporting #{event.number} to {[target.base for target in targets]}")

    git = clone(config.token, event.owner, event.repo, config.workdir)
    context = PullRequestContext(
        github=github,
        git=git,
        title_template=config.title_template,
        labels_to_add=tuple(config.labels_to_add),
    )

    for target in targets:
        with log_group(f'Backporting to {target.base} on {target.head}'):
            result = replay(target, change_set, context)
            if result.ok:
                logging.info(f"Created backport PR #{result.pull_request_number} for {target.base}")
            else:
                report_failure(github, event, result, config.failure_label)
