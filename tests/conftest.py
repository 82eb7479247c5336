from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from auto_backport.errors import GitError
from auto_backport.event import EventAction, PullRequestEvent

MERGE_SHA = 'm3rg3'
COMMITS = ['abc123', 'def456']


class FakeGit:
    """Records git invocations instead of running them.

    ``parents`` answers ``rev-list --parents`` per SHA; an unknown SHA makes the
    lookup fail. ``fail`` makes commands starting with a prefix exit non-zero,
    optionally only while a given branch is checked out. Branches in
    ``remote_heads`` are reported by ``ls-remote`` as existing on origin.
    """

    def __init__(self, parents: Optional[Dict[str, List[str]]] = None):
        self.calls: List[Tuple[str, ...]] = []
        self.parents = parents if parents is not None else {MERGE_SHA: ['p1']}
        self.remote_heads = set()
        self.branch = None
        self._failures = []

    def fail(self, *prefix: str, stderr: str = '', stdout: str = '', branch: Optional[str] = None):
        self._failures.append((prefix, stderr, stdout, branch))

    def run(self, *args: str) -> str:
        self.calls.append(args)
        for prefix, stderr, stdout, branch in self._failures:
            if args[:len(prefix)] == prefix and (branch is None or branch == self.branch):
                raise GitError(['git', *args], 1, stderr, stdout)
        if args[:1] == ('switch',):
            self.branch = args[-1]
        if args[:1] == ('ls-remote',):
            branch = args[-1]
            if branch not in self.remote_heads:
                raise GitError(['git', *args], 2)
            return f'0000000\trefs/heads/{branch}'
        if args[:2] == ('rev-list', '--parents'):
            sha = args[-1]
            if sha not in self.parents:
                raise GitError(['git', *args], 128, f"fatal: bad object {sha}")
            return ' '.join([sha, *self.parents[sha]])
        return ''

    def commands(self, name: str) -> List[Tuple[str, ...]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def github():
    client = MagicMock()
    client.list_commits.return_value = list(COMMITS)
    client.create_pull.side_effect = iter(range(100, 200))
    return client


def make_event(**overrides) -> PullRequestEvent:
    values = dict(
        action=EventAction.CLOSED,
        number=42,
        title='Fix bug',
        author='octocat',
        merged=True,
        merge_commit_sha=MERGE_SHA,
        owner='acme',
        repo='widgets',
        labels=['backport release-2'],
        label=None,
    )
    values.update(overrides)
    return PullRequestEvent(**values)


def make_payload(action='closed', labels=('backport release-2',), label=None, merged=True):
    payload = {
        'action': action,
        'pull_request': {
            'number': 42,
            'title': 'Fix bug',
            'user': {'login': 'octocat'},
            'merged': merged,
            'merge_commit_sha': MERGE_SHA,
            'labels': [{'name': name} for name in labels],
        },
        'repository': {'name': 'widgets', 'owner': {'login': 'acme'}},
    }
    if label is not None:
        payload['label'] = {'name': label}
    return payload
