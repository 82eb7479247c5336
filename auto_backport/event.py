"""
Typed view of the ``pull_request`` webhook payload that triggers a backport.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class EventAction(Enum):
    CLOSED = 'closed'
    LABELED = 'labeled'
    OTHER = 'other'

    @classmethod
    def parse(cls, action: Optional[str]) -> 'EventAction':
        try:
            return cls(action)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class BackportTarget:
    base: str
    head: str


@dataclass(frozen=True)
class ChangeSet:
    """
    The merged pull request being backported.

    ``merge_commit_sha`` may point at a real two-parent merge commit or at a
    single rebased/squashed commit; which one is only known after asking git.
    """
    number: int
    title: str
    author: str
    commits: Tuple[str, ...]
    merge_commit_sha: str


@dataclass(frozen=True)
class PullRequestEvent:
    action: EventAction
    number: int
    title: str
    author: str
    merged: bool
    merge_commit_sha: Optional[str]
    owner: str
    repo: str
    labels: List[str] = field(default_factory=list)
    label: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> 'PullRequestEvent':
        pr = payload['pull_request']
        repository = payload['repository']
        # The payload has a label property only when the action is "labeled".
        label = payload.get('label')
        return cls(
            action=EventAction.parse(payload.get('action')),
            number=pr['number'],
            title=pr['title'],
            author=pr['user']['login'],
            merged=bool(pr.get('merged')),
            merge_commit_sha=pr.get('merge_commit_sha'),
            owner=repository['owner']['login'],
            repo=repository['name'],
            labels=[item['name'] for item in pr.get('labels') or []],
            label=label['name'] if label else None,
        )

    def change_set(self, commits: List[str]) -> ChangeSet:
        return ChangeSet(
            number=self.number,
            title=self.title,
            author=self.author,
            commits=tuple(commits),
            merge_commit_sha=str(self.merge_commit_sha),
        )


def load_event(path: str) -> PullRequestEvent:
    with open(path, encoding='utf-8') as f:
        return PullRequestEvent.from_payload(json.load(f))
