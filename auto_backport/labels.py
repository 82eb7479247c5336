import re
from typing import Dict, List, Optional

from auto_backport.event import BackportTarget, EventAction, PullRequestEvent

LABEL_PATTERN = re.compile(r'backport ([^\s]+)(?: ([^\s]+))?')


def get_label_names(action: EventAction, label: Optional[str], labels: List[str]) -> List[str]:
    """
    Labels that may trigger a backport for this event.

    On merge every label present on the PR fires. On "labeled" only the newly
    added label fires, so earlier backport labels are not processed twice.
    """
    if action is EventAction.CLOSED:
        return list(labels)
    if action is EventAction.LABELED:
        return [label] if label is not None else []
    return []


def default_head(pr_number: int, base: str) -> str:
    return f'backport-{pr_number}-to-{base}'


def get_backport_base_to_head(action: EventAction, label: Optional[str], labels: List[str],
                              pr_number: int) -> Dict[str, str]:
    """
    Map each requested base branch to the head branch to create for it.

    A later label for the same base overrides the head of an earlier one, but
    the base keeps the position where it was first seen.
    """
    base_to_head = {}
    for name in get_label_names(action, label, labels):
        match = LABEL_PATTERN.fullmatch(name)
        if match is None:
            continue
        base, head = match.groups()
        base_to_head[base] = head or default_head(pr_number, base)
    return base_to_head


def resolve_targets(event: PullRequestEvent) -> List[BackportTarget]:
    base_to_head = get_backport_base_to_head(event.action, event.label, event.labels, event.number)
    return [BackportTarget(base=base, head=head) for base, head in base_to_head.items()]
