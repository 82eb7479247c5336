import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from auto_backport.messages import DEFAULT_TITLE_TEMPLATE

DEFAULT_FAILURE_LABEL = 'backport failed'


@dataclass
class BackportConfig:
    """
    Invocation parameters.

    Args:
        token: GitHub token used both for the API and for cloning/pushing
        labels_to_add: Labels added to every created backport PR
        title_template: Backport PR title, with {{base}} and {{originalTitle}} placeholders
        failure_label: Label added to the original PR when a backport fails
        workdir: Directory the repository is cloned into
    """
    token: str
    labels_to_add: List[str] = field(default_factory=list)
    title_template: str = DEFAULT_TITLE_TEMPLATE
    failure_label: str = DEFAULT_FAILURE_LABEL
    workdir: str = '.'


def split_labels(value: Optional[str]) -> List[str]:
    """Labels given as one string, separated by commas or newlines."""
    if not value:
        return []
    return [label.strip() for label in re.split(r'[,\n]', value) if label.strip()]


def env_default(*names: str, default: Optional[str] = None) -> Optional[str]:
    """First non-empty environment variable among ``names``."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return default
