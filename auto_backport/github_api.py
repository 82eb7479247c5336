import logging
from typing import Iterable, List, Optional

from github import Auth, Github


class GithubClient:
    """The few GitHub REST calls a backport needs, scoped to one repository."""

    def __init__(self, token: str, owner: str, repo: str, github: Optional[Github] = None):
        self.github = github if github is not None else Github(auth=Auth.Token(token))
        self.repo = self.github.get_repo(f'{owner}/{repo}')

    def list_commits(self, pr_number: int) -> List[str]:
        """SHAs of the PR's commits, in the order GitHub lists them."""
        return [commit.sha for commit in self.repo.get_pull(pr_number).get_commits()]

    def create_pull(self, base: str, head: str, title: str, body: str) -> int:
        pr = self.repo.create_pull(base=base, head=head, title=title, body=body)
        logging.info(f"Pull request created: {pr.html_url}")
        return pr.number

    def add_labels(self, number: int, labels: Iterable[str]) -> None:
        labels = list(labels)
        self.repo.get_issue(number).add_to_labels(*labels)
        logging.info(f"Added labels {labels} to #{number}")

    def create_comment(self, number: int, body: str) -> None:
        self.repo.get_issue(number).create_comment(body)
