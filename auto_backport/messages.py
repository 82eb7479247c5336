"""
Text rendered for GitHub: backport PR titles and bodies, and the comment
left on the original PR when a backport fails.
"""

from typing import Sequence

from auto_backport.errors import BackportError

DEFAULT_TITLE_TEMPLATE = '[Backport {{base}}] {{originalTitle}}'


def render_title(template: str, base: str, original_title: str) -> str:
    """
    Replace every ``{{base}}`` and ``{{originalTitle}}`` in the template.

    Matching is literal and case-sensitive. Unknown placeholders are kept as is.
    """
    title = template
    for name, value in (('base', base), ('originalTitle', original_title)):
        title = title.replace('{{' + name + '}}', value)
    return title


def render_body(pr_number: int, author: str) -> str:
    return f'Backport #{pr_number}\n **Authored by:** @{author}'


def worktree_path(base: str) -> str:
    return f'.worktrees/backport-{base}'


def create_details(content: str, title: str) -> str:
    if not content:
        return ''
    return '\n'.join([
        '<details>',
        f'<summary>{title}</summary>\n',
        '```',
        content,
        '```',
        '</details>\n',
    ])


def manual_backport_script(base: str, head: str, commits: Sequence[str]) -> str:
    path = worktree_path(base)
    return '\n'.join([
        '```bash',
        '# Fetch latest updates from GitHub',
        'git fetch',
        '# Create a new working tree',
        f'git worktree add {path} {base}',
        '# Navigate to the new working tree',
        f'cd {path}',
        '# Create a new branch',
        f'git switch --create {head}',
        '# Cherry-pick the merged commit of this pull request and resolve the conflicts',
        f"git cherry-pick {' '.join(commits)}",
        '# Push it to GitHub',
        f'git push --set-upstream origin {head}',
        '# Go back to the original working tree',
        'cd ../..',
        '# Delete the working tree',
        f'git worktree remove {path}',
        '```',
    ])


def failed_backport_comment(base: str, head: str, commits: Sequence[str], error: BackportError) -> str:
    """
    Comment body explaining why the backport to ``base`` failed and how to
    redo it by hand.

    Args:
        base: The branch the backport was targeting
        head: The branch that should have held the cherry-picked commits
        commits: SHAs of the original PR, in the order they were merged
        error: The failure, with captured git output when there is some
    """
    return '\n'.join([
        f'The backport to `{base}` failed:',
        '```',
        str(error),
        '```',
        create_details(error.stderr, 'stderr'),
        create_details(error.stdout, 'stdout'),
        'To backport manually, run these commands in your terminal:',
        manual_backport_script(base, head, commits),
        f'Then, create a pull request where the `base` branch is `{base}` '
        f'and the `compare`/`head` branch is `{head}`.',
    ])
