from typing import List


class GitError(Exception):
    """A git command exited with a non-zero status.

    Keeps the raw captured streams so they can be shown to a human later.
    """

    def __init__(self, command: List[str], status: int, stderr: str = '', stdout: str = ''):
        self.command = command
        self.status = status
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(f"The process '{command[0]}' failed with exit code {status}")


class BackportError(Exception):
    """
    An expected, human-recoverable failure while backporting to one target.

    Args:
        error: The underlying git or GitHub API error
        stderr: Captured standard error of the failing git command, if any
        stdout: Captured standard output of the failing git command, if any
    """

    def __init__(self, error: Exception, stderr: str = '', stdout: str = ''):
        self.error = error
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(str(error))

    @classmethod
    def wrap(cls, error: Exception) -> 'BackportError':
        if isinstance(error, GitError):
            return cls(error, error.stderr, error.stdout)
        return cls(error)


class SetupFailure(BackportError):
    """The base branch is missing or the head branch already exists."""


class ReplayFailure(BackportError):
    """Cherry-picking the change failed; the partial cherry-pick was aborted."""


class PublishFailure(BackportError):
    """Pushing the head branch was rejected."""


class CreatePRFailure(BackportError):
    pass


class LabelFailure(BackportError):
    pass
