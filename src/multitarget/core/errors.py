"""
Custom Exception Classes for multitarget

Every expected failure of the core carries a human-readable message and,
where one exists, a concrete remedy (an install command, a target-add
command, or the list of branches that were tried). Services convert these
into failed ServiceResults; the CLI prints the message and the remedy.
"""

from typing import Iterable, Optional, Sequence


class MultitargetError(Exception):
    """
    Base class for all multitarget errors.

    Attributes:
        message (str): Explanation of the error
        remedy (Optional[str]): What the user can do about it
    """

    def __init__(self, message: str, remedy: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.remedy = remedy

    @property
    def error_type(self) -> str:
        """Name of the concrete error class, used in service result metadata."""
        return type(self).__name__


class InvalidLocator(MultitargetError):
    """Raised when a repository locator does not match the hosting pattern."""

    def __init__(self, locator: str) -> None:
        super().__init__(
            f"Invalid repository URL: {locator!r}",
            remedy="Use a URL of the form https://github.com/<owner>/<repo>",
        )
        self.locator = locator


class SourceUnavailable(MultitargetError):
    """Raised when no candidate branch yields the package manifest."""

    def __init__(self, locator: str, branches: Sequence[str]) -> None:
        self.locator = locator
        self.branches = list(branches)
        tried = ", ".join(self.branches)
        super().__init__(
            f"Could not fetch Cargo.toml from {locator} (tried branches: {tried})",
            remedy=f"Check that the repository is public and has one of the branches: {tried}",
        )


class ExecutorUnavailable(MultitargetError):
    """Raised when the caller forces an executor that is not installed."""

    def __init__(self, tool: str, remedy: str) -> None:
        super().__init__(f"'{tool}' was requested but is not installed", remedy=remedy)
        self.tool = tool


class NoViableExecutor(MultitargetError):
    """Raised when neither executor can build the target."""

    def __init__(self, target: str, remedies: Iterable[str]) -> None:
        self.target = target
        self.remedies = list(remedies)
        super().__init__(
            f"No build tool can build target '{target}'",
            remedy="Either " + ", or ".join(self.remedies),
        )


class ExecutorFailed(MultitargetError):
    """Raised when a build or test executor exits with a non-zero status."""

    def __init__(self, tool: str, target: Optional[str], returncode: int, remedy: str) -> None:
        where = f" for target '{target}'" if target else ""
        super().__init__(f"'{tool}' failed{where} (exit code {returncode})", remedy=remedy)
        self.tool = tool
        self.target = target
        self.returncode = returncode


class PlatformNotFound(MultitargetError):
    """Raised when a named platform is not present in glue.toml."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Platform '{name}' not found",
            remedy="Run 'multitarget platform list' to see configured platforms",
        )
        self.name = name


class DuplicatePlatform(MultitargetError):
    """Raised when adding a platform whose name is already configured."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Platform '{name}' already exists",
            remedy=f"Remove it first with 'multitarget platform remove {name}'",
        )
        self.name = name


class GlueFileError(MultitargetError):
    """Raised when glue.toml exists but cannot be read or understood."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Could not read {path}: {reason}",
            remedy="Fix or remove the file; it must be valid TOML",
        )
        self.path = path
        self.reason = reason
