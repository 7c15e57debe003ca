from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """A problem that aborts the build, tied to the file or directory at fault."""

    label = "Build error"

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class UnsafeOutputDir(BuildError):
    pass


class MissingTemplate(BuildError):
    pass


class ContentError(BuildError):
    """Base class for problems with the content directory or a post file."""

    label = "Content error"


class NotFound(ContentError):
    pass


class MalformedContent(ContentError):
    pass


class InvalidDate(ContentError):
    pass


class IOFailure(ContentError):
    pass
