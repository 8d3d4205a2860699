from collections.abc import Iterable

from core.types import ResolvedCommand


class OpenError(Exception):
    """Base class for everything raised while opening a target."""


class InvalidArgument(OpenError, TypeError):
    pass


class UnsupportedPlatform(OpenError):
    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"{platform} is not supported")


class SpawnFailure(OpenError, OSError):
    """The OS could not create the process. Keeps errno/strerror/filename."""

    @classmethod
    def from_os_error(cls, exc: OSError, program: str) -> "SpawnFailure":
        return cls(exc.errno, exc.strerror or str(exc), exc.filename or program)


class ExitCodeFailure(OpenError):
    def __init__(self, exit_code: int, command: ResolvedCommand):
        self.exit_code = exit_code
        self.command = command
        super().__init__(f"Exited with code {exit_code}")


class AggregateFailure(OpenError):
    def __init__(self, errors: Iterable[BaseException]):
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"All {len(self.errors)} candidates failed" + (f" ({details})" if details else ""))
