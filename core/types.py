import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum


class Platform(StrEnum):
    DARWIN = "darwin"
    WIN32 = "win32"
    LINUX = "linux"
    ANDROID = "android"
    FREEBSD = "freebsd"
    OPENBSD = "openbsd"
    NETBSD = "netbsd"
    SUNOS = "sunos"
    AIX = "aix"
    CYGWIN = "cygwin"
    OTHER = "other"

    @classmethod
    def from_sys_platform(cls, value: str) -> "Platform":
        """Map a `sys.platform` string (e.g. "freebsd13") to a Platform."""
        for member in cls:
            if member is not cls.OTHER and value.startswith(member.value):
                return member
        return cls.OTHER


class LaunchStrategy(StrEnum):
    MACOS = "macos"
    WINDOWS = "windows"
    WSL = "wsl"
    UNIX = "unix"


class StdioMode(StrEnum):
    INHERIT = "inherit"
    IGNORE = "ignore"


@dataclass(frozen=True)
class AppDescriptor:
    name: str | tuple[str, ...]
    arguments: tuple[str, ...] = ()

    def with_arguments(self, *arguments: str) -> "AppDescriptor":
        return AppDescriptor(name=self.name, arguments=tuple(arguments))


AppOption = AppDescriptor | str
AppChoice = AppOption | Sequence[AppOption] | None


@dataclass
class OpenOptions:
    wait: bool = False
    background: bool = False  # macOS only
    allow_nonzero_exit_code: bool = False
    app: AppChoice = None


# --- options.app variants ---


@dataclass(frozen=True)
class NoApp:
    pass


@dataclass(frozen=True)
class SingleApp:
    app: AppDescriptor


@dataclass(frozen=True)
class AppChain:
    apps: tuple[AppDescriptor, ...]


@dataclass(frozen=True)
class NameChain:
    names: tuple[str, ...]
    arguments: tuple[str, ...] = ()


AppSelection = NoApp | SingleApp | AppChain | NameChain


def _as_descriptor(app: AppOption) -> AppDescriptor:
    if isinstance(app, AppDescriptor):
        return app
    return AppDescriptor(name=app)


def select_app(app: AppChoice) -> AppSelection:
    """Classify `OpenOptions.app` into one of the selection variants."""
    if app is None:
        return NoApp()
    if isinstance(app, (AppDescriptor, str)):
        descriptor = _as_descriptor(app)
        if isinstance(descriptor.name, tuple):
            return NameChain(names=descriptor.name, arguments=tuple(descriptor.arguments))
        return SingleApp(app=descriptor)
    return AppChain(apps=tuple(_as_descriptor(a) for a in app))


@dataclass(frozen=True)
class SpawnOptions:
    detached: bool = False
    stdio: StdioMode = StdioMode.INHERIT
    verbatim_arguments: bool = False


@dataclass(frozen=True)
class ResolvedCommand:
    program: str
    args: tuple[str, ...]
    strategy: LaunchStrategy
    spawn_options: SpawnOptions = field(default_factory=SpawnOptions)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def command_line(self) -> str:
        """Program quoted for Windows, arguments passed through untouched."""
        return " ".join([subprocess.list2cmdline([self.program]), *self.args])


@dataclass
class LaunchedProcess:
    command: ResolvedCommand
    process: subprocess.Popen

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode
