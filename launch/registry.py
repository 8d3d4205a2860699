import functools
from dataclasses import dataclass, field

from core.environment import EnvironmentProbe, default_probe
from core.errors import UnsupportedPlatform
from core.types import AppDescriptor, Platform

BinaryName = str | tuple[str, ...]


@dataclass(frozen=True)
class PlatformBinaries:
    platforms: dict[Platform, BinaryName] = field(default_factory=dict)
    wsl: str | None = None


CHROME = PlatformBinaries(
    platforms={
        Platform.DARWIN: "google chrome canary",
        Platform.WIN32: "Chrome",
        Platform.LINUX: ("google-chrome", "google-chrome-stable"),
    },
    wsl="/mnt/c/Program Files (x86)/Google/Chrome/Application/chrome.exe",
)

FIREFOX = PlatformBinaries(
    platforms={
        Platform.DARWIN: "firefox",
        Platform.WIN32: "C:\\Program Files\\Mozilla Firefox\\firefox.exe",
        Platform.LINUX: "firefox",
    },
    wsl="/mnt/c/Program Files/Mozilla Firefox/firefox.exe",
)


def detect_platform_binary(binaries: PlatformBinaries, probe: EnvironmentProbe) -> BinaryName:
    # WSL in a container cannot reach the Windows host binaries
    if binaries.wsl and probe.is_wsl and not probe.is_container:
        return binaries.wsl
    if probe.platform not in binaries.platforms:
        raise UnsupportedPlatform(probe.platform)
    return binaries.platforms[probe.platform]


class AppRegistry:
    """Well-known apps, resolved for this platform on first access and cached."""

    names = ("chrome", "firefox")

    def __init__(self, probe: EnvironmentProbe | None = None):
        self._probe = probe

    @property
    def probe(self) -> EnvironmentProbe:
        return self._probe if self._probe is not None else default_probe()

    @functools.cached_property
    def chrome(self) -> AppDescriptor:
        return AppDescriptor(name=detect_platform_binary(CHROME, self.probe))

    @functools.cached_property
    def firefox(self) -> AppDescriptor:
        return AppDescriptor(name=detect_platform_binary(FIREFOX, self.probe))

    def __getitem__(self, name: str) -> AppDescriptor:
        if name not in self.names:
            raise KeyError(name)
        return getattr(self, name)


apps = AppRegistry()
