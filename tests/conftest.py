import pytest

from core.config import Config, EnvironmentConfig, load_config
from core.environment import EnvironmentProbe
from core.errors import SpawnFailure
from core.types import Platform, ResolvedCommand


@pytest.fixture
def config() -> Config:
    """Load default config for tests."""
    return load_config()


@pytest.fixture
def temp_config(tmp_path):
    """Create a temp config TOML for isolated tests."""
    toml_content = """
[launcher]
wait = true
allow_nonzero_exit_code = true
[environment]
wsl_config_path = "/nonexistent/wsl.conf"
default_mount_point = "/media/"
system_launcher = "gio-open"
gui_host_env = ["MY_GUI_HOST"]
[logging]
level = "DEBUG"
"""
    config_path = tmp_path / "test.toml"
    config_path.write_text(toml_content)
    return load_config(str(config_path))


@pytest.fixture
def make_probe(tmp_path):
    """Build a probe with every fact pinned; no host detection involved."""

    def _make(
        platform: Platform = Platform.LINUX,
        *,
        is_wsl: bool = False,
        is_container: bool = False,
        is_bundled: bool = False,
        gui_host: bool = False,
        environ: dict[str, str] | None = None,
        **config_overrides,
    ) -> EnvironmentProbe:
        config_overrides.setdefault("wsl_config_path", str(tmp_path / "wsl.conf"))
        config_overrides.setdefault("bundled_launcher_path", str(tmp_path / "no-bundled-xdg-open"))
        return EnvironmentProbe(
            EnvironmentConfig(**config_overrides),
            platform=platform,
            is_wsl=is_wsl,
            is_container=is_container,
            is_bundled=is_bundled,
            gui_host=gui_host,
            environ=environ if environ is not None else {},
        )

    return _make


@pytest.fixture
def linux_probe(make_probe) -> EnvironmentProbe:
    return make_probe(Platform.LINUX)


class RecordingSpawn:
    """Stands in for launch.spawner.spawn; fails for programs in `failing`."""

    def __init__(self, failing: tuple[str, ...] = ()):
        self.failing = failing
        self.calls: list[ResolvedCommand] = []
        self.flags: list[dict] = []

    async def __call__(self, command: ResolvedCommand, *, wait: bool = False, allow_nonzero_exit_code: bool = False):
        self.calls.append(command)
        self.flags.append({"wait": wait, "allow_nonzero_exit_code": allow_nonzero_exit_code})
        if command.program in self.failing:
            raise SpawnFailure(2, "No such file or directory", command.program)
        return command

    @property
    def programs(self) -> list[str]:
        return [c.program for c in self.calls]


@pytest.fixture
def recording_spawn():
    return RecordingSpawn
