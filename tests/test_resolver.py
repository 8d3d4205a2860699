import os

import pytest

from core.errors import InvalidArgument
from core.types import AppDescriptor, LaunchStrategy, OpenOptions, Platform, StdioMode
from launch.encoding import POWERSHELL_FLAGS, decode_powershell_command
from launch.resolver import BUNDLED_LAUNCHER, resolve_command, select_strategy, unix_launcher


def _bundled(tmp_path, mode: int = 0o755) -> str:
    path = tmp_path / "xdg-open"
    path.write_text("#!/bin/sh\n")
    os.chmod(path, mode)
    return str(path)


@pytest.mark.parametrize(
    "platform, is_wsl, is_container, expected",
    [
        (Platform.DARWIN, False, False, LaunchStrategy.MACOS),
        (Platform.WIN32, False, False, LaunchStrategy.WINDOWS),
        (Platform.LINUX, True, False, LaunchStrategy.WSL),
        (Platform.LINUX, True, True, LaunchStrategy.UNIX),
        (Platform.LINUX, False, False, LaunchStrategy.UNIX),
        (Platform.LINUX, False, True, LaunchStrategy.UNIX),
        (Platform.FREEBSD, False, False, LaunchStrategy.UNIX),
        (Platform.ANDROID, False, False, LaunchStrategy.UNIX),
    ],
)
def test_select_strategy(make_probe, platform, is_wsl, is_container, expected):
    probe = make_probe(platform, is_wsl=is_wsl, is_container=is_container)
    assert select_strategy(probe) is expected


def test_select_strategy_unknown_platform(make_probe):
    assert select_strategy(make_probe(Platform.OTHER)) is LaunchStrategy.UNIX


@pytest.mark.asyncio
async def test_macos_command(make_probe):
    probe = make_probe(Platform.DARWIN)
    options = OpenOptions(wait=True, background=True)
    command = await resolve_command("/tmp/a.txt", options, probe, AppDescriptor(name="TextEdit"))
    assert command.program == "open"
    assert command.argv == ["open", "--wait-apps", "--background", "-a", "TextEdit", "/tmp/a.txt"]
    assert command.strategy is LaunchStrategy.MACOS


@pytest.mark.asyncio
async def test_macos_app_arguments(make_probe):
    probe = make_probe(Platform.DARWIN)
    app = AppDescriptor(name="Google Chrome", arguments=("--incognito",))
    command = await resolve_command("https://example.com", OpenOptions(), probe, app)
    assert command.args == ("-a", "Google Chrome", "https://example.com", "--args", "--incognito")


@pytest.mark.asyncio
async def test_wsl_command(make_probe, tmp_path):
    (tmp_path / "wsl.conf").write_text("[automount]\nroot = /custom\n")
    probe = make_probe(Platform.LINUX, is_wsl=True)
    command = await resolve_command("https://example.com", OpenOptions(), probe)

    assert command.strategy is LaunchStrategy.WSL
    assert command.program == "/custom/c/Windows/System32/WindowsPowerShell/v1.0/powershell.exe"
    assert command.args[:-1] == POWERSHELL_FLAGS
    assert decode_powershell_command(command.args[-1]) == 'Start "https://example.com"'
    assert command.spawn_options.verbatim_arguments is False


@pytest.mark.asyncio
async def test_wsl_default_mount_point(make_probe):
    probe = make_probe(Platform.LINUX, is_wsl=True)
    command = await resolve_command("https://example.com", OpenOptions(), probe)
    assert command.program == "/mnt/c/Windows/System32/WindowsPowerShell/v1.0/powershell.exe"


@pytest.mark.asyncio
async def test_windows_command(make_probe):
    probe = make_probe(Platform.WIN32, environ={"SYSTEMROOT": "C:\\WINDOWS"})
    app = AppDescriptor(name="firefox", arguments=("--private",))
    command = await resolve_command("https://example.com", OpenOptions(wait=True), probe, app)

    assert command.strategy is LaunchStrategy.WINDOWS
    assert command.program == "C:\\WINDOWS\\System32\\WindowsPowerShell\\v1.0\\powershell"
    assert command.spawn_options.verbatim_arguments is True
    assert "https://example.com" not in command.args
    assert decode_powershell_command(command.args[-1]) == (
        'Start -Wait "`"firefox`"" -ArgumentList "`"https://example.com`"","`"--private`""'
    )


@pytest.mark.asyncio
async def test_wsl_in_container_uses_unix_launcher(make_probe):
    probe = make_probe(Platform.LINUX, is_wsl=True, is_container=True)
    command = await resolve_command("https://example.com", OpenOptions(), probe)
    assert command.strategy is LaunchStrategy.UNIX
    assert command.argv == ["xdg-open", "https://example.com"]


@pytest.mark.asyncio
async def test_unix_app_arguments_before_target(linux_probe):
    app = AppDescriptor(name="firefox", arguments=("--new-window",))
    command = await resolve_command("https://example.com", OpenOptions(), linux_probe, app)
    assert command.argv == ["firefox", "--new-window", "https://example.com"]


@pytest.mark.asyncio
async def test_unix_spawn_options(linux_probe):
    detached = await resolve_command("/tmp/a.txt", OpenOptions(), linux_probe)
    assert detached.spawn_options.detached is True
    assert detached.spawn_options.stdio is StdioMode.IGNORE

    attached = await resolve_command("/tmp/a.txt", OpenOptions(wait=True), linux_probe)
    assert attached.spawn_options.detached is False
    assert attached.spawn_options.stdio is StdioMode.INHERIT


@pytest.mark.asyncio
async def test_unknown_platform_uses_system_launcher(make_probe):
    command = await resolve_command("/tmp/a.txt", OpenOptions(), make_probe(Platform.OTHER))
    assert command.argv == ["xdg-open", "/tmp/a.txt"]


@pytest.mark.asyncio
async def test_name_chain_is_not_resolved_directly(linux_probe):
    with pytest.raises(InvalidArgument):
        await resolve_command("/tmp/a.txt", OpenOptions(), linux_probe, AppDescriptor(name=("a", "b")))


def test_bundled_launcher_preferred_when_executable(make_probe, tmp_path):
    path = _bundled(tmp_path)
    assert unix_launcher(make_probe(bundled_launcher_path=path)) == path


def test_bundled_launcher_default_location():
    assert BUNDLED_LAUNCHER.name == "xdg-open"
    assert BUNDLED_LAUNCHER.parent.name == "launch"


@pytest.mark.skipif(os.name == "nt", reason="no execute bit on Windows")
def test_bundled_launcher_not_executable(make_probe, tmp_path):
    path = _bundled(tmp_path, mode=0o644)
    assert unix_launcher(make_probe(bundled_launcher_path=path)) == "xdg-open"


def test_missing_bundled_launcher(linux_probe):
    assert unix_launcher(linux_probe) == "xdg-open"


@pytest.mark.parametrize(
    "facts",
    [
        {"is_bundled": True},
        {"gui_host": True},
        {"platform": Platform.ANDROID},
    ],
)
def test_system_launcher_in_restricted_runtimes(make_probe, tmp_path, facts):
    path = _bundled(tmp_path)
    probe = make_probe(bundled_launcher_path=path, **facts)
    assert unix_launcher(probe) == "xdg-open"


def test_configured_system_launcher(make_probe):
    assert unix_launcher(make_probe(system_launcher="gio-open")) == "gio-open"
