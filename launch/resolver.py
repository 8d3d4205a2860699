import logging
import os
from pathlib import Path

from core.environment import EnvironmentProbe
from core.errors import InvalidArgument
from core.types import AppDescriptor, LaunchStrategy, OpenOptions, Platform, ResolvedCommand, SpawnOptions, StdioMode
from launch.encoding import macos_arguments, powershell_arguments, unix_arguments

logger = logging.getLogger(__name__)

BUNDLED_LAUNCHER = Path(__file__).resolve().parent / "xdg-open"
WSL_POWERSHELL = "c/Windows/System32/WindowsPowerShell/v1.0/powershell.exe"
WINDOWS_POWERSHELL = "\\System32\\WindowsPowerShell\\v1.0\\powershell"


def select_strategy(probe: EnvironmentProbe) -> LaunchStrategy:
    """Pick the launch strategy for the probed environment.

    WSL inside a container cannot reach the Windows host, so it takes the
    generic Unix path, as does any platform not recognised.
    """
    if probe.platform is Platform.DARWIN:
        return LaunchStrategy.MACOS
    if probe.platform is Platform.WIN32:
        return LaunchStrategy.WINDOWS
    if probe.is_wsl and not probe.is_container:
        return LaunchStrategy.WSL
    return LaunchStrategy.UNIX


def unix_launcher(probe: EnvironmentProbe) -> str:
    """Bundled xdg-open when usable, otherwise the system one."""
    config = probe.config
    bundled = Path(config.bundled_launcher_path) if config.bundled_launcher_path else BUNDLED_LAUNCHER
    use_system = (
        probe.is_bundled
        or probe.gui_host
        or probe.platform is Platform.ANDROID
        or not os.access(bundled, os.X_OK)
    )
    return config.system_launcher if use_system else str(bundled)


def _spawn_options(wait: bool, verbatim_arguments: bool = False) -> SpawnOptions:
    if wait:
        return SpawnOptions(verbatim_arguments=verbatim_arguments)
    # xdg-open blocks the caller unless stdio is ignored and it is detached
    return SpawnOptions(detached=True, stdio=StdioMode.IGNORE, verbatim_arguments=verbatim_arguments)


async def resolve_command(
    target: str,
    options: OpenOptions,
    probe: EnvironmentProbe,
    app: AppDescriptor | None = None,
) -> ResolvedCommand:
    """Build the platform-specific command that opens `target`.

    `app` is a single app with a single name; `options.app` is ignored here
    because app chains are expanded by the caller.
    """
    if app is not None and not isinstance(app.name, str):
        raise InvalidArgument(f"Expected a single app name, got {app.name!r}")

    app_name = app.name if app else None
    app_arguments = list(app.arguments) if app else []
    strategy = select_strategy(probe)

    if strategy is LaunchStrategy.MACOS:
        program = "open"
        args = macos_arguments(
            target,
            app_name,
            app_arguments,
            wait=options.wait,
            background=options.background,
        )
        spawn_options = _spawn_options(options.wait)
    elif strategy in (LaunchStrategy.WINDOWS, LaunchStrategy.WSL):
        if strategy is LaunchStrategy.WSL:
            program = f"{await probe.wsl_mount_point()}{WSL_POWERSHELL}"
        else:
            program = f"{probe.system_root}{WINDOWS_POWERSHELL}"
        args = powershell_arguments(target, app_name, app_arguments, wait=options.wait)
        spawn_options = _spawn_options(options.wait, verbatim_arguments=strategy is LaunchStrategy.WINDOWS)
    else:
        program = app_name or unix_launcher(probe)
        args = unix_arguments(target, app_arguments)
        spawn_options = _spawn_options(options.wait)

    command = ResolvedCommand(program=program, args=tuple(args), strategy=strategy, spawn_options=spawn_options)
    logger.debug("Resolved %s command: %s", strategy, command.argv)
    return command
