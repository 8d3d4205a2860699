import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from core.config import Config
from core.environment import EnvironmentProbe, default_probe
from core.errors import InvalidArgument
from core.types import (
    AppChain,
    AppDescriptor,
    LaunchedProcess,
    NameChain,
    NoApp,
    OpenOptions,
    ResolvedCommand,
    SingleApp,
    select_app,
)
from launch import spawner
from launch.fallback import try_each
from launch.resolver import resolve_command

logger = logging.getLogger(__name__)

SpawnFunc = Callable[..., Awaitable[Any]]


def validate_target(target: Any) -> str:
    if not isinstance(target, str) or not target:
        raise InvalidArgument("Expected a `target`")
    return target


class Opener:
    def __init__(
        self,
        config: Config | None = None,
        probe: EnvironmentProbe | None = None,
        spawn: SpawnFunc | None = None,
    ):
        self.config = config or Config()
        if probe is None:
            probe = default_probe() if config is None else EnvironmentProbe(self.config.environment)
        self.probe = probe
        self._spawn = spawn or spawner.spawn

    def default_options(self) -> OpenOptions:
        launcher = self.config.launcher
        return OpenOptions(
            wait=launcher.wait,
            background=launcher.background,
            allow_nonzero_exit_code=launcher.allow_nonzero_exit_code,
        )

    async def open(self, target: str, options: OpenOptions | None = None) -> LaunchedProcess:
        """Open `target` with the default app, or with `options.app`.

        A sequence of apps, or an app whose name is a tuple, is tried in order
        until one launches; AggregateFailure is raised if none does.
        """
        target = validate_target(target)
        options = options or self.default_options()
        selection = select_app(options.app)

        if isinstance(selection, AppChain):
            return await try_each(
                selection.apps,
                lambda app: self.open(target, dataclasses.replace(options, app=app)),
            )
        if isinstance(selection, NameChain):
            return await try_each(
                selection.names,
                lambda name: self.open(
                    target,
                    dataclasses.replace(options, app=AppDescriptor(name=name, arguments=selection.arguments)),
                ),
            )

        command = await self._resolve_selection(target, options, selection)
        return await self._spawn(
            command,
            wait=options.wait,
            allow_nonzero_exit_code=options.allow_nonzero_exit_code,
        )

    async def resolve(self, target: str, options: OpenOptions | None = None) -> list[ResolvedCommand]:
        """Commands `open` would try, in order, without spawning anything."""
        target = validate_target(target)
        options = options or self.default_options()
        selection = select_app(options.app)

        if isinstance(selection, AppChain):
            commands: list[ResolvedCommand] = []
            for app in selection.apps:
                commands.extend(await self.resolve(target, dataclasses.replace(options, app=app)))
            return commands
        if isinstance(selection, NameChain):
            return [
                await self._resolve_selection(
                    target, options, SingleApp(AppDescriptor(name=name, arguments=selection.arguments))
                )
                for name in selection.names
            ]
        return [await self._resolve_selection(target, options, selection)]

    async def _resolve_selection(
        self,
        target: str,
        options: OpenOptions,
        selection: NoApp | SingleApp,
    ) -> ResolvedCommand:
        app = selection.app if isinstance(selection, SingleApp) else None
        return await resolve_command(target, options, self.probe, app)
