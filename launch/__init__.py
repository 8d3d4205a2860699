import functools

from core.types import LaunchedProcess, OpenOptions
from launch.opener import Opener
from launch.registry import AppRegistry, apps

__all__ = ["AppRegistry", "Opener", "apps", "default_opener", "open_target"]


@functools.cache
def default_opener() -> Opener:
    """Process-wide opener backed by the process-wide environment probe."""
    return Opener()


async def open_target(target: str, options: OpenOptions | None = None) -> LaunchedProcess:
    return await default_opener().open(target, options)
