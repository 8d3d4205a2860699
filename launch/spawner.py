import asyncio
import logging
import os
import subprocess
from typing import Any

from core.errors import ExitCodeFailure, SpawnFailure
from core.types import LaunchedProcess, ResolvedCommand, StdioMode

logger = logging.getLogger(__name__)


def _popen_kwargs(command: ResolvedCommand) -> dict[str, Any]:
    options = command.spawn_options
    kwargs: dict[str, Any] = {}
    if options.stdio is StdioMode.IGNORE:
        kwargs.update(stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    if options.detached:
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True
    return kwargs


def _popen(command: ResolvedCommand) -> subprocess.Popen:
    # Windows command lines are built by the caller, no extra quoting
    args: str | list[str] = command.argv
    if command.spawn_options.verbatim_arguments and os.name == "nt":
        args = command.command_line()
    try:
        return subprocess.Popen(args, **_popen_kwargs(command))
    except OSError as e:
        raise SpawnFailure.from_os_error(e, command.program) from e


async def spawn(
    command: ResolvedCommand,
    *,
    wait: bool = False,
    allow_nonzero_exit_code: bool = False,
) -> LaunchedProcess:
    """Start `command`; with `wait`, block until it exits and check the exit code."""
    process = _popen(command)
    launched = LaunchedProcess(command=command, process=process)
    logger.info("Launched %s (PID %s)", command.program, process.pid)

    if not wait:
        return launched

    exit_code = await asyncio.to_thread(process.wait)
    if exit_code != 0 and not allow_nonzero_exit_code:
        raise ExitCodeFailure(exit_code, command)
    return launched
