"""Argument construction for each launcher's quirks."""

import base64
from collections.abc import Sequence

POWERSHELL_FLAGS = ("-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-EncodedCommand")


def macos_arguments(
    target: str,
    app: str | None = None,
    app_arguments: Sequence[str] = (),
    *,
    wait: bool = False,
    background: bool = False,
) -> list[str]:
    args: list[str] = []
    if wait:
        args.append("--wait-apps")
    if background:
        args.append("--background")
    if app:
        args.extend(["-a", app])
    args.append(target)
    # Arguments after --args go to the app, not to `open`
    if app_arguments:
        args.extend(["--args", *app_arguments])
    return args


def _powershell_quote(value: str) -> str:
    # Outer double quotes for the command line, backtick-escaped inner ones for PowerShell
    return f'"`"{value}`""'


def powershell_command(
    target: str,
    app: str | None = None,
    app_arguments: Sequence[str] = (),
    *,
    wait: bool = False,
) -> str:
    """Build the PowerShell `Start` command that opens `target`."""
    tokens = ["Start"]
    arguments = list(app_arguments)
    if wait:
        tokens.append("-Wait")

    if app:
        tokens.extend([_powershell_quote(app), "-ArgumentList"])
        arguments.insert(0, target)
    else:
        tokens.append(f'"{target}"')

    if arguments:
        tokens.append(",".join(_powershell_quote(arg) for arg in arguments))
    return " ".join(tokens)


def encode_powershell_command(command: str) -> str:
    """Encode a command for `powershell -EncodedCommand` (UTF-16LE, then Base64)."""
    return base64.b64encode(command.encode("utf-16-le")).decode("ascii")


def decode_powershell_command(encoded: str) -> str:
    return base64.b64decode(encoded).decode("utf-16-le")


def powershell_arguments(
    target: str,
    app: str | None = None,
    app_arguments: Sequence[str] = (),
    *,
    wait: bool = False,
) -> list[str]:
    command = powershell_command(target, app, app_arguments, wait=wait)
    return [*POWERSHELL_FLAGS, encode_powershell_command(command)]


def unix_arguments(target: str, app_arguments: Sequence[str] = ()) -> list[str]:
    return [*app_arguments, target]
