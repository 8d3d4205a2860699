import argparse
import asyncio
import logging
import sys
from pathlib import Path

from core.config import Config, load_config
from core.errors import AggregateFailure, OpenError
from core.types import AppDescriptor, LaunchStrategy, OpenOptions
from launch import AppRegistry, Opener
from launch.encoding import decode_powershell_command

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config" / "default.toml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="openit", description="Open a file or URL with its preferred app.")
    parser.add_argument("target", help="Path or URL to open")
    parser.add_argument("--wait", action="store_true", default=None, help="Wait for the app to exit")
    parser.add_argument("--background", action="store_true", default=None, help="Do not focus the app (macOS)")
    parser.add_argument(
        "--allow-nonzero-exit-code",
        action="store_true",
        default=None,
        help="With --wait, treat a nonzero exit code as success",
    )
    parser.add_argument("--app", action="append", default=[], help="App to open with; repeat for fallbacks")
    parser.add_argument("--browser", choices=AppRegistry.names, help="Open with a well-known browser")
    parser.add_argument(
        "--arg",
        dest="app_args",
        action="append",
        default=[],
        help="Argument passed to the app; needs --app or --browser",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the commands instead of running them")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="Path to the TOML config")
    return parser


def build_options(args: argparse.Namespace, opener: Opener, registry: AppRegistry) -> OpenOptions:
    options = opener.default_options()
    for name in ("wait", "background", "allow_nonzero_exit_code"):
        value = getattr(args, name)
        if value is not None:
            setattr(options, name, value)

    app_args = tuple(args.app_args)
    candidates = [AppDescriptor(name=name, arguments=app_args) for name in args.app]
    if args.browser:
        candidates.append(registry[args.browser].with_arguments(*app_args))

    if len(candidates) == 1:
        options.app = candidates[0]
    elif candidates:
        options.app = candidates
    return options


async def run(args: argparse.Namespace, config: Config) -> int:
    opener = Opener(config)
    options = build_options(args, opener, AppRegistry(opener.probe))

    if args.dry_run:
        for command in await opener.resolve(args.target, options):
            print(" ".join(command.argv))
            if command.strategy in (LaunchStrategy.WINDOWS, LaunchStrategy.WSL):
                print(f"  # {decode_powershell_command(command.args[-1])}")
        return 0

    launched = await opener.open(args.target, options)
    if options.wait:
        print(f"{launched.command.program} exited with code {launched.returncode}")
    else:
        print(f"Launched: {launched.command.program} (PID {launched.pid})")
    return 0


def read_config(path: str) -> Config:
    """Load the TOML config; the bundled default may be absent after install."""
    if path == str(DEFAULT_CONFIG) and not DEFAULT_CONFIG.exists():
        return Config()
    return load_config(path)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.app_args and not (args.app or args.browser):
        parser.error("--arg requires --app or --browser")

    try:
        config = read_config(args.config)
    except OSError as e:
        print(f"openit: cannot read config: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=config.logging.level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return asyncio.run(run(args, config))
    except AggregateFailure as e:
        print(f"openit: {e}", file=sys.stderr)
        for error in e.errors:
            print(f"  - {type(error).__name__}: {error}", file=sys.stderr)
        return 1
    except OpenError as e:
        print(f"openit: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
