"""Facts about the host the launcher runs on.

Every fact is computed lazily and cached on the probe. Constructor overrides
replace detection entirely, which is how tests and embedding callers inject
a different environment.
"""

import asyncio
import functools
import logging
import os
import platform as platform_module
import re
import sys
from collections.abc import Mapping
from pathlib import Path

from core.config import EnvironmentConfig
from core.types import Platform

logger = logging.getLogger(__name__)

MOUNT_POINT_PATTERN = re.compile(r"root\s*=\s*(?P<mount_point>.*)")
CONTAINER_MARKERS = ("/.dockerenv", "/run/.containerenv")


def _read_text(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        return None


def parse_mount_point(content: str, default: str = "/mnt/") -> str:
    """Extract the `root = <path>` value from wsl.conf content."""
    match = MOUNT_POINT_PATTERN.search(content)
    value = match.group("mount_point").strip() if match else ""
    if not value:
        return default
    return value if value.endswith("/") else f"{value}/"


class EnvironmentProbe:
    def __init__(
        self,
        config: EnvironmentConfig | None = None,
        *,
        platform: Platform | None = None,
        is_wsl: bool | None = None,
        is_container: bool | None = None,
        is_bundled: bool | None = None,
        gui_host: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.config = config or EnvironmentConfig()
        self.environ = os.environ if environ is None else environ
        self._overrides = {
            "platform": platform,
            "is_wsl": is_wsl,
            "is_container": is_container,
            "is_bundled": is_bundled,
            "gui_host": gui_host,
        }
        self._mount_point: str | None = None
        self._mount_point_lock = asyncio.Lock()

    @functools.cached_property
    def platform(self) -> Platform:
        value = self._overrides["platform"]
        return value if value is not None else Platform.from_sys_platform(sys.platform)

    @functools.cached_property
    def is_wsl(self) -> bool:
        value = self._overrides["is_wsl"]
        if value is not None:
            return value
        if self.platform is not Platform.LINUX:
            return False
        if "microsoft" in platform_module.release().lower():
            return True
        version = _read_text("/proc/version") or ""
        return "microsoft" in version.lower()

    @functools.cached_property
    def is_container(self) -> bool:
        value = self._overrides["is_container"]
        if value is not None:
            return value
        if any(os.path.exists(marker) for marker in CONTAINER_MARKERS):
            return True
        cgroup = _read_text("/proc/self/cgroup") or ""
        return "docker" in cgroup

    @functools.cached_property
    def is_bundled(self) -> bool:
        value = self._overrides["is_bundled"]
        if value is not None:
            return value
        return bool(getattr(sys, "frozen", False))

    @functools.cached_property
    def gui_host(self) -> bool:
        value = self._overrides["gui_host"]
        if value is not None:
            return value
        return any(self.environ.get(name) for name in self.config.gui_host_env)

    @property
    def system_root(self) -> str:
        return self.environ.get("SYSTEMROOT") or self.config.default_system_root

    async def wsl_mount_point(self) -> str:
        """Mount point of the Windows drives inside WSL, read once from wsl.conf."""
        if self._mount_point is not None:
            return self._mount_point

        async with self._mount_point_lock:
            if self._mount_point is None:
                self._mount_point = await asyncio.to_thread(self._read_mount_point)
        return self._mount_point

    def _read_mount_point(self) -> str:
        default = self.config.default_mount_point
        path = self.config.wsl_config_path
        if not os.path.exists(path):
            logger.debug("%s not found, using mount point %s", path, default)
            return default

        content = _read_text(path)
        if content is None:
            logger.debug("%s unreadable, using mount point %s", path, default)
            return default

        mount_point = parse_mount_point(content, default)
        logger.debug("WSL mount point from %s: %s", path, mount_point)
        return mount_point


@functools.cache
def default_probe() -> EnvironmentProbe:
    """Process-wide probe, created on first use."""
    return EnvironmentProbe()
