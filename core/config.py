import tomli
from pydantic import BaseModel


class LauncherConfig(BaseModel):
    wait: bool = False
    background: bool = False
    allow_nonzero_exit_code: bool = False


class EnvironmentConfig(BaseModel):
    wsl_config_path: str = "/etc/wsl.conf"
    default_mount_point: str = "/mnt/"
    system_launcher: str = "xdg-open"
    bundled_launcher_path: str = ""  # empty: xdg-open shipped next to the launch package
    gui_host_env: list[str] = ["ELECTRON_RUN_AS_NODE"]
    default_system_root: str = "C:\\Windows"


class LoggingConfig(BaseModel):
    level: str = "WARNING"


class Config(BaseModel):
    launcher: LauncherConfig = LauncherConfig()
    environment: EnvironmentConfig = EnvironmentConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str = "config/default.toml") -> Config:
    """Load config from TOML file, validate with Pydantic."""
    with open(path, "rb") as f:
        data = tomli.load(f)
    return Config(**data)
