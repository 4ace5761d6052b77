"""Manager configuration."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import appdirs

from electron_manager.binaries.constants import (
    CHUNK_SIZE,
    DOWNLOAD_BASE_URL,
    DOWNLOAD_CONNECT_TIMEOUT,
    DOWNLOAD_READ_TIMEOUT,
    FALLBACK_TIMEOUT,
    GITHUB_LATEST_RELEASE_URL,
    INSTALL_DIR_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    MAX_DOWNLOAD_ATTEMPTS,
    NPM_REGISTRY_LATEST_URL,
    PLATFORM_ENV_VAR,
    PRIMARY_TIMEOUT,
    RETRY_DELAY,
)
from electron_manager.binaries.platforms import detect_arch, detect_platform
from electron_manager.logging import DEFAULT_LOG_LEVEL

APP_NAME = "electron-manager"


def default_install_dir() -> Path:
    return Path(appdirs.user_data_dir(APP_NAME)) / "electron"


@dataclass(frozen=True)
class ManagerConfig:
    """Electron manager configuration"""
    install_dir: Path = field(default_factory=default_install_dir)
    platform: str = field(default_factory=detect_platform)
    arch: str = field(default_factory=detect_arch)
    primary_release_url: str = NPM_REGISTRY_LATEST_URL
    fallback_release_url: str = GITHUB_LATEST_RELEASE_URL
    download_base_url: str = DOWNLOAD_BASE_URL
    primary_timeout: float = PRIMARY_TIMEOUT
    fallback_timeout: float = FALLBACK_TIMEOUT
    max_attempts: int = MAX_DOWNLOAD_ATTEMPTS
    retry_delay: float = RETRY_DELAY
    chunk_size: int = CHUNK_SIZE
    download_connect_timeout: float = DOWNLOAD_CONNECT_TIMEOUT
    download_read_timeout: float = DOWNLOAD_READ_TIMEOUT

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, **overrides
    ) -> "ManagerConfig":
        """Build a config, letting environment variables override defaults.

        Explicit keyword overrides win over the environment.
        """
        env = os.environ if env is None else env
        values = {}
        if env.get(INSTALL_DIR_ENV_VAR):
            values["install_dir"] = Path(env[INSTALL_DIR_ENV_VAR]).expanduser()
        if env.get(PLATFORM_ENV_VAR):
            values["platform"] = env[PLATFORM_ENV_VAR]
        values.update(overrides)
        if "install_dir" in values:
            values["install_dir"] = Path(values["install_dir"])
        return cls(**values)


def get_log_level(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return env.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
