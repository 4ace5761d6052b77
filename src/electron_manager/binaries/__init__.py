"""Electron binary resolution, download and installation."""
from electron_manager.binaries.releases import VersionResolver
from electron_manager.binaries.locator import ExecutableLocator
from electron_manager.binaries.fetcher import (
    compute_progress,
    download_archive,
    extract_archive,
)
from electron_manager.binaries.platforms import (
    get_download_descriptor,
    get_platform_executable,
)

__all__ = [
    "VersionResolver",
    "ExecutableLocator",
    "compute_progress",
    "download_archive",
    "extract_archive",
    "get_download_descriptor",
    "get_platform_executable",
]
