"""Platform detection and mapping."""
import platform
import sys
from typing import Dict, Optional

from electron_manager.binaries.constants import (
    ARCHIVE_FORMAT,
    DOWNLOAD_BASE_URL,
)
from electron_manager.errors import UnsupportedPlatformError
from electron_manager.types import DownloadDescriptor

# Architecture mappings, platform.machine() -> Electron release naming
ARCH_MAPPINGS: Dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "armv7l",
}

# sys.platform prefix -> Electron release naming
PLATFORM_MAPPINGS: Dict[str, str] = {
    "darwin": "darwin",
    "linux": "linux",
    "win32": "win32",
    "cygwin": "win32",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
}

MACOS_BUNDLE_EXECUTABLE = "Electron.app/Contents/MacOS/Electron"

EXECUTABLE_PATHS: Dict[str, str] = {
    "mas": MACOS_BUNDLE_EXECUTABLE,
    "darwin": MACOS_BUNDLE_EXECUTABLE,
    "freebsd": "electron",
    "openbsd": "electron",
    "linux": "electron",
    "win32": "electron.exe",
}

MACOS_FAMILY = ("darwin", "mas")


def detect_platform(system: Optional[str] = None) -> str:
    """Map sys.platform onto the Electron platform name."""
    system = system or sys.platform
    for prefix, name in PLATFORM_MAPPINGS.items():
        if system.startswith(prefix):
            return name
    return system


def detect_arch(machine: Optional[str] = None) -> str:
    """Map platform.machine() onto the Electron arch name."""
    machine = (machine or platform.machine()).lower()
    return ARCH_MAPPINGS.get(machine, machine)


def get_platform_executable(platform_name: str) -> str:
    """Relative path of the executable inside an install root."""
    try:
        return EXECUTABLE_PATHS[platform_name]
    except KeyError:
        raise UnsupportedPlatformError(platform_name) from None


def is_macos_family(platform_name: str) -> bool:
    return platform_name in MACOS_FAMILY


def get_download_descriptor(
    version: str,
    platform_name: str,
    arch: str,
    base_url: str = DOWNLOAD_BASE_URL,
) -> DownloadDescriptor:
    """Archive URL and file name for a release on a platform."""
    file_name = f"electron-{version}-{platform_name}-{arch}.{ARCHIVE_FORMAT}"
    url = f"{base_url.rstrip('/')}/{version}/{file_name}"
    return DownloadDescriptor(url=url, file_name=file_name)
