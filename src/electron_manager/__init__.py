"""Electron runtime manager package."""

__version__ = "0.1.0"

from electron_manager.types import ResolvedExecutable, DownloadDescriptor
from electron_manager.config import ManagerConfig
from electron_manager.manager import ElectronManager
from electron_manager.processes import ProcessController, sanitize_env
from electron_manager.ui import CancellationToken, HostUI, LoggingUI
from electron_manager.errors import (
    ElectronManagerError,
    NetworkError,
    ResolutionError,
    ProbeFailure,
    FilesystemError,
    UnsupportedPlatformError,
    DownloadCancelledError,
    ExtractionError,
)

__all__ = [
    # Types
    "ResolvedExecutable",
    "DownloadDescriptor",
    "ManagerConfig",

    # Lifecycle
    "ElectronManager",
    "ProcessController",
    "sanitize_env",

    # Host UI
    "CancellationToken",
    "HostUI",
    "LoggingUI",

    # Error types
    "ElectronManagerError",
    "NetworkError",
    "ResolutionError",
    "ProbeFailure",
    "FilesystemError",
    "UnsupportedPlatformError",
    "DownloadCancelledError",
    "ExtractionError",
]
