"""Error handling for the Electron manager."""
from typing import Any, Dict, Optional

from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_REQUEST

from electron_manager.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Any = None,
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, ElectronManagerError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("electron_manager_error", **error_info)


class ElectronManagerError(Exception):
    """Base error class for the Electron manager."""
    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(
            code=self.code,
            message=str(self),
            data=self.details
        )


class NetworkError(ElectronManagerError):
    """Transport-level failure reaching a remote endpoint."""
    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Failed to reach {url}: {reason}",
            details={"url": url, "reason": reason}
        )


class ResolutionError(ElectronManagerError):
    """Well-formed response that lacks the expected data."""
    def __init__(self, url: str, field: str):
        super().__init__(
            f"Cannot get version details from {url}: missing {field}",
            details={"url": url, "field": field}
        )


class ProbeFailure(ElectronManagerError):
    """A candidate executable did not answer the version probe."""
    def __init__(self, target: str, reason: str):
        super().__init__(
            f"{target} did not report a version: {reason}",
            code=INVALID_REQUEST,
            details={"target": target, "reason": reason}
        )


class FilesystemError(ElectronManagerError):
    """Purge, listing or delete failure."""
    def __init__(self, message: str, paths: Optional[list] = None):
        super().__init__(message, details={"paths": [str(p) for p in paths or []]})


class UnsupportedPlatformError(ElectronManagerError):
    """No Electron build exists for the platform."""
    def __init__(self, platform: str):
        super().__init__(
            f"Electron builds are not available on platform: {platform}",
            code=INVALID_REQUEST,
            details={"platform": platform}
        )


class DownloadCancelledError(ElectronManagerError):
    """The host cancelled an in-flight download."""
    def __init__(self, url: str):
        super().__init__(f"Download of {url} was cancelled", details={"url": url})


class ExtractionError(ElectronManagerError):
    """Archive could not be extracted."""
    def __init__(self, archive: str, reason: str):
        super().__init__(
            f"Failed to extract {archive}: {reason}",
            details={"archive": archive, "reason": reason}
        )
