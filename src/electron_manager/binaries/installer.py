"""Installation of a specific Electron version."""
import asyncio
import shutil
from pathlib import Path
from typing import List, Optional

import semver

from electron_manager.binaries.fetcher import download_archive, extract_archive
from electron_manager.binaries.locator import ExecutableLocator
from electron_manager.binaries.platforms import get_download_descriptor
from electron_manager.config import ManagerConfig
from electron_manager.errors import DownloadCancelledError, FilesystemError
from electron_manager.logging import get_logger
from electron_manager.types import DownloadDescriptor
from electron_manager.ui import CancellationToken, HostUI, LoggingUI, Progress

logger = get_logger(__name__)

PROGRESS_TITLE = "Installing additional dependencies"


def parse_version(value: str) -> Optional[semver.Version]:
    value = value.strip()
    if value[:1] in ("v", "="):
        value = value[1:]
    try:
        return semver.Version.parse(value)
    except ValueError:
        return None


def versions_equal(a: str, b: str) -> bool:
    """Semantic version equality.

    A leading "v" and build metadata are ignored. Strings that are not
    semantic versions compare verbatim.
    """
    parsed_a, parsed_b = parse_version(a), parse_version(b)
    if parsed_a is None or parsed_b is None:
        return a.strip() == b.strip()
    return parsed_a.compare(parsed_b) == 0


def remove_entries(paths: List[Path]) -> List[Path]:
    """Recursively remove paths, returning the ones that could not be removed."""
    failed = []
    for path in paths:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug("remove_failed", path=str(path), error=str(e))
            failed.append(path)
    return failed


class Installer:
    """Brings the installation directory to a target version.

    ``ensure`` is serialized per instance; two installers on the same
    directory do not coordinate.
    """

    def __init__(
        self,
        config: ManagerConfig,
        locator: ExecutableLocator,
        ui: Optional[HostUI] = None,
    ):
        self.config = config
        self.locator = locator
        self.ui = ui or LoggingUI()
        self._lock = asyncio.Lock()

    @property
    def install_dir(self) -> Path:
        return self.config.install_dir

    def descriptor(self, version: str) -> DownloadDescriptor:
        return get_download_descriptor(
            version,
            self.config.platform,
            self.config.arch,
            self.config.download_base_url,
        )

    async def purge(self) -> Optional[FilesystemError]:
        """Empty the installation directory. Failures are logged, not raised."""
        install_dir = self.install_dir
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
            entries = list(install_dir.iterdir())
        except OSError as e:
            error = FilesystemError(f"Cannot list {install_dir}: {e}", [install_dir])
            logger.warning("purge_failed", install_dir=str(install_dir), error=str(error))
            return error

        failed = await asyncio.to_thread(remove_entries, entries)
        if failed:
            error = FilesystemError(f"Cannot purge {install_dir}", failed)
            logger.warning(
                "purge_failed",
                install_dir=str(install_dir),
                paths=error.details["paths"],
            )
            return error

        logger.info("install_dir_purged", install_dir=str(install_dir), removed=len(entries))
        return None

    async def ensure(self, target_version: str) -> None:
        async with self._lock:
            current = await self.locator.current()
            if current and versions_equal(current.version, target_version):
                logger.info(
                    "electron_up_to_date",
                    version=current.version,
                    path=current.path,
                )
                return

            logger.info(
                "electron_version_not_installed",
                target=target_version,
                current=current.version if current else None,
            )
            await self.purge()

            descriptor = self.descriptor(target_version)

            async def run(progress: Progress, token: CancellationToken) -> None:
                def on_progress(loaded: float, total: float) -> None:
                    progress.report(f"{loaded:.2f}/{total:.2f}MB")

                archive = await download_archive(
                    descriptor,
                    self.install_dir,
                    token=token,
                    on_progress=on_progress,
                    max_attempts=self.config.max_attempts,
                    retry_delay=self.config.retry_delay,
                    chunk_size=self.config.chunk_size,
                    connect_timeout=self.config.download_connect_timeout,
                    read_timeout=self.config.download_read_timeout,
                )

                if token.is_cancellation_requested:
                    raise DownloadCancelledError(descriptor.url)

                progress.report("Extracting...")
                await asyncio.to_thread(extract_archive, archive)
                self.delete_archive(archive)

            await self.ui.with_progress(PROGRESS_TITLE, run, cancellable=True)

    def delete_archive(self, archive: Path) -> None:
        """Remove a downloaded archive; the extracted copy is already usable."""
        try:
            archive.unlink()
        except OSError as e:
            logger.warning("archive_delete_failed", archive=str(archive), error=str(e))
            return
        logger.debug("archive_deleted", archive=str(archive))
