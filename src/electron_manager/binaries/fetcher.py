"""Archive download and extraction."""
import asyncio
import os
import shutil
import stat
import zipfile
from pathlib import Path
from typing import Callable, Optional, Tuple

import aiohttp

from electron_manager.binaries.constants import (
    CHUNK_SIZE,
    DOWNLOAD_CONNECT_TIMEOUT,
    DOWNLOAD_READ_TIMEOUT,
    MAX_DOWNLOAD_ATTEMPTS,
    RETRY_DELAY,
)
from electron_manager.errors import DownloadCancelledError, ExtractionError, NetworkError
from electron_manager.logging import get_logger
from electron_manager.types import DownloadDescriptor
from electron_manager.ui import CancellationToken

logger = get_logger(__name__)

MB = 1024 * 1024

ProgressCallback = Callable[[float, float], None]


def compute_progress(percent: float, remaining_bytes: float) -> Optional[Tuple[float, float]]:
    """(loaded_mb, total_mb) from a completion percent and the bytes left.

    The total is derived rather than read from the response because the
    release host does not always announce a content length. Returns None once
    the download is complete, where the derivation is undefined.
    """
    if percent >= 100:
        return None
    remaining_mb = remaining_bytes / MB
    total = remaining_mb / ((100 - percent) / 100)
    loaded = total - remaining_mb
    return round(loaded, 2), round(total, 2)


async def _download_once(
    url: str,
    part_path: Path,
    token: CancellationToken,
    on_progress: Optional[ProgressCallback],
    chunk_size: int,
    timeout: aiohttp.ClientTimeout,
) -> int:
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url) as response:
            if response.status != 200:
                logger.error(
                    "download_request_failed",
                    url=url,
                    status=response.status,
                    reason=response.reason,
                )
                response.raise_for_status()

            size = int(response.headers.get("content-length", 0) or 0)
            downloaded = 0

            with open(part_path, "wb") as f:
                async for chunk in response.content.iter_chunked(chunk_size):
                    if token.is_cancellation_requested:
                        raise DownloadCancelledError(url)
                    f.write(chunk)
                    downloaded += len(chunk)
                    if on_progress and size:
                        progress = compute_progress(
                            downloaded * 100 / size, max(size - downloaded, 0)
                        )
                        if progress:
                            on_progress(*progress)

            if token.is_cancellation_requested:
                raise DownloadCancelledError(url)
            return downloaded


async def download_archive(
    descriptor: DownloadDescriptor,
    directory: Path,
    token: Optional[CancellationToken] = None,
    on_progress: Optional[ProgressCallback] = None,
    max_attempts: int = MAX_DOWNLOAD_ATTEMPTS,
    retry_delay: float = RETRY_DELAY,
    chunk_size: int = CHUNK_SIZE,
    connect_timeout: float = DOWNLOAD_CONNECT_TIMEOUT,
    read_timeout: float = DOWNLOAD_READ_TIMEOUT,
) -> Path:
    """Download a release archive into directory and return its path.

    Transport failures are retried up to max_attempts times; cancellation is
    not. There is no total deadline: an attempt fails only when connecting
    takes longer than connect_timeout or no data arrives for read_timeout.
    The archive is written under a ``.download`` name and renamed once
    complete, so a half-written file never carries the final name. An
    archive already present under the final name is reused.
    """
    token = token or CancellationToken()
    timeout = aiohttp.ClientTimeout(
        total=None, sock_connect=connect_timeout, sock_read=read_timeout
    )
    directory.mkdir(parents=True, exist_ok=True)
    dest = directory / descriptor.file_name
    part_path = directory / f"{descriptor.file_name}.download"

    if token.is_cancellation_requested:
        raise DownloadCancelledError(descriptor.url)

    if dest.is_file():
        logger.info("archive_already_present", path=str(dest))
        return dest

    last_error: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        if token.is_cancellation_requested:
            raise DownloadCancelledError(descriptor.url)

        logger.info(
            "starting_download",
            url=descriptor.url,
            destination=str(dest),
            attempt=attempt,
        )
        try:
            size = await _download_once(
                descriptor.url, part_path, token, on_progress, chunk_size, timeout
            )
        except DownloadCancelledError:
            part_path.unlink(missing_ok=True)
            logger.info("download_cancelled", url=descriptor.url)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            part_path.unlink(missing_ok=True)
            last_error = e
            logger.warning(
                "download_attempt_failed",
                url=descriptor.url,
                attempt=attempt,
                error=str(e) or e.__class__.__name__,
            )
            if attempt < max_attempts and retry_delay:
                await asyncio.sleep(retry_delay)
            continue
        except BaseException:
            part_path.unlink(missing_ok=True)
            raise

        os.replace(part_path, dest)
        logger.info("download_complete", url=descriptor.url, size=size, path=str(dest))
        return dest

    raise NetworkError(descriptor.url, str(last_error) or last_error.__class__.__name__)


def archive_dest_dir(archive_path: Path) -> Path:
    """Directory named after the archive, minus its extension."""
    return archive_path.with_suffix("")


def _extract_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo, dest_dir: Path) -> None:
    target = (dest_dir / info.filename).resolve()
    if target != dest_dir and dest_dir not in target.parents:
        raise ExtractionError(archive.filename or "", f"member {info.filename} escapes destination")

    mode = info.external_attr >> 16
    if stat.S_ISLNK(mode):
        link_target = archive.read(info).decode()
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink() or target.exists():
            target.unlink()
        os.symlink(link_target, target)
        return

    if info.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    if mode and os.name != "nt":
        target.chmod(stat.S_IMODE(mode))


def extract_archive(archive_path: Path, dest_dir: Optional[Path] = None) -> Path:
    """Extract a zip release archive.

    Every member is written as a plain file, including Electron's own .asar
    bundles. Unix permission bits and symlinks recorded in the archive are
    restored, which zipfile.extractall would drop.
    """
    dest_dir = (dest_dir or archive_dest_dir(archive_path)).resolve()
    logger.debug("extract_archive", archive=str(archive_path), dest=str(dest_dir))

    try:
        with zipfile.ZipFile(archive_path) as archive:
            dest_dir.mkdir(parents=True, exist_ok=True)
            for info in archive.infolist():
                _extract_member(archive, info, dest_dir)
    except (zipfile.BadZipFile, OSError) as e:
        logger.error("extract_failed", archive=str(archive_path), error=str(e))
        raise ExtractionError(str(archive_path), str(e)) from e

    logger.info("archive_extracted", archive=str(archive_path), extracted_to=str(dest_dir))
    return dest_dir
