"""Electron lifecycle façade."""
import asyncio
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from electron_manager.binaries.installer import Installer, remove_entries
from electron_manager.binaries.locator import ExecutableLocator, list_install_roots
from electron_manager.binaries.releases import VersionResolver
from electron_manager.config import ManagerConfig
from electron_manager.errors import FilesystemError, NetworkError, ResolutionError, log_error
from electron_manager.logging import get_logger
from electron_manager.processes import ProcessController, sanitize_env
from electron_manager.types import ResolvedExecutable
from electron_manager.ui import HostUI, LoggingUI

logger = get_logger(__name__)

CONNECTIVITY_MESSAGE = (
    "Cannot fetch resources, make sure you are connected to internet and try again."
)


class ElectronManager:
    """Installs, finds, launches and removes Electron for one installation directory."""

    def __init__(
        self,
        config: Optional[ManagerConfig] = None,
        env: Optional[Mapping[str, str]] = None,
        ui: Optional[HostUI] = None,
    ):
        self.config = config or ManagerConfig.from_env()
        self.env: Dict[str, str] = sanitize_env(os.environ if env is None else env)
        self.ui = ui or LoggingUI()
        self.resolver = VersionResolver(
            primary_url=self.config.primary_release_url,
            fallback_url=self.config.fallback_release_url,
            primary_timeout=self.config.primary_timeout,
            fallback_timeout=self.config.fallback_timeout,
        )
        self.locator = ExecutableLocator(
            self.config.install_dir, self.config.platform, env=self.env
        )
        self.installer = Installer(self.config, self.locator, self.ui)
        self.processes = ProcessController()

    @property
    def install_dir(self) -> Path:
        return self.config.install_dir

    async def install(self) -> None:
        try:
            version = await self.resolver.latest()
            await self.installer.ensure(version)
        except (NetworkError, ResolutionError) as e:
            log_error(e, {"install_dir": str(self.install_dir)}, logger)
            self.ui.show_error_message(CONNECTIVITY_MESSAGE)
            raise

    async def upgrade(self) -> None:
        await self.install()

    async def get_latest_release(self) -> str:
        return await self.resolver.latest()

    async def get_installed(self) -> Optional[ResolvedExecutable]:
        return await self.locator.current()

    async def start(
        self, entry_file: Optional[str] = None, args: Optional[List[str]] = None
    ) -> Optional[asyncio.subprocess.Process]:
        installed = await self.get_installed()
        if not installed:
            logger.info("start_skipped_not_installed", install_dir=str(self.install_dir))
            return None
        return await self.processes.start(
            installed.path, args, env=self.env, entry_file=entry_file
        )

    async def stop(self) -> None:
        self.processes.stop()

    async def uninstall(self) -> Optional[Exception]:
        """Remove every install root. Errors are returned, never raised."""
        try:
            roots = [self.install_dir / name for name in list_install_roots(self.install_dir)]
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("uninstall_failed", install_dir=str(self.install_dir), error=str(e))
            return FilesystemError(f"Cannot list {self.install_dir}: {e}", [self.install_dir])

        failed = await asyncio.to_thread(remove_entries, roots)
        if failed:
            error = FilesystemError(f"Cannot remove installations in {self.install_dir}", failed)
            logger.warning("uninstall_failed", paths=error.details["paths"])
            return error

        logger.info("uninstalled", install_dir=str(self.install_dir), removed=[r.name for r in roots])
        return None
