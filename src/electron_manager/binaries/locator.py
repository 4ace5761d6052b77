"""Discovery of installed Electron executables."""
import asyncio
import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from electron_manager.binaries.constants import (
    COMMAND_NAME,
    INSTALL_PREFIX,
    INSTALL_SUFFIX,
    MACOS_APPLICATIONS_DIR,
    VERSION_FLAG,
)
from electron_manager.binaries.platforms import get_platform_executable, is_macos_family
from electron_manager.errors import ProbeFailure
from electron_manager.logging import get_logger
from electron_manager.types import ResolvedExecutable

logger = get_logger(__name__)


def is_install_root(name: str) -> bool:
    """Whether a directory entry looks like electron-<version>-<platform>-<arch>64."""
    return name.startswith(INSTALL_PREFIX) and name.endswith(INSTALL_SUFFIX)


def list_install_roots(install_dir: Path) -> List[str]:
    """Matching entry names in lexicographic order. Raises OSError."""
    return sorted(entry.name for entry in install_dir.iterdir() if is_install_root(entry.name))


def clean_version_output(output: str) -> str:
    return output.replace("\r", "").replace("\n", "").strip()


async def async_subprocess_run(*args, env: Optional[Dict[str, str]] = None):
    """
    Run a command asynchronously and return its exit code, stdout, and stderr.

    :param args: Command and arguments to run
    :param env: Environment for the child
    :return: Tuple of (returncode, stdout, stderr)
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=env,
    )
    stdout, stderr = await proc.communicate()
    return proc.returncode, stdout.decode(errors="replace"), stderr.decode(errors="replace")


class ExecutableLocator:
    """Finds an Electron executable and asks it for its version.

    A file is trusted as Electron purely because it answers ``--version``
    with exit code 0.
    """

    def __init__(
        self,
        install_dir: Path,
        platform_name: str,
        env: Optional[Dict[str, str]] = None,
        applications_dir: str = MACOS_APPLICATIONS_DIR,
    ):
        self.install_dir = Path(install_dir)
        self.platform = platform_name
        self.env = env
        self.applications_dir = Path(applications_dir)

    async def _probe(self, target: str) -> str:
        command = target
        if os.sep not in target and (os.altsep is None or os.altsep not in target):
            path = (self.env or os.environ).get("PATH")
            command = shutil.which(target, path=path)
            if command is None:
                raise ProbeFailure(target, "not found on PATH")

        try:
            returncode, stdout, stderr = await async_subprocess_run(
                command, VERSION_FLAG, env=self.env
            )
        except OSError as e:
            raise ProbeFailure(target, str(e)) from e

        if returncode != 0:
            raise ProbeFailure(target, f"exit code {returncode}: {stderr.strip()}")
        return clean_version_output(stdout)

    async def check_command(self, target: str = COMMAND_NAME) -> Optional[str]:
        """Version reported by ``<target> --version``, or None."""
        try:
            version = await self._probe(target)
        except ProbeFailure as e:
            logger.debug("version_probe_failed", target=target, reason=e.details["reason"])
            return None
        logger.debug("version_probe", target=target, version=version)
        return version

    async def local(self) -> Optional[ResolvedExecutable]:
        """Executable from the installation directory, if one answers."""
        try:
            roots = list_install_roots(self.install_dir)
        except OSError as e:
            logger.debug("install_dir_unreadable", install_dir=str(self.install_dir), error=str(e))
            return None

        if not roots:
            return None
        if len(roots) > 1:
            logger.warning("multiple_installations", install_dir=str(self.install_dir), roots=roots)

        exec_path = (
            self.install_dir / roots[0] / get_platform_executable(self.platform)
        ).resolve()
        version = await self.check_command(str(exec_path))
        if not version:
            return None
        return ResolvedExecutable(version=version, path=str(exec_path))

    async def global_(self) -> Optional[ResolvedExecutable]:
        """Executable from PATH, or the Applications folder on macOS."""
        version = await self.check_command(COMMAND_NAME)
        if version:
            return ResolvedExecutable(version=version, path=COMMAND_NAME)

        if not is_macos_family(self.platform):
            return None

        exec_path = (
            self.applications_dir / get_platform_executable(self.platform)
        ).resolve()
        if not exec_path.is_file():
            return None

        version = await self.check_command(str(exec_path))
        if version:
            return ResolvedExecutable(version=version, path=str(exec_path))
        return None

    async def current(self) -> Optional[ResolvedExecutable]:
        return await self.local() or await self.global_()
