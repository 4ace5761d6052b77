"""Launching and stopping the Electron child process."""
import asyncio
from typing import Dict, List, Mapping, Optional

import psutil

from electron_manager.binaries.constants import STRIPPED_ENV_VARS
from electron_manager.logging import get_logger

logger = get_logger(__name__)


def sanitize_env(env: Mapping[str, str]) -> Dict[str, str]:
    """Copy of env without the variables that make Electron act as Node."""
    return {k: v for k, v in env.items() if k not in STRIPPED_ENV_VARS}


def build_args(args: Optional[List[str]] = None, entry_file: Optional[str] = None) -> List[str]:
    argv = list(args or [])
    if entry_file:
        argv.insert(0, entry_file)
    return argv


class ProcessController:
    """Owns at most one running Electron child.

    Starting while a child is still running spawns the new one first and
    terminates the old one once the spawn has succeeded. A failed spawn
    leaves the running child in the slot.
    """

    def __init__(self) -> None:
        self.process: Optional[asyncio.subprocess.Process] = None

    def is_running(self) -> bool:
        if self.process is None or self.process.returncode is not None:
            return False
        try:
            proc = psutil.Process(self.process.pid)
            return proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    async def start(
        self,
        path: str,
        args: Optional[List[str]] = None,
        env: Optional[Dict[str, str]] = None,
        entry_file: Optional[str] = None,
    ) -> asyncio.subprocess.Process:
        previous = self.process if self.is_running() else None
        argv = build_args(args, entry_file)
        # stdin is the control channel; no stdio is shared with the host
        process = await asyncio.create_subprocess_exec(
            path,
            *argv,
            env=env,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        self.process = process
        logger.info("process_started", path=path, args=argv, pid=process.pid)

        if previous is not None:
            logger.info("replacing_running_process", pid=previous.pid, new_pid=process.pid)
            self._terminate(previous)
        return process

    def stop(self) -> None:
        """Ask the tracked child to terminate without waiting for it."""
        if self.process is not None:
            self._terminate(self.process)

    def _terminate(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            logger.debug("process_already_exited", pid=process.pid)
            return
        logger.info("process_terminated", pid=process.pid)
