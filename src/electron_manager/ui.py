"""Host UI contract: notifications, progress and cancellation."""
from typing import Awaitable, Callable, List, Protocol, Set, TypeVar

from electron_manager.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal handed to a running task."""

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        for callback in self._callbacks:
            callback()

    def on_cancellation_requested(self, callback: Callable[[], None]) -> None:
        """Run callback on cancel, immediately if already cancelled."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)


class Progress(Protocol):
    def report(self, message: str) -> None: ...


ProgressTask = Callable[[Progress, CancellationToken], Awaitable[T]]


class HostUI(Protocol):
    """What the manager needs from whoever is displaying it."""

    def show_error_message(self, message: str) -> None: ...

    async def with_progress(
        self, title: str, task: ProgressTask, cancellable: bool = True
    ) -> T: ...


class LoggingProgress:
    def __init__(self, title: str) -> None:
        self.title = title
        self.messages: List[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)
        logger.debug("progress", title=self.title, message=message)


class LoggingUI:
    """Headless host: notifications and progress go to the log.

    Tokens of in-flight tasks are kept so a caller can cancel them.
    """

    def __init__(self) -> None:
        self.errors: List[str] = []
        self._active: Set[CancellationToken] = set()

    def show_error_message(self, message: str) -> None:
        self.errors.append(message)
        logger.error("user_notification", message=message)

    async def with_progress(
        self, title: str, task: ProgressTask, cancellable: bool = True
    ) -> T:
        token = CancellationToken()
        progress = LoggingProgress(title)
        if cancellable:
            self._active.add(token)
        logger.info("progress_started", title=title, cancellable=cancellable)
        try:
            return await task(progress, token)
        finally:
            self._active.discard(token)
            logger.info("progress_finished", title=title)

    def cancel_all(self) -> int:
        """Cancel every in-flight cancellable task, returning how many."""
        tokens = list(self._active)
        for token in tokens:
            token.cancel()
        return len(tokens)
