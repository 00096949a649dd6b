"""Event loop for an interactive session.

One thread (the caller's) owns the session state and applies events strictly
in arrival order. Commands run on a small thread pool and post their
completion event back onto the same FIFO inbox.

Example:
    loop = EventLoop(SessionMachine(workspaces, tickets))
    loop.start()
    loop.post(KeyPressed("down"))
    loop.run_until_idle()
    loop.shutdown()
"""

import logging
import queue
import time
from concurrent.futures import Future, ThreadPoolExecutor

from .commands import Command
from .machine import SessionMachine
from .messages import SessionEvent
from .state import SessionState

logger = logging.getLogger(__name__)


class EventLoop:
    """Single-consumer event loop with background command execution.

    Args:
        machine: The state machine that consumes events.
        max_workers: Size of the command thread pool.
    """

    def __init__(self, machine: SessionMachine, max_workers: int = 4) -> None:
        self.machine = machine
        self._inbox: queue.Queue[SessionEvent] = queue.Queue()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="sprout-command"
        )
        self._in_flight: list[Future[None]] = []

    @property
    def state(self) -> SessionState:
        return self.machine.state

    @property
    def in_flight(self) -> tuple[Future[None], ...]:
        """Commands dispatched and not yet seen finished."""
        return tuple(self._in_flight)

    @property
    def idle(self) -> bool:
        """True when no command is running and no event is waiting."""
        self._prune()
        return not self._in_flight and self._inbox.empty()

    def start(self) -> None:
        """Dispatch the machine's start-up commands."""
        self._dispatch(self.machine.start())

    def post(self, event: SessionEvent) -> None:
        """Queue an event. Safe to call from any thread."""
        self._inbox.put(event)

    def step(self, timeout: float | None = None) -> bool:
        """Apply the next queued event.

        Args:
            timeout: Seconds to wait for an event; None means don't wait.

        Returns:
            True if an event was applied.
        """
        try:
            if timeout is None:
                event = self._inbox.get_nowait()
            else:
                event = self._inbox.get(timeout=timeout)
        except queue.Empty:
            return False
        self._dispatch(self.machine.update(event))
        return True

    def drain(self) -> int:
        """Apply every event queued right now, without waiting.

        Returns:
            Number of events applied.
        """
        applied = 0
        while self.step():
            applied += 1
        return applied

    def run_until_idle(self, timeout: float = 10.0) -> None:
        """Apply events until no command is running and the inbox is empty.

        Raises:
            TimeoutError: If commands are still running after ``timeout``.
        """
        deadline = time.monotonic() + timeout
        while not self.idle:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("Background commands did not finish in time")
            self.step(timeout=min(remaining, 0.05))

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting commands. Running commands finish in the background."""
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _dispatch(self, commands: list[Command]) -> None:
        self._prune()
        for command in commands:
            logger.debug(f"Dispatching {command.name}")
            self._in_flight.append(self._executor.submit(self._execute, command))

    def _prune(self) -> None:
        self._in_flight = [f for f in self._in_flight if not f.done()]

    def _execute(self, command: Command) -> None:
        # Runs on a worker thread; the event is the only thing it shares.
        self._inbox.put(command.execute())
