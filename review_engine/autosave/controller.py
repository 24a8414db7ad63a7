"""
Auto-Save Controller

Debounced, single-flight persistence of a data snapshot.

How it works:
1. The host calls update() whenever its data changes
2. If the snapshot differs from the last persisted one, a debounce timer
   is (re)started; rapid edits keep pushing the timer back
3. When the timer fires, the caller's async save function runs
4. Only one save is ever in flight; triggers that arrive meanwhile are
   dropped, not queued
5. The persisted baseline only moves on success, so a failed or dropped
   write stays dirty until the next change retries it

Status machine:
    IDLE -> SAVING -> SAVED -> (cool-down) -> IDLE
                   -> ERROR  (until the next attempt)

Dropped writes:
A trigger dropped while a save is in flight is retried by the next real
change. If no change follows, it is never retried unless the controller
was created with retry_dropped=True, which runs one follow-up save of the
latest snapshot after the in-flight save settles.
"""

from __future__ import annotations

import asyncio
import copy
import operator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

from loguru import logger

T = TypeVar('T')

DEFAULT_DELAY = 2.0
SAVED_RESET_DELAY = 2.0


class SaveStatus(Enum):
    """Status of the auto-save session."""

    IDLE = auto()      # Nothing happening
    SAVING = auto()    # Save call in flight
    SAVED = auto()     # Last save succeeded (reverts to IDLE)
    ERROR = auto()     # Last save failed

    @property
    def display_name(self) -> str:
        return self.name.lower()


# Legal status transitions
_TRANSITIONS = {
    SaveStatus.IDLE: {SaveStatus.SAVING},
    SaveStatus.SAVING: {SaveStatus.SAVED, SaveStatus.ERROR},
    SaveStatus.SAVED: {SaveStatus.IDLE, SaveStatus.SAVING},
    SaveStatus.ERROR: {SaveStatus.SAVING},
}


@dataclass(frozen=True)
class SaveState:
    """Observable state of an auto-save session."""
    status: SaveStatus = SaveStatus.IDLE
    last_saved: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def is_saving(self) -> bool:
        return self.status == SaveStatus.SAVING

    def to_dict(self) -> dict:
        return {
            'status': self.status.display_name,
            'last_saved': self.last_saved.isoformat() if self.last_saved else None,
            'error': self.error,
        }


class AutoSaveController(Generic[T]):
    """
    Debounces changes to a snapshot and persists them one at a time.

    Must be used from inside a running asyncio event loop.

    Usage:
        async def persist(fields):
            await store.put('review', fields)

        autosave = AutoSaveController(fields, persist, delay=2.0)
        autosave.update(new_fields)     # saved ~2s after the last edit
        await autosave.save_now()       # flush immediately
        autosave.close()
    """

    def __init__(
        self,
        data: T,
        save: Callable[[T], Awaitable[Any]],
        delay: float = DEFAULT_DELAY,
        enabled: bool = True,
        equals: Optional[Callable[[T, T], bool]] = None,
        on_status_change: Optional[Callable[[SaveState], None]] = None,
        saved_reset_delay: float = SAVED_RESET_DELAY,
        retry_dropped: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the controller.

        Args:
            data: Current snapshot; treated as already persisted
            save: Async persistence function; raising means failure
            delay: Debounce window in seconds
            enabled: Whether changes are watched at all
            equals: Snapshot equality (defaults to ==)
            on_status_change: Called with the new SaveState on every transition
            saved_reset_delay: Seconds before SAVED reverts to IDLE
            retry_dropped: Re-save once after a trigger was dropped in flight
            clock: Source of `last_saved` timestamps
        """
        self._data = data
        self._baseline = copy.deepcopy(data)
        self._save_fn = save
        self.delay = delay
        self._enabled = enabled
        self._equals = equals or operator.eq
        self._on_status_change = on_status_change
        self.saved_reset_delay = saved_reset_delay
        self.retry_dropped = retry_dropped
        self._clock = clock

        self._state = SaveState()
        self._is_saving = False
        self._retry_pending = False
        self._closed = False

        self._timer: Optional[asyncio.TimerHandle] = None
        self._reset_timers: Set[asyncio.TimerHandle] = set()
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def status(self) -> SaveStatus:
        return self._state.status

    @property
    def is_saving(self) -> bool:
        return self._state.is_saving

    @property
    def data(self) -> T:
        return self._data

    @property
    def is_dirty(self) -> bool:
        """Whether the current snapshot differs from the persisted one."""
        return not self._equals(self._data, self._baseline)

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    def update(self, data: T) -> None:
        """
        Observe a new snapshot.

        Restarts the debounce timer when the snapshot differs from the
        last persisted one. A snapshot equal to the baseline cancels any
        pending timer and starts none.
        """
        self._data = data
        self._watch()

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable change watching."""
        self._enabled = enabled
        if enabled:
            self._watch()
        else:
            self._cancel_timer()

    def _watch(self) -> None:
        if not self._enabled or self._closed:
            return

        self._cancel_timer()

        if not self.is_dirty:
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._on_timer, self._data)
        logger.debug(f"Auto-save scheduled in {self.delay}s")

    def _on_timer(self, snapshot: T) -> None:
        self._timer = None
        self._start(snapshot)

    def _start(self, snapshot: T) -> None:
        task = asyncio.get_running_loop().create_task(self._save(snapshot))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    async def save_now(self) -> bool:
        """
        Cancel the debounce timer and save the current snapshot now.

        Returns:
            True if a save ran and succeeded, False if it failed or was
            dropped because another save was in flight.
        """
        self._cancel_timer()
        return await self._save(self._data)

    def request_save(self) -> None:
        """Fire-and-forget save_now() for synchronous callers."""
        self._cancel_timer()
        self._start(self._data)

    async def wait(self) -> None:
        """Wait until every save started by this controller has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _save(self, snapshot: T) -> bool:
        if self._is_saving:
            logger.debug("Save already in progress - trigger dropped")
            if self.retry_dropped:
                self._retry_pending = True
            return False

        self._is_saving = True
        try:
            self._transition(SaveStatus.SAVING, error=None)

            try:
                await self._save_fn(snapshot)
            except Exception as e:
                message = str(e) or 'Failed to save'
                self._transition(SaveStatus.ERROR, error=message)
                logger.error(f"Auto-save error: {message}")
                return False

            self._baseline = copy.deepcopy(snapshot)
            self._transition(SaveStatus.SAVED, last_saved=self._clock())
            logger.info("Auto-save complete")
            self._schedule_reset()
            return True

        finally:
            self._is_saving = False
            if self._retry_pending:
                self._retry_pending = False
                self._retry_dropped_write()

    def _retry_dropped_write(self) -> None:
        if self._closed or not self._enabled or not self.is_dirty:
            return
        logger.debug("Retrying save dropped while in flight")
        self._cancel_timer()
        self._start(self._data)

    def _transition(self, status: SaveStatus, **changes) -> None:
        current = self._state.status
        if status not in _TRANSITIONS[current]:
            raise RuntimeError(
                f"Illegal save status transition: {current.name} -> {status.name}"
            )

        fields = {
            'status': status,
            'last_saved': self._state.last_saved,
            'error': self._state.error,
        }
        fields.update(changes)
        self._state = SaveState(**fields)

        if self._on_status_change:
            self._on_status_change(self._state)

    def _schedule_reset(self) -> None:
        if self._closed:
            return

        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def reset() -> None:
            self._reset_timers.discard(handle)
            # A newer save may already be running
            if self._state.status == SaveStatus.SAVED:
                self._transition(SaveStatus.IDLE)

        handle = loop.call_later(self.saved_reset_delay, reset)
        self._reset_timers.add(handle)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def close(self) -> None:
        """
        Tear the controller down.

        Cancels the debounce and status-reset timers. A save already in
        flight is not cancelled and still reports its outcome.
        """
        self._closed = True
        self._cancel_timer()
        for handle in self._reset_timers:
            handle.cancel()
        self._reset_timers.clear()
