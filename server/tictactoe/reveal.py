"""Delayed reveal of the game result."""
from __future__ import annotations
import asyncio
import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class RevealState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    FIRED = "fired"


class DeferredRevealTimer:
    """One-shot timer that raises the reveal flag after a fixed delay.

    Bound to an asyncio event loop when created: the given one, or the
    running one. The callback only writes the flag and calls on_fire.
    """

    def __init__(self, delay: float, on_fire: Callable[[], None] | None = None,
                 loop: asyncio.AbstractEventLoop | None = None):
        self.delay = delay
        self.on_fire = on_fire
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise RuntimeError(
                    "DeferredRevealTimer needs a running event loop or an explicit loop"
                ) from e
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._state = RevealState.IDLE
        self.revealed = False

    @property
    def state(self) -> RevealState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is RevealState.PENDING

    def arm(self) -> bool:
        """Schedule the reveal. Returns False if already pending or fired."""
        if self._state is not RevealState.IDLE:
            return False
        self._handle = self._loop.call_later(self.delay, self._fire)
        self._state = RevealState.PENDING
        logger.debug("Reveal scheduled in %.3fs", self.delay)
        return True

    def _fire(self):
        self._handle = None
        self._state = RevealState.FIRED
        self.revealed = True
        logger.info("Result revealed")
        if self.on_fire:
            self.on_fire()

    def reset(self):
        """Cancel a pending reveal and clear the flag."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._state = RevealState.IDLE
        self.revealed = False
