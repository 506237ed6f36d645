"""
Gravity timer: drives GameEngine.tick() at a fixed period.

The timer owns no thread and no clock. The caller passes the current time in
milliseconds (pygame.time.get_ticks() in play mode) and the timer runs one
tick per elapsed interval. It stops for good once the engine is over.
"""

from __future__ import annotations

import logging

from tetris_engine.game.engine import GameEngine

logger = logging.getLogger(__name__)

DEFAULT_DROP_INTERVAL_MS = 1000


class GravityTimer:
    """Periodic gravity driver for a GameEngine.

    Attributes:
        engine: The engine being driven.
        interval_ms: Milliseconds between gravity ticks.
        running: False once stopped; a stopped timer never ticks again.
    """

    def __init__(self, engine: GameEngine, interval_ms: int = DEFAULT_DROP_INTERVAL_MS) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.engine = engine
        self.interval_ms = interval_ms
        self.running = False
        self._last_tick_ms: int | None = None

    def start(self, now_ms: int) -> None:
        """Begin timing from `now_ms`."""
        self.running = True
        self._last_tick_ms = now_ms

    def stop(self) -> None:
        self.running = False

    def update(self, now_ms: int) -> int:
        """Run every gravity tick that is due at `now_ms`.

        Args:
            now_ms: Current time in milliseconds.

        Returns:
            Number of ticks run.
        """
        if not self.running or self._last_tick_ms is None:
            return 0

        ticks = 0
        while now_ms - self._last_tick_ms >= self.interval_ms:
            self._last_tick_ms += self.interval_ms
            ticks += 1
            if not self.engine.tick():
                logger.debug("Engine is over, stopping gravity timer")
                self.stop()
                break
        return ticks
