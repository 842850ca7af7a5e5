"""
Step Playback Engine

Plays back the step trace of a Bellman-Ford run:
- Play/pause at 0.5x to 3x speed
- Step forward/back one event at a time
- Seek to any step index
- Event-driven callbacks for presentation layers

Steps are pulled from the run only as far as the cursor has reached, so
scrubbing the first few steps of a large run never computes the rest.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, List, Callable, Iterable, Iterator

from config import (
    DEFAULT_PLAYBACK_SPEED, MIN_PLAYBACK_SPEED, MAX_PLAYBACK_SPEED, STEP_INTERVAL_SECONDS
)
from engine_bellman_ford import BellmanFordStep

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass
class PlaybackConfig:
    """Configuration for a playback session"""
    speed: float = DEFAULT_PLAYBACK_SPEED  # 1.0 = one step per interval
    step_interval_seconds: float = STEP_INTERVAL_SECONDS
    min_speed: float = MIN_PLAYBACK_SPEED
    max_speed: float = MAX_PLAYBACK_SPEED


class PlaybackSession:
    """
    Cursor over a step trace with playback controls.

    Accepts either a recorded list of steps or the lazy iterator returned
    by engine_bellman_ford.run().
    """

    def __init__(self, steps: Iterable[BellmanFordStep], config: Optional[PlaybackConfig] = None):
        # Own copy; speed changes never leak into the caller's config
        self.config = replace(config) if config else PlaybackConfig()
        self.config.speed = self._clamp_speed(self.config.speed)

        self.state = PlaybackState.STOPPED
        self.cursor = 0

        self._source: Iterator[BellmanFordStep] = iter(steps)
        self._loaded: List[BellmanFordStep] = []
        self._exhausted = False

        # Callbacks
        self.on_step_callbacks: List[Callable[[BellmanFordStep], None]] = []
        self.on_state_change_callbacks: List[Callable[[PlaybackState], None]] = []

    def on_step(self, callback: Callable[[BellmanFordStep], None]):
        """Register callback for cursor moves"""
        self.on_step_callbacks.append(callback)

    def on_state_change(self, callback: Callable[[PlaybackState], None]):
        """Register callback for state changes"""
        self.on_state_change_callbacks.append(callback)

    def _set_state(self, new_state: PlaybackState):
        """Update state and notify listeners"""
        old_state = self.state
        self.state = new_state

        if old_state != new_state:
            for callback in self.on_state_change_callbacks:
                try:
                    callback(new_state)
                except Exception as e:
                    logger.error(f"State change callback error: {e}")

    def _notify_step(self):
        step = self.current_step
        if step is None:
            return
        for callback in self.on_step_callbacks:
            try:
                callback(step)
            except Exception as e:
                logger.error(f"Step callback error: {e}")

    def _clamp_speed(self, speed: float) -> float:
        return max(self.config.min_speed, min(self.config.max_speed, speed))

    def _load_until(self, index: int) -> bool:
        """Pull steps from the run until index is loaded; False if the run ends first"""
        while len(self._loaded) <= index and not self._exhausted:
            try:
                self._loaded.append(next(self._source))
            except StopIteration:
                self._exhausted = True
        return index < len(self._loaded)

    # ----- Cursor ------------------------------------------------------

    @property
    def current_step(self) -> Optional[BellmanFordStep]:
        if self._load_until(self.cursor):
            return self._loaded[self.cursor]
        return None

    @property
    def loaded_steps(self) -> int:
        return len(self._loaded)

    @property
    def total_steps(self) -> Optional[int]:
        """Length of the trace, once the run has been fully consumed"""
        return len(self._loaded) if self._exhausted else None

    @property
    def at_end(self) -> bool:
        return not self._load_until(self.cursor + 1)

    def _move_to(self, index: int) -> Optional[BellmanFordStep]:
        if index != self.cursor:
            self.cursor = index
            self._notify_step()
        return self.current_step

    def step_forward(self) -> Optional[BellmanFordStep]:
        """Advance one step and pause"""
        self._pause_if_playing()
        if self.at_end:
            return self.current_step
        return self._move_to(self.cursor + 1)

    def step_back(self) -> Optional[BellmanFordStep]:
        """Go back one step and pause"""
        self._pause_if_playing()
        if self.cursor == 0:
            return self.current_step
        return self._move_to(self.cursor - 1)

    def seek(self, index: int) -> Optional[BellmanFordStep]:
        """Jump to a step index, clamped to the trace"""
        index = max(0, index)
        if not self._load_until(index):
            index = max(0, len(self._loaded) - 1)
        return self._move_to(index)

    def reset(self) -> Optional[BellmanFordStep]:
        """Back to the first step, stopped"""
        self._set_state(PlaybackState.STOPPED)
        return self._move_to(0)

    def set_speed(self, speed: float) -> float:
        self.config.speed = self._clamp_speed(speed)
        return self.config.speed

    # ----- Playback ----------------------------------------------------

    def _pause_if_playing(self):
        if self.state == PlaybackState.PLAYING:
            self._set_state(PlaybackState.PAUSED)

    def pause(self):
        self._pause_if_playing()

    async def play(self):
        """
        Advance one step per interval until paused or the trace ends.

        Starting from the last step rewinds to the first.
        """
        if self.state == PlaybackState.PLAYING:
            return
        if self.current_step is None:
            return

        if self.at_end:
            self._move_to(0)

        self._set_state(PlaybackState.PLAYING)
        logger.info(f"Starting playback at step {self.cursor} ({self.config.speed}x speed)")

        while self.state == PlaybackState.PLAYING:
            delay = self.config.step_interval_seconds / self.config.speed
            await asyncio.sleep(delay)

            if self.state != PlaybackState.PLAYING:
                break

            if not self.at_end:
                self._move_to(self.cursor + 1)

            if self.at_end:
                self._set_state(PlaybackState.FINISHED)
                logger.info(f"Playback finished after {self.cursor + 1} steps")

    async def play_pause(self):
        """Toggle playback"""
        if self.state == PlaybackState.PLAYING:
            self.pause()
        else:
            await self.play()

    def get_state(self) -> dict:
        """Get current state for API/dashboard"""
        step = self.current_step
        return {
            "state": self.state.value,
            "cursor": self.cursor,
            "loaded_steps": self.loaded_steps,
            "total_steps": self.total_steps,
            "speed": self.config.speed,
            "current_step": step.to_dict() if step else None,
        }
