from __future__ import annotations

import math
import time
from enum import Enum
from typing import Callable, Optional


class TimerState(str, Enum):
	RUNNING = "running"
	PAUSED = "paused"
	EXPIRED = "expired"


class CountdownTimer:
	"""Per-item countdown that fires ``on_complete`` once when it runs out.

	The timer registers no callbacks of its own. Whoever drives the UI calls
	``poll()`` periodically; expiry is detected there, so there is never a
	pending callback to cancel on pause, reset or teardown.
	"""

	def __init__(self, duration: float, on_complete: Callable[[], None], clock: Callable[[], float] = time.monotonic) -> None:
		if duration <= 0:
			raise ValueError(f"duration must be positive, got {duration}")
		self.duration = float(duration)
		self.on_complete = on_complete
		self._clock = clock
		self._remaining = self.duration
		self._started_at: Optional[float] = clock()
		self.state = TimerState.RUNNING

	@property
	def is_running(self) -> bool:
		return self.state is TimerState.RUNNING

	def remaining(self) -> float:
		if self._started_at is None:
			return self._remaining
		return max(0.0, self._remaining - (self._clock() - self._started_at))

	def display_seconds(self) -> int:
		return int(math.ceil(self.remaining()))

	def pause(self) -> None:
		if self.state is not TimerState.RUNNING:
			return
		self._remaining = self.remaining()
		self._started_at = None
		self.state = TimerState.PAUSED

	def resume(self) -> None:
		if self.state is not TimerState.PAUSED:
			return
		self._started_at = self._clock()
		self.state = TimerState.RUNNING

	def reset(self, duration: Optional[float] = None) -> None:
		if duration is not None:
			self.duration = float(duration)
		self._remaining = self.duration
		self._started_at = self._clock()
		self.state = TimerState.RUNNING

	def poll(self) -> bool:
		"""Fire ``on_complete`` if time is up. Returns True on the call that fired."""
		if self.state is not TimerState.RUNNING or self.remaining() > 0:
			return False
		self._remaining = 0.0
		self._started_at = None
		self.state = TimerState.EXPIRED
		self.on_complete()
		return True
