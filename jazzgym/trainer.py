from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

import numpy as np

from .domains import Domain
from .errors import InvalidArgument, NoActiveSession
from .models import Item, SessionState, Summary
from .storage import PracticeStore

logger = logging.getLogger(__name__)


def select_random(pool: Sequence[Item], previous: Optional[Item] = None) -> Item:
	"""Pick the next item uniformly from ``pool``.

	When ``previous`` is given and the pool has more than one item, anything
	with the same display name as ``previous`` is left out of the draw.
	"""
	if len(pool) == 0:
		raise InvalidArgument("No items available with the current filters. Enable at least one category.")
	if len(pool) == 1:
		return pool[0]
	candidates: List[Item] = list(pool)
	if previous is not None:
		candidates = [it for it in pool if it.display_name != previous.display_name]
		if not candidates:
			candidates = list(pool)
	idx = int(np.random.choice(len(candidates)))
	return candidates[idx]


def duration_minutes(total_items: int, time_limit: int) -> float:
	"""Nominal practice time in minutes, rounded half-up to one decimal."""
	minutes = Decimal(total_items * time_limit) / Decimal(60)
	return float(minutes.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class PracticeSessionManager:
	"""Runs timed sessions for one domain: start, advance, end.

	The manager keeps no session of its own; callers hold the returned
	``SessionState`` and pass it back in. A failed call leaves the state the
	caller passed untouched, so the same step can be retried.
	"""

	def __init__(self, domain: Domain, store: PracticeStore) -> None:
		self.domain = domain
		self.store = store

	def _next_item(self, state: SessionState) -> Item:
		previous = state.current_item if self.domain.avoid_repeats else None
		return select_random(state.available_pool, previous)

	def start(self, time_limit: int, enabled_categories: Sequence[str]) -> SessionState:
		pool = self.domain.library.available_items(enabled_categories)
		first = select_random(pool)
		session_id = self.store.create_session(time_limit)
		logger.info(
			"started %s session %d (%ds, %d items in pool)", self.domain.name, session_id, time_limit, len(pool)
		)
		return SessionState(
			session_id=session_id,
			current_item=first,
			completed_count=0,
			is_active=True,
			time_limit=time_limit,
			available_pool=tuple(pool),
		)

	def advance(self, state: SessionState) -> SessionState:
		if state.session_id is None or state.current_item is None:
			raise NoActiveSession("No active session")
		self.store.append_item(state.session_id, state.current_item.display_name)
		nxt = self._next_item(state)
		logger.debug("%s session %d: %s -> %s", self.domain.name, state.session_id, state.current_item.display_name, nxt.display_name)
		return state.model_copy(update={"current_item": nxt, "completed_count": state.completed_count + 1})

	def end(self, state: SessionState) -> Summary:
		if state.session_id is None:
			raise NoActiveSession("No active session")
		# The item still on screen counts as practised.
		final = state.current_item.display_name if state.current_item is not None else None
		closed = self.store.close_session(state.session_id, final)
		total = state.completed_count + (1 if state.current_item is not None else 0)
		summary = Summary(
			domain=self.domain.name,
			session_id=state.session_id,
			total_items=total,
			duration_minutes=duration_minutes(total, state.time_limit),
			started_at=closed.started_at,
			ended_at=closed.ended_at if closed.ended_at is not None else closed.started_at,
		)
		logger.info(
			"ended %s session %d: %d items, %.1f min", self.domain.name, summary.session_id, total, summary.duration_minutes
		)
		return summary
