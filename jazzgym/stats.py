from __future__ import annotations

from typing import Iterable

from .models import PersistedSession, Stats


def session_minutes(session: PersistedSession) -> int:
	"""Whole minutes between start and end, truncated. Open sessions count as 0."""
	if session.ended_at is None:
		return 0
	seconds = (session.ended_at - session.started_at).total_seconds()
	return max(0, int(seconds // 60))


def compute_stats(sessions: Iterable[PersistedSession]) -> Stats:
	# Minutes are floored per session before summing, unlike Summary.duration_minutes.
	stats = Stats()
	for s in sessions:
		if s.ended_at is None:
			continue
		stats.total_sessions += 1
		stats.total_items += s.item_count
		stats.total_minutes += session_minutes(s)
	return stats
