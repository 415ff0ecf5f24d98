from datetime import datetime, timedelta, timezone

from jazzgym.models import PersistedSession, Stats
from jazzgym.stats import compute_stats, session_minutes

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _session(sid, items, seconds, ended=True):
	return PersistedSession(
		id=sid,
		started_at=T0,
		ended_at=T0 + timedelta(seconds=seconds) if ended else None,
		item_count=items,
		time_limit=10,
	)


def test_no_sessions_gives_zero_stats():
	assert compute_stats([]) == Stats(total_sessions=0, total_items=0, total_minutes=0)


def test_totals():
	stats = compute_stats([_session(1, 2, 60), _session(2, 3, 120), _session(3, 4, 180)])
	assert stats.total_sessions == 3
	assert stats.total_items == 9
	assert stats.total_minutes == 6


def test_minutes_are_floored_per_session():
	# 1.9 + 1.9 minutes sums to 2, not 3 or 4
	stats = compute_stats([_session(1, 1, 114), _session(2, 1, 114)])
	assert stats.total_minutes == 2
	assert session_minutes(_session(3, 1, 59)) == 0


def test_open_sessions_ignored():
	stats = compute_stats([_session(1, 5, 600, ended=False), _session(2, 1, 60)])
	assert stats.total_sessions == 1
	assert stats.total_items == 1
	assert stats.total_minutes == 1
