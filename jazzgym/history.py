from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .models import PersistedSession, SessionDetails, Stats
from .storage import DEFAULT_HISTORY_LIMIT, PracticeStore

logger = logging.getLogger(__name__)


@dataclass
class HistorySnapshot:
	sessions: List[PersistedSession] = field(default_factory=list)
	stats: Stats = field(default_factory=Stats)


class HistoryManager:
	"""Browse and prune finished sessions for one domain.

	There is no incremental update: after any deletion the full list and the
	totals are fetched again.
	"""

	def __init__(self, store: PracticeStore, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
		self.store = store
		self.limit = limit

	def list(self) -> List[PersistedSession]:
		return self.store.list_sessions(self.limit)

	def details(self, session_id: int) -> Optional[SessionDetails]:
		return self.store.get_session_details(session_id)

	def stats(self) -> Stats:
		return self.store.get_stats()

	def refresh(self) -> HistorySnapshot:
		return HistorySnapshot(sessions=self.list(), stats=self.stats())

	def delete_one(self, session_id: int) -> HistorySnapshot:
		self.store.delete_session(session_id)
		return self.refresh()

	def delete_all(self) -> HistorySnapshot:
		self.store.delete_all_sessions()
		logger.info("practice history cleared")
		return self.refresh()
